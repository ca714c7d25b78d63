"""
Severity statistics.

A ladder is a strictly descending list of thresholds. Bin 0 counts values at
or above the first threshold, bin i counts values in [t[i], t[i-1]), and an
implicit last bin (threshold 0) takes everything below the final threshold,
so every value lands in exactly one bin.
"""

from __future__ import annotations

import math
import typing
from dataclasses import dataclass

from .config import DIASTOLIC_LADDER, SYSTOLIC_LADDER
from .measurement import MeasurementRecord


@dataclass(frozen=True)
class StatisticsBucket:
    threshold: int
    count: int
    percentage: float


@dataclass(frozen=True)
class Statistics:
    """Bucket tables for both pressures over one dataset."""

    systolic: typing.Tuple[StatisticsBucket, ...]
    diastolic: typing.Tuple[StatisticsBucket, ...]


def round_half_up(value: float, digits: int = 0) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def validate_ladder(ladder: typing.Sequence[int]) -> typing.Tuple[int, ...]:
    thresholds = tuple(int(t) for t in ladder)
    if not thresholds:
        raise ValueError("ladder must have at least one threshold")
    if any(a <= b for a, b in zip(thresholds, thresholds[1:])):
        raise ValueError(f"ladder must be strictly descending, got {list(thresholds)}")
    if thresholds[-1] < 0:
        raise ValueError(f"ladder thresholds must be non-negative, got {list(thresholds)}")
    return thresholds


def bucket_counts(
    values: typing.Sequence[int], ladder: typing.Sequence[int]
) -> typing.Tuple[StatisticsBucket, ...]:
    """
    Count values per ladder bin and express each count as a percentage of the
    total, rounded to one decimal. An empty input gives zero-valued buckets.
    """
    thresholds = validate_ladder(ladder)
    counts = [0] * len(thresholds)
    below = 0
    for value in values:
        for i, threshold in enumerate(thresholds):
            if value >= threshold:
                counts[i] += 1
                break
        else:
            below += 1

    total = len(values)
    buckets = list(zip(thresholds, counts))
    # implicit bottom rung; a ladder already ending at 0 absorbs it
    if thresholds[-1] > 0:
        buckets.append((0, below))
    else:
        buckets[-1] = (0, counts[-1] + below)

    return tuple(
        StatisticsBucket(
            threshold=threshold,
            count=count,
            percentage=round_half_up(100 * count / total, 1) if total else 0.0,
        )
        for threshold, count in buckets
    )


def compute_statistics(
    records: typing.Sequence[MeasurementRecord],
    systolic_ladder: typing.Sequence[int] = SYSTOLIC_LADDER,
    diastolic_ladder: typing.Sequence[int] = DIASTOLIC_LADDER,
) -> Statistics:
    return Statistics(
        systolic=bucket_counts([r.systolic for r in records], systolic_ladder),
        diastolic=bucket_counts([r.diastolic for r in records], diastolic_ladder),
    )
