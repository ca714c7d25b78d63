"""Windowed moving averages over calendar-day buckets.

Records are grouped by local calendar date. The window for a record is its
own day plus the ``window - 1`` nearest earlier days *present in the data*,
so gaps between measurement days stretch the wall-clock span of a window
rather than shrinking it. At the start of the series the window simply uses
whatever days exist.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass

import pandas as pd

from .config import MAX_WINDOW_DAYS, MIN_WINDOW_DAYS
from .measurement import MeasurementRecord
from .statistics import round_half_up


@dataclass(frozen=True)
class MovingAverageSeries:
    """One averaged value per record, aligned with the dataset order."""

    window: int
    systolic: typing.Tuple[int, ...]
    diastolic: typing.Tuple[int, ...]


def clamp_window(window: int) -> int:
    return max(MIN_WINDOW_DAYS, min(MAX_WINDOW_DAYS, int(window)))


def moving_averages(
    records: typing.Sequence[MeasurementRecord], window: int
) -> MovingAverageSeries:
    """Compute day-bucket moving averages of systolic and diastolic pressure.

    Parameters
    ----------
    records:
        Dataset sorted ascending by timestamp.
    window:
        Window length in measurement days; clamped to [1, 30].

    Returns
    -------
    MovingAverageSeries
        Averages rounded half-up to integers. Records sharing a day share
        the same value.
    """
    window = clamp_window(window)
    if not records:
        return MovingAverageSeries(window=window, systolic=(), diastolic=())

    frame = pd.DataFrame(
        {
            "day": [r.timestamp.date() for r in records],
            "systolic": [r.systolic for r in records],
            "diastolic": [r.diastolic for r in records],
        }
    )
    daily = frame.groupby("day", sort=True).agg(
        systolic=("systolic", "sum"),
        diastolic=("diastolic", "sum"),
        count=("systolic", "size"),
    )
    # integer window → counts rows (= distinct days), not elapsed time
    rolled = daily.rolling(window=window, min_periods=1).sum()

    averages = {}
    for column in ("systolic", "diastolic"):
        per_day = (rolled[column] / rolled["count"]).map(lambda v: int(round_half_up(v)))
        averages[column] = tuple(int(v) for v in frame["day"].map(per_day))

    return MovingAverageSeries(
        window=window,
        systolic=averages["systolic"],
        diastolic=averages["diastolic"],
    )
