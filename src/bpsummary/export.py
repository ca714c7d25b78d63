"""
JSON-ready rendering of a Snapshot.
"""

from __future__ import annotations

import dataclasses
import typing

from .aggregation import Snapshot
from .measurement import MeasurementRecord
from .statistics import StatisticsBucket


def _record_to_dict(record: MeasurementRecord) -> dict[str, typing.Any]:
    return {
        "timestamp": record.timestamp.isoformat(),
        "systolic": record.systolic,
        "diastolic": record.diastolic,
        "pulse": record.pulse,
        "device": record.device,
        "measurement_mode": record.measurement_mode,
    }


def _buckets_to_list(buckets: typing.Sequence[StatisticsBucket]) -> list[dict[str, typing.Any]]:
    return [dataclasses.asdict(bucket) for bucket in buckets]


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, typing.Any]:
    period = None
    if snapshot.period is not None:
        start, end = snapshot.period
        period = {"start": start.isoformat(), "end": end.isoformat()}

    return {
        "period": period,
        "records": [_record_to_dict(r) for r in snapshot.dataset],
        "statistics": {
            "systolic": _buckets_to_list(snapshot.statistics.systolic),
            "diastolic": _buckets_to_list(snapshot.statistics.diastolic),
        },
        "moving_average": {
            "window": snapshot.moving_average.window,
            "systolic": list(snapshot.moving_average.systolic),
            "diastolic": list(snapshot.moving_average.diastolic),
        },
        "sub_series": {
            name: [r.timestamp.isoformat() for r in getattr(snapshot.sub_series, name)]
            for name in ("high", "medium", "night", "classified_night")
        },
        "diagnostics": {
            **dataclasses.asdict(snapshot.diagnostics),
            "skipped_rows": snapshot.diagnostics.skipped_rows,
        },
    }
