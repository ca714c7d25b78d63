"""
Aggregation session.

BloodPressureSession owns the current Snapshot: the sorted dataset plus every
view derived from it. A reload awaits the raw source, rebuilds everything and
publishes the new snapshot in one assignment, so readers never see a mix of
old and new state. A failed reload leaves the previous snapshot in place and
propagates the error. When reloads overlap, the most recently started one
wins; an older reload that finishes late is discarded.
"""

from __future__ import annotations

import dataclasses
import logging
import typing
from dataclasses import dataclass
from datetime import datetime

from stairval.notepad import Notepad

from .config import (
    DEFAULT_WINDOW_DAYS,
    DIASTOLIC_LADDER,
    HIGH_SYSTOLIC,
    MEDIUM_SYSTOLIC,
    NIGHT_MODE_TAG,
    SYSTOLIC_LADDER,
)
from .errors import NoValidRecords
from .loader import decode_source, load_csv_as_table
from .mapper import ParseDiagnostics, RecordMapper
from .measurement import MeasurementRecord
from .moving_average import MovingAverageSeries, clamp_window, moving_averages
from .night import is_night_record
from .source import Source, fetch_source
from .statistics import Statistics, compute_statistics, validate_ladder

logger = logging.getLogger(__name__)

Dataset = typing.Tuple[MeasurementRecord, ...]


@dataclass(frozen=True)
class SubSeries:
    """
    Named subsets of the dataset, each in dataset order.

    `night` holds readings tagged with the nocturnal mode; `classified_night`
    holds everything the night-measurement classifier accepts, which also
    covers untagged night-hour readings from the night device.
    """

    high: Dataset
    medium: Dataset
    night: Dataset
    classified_night: Dataset


@dataclass(frozen=True)
class Snapshot:
    """Everything derived from one successful load."""

    dataset: Dataset
    period: typing.Optional[typing.Tuple[datetime, datetime]]
    sub_series: SubSeries
    statistics: Statistics
    moving_average: MovingAverageSeries
    diagnostics: ParseDiagnostics


def measurement_period(
    dataset: typing.Sequence[MeasurementRecord],
) -> typing.Optional[typing.Tuple[datetime, datetime]]:
    if not dataset:
        return None
    return dataset[0].timestamp, dataset[-1].timestamp


def derive_sub_series(dataset: Dataset) -> SubSeries:
    return SubSeries(
        high=tuple(r for r in dataset if r.systolic >= HIGH_SYSTOLIC),
        medium=tuple(r for r in dataset if MEDIUM_SYSTOLIC <= r.systolic < HIGH_SYSTOLIC),
        night=tuple(r for r in dataset if r.measurement_mode == NIGHT_MODE_TAG),
        classified_night=tuple(r for r in dataset if is_night_record(r)),
    )


def build_snapshot(
    raw: bytes,
    window: int = DEFAULT_WINDOW_DAYS,
    systolic_ladder: typing.Sequence[int] = SYSTOLIC_LADDER,
    diastolic_ladder: typing.Sequence[int] = DIASTOLIC_LADDER,
    notepad: typing.Optional[Notepad] = None,
) -> Snapshot:
    """
    Pure pipeline from raw bytes to a Snapshot:
    parse → drop invalid rows → sort → period → sub-series → statistics →
    moving averages. Raises a LoadError subclass on dataset-level failures.
    """
    table = load_csv_as_table(decode_source(raw))
    records, diagnostics = RecordMapper().apply_mapping(table, notepad)
    if not records:
        raise NoValidRecords(diagnostics)

    # stable: readings with equal timestamps keep their source order
    dataset: Dataset = tuple(sorted(records, key=lambda r: r.timestamp))

    return Snapshot(
        dataset=dataset,
        period=measurement_period(dataset),
        sub_series=derive_sub_series(dataset),
        statistics=compute_statistics(dataset, systolic_ladder, diastolic_ladder),
        moving_average=moving_averages(dataset, window),
        diagnostics=diagnostics,
    )


class BloodPressureSession:
    """
    Holds the currently published Snapshot and the parameters used to build it.
    Consumers read `snapshot`; only `reload` and `set_window` replace it.
    """

    def __init__(
        self,
        window: int = DEFAULT_WINDOW_DAYS,
        systolic_ladder: typing.Sequence[int] = SYSTOLIC_LADDER,
        diastolic_ladder: typing.Sequence[int] = DIASTOLIC_LADDER,
    ):
        self._window = clamp_window(window)
        self._systolic_ladder = validate_ladder(systolic_ladder)
        self._diastolic_ladder = validate_ladder(diastolic_ladder)
        self._snapshot: typing.Optional[Snapshot] = None
        self._generation = 0

    @property
    def snapshot(self) -> typing.Optional[Snapshot]:
        return self._snapshot

    @property
    def window(self) -> int:
        return self._window

    async def reload(
        self, source: Source, notepad: typing.Optional[Notepad] = None
    ) -> typing.Optional[Snapshot]:
        """
        Fetch `source` and rebuild every view from it.

        Returns the published snapshot, or None if a newer reload was started
        while this one was waiting on the source.
        """
        self._generation += 1
        generation = self._generation
        logger.info("Reload #%d started", generation)

        raw = await fetch_source(source)
        snapshot = build_snapshot(
            raw,
            self._window,
            self._systolic_ladder,
            self._diastolic_ladder,
            notepad,
        )

        if generation != self._generation:
            logger.info("Reload #%d superseded by #%d; discarding", generation, self._generation)
            return None

        self._snapshot = snapshot
        logger.info(
            "Reload #%d published %d records (%d skipped)",
            generation,
            len(snapshot.dataset),
            snapshot.diagnostics.skipped_rows,
        )
        return snapshot

    def set_window(self, window: int) -> typing.Optional[Snapshot]:
        """
        Change the moving-average window; only that view is rebuilt.
        """
        self._window = clamp_window(window)
        current = self._snapshot
        if current is None or current.moving_average.window == self._window:
            return current

        self._snapshot = dataclasses.replace(
            current, moving_average=moving_averages(current.dataset, self._window)
        )
        return self._snapshot
