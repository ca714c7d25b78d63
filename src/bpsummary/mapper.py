import logging
import re
import typing

from dataclasses import dataclass
from datetime import datetime

import pandas as pd
from stairval.notepad import Notepad

from .config import (
    MONTH_ABBREVIATIONS,
    OPTIONAL_COLUMNS,
    RENAME_MAP,
    REQUIRED_COLUMNS,
    SENTINEL_INVALID,
)
from .errors import MissingRequiredColumn
from .measurement import MeasurementRecord
from .timezone import localize

logger = logging.getLogger(__name__)

# "30 Mar 2025": day, case-sensitive English month abbreviation, year
_DATE_PATTERN = re.compile(r"^(?P<day>\d{1,2}) (?P<month>[A-Z][a-z]{2}) (?P<year>\d{4})$")
# "07:45", 24-hour
_TIME_PATTERN = re.compile(r"^(?P<hour>\d{2}):(?P<minute>\d{2})$")
_INT_PATTERN = re.compile(r"^[+-]?\d+$")

VITAL_FIELDS = ("systolic", "diastolic", "pulse")


@dataclass
class ParseDiagnostics:
    """Counts of rows seen and rows skipped, by reason."""

    total_rows: int = 0
    blank_rows: int = 0
    malformed_rows: int = 0
    sentinel_rows: int = 0
    invalid_number_rows: int = 0
    invalid_timestamp_rows: int = 0

    @property
    def skipped_rows(self) -> int:
        return (
            self.blank_rows
            + self.malformed_rows
            + self.sentinel_rows
            + self.invalid_number_rows
            + self.invalid_timestamp_rows
        )

    @property
    def accepted_rows(self) -> int:
        return self.total_rows - self.skipped_rows


class RecordMapper:
    """
    Turns a raw table (one row per reading, headers exactly as exported)
    into MeasurementRecord objects.

    Row-level problems never abort the load: the row is skipped, the matching
    counter on ParseDiagnostics goes up, and a warning lands on the notepad
    when one is supplied. A header without the required columns raises
    MissingRequiredColumn.
    """

    def apply_mapping(
            self, df: pd.DataFrame, notepad: typing.Optional[Notepad] = None
    ) -> typing.Tuple[typing.List[MeasurementRecord], ParseDiagnostics]:
        self.check_required_columns(df)
        working = df.rename(columns=RENAME_MAP)
        extra_columns = [c for c in df.columns if c not in RENAME_MAP]

        # lines the CSV reader already dropped (see loader.load_csv_as_table)
        malformed = int(df.attrs.get("malformed_rows", 0))
        diagnostics = ParseDiagnostics(total_rows=malformed, malformed_rows=malformed)
        if malformed and notepad is not None:
            notepad.add_warning(f"{malformed} line(s) with more fields than the header were dropped")
        records: list[MeasurementRecord] = []
        # +2: one for the header, one for 1-based line numbers
        for line_number, (_, row) in enumerate(working.iterrows(), start=2):
            diagnostics.total_rows += 1
            record = self.parse_row(row, extra_columns, line_number, diagnostics, notepad)
            if record is not None:
                records.append(record)

        if diagnostics.skipped_rows:
            logger.info(
                "Skipped %d of %d rows (blank=%d, malformed=%d, sentinel=%d, invalid number=%d, invalid timestamp=%d)",
                diagnostics.skipped_rows,
                diagnostics.total_rows,
                diagnostics.blank_rows,
                diagnostics.malformed_rows,
                diagnostics.sentinel_rows,
                diagnostics.invalid_number_rows,
                diagnostics.invalid_timestamp_rows,
            )
        return records, diagnostics

    @staticmethod
    def check_required_columns(df: pd.DataFrame) -> None:
        have = set(df.columns)
        missing = [column for column in REQUIRED_COLUMNS if column not in have]
        if missing:
            raise MissingRequiredColumn(missing)

    @staticmethod
    def _is_blank(row: pd.Series) -> bool:
        return all(pd.isna(value) or not str(value).strip() for value in row.values)

    @staticmethod
    def _cell(row: pd.Series, name: str) -> str:
        """String value of a cell; missing/NaN becomes the empty string."""
        value = row.get(name, "")
        if value is None or pd.isna(value):
            return ""
        return str(value).strip()

    @staticmethod
    def _to_int(value: str) -> int:
        """
        Integer parsing for vitals:
        - plain integers with an optional sign
        - integral decimals such as '120.0' (some spreadsheet exports)
        Anything else raises ValueError.
        """
        if _INT_PATTERN.match(value):
            return int(value)
        number = float(value)
        if not number.is_integer():
            raise ValueError(f"not an integer: {value!r}")
        return int(number)

    @staticmethod
    def parse_local_datetime(date_cell: str, time_cell: str) -> datetime:
        """
        Combine 'D Mon YYYY' and 'HH:MM' cells into a naive local datetime.
        Raises ValueError for malformed cells or impossible calendar dates.
        """
        date_match = _DATE_PATTERN.match(date_cell)
        if not date_match:
            raise ValueError(f"malformed date {date_cell!r}")
        month = MONTH_ABBREVIATIONS.get(date_match.group("month"))
        if month is None:
            raise ValueError(f"unknown month in {date_cell!r}")

        time_match = _TIME_PATTERN.match(time_cell)
        if not time_match:
            raise ValueError(f"malformed time {time_cell!r}")

        # datetime() rejects 31 Feb, 24:00, 12:60 ...
        return datetime(
            int(date_match.group("year")),
            month,
            int(date_match.group("day")),
            int(time_match.group("hour")),
            int(time_match.group("minute")),
        )

    def parse_row(
            self,
            row: pd.Series,
            extra_columns: typing.Sequence[str],
            line_number: int,
            diagnostics: ParseDiagnostics,
            notepad: typing.Optional[Notepad] = None,
    ) -> typing.Optional[MeasurementRecord]:
        """
        Parse a single row into a MeasurementRecord.
        Returns None (and bumps a counter) if the row has to be skipped.
        """
        def skip(reason: str) -> None:
            logger.debug("Line %d skipped: %s", line_number, reason)
            if notepad is not None:
                notepad.add_warning(f"Line {line_number}: {reason}")

        if self._is_blank(row):
            diagnostics.blank_rows += 1
            # blank lines are routine; no warning
            logger.debug("Line %d is blank", line_number)
            return None

        try:
            vitals = {name: self._to_int(self._cell(row, name)) for name in VITAL_FIELDS}
        except ValueError as e:
            diagnostics.invalid_number_rows += 1
            skip(str(e))
            return None

        if any(value == SENTINEL_INVALID for value in vitals.values()):
            diagnostics.sentinel_rows += 1
            skip("reading flagged invalid by the device")
            return None

        negative = [name for name, value in vitals.items() if value < 0]
        if negative:
            diagnostics.invalid_number_rows += 1
            skip(f"negative reading in {negative}")
            return None

        try:
            local = self.parse_local_datetime(self._cell(row, "date"), self._cell(row, "time"))
        except ValueError as e:
            diagnostics.invalid_timestamp_rows += 1
            skip(str(e))
            return None

        return MeasurementRecord(
            timestamp=localize(local),
            device=self._cell(row, "device") or None,
            measurement_mode=self._cell(row, "measurement_mode") or None,
            extra={column: self._cell(row, column) for column in extra_columns},
            **vitals,
        )


def known_columns() -> typing.Tuple[str, ...]:
    """Every header name the mapper understands, required ones first."""
    return REQUIRED_COLUMNS + OPTIONAL_COLUMNS
