"""
Configuration for the bpsummary toolkit.

Everything that might need tweaking lives here as module-level constants:
column names, severity ladders, the moving-average window bounds, the
night-measurement rule and the target timezone.

Environment
-----------
BPSUMMARY_BASE_URL : Base location for the named data sources (an http(s)
                     URL or a directory). Defaults to "./data".
BPSUMMARY_TIMEOUT  : HTTP timeout in seconds for fetching sources (default 10).
"""

from __future__ import annotations

import os

# ------------------------------------------------------------------------------
# Input format
# ------------------------------------------------------------------------------

# Reserved value written by the device exports when a reading is missing
SENTINEL_INVALID = -2147483648

DATE_COLUMN = "Date"
TIME_COLUMN = "Time"
SYSTOLIC_COLUMN = "Systolic (mmHg)"
DIASTOLIC_COLUMN = "Diastolic (mmHg)"
PULSE_COLUMN = "Pulse (bpm)"
DEVICE_COLUMN = "Device"
MODE_COLUMN = "Measurement Mode"

REQUIRED_COLUMNS = (
    DATE_COLUMN,
    TIME_COLUMN,
    SYSTOLIC_COLUMN,
    DIASTOLIC_COLUMN,
    PULSE_COLUMN,
)
OPTIONAL_COLUMNS = (DEVICE_COLUMN, MODE_COLUMN)

# Source header → MeasurementRecord field
RENAME_MAP = {
    DATE_COLUMN: "date",
    TIME_COLUMN: "time",
    SYSTOLIC_COLUMN: "systolic",
    DIASTOLIC_COLUMN: "diastolic",
    PULSE_COLUMN: "pulse",
    DEVICE_COLUMN: "device",
    MODE_COLUMN: "measurement_mode",
}

MONTH_ABBREVIATIONS = {
    "Jan": 1,
    "Feb": 2,
    "Mar": 3,
    "Apr": 4,
    "May": 5,
    "Jun": 6,
    "Jul": 7,
    "Aug": 8,
    "Sep": 9,
    "Oct": 10,
    "Nov": 11,
    "Dec": 12,
}

# ------------------------------------------------------------------------------
# Target timezone (EET/EEST style rule)
# ------------------------------------------------------------------------------

STANDARD_OFFSET_HOURS = 2
SUMMER_OFFSET_HOURS = 3
# Local wall-clock hours at which the clocks change on the last Sundays
SUMMER_START_HOUR = 3  # March, in standard time
SUMMER_END_HOUR = 4  # October, in summer time

# ------------------------------------------------------------------------------
# Statistics and derived series
# ------------------------------------------------------------------------------

SYSTOLIC_LADDER = (140, 130, 120, 110, 100, 90)
DIASTOLIC_LADDER = (90, 85, 80, 75, 70, 65)

HIGH_SYSTOLIC = 140
MEDIUM_SYSTOLIC = 130

MIN_WINDOW_DAYS = 1
MAX_WINDOW_DAYS = 30
DEFAULT_WINDOW_DAYS = 7

NIGHT_MODE_TAG = "Nocturnal"
NIGHT_DEVICE_ID = "NightView"
NIGHT_HOURS = frozenset({23, 0, 1, 2, 3, 4})

# ------------------------------------------------------------------------------
# Data sources
# ------------------------------------------------------------------------------

BASE_URL = os.getenv("BPSUMMARY_BASE_URL", "data").rstrip("/")
HTTP_TIMEOUT = float(os.getenv("BPSUMMARY_TIMEOUT", "10"))

# Named sources offered to callers; each resolves to <BASE_URL>/<name>.csv
DATA_SOURCES = ("home", "clinic", "ambulatory")
