"""
Timezone resolver.

Maps a naive local date/time onto the fixed target zone, applying its
daylight-saving rule: summer time runs from the last Sunday of March to the
last Sunday of October. Only weekday arithmetic is used, so any year works.
"""

from datetime import date, datetime, timedelta, timezone

from .config import (
    STANDARD_OFFSET_HOURS,
    SUMMER_END_HOUR,
    SUMMER_OFFSET_HOURS,
    SUMMER_START_HOUR,
)

_SUNDAY = 6  # date.weekday()


def last_sunday(year: int, month: int) -> date:
    """
    Last Sunday of a 31-day month: start at day 31 and walk back to Sunday.
    """
    day_31 = date(year, month, 31)
    return day_31 - timedelta(days=(day_31.weekday() - _SUNDAY) % 7)


def resolve_offset(local: datetime) -> timedelta:
    """
    UTC offset in effect for a naive local wall-clock time.

    Times inside the spring-forward gap resolve to summer time; the repeated
    autumn hour resolves to its first (summer) occurrence.
    """
    march = last_sunday(local.year, 3)
    october = last_sunday(local.year, 10)
    summer_start = datetime(march.year, march.month, march.day, SUMMER_START_HOUR)
    summer_end = datetime(october.year, october.month, october.day, SUMMER_END_HOUR)
    naive = local.replace(tzinfo=None)
    if summer_start <= naive < summer_end:
        return timedelta(hours=SUMMER_OFFSET_HOURS)
    return timedelta(hours=STANDARD_OFFSET_HOURS)


def localize(local: datetime) -> datetime:
    """Attach the resolved fixed offset to a naive local datetime."""
    return local.replace(tzinfo=timezone(resolve_offset(local)))
