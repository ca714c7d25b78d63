from datetime import date, datetime, timedelta

import pytest
from bpsummary.timezone import last_sunday, localize, resolve_offset


@pytest.mark.parametrize(
    "year, month, expected",
    [
        (2025, 3, date(2025, 3, 30)),
        (2025, 10, date(2025, 10, 26)),
        (2024, 3, date(2024, 3, 31)),  # day 31 itself is a Sunday
        (2024, 10, date(2024, 10, 27)),
        (1999, 3, date(1999, 3, 28)),
        (2100, 10, date(2100, 10, 31)),
    ],
)
def test_last_sunday(year, month, expected):
    assert last_sunday(year, month) == expected
    assert expected.weekday() == 6


def test_spring_forward_on_last_sunday_of_march():
    """Same date, before and after the change."""
    assert resolve_offset(datetime(2025, 3, 30, 2, 0)) == timedelta(hours=2)
    assert resolve_offset(datetime(2025, 3, 30, 4, 0)) == timedelta(hours=3)


def test_day_before_transition_is_standard_time():
    assert resolve_offset(datetime(2025, 3, 29, 23, 59)) == timedelta(hours=2)


def test_fall_back_on_last_sunday_of_october():
    assert resolve_offset(datetime(2025, 10, 26, 3, 30)) == timedelta(hours=3)
    assert resolve_offset(datetime(2025, 10, 26, 4, 0)) == timedelta(hours=2)
    assert resolve_offset(datetime(2025, 10, 27, 12, 0)) == timedelta(hours=2)


@pytest.mark.parametrize(
    "local, hours",
    [
        (datetime(2023, 1, 15, 12, 0), 2),
        (datetime(2023, 7, 15, 12, 0), 3),
        (datetime(2023, 12, 31, 23, 59), 2),
    ],
)
def test_offset_by_season(local, hours):
    assert resolve_offset(local) == timedelta(hours=hours)


def test_localize_keeps_wall_clock_time():
    aware = localize(datetime(2025, 7, 1, 8, 15))
    assert aware.hour == 8 and aware.minute == 15
    assert aware.utcoffset() == timedelta(hours=3)
