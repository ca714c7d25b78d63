from datetime import datetime

import pytest
from bpsummary.measurement import MeasurementRecord
from bpsummary.night import is_night_measurement, is_night_record
from bpsummary.timezone import localize


@pytest.mark.parametrize(
    "mode, device, hour, expected",
    [
        ("Nocturnal", "Other", 14, True),
        ("Normal", "NightView", 0, True),
        ("Normal", "EVOLV", 0, False),
        ("Normal", "NightView", 23, True),
        ("Normal", "NightView", 4, True),
        ("Normal", "NightView", 5, False),
        ("Normal", "NightView", 22, False),
        (None, None, 2, False),
        ("nocturnal", "Other", 14, False),  # tag is case-sensitive
    ],
)
def test_is_night_measurement(mode, device, hour, expected):
    assert is_night_measurement(device, mode, hour) is expected


def test_is_night_record_uses_local_hour():
    record = MeasurementRecord(
        timestamp=localize(datetime(2025, 3, 5, 0, 30)),
        systolic=118,
        diastolic=76,
        pulse=58,
        device="NightView",
        measurement_mode="Normal",
    )
    assert is_night_record(record)
