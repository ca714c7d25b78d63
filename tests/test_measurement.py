from datetime import datetime

import pytest
from bpsummary.measurement import MeasurementRecord
from bpsummary.timezone import localize

STAMP = localize(datetime(2025, 3, 3, 8, 0))


def test_valid_record():
    record = MeasurementRecord(timestamp=STAMP, systolic=120, diastolic=80, pulse=60)
    assert record.local_hour == 8
    assert record.extra == {}


@pytest.mark.parametrize("field", ["systolic", "diastolic", "pulse"])
def test_sentinel_rejected(field):
    values = {"systolic": 120, "diastolic": 80, "pulse": 60, field: -2147483648}
    with pytest.raises(ValueError):
        MeasurementRecord(timestamp=STAMP, **values)


@pytest.mark.parametrize("bad", [120.0, "120", True, None])
def test_non_int_vitals_rejected(bad):
    with pytest.raises(ValueError):
        MeasurementRecord(timestamp=STAMP, systolic=bad, diastolic=80, pulse=60)


def test_naive_timestamp_rejected():
    with pytest.raises(ValueError):
        MeasurementRecord(timestamp=datetime(2025, 3, 3, 8, 0), systolic=120, diastolic=80, pulse=60)


def test_extra_is_read_only():
    record = MeasurementRecord(
        timestamp=STAMP, systolic=120, diastolic=80, pulse=60, extra={"Notes": "x"}
    )
    with pytest.raises(TypeError):
        record.extra["Notes"] = "y"


def test_negative_vitals_rejected():
    with pytest.raises(ValueError):
        MeasurementRecord(timestamp=STAMP, systolic=120, diastolic=80, pulse=-5)
