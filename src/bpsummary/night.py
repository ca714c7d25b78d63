"""
Night-measurement classifier.

A reading counts as a night measurement when the device tagged it with the
nocturnal mode, or when it was taken during the night hours on the dedicated
night device. Readings from other devices during the night hours do not
count.
"""

import typing

from .config import NIGHT_DEVICE_ID, NIGHT_HOURS, NIGHT_MODE_TAG
from .measurement import MeasurementRecord


def is_night_measurement(
    device: typing.Optional[str], mode: typing.Optional[str], hour: int
) -> bool:
    if mode == NIGHT_MODE_TAG:
        return True
    return hour in NIGHT_HOURS and device == NIGHT_DEVICE_ID


def is_night_record(record: MeasurementRecord) -> bool:
    return is_night_measurement(record.device, record.measurement_mode, record.local_hour)
