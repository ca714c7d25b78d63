"""
Measurement domain model.

Defines the MeasurementRecord dataclass for one blood-pressure reading.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

from .config import SENTINEL_INVALID


@dataclass(frozen=True)
class MeasurementRecord:
    """
    Represents a single blood-pressure reading.

    Attributes:
        timestamp: Local time of the reading with the target zone offset attached.
        systolic: Systolic pressure in mmHg.
        diastolic: Diastolic pressure in mmHg.
        pulse: Pulse in bpm.
        device: Name of the measuring device, if exported.
        measurement_mode: Mode tag reported by the device (e.g. 'Nocturnal').
        extra: Any unrecognized source columns, kept verbatim.
    """

    timestamp: datetime
    systolic: int
    diastolic: int
    pulse: int
    device: typing.Optional[str] = None
    measurement_mode: typing.Optional[str] = None
    extra: typing.Mapping[str, str] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if self.timestamp.tzinfo is None:
            raise ValueError(f"timestamp must carry an offset, got {self.timestamp!r}")

        for name in ("systolic", "diastolic", "pulse"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{name} must be an int, got {type(value).__name__}")
            if value == SENTINEL_INVALID:
                raise ValueError(f"{name} holds the invalid sentinel value")
            if value < 0:
                raise ValueError(f"{name} must not be negative, got {value}")

        # frozen: bypass __setattr__ to store a read-only view
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @property
    def local_hour(self) -> int:
        return self.timestamp.hour
