"""
Location and clock context consumed by the calculator.

The calculator only needs a handful of attributes from its surroundings,
so it accepts anything matching the ``LocationProvider`` and ``Clock``
protocols. ``Location`` and ``ClockTime`` are simple concrete carriers
for callers that have nothing better to pass.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


class LocationProvider(Protocol):
    """Where the weather was observed."""

    @property
    def latitude(self) -> float:
        """Latitude in radians."""

    @property
    def longitude(self) -> float:
        """Longitude in radians."""

    @property
    def timezone_offset(self) -> int:
        """Offset of local standard time from UTC, in seconds."""

    @property
    def dst_amount(self) -> int:
        """Daylight saving shift currently in effect, in seconds (0 if none)."""


class Clock(Protocol):
    """Local clock time of an observation."""

    @property
    def month(self) -> int:
        """Month, January = 1."""

    @property
    def hour(self) -> int: ...

    @property
    def minute(self) -> int: ...

    @property
    def second(self) -> int: ...


@dataclass(frozen=True)
class Location:
    """
    A fixed observation site.

    Attributes
    ----------
    latitude : float
        Latitude in radians.
    longitude : float
        Longitude in radians.
    timezone_offset : int
        Local standard time offset from UTC (seconds).
    dst_amount : int
        Daylight saving shift in effect (seconds).
    """

    latitude: float
    longitude: float
    timezone_offset: int = 0
    dst_amount: int = 0

    @classmethod
    def from_degrees(
        cls,
        latitude: float,
        longitude: float,
        timezone_offset_hours: float = 0.0,
        dst_hours: float = 0.0,
    ) -> "Location":
        """Build a location from degrees and hour offsets."""
        return cls(
            latitude=math.radians(latitude),
            longitude=math.radians(longitude),
            timezone_offset=int(round(timezone_offset_hours * 3600)),
            dst_amount=int(round(dst_hours * 3600)),
        )


@dataclass(frozen=True)
class ClockTime:
    """A local clock reading; ``month`` runs 1-12."""

    month: int
    hour: int = 12
    minute: int = 0
    second: int = 0

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1-12, got {self.month}")
        if not 0 <= self.hour <= 23:
            raise ValueError(f"hour must be in 0-23, got {self.hour}")
        if not 0 <= self.minute <= 59 or not 0 <= self.second <= 59:
            raise ValueError(f"invalid minute/second: {self.minute}:{self.second}")

    @classmethod
    def from_datetime(cls, moment: datetime) -> "ClockTime":
        """Take the month and time of day from a local datetime."""
        return cls(moment.month, moment.hour, moment.minute, moment.second)
