from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence

from gpxtrack.domain.gps_types import Location, Track


class LocatePhase(str, Enum):
    LOCATE_TIME = "locate_time"
    DONE = "done"


@dataclass(frozen=True)
class LocateRequest:
    times: Sequence[datetime] = field(default_factory=tuple)
    offset_seconds: float = 0.0
    local_timezone: str = "UTC"


@dataclass(frozen=True)
class ProgressEvent:
    phase: LocatePhase
    message: str
    current: int = 0
    total: int = 0
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class TimedLocation:
    time: datetime
    location: Optional[Location]

    def is_located(self) -> bool:
        return self.location is not None and self.location.in_range


@dataclass(frozen=True)
class LocateResult:
    track: Optional[Track]
    locations: list[TimedLocation]
