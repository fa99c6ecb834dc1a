from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from gpxtrack.domain.gps_types import Location, ParseWarning, Track


class TrackSyncPort(Protocol):
    """Accès au track + recherche temporelle (core-friendly)."""

    @property
    def track(self) -> Optional[Track]: ...

    @property
    def warnings(self) -> tuple[ParseWarning, ...]: ...

    def parse(self) -> Track: ...

    def is_time_in_track(self, time_to_check: datetime, tolerance_seconds: float = 300.0) -> bool: ...

    def locate(self, query_time: datetime) -> Location: ...
