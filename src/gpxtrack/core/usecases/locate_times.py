from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from gpxtrack.core.models.locate_models import (
    LocatePhase,
    LocateRequest,
    LocateResult,
    ProgressEvent,
    TimedLocation,
)
from gpxtrack.core.ports.progress import ProgressReporter
from gpxtrack.core.ports.track_sync import TrackSyncPort
from gpxtrack.domain.errors import InsufficientData
from gpxtrack.domain.timestamps import ensure_utc


@dataclass
class LocateTimesUseCase:
    """Use-case principal: positionner une série d'instants sur une trace GPS."""

    track_sync: TrackSyncPort

    def execute(self, request: LocateRequest, reporter: Optional[ProgressReporter] = None) -> LocateResult:
        total = len(request.times)
        results: list[TimedLocation] = []

        if total == 0:
            if reporter:
                reporter.report(ProgressEvent(LocatePhase.DONE, "Aucun instant à positionner"))
            return LocateResult(track=self.track_sync.track, locations=[])

        for idx, raw_time in enumerate(request.times, start=1):
            query_time = self._apply_offset(raw_time, request)
            if reporter:
                reporter.report(
                    ProgressEvent(
                        LocatePhase.LOCATE_TIME,
                        f"Instant {idx}/{total}",
                        current=idx,
                        total=total,
                        timestamp=query_time,
                    )
                )

            results.append(TimedLocation(time=query_time, location=self._locate_one(query_time)))

        if reporter:
            reporter.report(ProgressEvent(LocatePhase.DONE, "Terminé", current=total, total=total))

        return LocateResult(track=self.track_sync.track, locations=results)

    def _locate_one(self, query_time: datetime):
        try:
            return self.track_sync.locate(query_time)
        except InsufficientData:
            return None

    def _apply_offset(self, raw_time: datetime, request: LocateRequest) -> datetime:
        # Décalage manuel (horloge de l'appareil vs GPS)
        utc_time = ensure_utc(raw_time, request.local_timezone)
        if request.offset_seconds:
            utc_time = utc_time + timedelta(seconds=request.offset_seconds)
        return utc_time
