from __future__ import annotations

from typing import Protocol

from gpxtrack.core.models.locate_models import ProgressEvent


class ProgressReporter(Protocol):
    def report(self, event: ProgressEvent) -> None: ...
