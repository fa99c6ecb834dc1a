#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Façade "application" utilisée par la ligne de commande.

Objectif: l'appelant ne doit pas connaître l'infra (lxml/mmap/fs).
Le calcul est déporté dans `gpxtrack.core` (usecase + ports).
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from gpxtrack.app.config import DEFAULT_TIMEZONE
from gpxtrack.core.models.locate_models import LocateRequest, TimedLocation
from gpxtrack.core.ports.byte_source import ByteSourcePort
from gpxtrack.core.usecases.locate_times import LocateTimesUseCase
from gpxtrack.domain.errors import InsufficientData, IoOrFormatError
from gpxtrack.domain.gps_types import Location, ParseWarning, Track
from gpxtrack.infra.gpx.gpx_parser import GpxParser
from gpxtrack.infra.system.byte_source import OSByteSource


logger = logging.getLogger(__name__)


class TrackController:
    """
    Contrôleur principal pour la recherche de positions.
    Gère le chargement de la trace et les requêtes.
    """

    def __init__(
        self,
        local_timezone: str = DEFAULT_TIMEZONE,
        byte_source: Optional[ByteSourcePort] = None
    ) -> None:
        """
        Initialise le contrôleur.

        Args:
            local_timezone: Timezone des horodatages sans décalage
            byte_source: Lecteur de fichier (projection mémoire par défaut)
        """
        self.local_timezone = local_timezone
        self.gpx_parser: Optional[GpxParser] = None
        self.track: Optional[Track] = None
        self.locations: List[TimedLocation] = []

        self._byte_source = byte_source or OSByteSource()

        self.gpx_path: Optional[str] = None

    def load_gpx_file(self, filepath: str) -> bool:
        """
        Charge et parse un fichier .gpx.

        Args:
            filepath: Chemin vers le fichier .gpx

        Returns:
            True si le parsing a réussi et la trace contient des points
        """
        self.gpx_path = filepath
        self.gpx_parser = GpxParser(
            filepath, byte_source=self._byte_source, local_timezone=self.local_timezone
        )
        try:
            self.track = self.gpx_parser.parse()
        except IoOrFormatError as e:
            logger.error("chargement de %s impossible: %s", filepath, e.message)
            self.track = None
            return False

        return not self.track.is_empty()

    def locate(self, query_time: datetime) -> Optional[Location]:
        """
        Position de la trace à un instant donné.

        Returns:
            Location, ou None si la trace a moins de deux points
        """
        if self.gpx_parser is None or self.track is None:
            return None
        try:
            return self.gpx_parser.locate(query_time)
        except InsufficientData as e:
            logger.warning("%s", e.message)
            return None

    def locate_many(
        self,
        times: Sequence[datetime],
        offset_seconds: float = 0.0,
        progress_callback: Optional[Callable[[int, int], None]] = None
    ) -> List[TimedLocation]:
        """
        Positionne une série d'instants sur la trace chargée.

        Args:
            times: Instants à positionner
            offset_seconds: Décalage appliqué à chaque instant
            progress_callback: Fonction de callback (current, total)

        Returns:
            Liste des TimedLocation, dans l'ordre de `times`
        """
        if self.gpx_parser is None or self.track is None:
            logger.error("aucune trace chargée")
            return []

        request = LocateRequest(
            times=tuple(times),
            offset_seconds=offset_seconds,
            local_timezone=self.local_timezone,
        )
        usecase = LocateTimesUseCase(track_sync=self.gpx_parser)

        reporter = _CallbackProgressReporter(progress_callback) if progress_callback else None
        result = usecase.execute(request, reporter=reporter)
        self.locations = result.locations

        return self.locations

    def get_track(self) -> Optional[Track]:
        """Retourne la trace GPS chargée."""
        return self.track

    def get_warnings(self) -> Tuple[ParseWarning, ...]:
        """Retourne les avertissements du dernier parsing."""
        if self.gpx_parser is None:
            return ()
        return self.gpx_parser.warnings

    def has_track(self) -> bool:
        """Vérifie si une trace GPS est chargée."""
        return self.track is not None and not self.track.is_empty()

    def get_summary(self) -> dict:
        """Retourne un résumé du traitement."""
        total = len(self.locations)
        located = sum(1 for loc in self.locations if loc.is_located())
        return {
            "track_points": len(self.track) if self.track else 0,
            "warnings": len(self.get_warnings()),
            "start_time": self.track.start_time if self.track else None,
            "end_time": self.track.end_time if self.track else None,
            "total_times": total,
            "located_times": located,
            "out_of_range": total - located,
        }


class _CallbackProgressReporter:
    def __init__(self, callback: Callable[[int, int], None]) -> None:
        self._callback = callback

    def report(self, event) -> None:
        if event.total and event.current:
            self._callback(event.current, event.total)
