#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Types de données GPS pour gpxtrack.
Définit les dataclasses utilisées dans toute l'application.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterator, NamedTuple, Optional, Tuple


@dataclass(frozen=True)
class Waypoint:
    """
    Représente un point de trace accepté.

    Attributes:
        longitude: Longitude en degrés décimaux
        latitude: Latitude en degrés décimaux
        timestamp: Horodatage du point (UTC, timezone-aware)
        elevation: Altitude en mètres (0 si absente ou illisible)
    """
    longitude: float
    latitude: float
    timestamp: datetime
    elevation: float = 0.0


@dataclass(frozen=True)
class Track:
    """
    Représente une trace GPS complète, dans l'ordre du fichier.

    L'ordre chronologique n'est pas vérifié : la recherche de position
    suppose des horodatages croissants (contrat du fichier).

    Attributes:
        name: Nom de la trace (ex: nom du fichier)
        points: Points acceptés, figés
    """
    name: str
    points: Tuple[Waypoint, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Waypoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> Waypoint:
        return self.points[index]

    def is_empty(self) -> bool:
        """Vérifie si la trace est vide."""
        return len(self.points) == 0

    @property
    def start_time(self) -> Optional[datetime]:
        return self.points[0].timestamp if self.points else None

    @property
    def end_time(self) -> Optional[datetime]:
        return self.points[-1].timestamp if self.points else None

    def get_bounds(self) -> tuple:
        """
        Retourne les limites géographiques de la trace.

        Returns:
            Tuple (min_lat, min_lon, max_lat, max_lon)
        """
        if self.is_empty():
            return (0.0, 0.0, 0.0, 0.0)

        lats = [p.latitude for p in self.points]
        lons = [p.longitude for p in self.points]
        return (min(lats), min(lons), max(lats), max(lons))

    def get_center(self) -> tuple:
        """
        Retourne le centre géographique de la trace.

        Returns:
            Tuple (lat, lon)
        """
        bounds = self.get_bounds()
        center_lat = (bounds[0] + bounds[2]) / 2
        center_lon = (bounds[1] + bounds[3]) / 2
        return (center_lat, center_lon)

    def is_time_in_track(self, time_to_check: datetime, tolerance_seconds: float = 300.0) -> bool:
        """
        Vérifie si un temps donné est inclus dans la plage temporelle de la trace.

        Args:
            time_to_check: Temps à vérifier (timezone-aware)
            tolerance_seconds: Tolérance en secondes (défaut 5 min)
        """
        if self.start_time is None or self.end_time is None:
            return False

        start = self.start_time - timedelta(seconds=tolerance_seconds)
        end = self.end_time + timedelta(seconds=tolerance_seconds)
        return start <= time_to_check <= end


class Location(NamedTuple):
    """Résultat d'une recherche de position."""
    longitude: float
    latitude: float
    in_range: bool


class WarningKind(Enum):
    """Anomalies non fatales rencontrées pendant le parsing."""
    NESTED_TRKPT = "trkpt imbriqué"
    MISSING_COORDINATES = "lon/lat absents"
    INVALID_COORDINATES = "lon/lat illisibles"
    ORPHAN_ELEMENT = "élément hors trkpt"
    INVALID_TIME = "horodatage illisible"


@dataclass(frozen=True)
class ParseWarning:
    kind: WarningKind
    message: str
    element: str = ""

    def __str__(self) -> str:
        return self.message


class ParseResult(NamedTuple):
    """Trace obtenue + avertissements accumulés pendant le parsing."""
    track: Track
    warnings: Tuple[ParseWarning, ...] = ()
