#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Recherche de la position d'une trace à un instant donné.
"""

from __future__ import annotations

from datetime import datetime

from gpxtrack.domain.errors import InsufficientData
from gpxtrack.domain.gps_types import Location, Track
from gpxtrack.domain.timestamps import ensure_utc


def locate(track: Track, query_time: datetime, local_timezone: str = "UTC") -> Location:
    """
    Retourne la position connue de la trace à `query_time`.

    On cherche deux points consécutifs qui encadrent l'instant demandé
    et on retourne les coordonnées du premier. Hors de la plage
    temporelle, on retourne le point le plus proche (premier ou dernier)
    avec `in_range=False`.

    Un instant égal à l'horodatage d'un point intermédiaire retourne ce
    point (et non le précédent) avec `in_range=True` ; égal au dernier
    point, il retourne ce dernier avec `in_range=False`.

    Args:
        track: Trace à interroger (horodatages supposés croissants)
        query_time: Instant recherché (naïf = `local_timezone`)
        local_timezone: Timezone appliquée à un `query_time` naïf

    Returns:
        Location(longitude, latitude, in_range)

    Raises:
        InsufficientData: la trace contient moins de deux points
    """
    points = track.points
    if len(points) < 2:
        raise InsufficientData(
            f"au moins 2 points de trace nécessaires, {len(points)} disponible(s)"
        )

    query = ensure_utc(query_time, local_timezone)
    last_index = len(points) - 1

    for index, point in enumerate(points):
        # Fin de trace atteinte ou dépassée
        if index == last_index and query >= point.timestamp:
            return Location(point.longitude, point.latitude, False)

        # Avant ce point (avant le début de la trace pour le premier)
        if query < point.timestamp:
            return Location(point.longitude, point.latitude, False)

        if index < last_index and point.timestamp <= query < points[index + 1].timestamp:
            return Location(point.longitude, point.latitude, True)

    # Filet de sécurité : la boucle retourne toujours au dernier point
    point = points[-1]
    return Location(point.longitude, point.latitude, False)
