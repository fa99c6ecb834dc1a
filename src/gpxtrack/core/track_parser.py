#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Construction d'une trace à partir d'un flux d'événements XML.

Le parseur est une machine à états explicite : `step()` reçoit l'état
courant et un événement (début d'élément, texte, fin d'élément) et
retourne le nouvel état, le point éventuellement validé et les
avertissements produits. Aucun état n'est partagé entre deux parsings.

Politique : un point invalide est écarté, le parsing continue toujours.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Mapping, NamedTuple, Optional, Tuple

from gpxtrack.core.models.xml_events import EndElement, StartElement, Text, XmlEvent, local_name
from gpxtrack.domain.gps_types import ParseResult, ParseWarning, Track, WarningKind, Waypoint
from gpxtrack.domain.timestamps import parse_iso8601


logger = logging.getLogger(__name__)


class ParserElement(Enum):
    """Élément reconnu actuellement ouvert."""
    NONE = 0
    TRKPT = 1
    TIME = 2
    ELE = 4


@dataclass(frozen=True)
class Candidate:
    """
    Point en cours de construction.

    `longitude` / `latitude` valent None quand l'attribut est absent ou
    illisible ; `timestamp` vaut None tant qu'aucun <time> valide n'a été lu.
    """
    longitude: Optional[float] = None
    latitude: Optional[float] = None
    elevation: float = 0.0
    timestamp: Optional[datetime] = None

    def to_waypoint(self) -> Optional[Waypoint]:
        if self.longitude is None or self.latitude is None or self.timestamp is None:
            return None
        return Waypoint(
            longitude=self.longitude,
            latitude=self.latitude,
            timestamp=self.timestamp,
            elevation=self.elevation,
        )


@dataclass(frozen=True)
class ParserState:
    element: ParserElement = ParserElement.NONE
    candidate: Optional[Candidate] = None
    valid: bool = False


class StepResult(NamedTuple):
    state: ParserState
    committed: Optional[Waypoint] = None
    warnings: Tuple[ParseWarning, ...] = ()


INITIAL_STATE = ParserState()


def step(state: ParserState, event: XmlEvent, local_timezone: str = "UTC") -> StepResult:
    """
    Applique un événement XML à l'état du parseur.

    Args:
        state: État courant (jamais modifié)
        event: StartElement, Text ou EndElement
        local_timezone: Timezone des horodatages sans décalage

    Returns:
        StepResult (nouvel état, point validé ou None, avertissements)
    """
    if isinstance(event, StartElement):
        return _on_start(state, local_name(event.name), event.attributes)
    if isinstance(event, Text):
        return _on_text(state, event.content, local_timezone)
    if isinstance(event, EndElement):
        return _on_end(state, local_name(event.name))
    raise TypeError(f"événement XML inconnu: {event!r}")


def parse(events: Iterable[XmlEvent], name: str = "", local_timezone: str = "UTC") -> ParseResult:
    """
    Construit la trace à partir d'un flux d'événements complet.

    Args:
        events: Événements XML dans l'ordre du document
        name: Nom de la trace (ex: nom du fichier)
        local_timezone: Timezone des horodatages sans décalage

    Returns:
        ParseResult (trace figée + avertissements)
    """
    state = INITIAL_STATE
    points: List[Waypoint] = []
    warnings: List[ParseWarning] = []

    for event in events:
        state, committed, step_warnings = step(state, event, local_timezone)
        if committed is not None:
            points.append(committed)
        warnings.extend(step_warnings)

    logger.debug("%d points acceptés, %d avertissements", len(points), len(warnings))
    return ParseResult(Track(name=name, points=tuple(points)), tuple(warnings))


def _on_start(state: ParserState, element: str, attributes: Mapping[str, str]) -> StepResult:
    if element == "trkpt":
        return _open_track_point(state, attributes)

    if element in ("time", "ele"):
        if state.candidate is None:
            warning = _warn(
                WarningKind.ORPHAN_ELEMENT,
                f"fichier gpx cassé, élément '{element}' trouvé hors d'un trkpt",
                element,
            )
            return StepResult(replace(state, element=ParserElement.NONE), warnings=(warning,))

        current = ParserElement.TIME if element == "time" else ParserElement.ELE
        return StepResult(replace(state, element=current))

    return StepResult(state)


def _open_track_point(state: ParserState, attributes: Mapping[str, str]) -> StepResult:
    warnings: List[ParseWarning] = []

    if state.candidate is not None:
        warnings.append(_warn(
            WarningKind.NESTED_TRKPT,
            "fichier gpx cassé, nouveau trkpt avant la fin du précédent",
            "trkpt",
        ))

    values = {local_name(key): value for key, value in attributes.items()}
    raw_lon = values.get("lon")
    raw_lat = values.get("lat")
    longitude = _parse_float(raw_lon)
    latitude = _parse_float(raw_lat)

    valid = True
    if raw_lon is None or raw_lat is None:
        warnings.append(_warn(
            WarningKind.MISSING_COORDINATES,
            "fichier gpx cassé, trkpt sans attribut lon/lat",
            "trkpt",
        ))
        valid = False
    elif longitude is None or latitude is None:
        warnings.append(_warn(
            WarningKind.INVALID_COORDINATES,
            f"fichier gpx cassé, lon/lat illisibles pour trkpt (lon={raw_lon!r}, lat={raw_lat!r})",
            "trkpt",
        ))
        valid = False

    # Le candidat est ouvert même invalide : <time>/<ele> ont besoin d'un point
    new_state = ParserState(
        element=ParserElement.TRKPT,
        candidate=Candidate(longitude=longitude, latitude=latitude),
        valid=valid,
    )
    return StepResult(new_state, warnings=tuple(warnings))


def _on_text(state: ParserState, content: str, local_timezone: str) -> StepResult:
    candidate = state.candidate
    if candidate is None:
        return StepResult(state)

    if state.element is ParserElement.TIME:
        try:
            timestamp = parse_iso8601(content, local_timezone)
        except (ValueError, OverflowError):
            warning = _warn(
                WarningKind.INVALID_TIME,
                f"fichier gpx cassé, horodatage iso8601 illisible '{content.strip()}' pour trkpt",
                "time",
            )
            return StepResult(replace(state, valid=False), warnings=(warning,))
        return StepResult(replace(state, candidate=replace(candidate, timestamp=timestamp)))

    if state.element is ParserElement.ELE:
        # Altitude best effort : une valeur illisible garde 0
        elevation = _parse_float(content)
        if elevation is not None:
            return StepResult(replace(state, candidate=replace(candidate, elevation=elevation)))

    return StepResult(state)


def _on_end(state: ParserState, element: str) -> StepResult:
    if element != "trkpt":
        return StepResult(replace(state, element=ParserElement.NONE))

    committed = None
    if state.candidate is not None and state.valid:
        committed = state.candidate.to_waypoint()
        if committed is None:
            logger.debug("trkpt sans horodatage, point ignoré")

    return StepResult(INITIAL_STATE, committed=committed)


def _parse_float(text: Optional[str]) -> Optional[float]:
    if text is None:
        return None
    try:
        value = float(text.strip())
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _warn(kind: WarningKind, message: str, element: str) -> ParseWarning:
    logger.warning(message)
    return ParseWarning(kind=kind, message=message, element=element)
