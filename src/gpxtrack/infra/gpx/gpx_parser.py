#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Parser de fichiers GPX pour gpxtrack.
Transforme le XML en flux d'événements (lxml) et construit la trace.
"""

import logging
import os
from datetime import datetime
from typing import List, Optional, Tuple

from lxml import etree

from gpxtrack.app.config import DEFAULT_TIME_TOLERANCE_SECONDS, DEFAULT_TIMEZONE, MIN_GPX_SIZE
from gpxtrack.core import track_parser
from gpxtrack.core.location_resolver import locate
from gpxtrack.core.models.xml_events import EndElement, StartElement, Text, XmlEvent
from gpxtrack.core.ports.byte_source import ByteSourcePort
from gpxtrack.domain.errors import InsufficientData, IoOrFormatError
from gpxtrack.domain.gps_types import Location, ParseResult, ParseWarning, Track
from gpxtrack.domain.timestamps import ensure_utc
from gpxtrack.infra.system.byte_source import OSByteSource


logger = logging.getLogger(__name__)


class _EventCollector:
    """
    Cible du parser lxml : enregistre les événements dans l'ordre.

    lxml peut découper un même nœud texte en plusieurs appels `data()` ;
    ils sont regroupés en un seul événement Text.
    """

    def __init__(self) -> None:
        self.events: List[XmlEvent] = []
        self._text: List[str] = []

    def start(self, tag, attrib) -> None:
        self._flush_text()
        self.events.append(StartElement(tag, dict(attrib)))

    def end(self, tag) -> None:
        self._flush_text()
        self.events.append(EndElement(tag))

    def data(self, data) -> None:
        self._text.append(data)

    def close(self) -> List[XmlEvent]:
        self._flush_text()
        return self.events

    def _flush_text(self) -> None:
        if self._text:
            self.events.append(Text("".join(self._text)))
            self._text = []


def events_from_bytes(data: bytes) -> List[XmlEvent]:
    """
    Découpe un document XML en événements début/texte/fin.

    Raises:
        IoOrFormatError: XML mal formé ou encodage invalide
    """
    parser = etree.XMLParser(
        target=_EventCollector(),
        resolve_entities=False,
        no_network=True,
    )
    try:
        parser.feed(data)
        return parser.close()
    except etree.LxmlError as e:
        raise IoOrFormatError(f"fichier gpx mal formé: {e}") from e


def parse_gpx_bytes(data: Optional[bytes], name: str = "", local_timezone: str = DEFAULT_TIMEZONE) -> ParseResult:
    """
    Parse le contenu complet d'un fichier GPX.

    Args:
        data: Contenu brut du fichier
        name: Nom de la trace
        local_timezone: Timezone des horodatages sans décalage

    Returns:
        ParseResult (trace + avertissements)

    Raises:
        IoOrFormatError: contenu absent, trop petit ou XML mal formé
    """
    if not data or len(data) < MIN_GPX_SIZE:
        size = len(data) if data else 0
        raise IoOrFormatError(f"pas un fichier gpx: {size} octet(s)")

    return track_parser.parse(events_from_bytes(data), name=name, local_timezone=local_timezone)


class GpxParser:
    """
    Parser pour les fichiers GPX.
    Charge le fichier via un ByteSourcePort puis construit la trace.
    """

    def __init__(
        self,
        filepath: str,
        byte_source: Optional[ByteSourcePort] = None,
        local_timezone: str = DEFAULT_TIMEZONE
    ) -> None:
        """
        Initialise le parser avec le chemin du fichier .gpx.

        Args:
            filepath: Chemin vers le fichier .gpx
            byte_source: Lecteur de fichier (projection mémoire par défaut)
            local_timezone: Timezone des horodatages sans décalage
        """
        self.filepath = filepath
        self.byte_source = byte_source or OSByteSource()
        self.local_timezone = local_timezone
        self._track: Optional[Track] = None
        self._warnings: Tuple[ParseWarning, ...] = ()

    @property
    def track(self) -> Optional[Track]:
        return self._track

    @property
    def warnings(self) -> Tuple[ParseWarning, ...]:
        return self._warnings

    def parse(self) -> Track:
        """
        Parse le fichier .gpx et retourne la trace GPS.

        Raises:
            IoOrFormatError: fichier illisible, trop petit ou mal formé
        """
        data = self.byte_source.read_bytes(self.filepath)
        name = os.path.basename(self.filepath)
        track, warnings = parse_gpx_bytes(data, name=name, local_timezone=self.local_timezone)

        if track.is_empty():
            logger.warning("aucun point de trace valide dans %s", self.filepath)
        else:
            logger.info("trace %s: %s -> %s", name, track.start_time, track.end_time)

        logger.info(
            "fichier .gpx parsé: %d points, %d avertissements", len(track), len(warnings)
        )
        self._track = track
        self._warnings = warnings
        return track

    def is_time_in_track(
        self,
        time_to_check: datetime,
        tolerance_seconds: float = DEFAULT_TIME_TOLERANCE_SECONDS
    ) -> bool:
        """
        Vérifie si un temps donné est inclus dans la plage temporelle de la trace.

        Args:
            time_to_check: Temps à vérifier (naïf = timezone locale)
            tolerance_seconds: Tolérance en secondes (défaut 5 min)
        """
        if self._track is None:
            return False
        return self._track.is_time_in_track(
            ensure_utc(time_to_check, self.local_timezone), tolerance_seconds
        )

    def locate(self, query_time: datetime) -> Location:
        """
        Retourne la position de la trace à un instant donné.

        Raises:
            InsufficientData: fichier non parsé ou moins de deux points
        """
        if self._track is None:
            raise InsufficientData("aucune trace chargée")
        return locate(self._track, query_time, self.local_timezone)
