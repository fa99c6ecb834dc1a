from __future__ import annotations

import logging
import os

import pytz


# En dessous de cette taille, le contenu ne peut pas être un GPX.
MIN_GPX_SIZE: int = 10

DEFAULT_TIMEZONE: str = "UTC"
DEFAULT_TIME_TOLERANCE_SECONDS: float = 300.0

LOG_FORMAT: str = "%(levelname)s %(name)s: %(message)s"

APP_NAME: str = "gpxtrack"
APP_VERSION: str = "1.0.0"


def get_default_timezone() -> str:
    """Timezone des horodatages sans décalage (`GPXTRACK_TIMEZONE`, sinon UTC)."""
    name = os.getenv("GPXTRACK_TIMEZONE", "").strip()
    if not name:
        return DEFAULT_TIMEZONE
    try:
        pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return DEFAULT_TIMEZONE
    return name


def get_log_level() -> int:
    name = os.getenv("GPXTRACK_LOG_LEVEL", "WARNING").strip().upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    return logging.WARNING
