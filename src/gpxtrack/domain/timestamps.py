from __future__ import annotations

from datetime import datetime, timezone

import pytz


def ensure_utc(dt: datetime, local_timezone: str = "UTC") -> datetime:
    """
    Ramène un datetime en UTC.

    Un datetime naïf est d'abord interprété dans `local_timezone`.
    """
    if dt.tzinfo is None:
        local_tz = pytz.timezone(local_timezone)
        dt = local_tz.localize(dt)
    return dt.astimezone(timezone.utc)


def parse_iso8601(text: str, local_timezone: str = "UTC") -> datetime:
    """
    Parse un horodatage ISO-8601 (`2011-06-01T12:30:05Z`, avec ou sans
    fraction de seconde ou décalage) et le retourne en UTC.

    Raises:
        ValueError: texte vide, sans partie horaire ou non ISO-8601
    """
    value = text.strip()
    # `2011-06-01` seul est une date, pas un instant
    if len(value) <= 10:
        raise ValueError(f"horodatage sans partie horaire: {text!r}")
    if value[-1:] in ("Z", "z"):
        value = value[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(value), local_timezone)
