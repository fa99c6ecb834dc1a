from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

import pytz

from gpxtrack.app.config import APP_NAME, APP_VERSION, LOG_FORMAT, get_default_timezone, get_log_level
from gpxtrack.domain.timestamps import parse_iso8601


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Position d'une trace GPX à un ou plusieurs instants.",
    )
    parser.add_argument("gpx_file", help="fichier .gpx")
    parser.add_argument("times", nargs="+", help="instants ISO-8601 (ex: 2011-06-01T12:30:05Z)")
    parser.add_argument(
        "--timezone",
        default=None,
        help="timezone des instants sans décalage (défaut: GPXTRACK_TIMEZONE ou UTC)",
    )
    parser.add_argument(
        "--offset",
        type=float,
        default=0.0,
        help="décalage en secondes ajouté à chaque instant",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="logs de debug")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    return parser


def run(argv: Sequence[str]) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv)[1:])

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else get_log_level(),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    if args.timezone is not None:
        try:
            pytz.timezone(args.timezone)
        except pytz.UnknownTimeZoneError:
            parser.error(f"timezone inconnue: {args.timezone}")

    local_timezone = args.timezone or get_default_timezone()

    times = []
    for raw in args.times:
        try:
            times.append(parse_iso8601(raw, local_timezone))
        except (ValueError, OverflowError):
            parser.error(f"instant ISO-8601 invalide: {raw}")

    from gpxtrack.services.track_controller import TrackController

    controller = TrackController(local_timezone=local_timezone)
    if not controller.load_gpx_file(args.gpx_file):
        if controller.get_track() is None:
            return 1

    for timed in controller.locate_many(times, offset_seconds=args.offset):
        if timed.location is None:
            print(f"{timed.time.isoformat()} - - no_data")
            continue
        lon, lat, in_range = timed.location
        status = "in_range" if in_range else "out_of_range"
        print(f"{timed.time.isoformat()} {lon:.6f} {lat:.6f} {status}")

    return 0
