"""
GeoProximity CLI entrypoint.

Subcommands:
- `distance`: great-circle distance between two points
- `classify`: classify explicit coordinates against the configured reference point
- `locate`: acquire a reading (explicit coordinates or IP lookup) and report proximity
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from pydantic import ValidationError

from geoproximity.config.settings import Settings, get_settings
from geoproximity.core.geo import GeoPoint as CoreGeoPoint
from geoproximity.core.geo import distance_m, haversine_m
from geoproximity.core.logging import configure_logging
from geoproximity.domain.models import GeoPoint, PositionOptions, Reading
from geoproximity.location.ip_provider import IpGeolocationProvider
from geoproximity.location.provider import FixedLocationProvider, LocationProvider
from geoproximity.proximity.classify import classify
from geoproximity.render.messages import format_classification
from geoproximity.render.sinks import ConsoleSink, MemorySink
from geoproximity.service import ProximityService


def _threshold(args: argparse.Namespace, settings: Settings) -> float:
    if args.threshold is not None:
        return float(args.threshold)
    return float(settings.proximity.threshold_m)


def _cmd_distance(args: argparse.Namespace) -> int:
    current = GeoPoint(lat=args.from_lat, lon=args.from_lon)
    target = GeoPoint(lat=args.to_lat, lon=args.to_lon)
    a = CoreGeoPoint(lat=current.lat, lon=current.lon)
    b = CoreGeoPoint(lat=target.lat, lon=target.lon)
    if args.exact:
        print(f"{haversine_m(a, b):.3f}")
    else:
        print(distance_m(a, b))
    return 0


def _cmd_classify(args: argparse.Namespace) -> int:
    settings = get_settings()
    reading = Reading(lat=args.lat, lon=args.lon, accuracy=args.accuracy)
    result = classify(reading, settings.proximity.reference, _threshold(args, settings))
    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
    else:
        print(format_classification(result))
    return 0


def _options_from_args(args: argparse.Namespace, settings: Settings) -> PositionOptions:
    updates: dict[str, Any] = {}
    if args.high_accuracy:
        updates["enable_high_accuracy"] = True
    if args.timeout_ms is not None:
        updates["timeout_ms"] = args.timeout_ms
    if args.max_age_ms is not None:
        updates["max_reading_age_ms"] = args.max_age_ms
    if not updates:
        return settings.position_options
    return PositionOptions.model_validate({**settings.position_options.model_dump(), **updates})


def _cmd_locate(args: argparse.Namespace) -> int:
    settings = get_settings()
    options = _options_from_args(args, settings)

    provider: LocationProvider
    if args.lat is not None or args.lon is not None:
        if args.lat is None or args.lon is None:
            raise ValueError("--lat and --lon must be given together")
        provider = FixedLocationProvider(Reading(lat=args.lat, lon=args.lon, accuracy=args.accuracy))
    else:
        provider = IpGeolocationProvider(settings)

    sink = MemorySink() if args.json else ConsoleSink()
    service = ProximityService(settings.proximity.reference, _threshold(args, settings), sink)
    result = service.locate(provider, options)

    if isinstance(sink, MemorySink):
        payload = {
            "result": result.model_dump(mode="json") if result is not None else None,
            "messages": sink.messages,
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0 if result is not None else 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the GeoProximity CLI."""
    parser = argparse.ArgumentParser(prog="geoproximity")
    sub = parser.add_subparsers(dest="command", required=True)

    dist = sub.add_parser("distance", help="Great-circle distance in meters between two points.")
    dist.add_argument("--from-lat", required=True, type=float)
    dist.add_argument("--from-lon", required=True, type=float)
    dist.add_argument("--to-lat", required=True, type=float)
    dist.add_argument("--to-lon", required=True, type=float)
    dist.add_argument("--exact", action="store_true", help="Print sub-meter distance instead of floored meters")
    dist.set_defaults(func=_cmd_distance)

    cls = sub.add_parser("classify", help="Classify a point against the configured reference.")
    cls.add_argument("--lat", required=True, type=float)
    cls.add_argument("--lon", required=True, type=float)
    cls.add_argument("--accuracy", type=float, default=0.0, help="Reading accuracy radius in meters")
    cls.add_argument("--threshold", type=float, default=None, help="Tolerance in meters (default from config)")
    cls.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    cls.set_defaults(func=_cmd_classify)

    loc = sub.add_parser("locate", help="Acquire a reading and report proximity to the reference.")
    loc.add_argument("--lat", type=float, default=None, help="Use this latitude instead of an IP lookup")
    loc.add_argument("--lon", type=float, default=None, help="Use this longitude instead of an IP lookup")
    loc.add_argument("--accuracy", type=float, default=0.0)
    loc.add_argument("--high-accuracy", action="store_true")
    loc.add_argument("--timeout-ms", type=int, default=None)
    loc.add_argument("--max-age-ms", type=int, default=None)
    loc.add_argument("--threshold", type=float, default=None)
    loc.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    loc.set_defaults(func=_cmd_locate)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m geoproximity.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except ValueError as e:
        # Pydantic's ValidationError is a ValueError subclass.
        message = e.errors()[0]["msg"] if isinstance(e, ValidationError) else str(e)
        parser.exit(2, f"{parser.prog}: error: {message}\n")


if __name__ == "__main__":
    raise SystemExit(main())
