from __future__ import annotations

from dataclasses import dataclass
from math import atan2, cos, floor, radians, sin, sqrt

"""
Geospatial helpers.

A tiny spherical-earth geometry layer: no validation, no I/O, no shared state.
Range checks belong to the Pydantic models in `geoproximity.domain.models`.
"""

# Equatorial radius (WGS84 semi-major axis) used as the sphere radius.
EARTH_RADIUS_M = 6_378_137


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


def _central_angle(current: GeoPoint, target: GeoPoint) -> float:
    d_lat = radians(target.lat - current.lat)
    d_lon = radians(target.lon - current.lon)

    a = sin(d_lat / 2) ** 2 + cos(radians(current.lat)) * cos(radians(target.lat)) * sin(d_lon / 2) ** 2
    # Rounding can push `a` just outside [0, 1] for identical or antipodal points.
    a = min(1.0, max(0.0, a))
    return 2 * atan2(sqrt(a), sqrt(1 - a))


def haversine_m(current: GeoPoint, target: GeoPoint) -> float:
    """Compute great-circle distance in meters between two points (not floored)."""
    return EARTH_RADIUS_M * _central_angle(current, target)


def distance_m(current: GeoPoint, target: GeoPoint) -> int:
    """Great-circle distance in whole meters, floored.

    Flooring matches the historical output of this system: proximity decisions and
    displayed kilometers are computed from the integer value.
    """
    return floor(haversine_m(current, target))
