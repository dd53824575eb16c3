"""
Proximity classification.

Decides whether a location reading counts as "at" a reference point. The match
window is widened by the reading's own accuracy radius so that noisy fixes near
the reference are not reported as "away":

    at_location  <=>  distance_m <= reading.accuracy + threshold_m
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from geoproximity.core.geo import GeoPoint as CoreGeoPoint
from geoproximity.core.geo import distance_m
from geoproximity.domain.models import (
    AtLocation,
    AwayFromLocation,
    ClassificationResult,
    Reading,
    ReferencePoint,
)


def meters_to_km(meters: int) -> float:
    """Whole meters to kilometers at two decimals, rounding halves up (1125 -> 1.13)."""
    return float((Decimal(meters) / 1000).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def is_at_location(distance: float, *, accuracy: float, threshold_m: float) -> bool:
    """Return True when `distance` falls inside the accuracy-widened window."""
    return distance <= accuracy + threshold_m


def classify(reading: Reading, reference: ReferencePoint, threshold_m: float) -> ClassificationResult:
    """Classify `reading` against `reference` (see module docstring for the rule)."""
    if threshold_m < 0:
        raise ValueError("threshold_m must be >= 0")

    d = distance_m(
        CoreGeoPoint(lat=reading.lat, lon=reading.lon),
        CoreGeoPoint(lat=reference.lat, lon=reference.lon),
    )
    if is_at_location(d, accuracy=reading.accuracy, threshold_m=threshold_m):
        return AtLocation(name=reference.name, distance_m=d)
    return AwayFromLocation(name=reference.name, distance_m=d, distance_km=meters_to_km(d))
