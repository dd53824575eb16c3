"""
Domain models (Pydantic).

These types are the validated "contract" between the core math and its collaborators:
- location readings delivered by a provider (`Reading`, `PositionError`, `LocationOutcome`)
- the configured target (`ReferencePoint`) and acquisition knobs (`PositionOptions`)
- the classification output consumed by renderers (`ClassificationResult`)

Validation happens here, at the boundary, so `geoproximity.core.geo` can stay pure math.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class GeoPoint(BaseModel):
    """A geographic point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class Reading(GeoPoint):
    """One location fix: a point plus its uncertainty radius in meters."""

    accuracy: float = Field(0.0, ge=0)
    altitude: float | None = None


class ReferencePoint(GeoPoint):
    """A named point readings are classified against."""

    name: str = Field(..., min_length=1)


class AtLocation(BaseModel):
    kind: Literal["at_location"] = "at_location"
    name: str
    distance_m: int = Field(..., ge=0)


class AwayFromLocation(BaseModel):
    kind: Literal["away"] = "away"
    name: str
    distance_m: int = Field(..., ge=0)
    distance_km: float = Field(..., ge=0)

    @property
    def distance_km_text(self) -> str:
        """Distance in kilometers with exactly two decimals (e.g. "1.00")."""
        return f"{self.distance_km:.2f}"


ClassificationResult = Annotated[Union[AtLocation, AwayFromLocation], Field(discriminator="kind")]


class PositionOptions(BaseModel):
    """Acquisition options handed to a location provider.

    `timeout_ms=None` means "wait as long as the provider needs".
    `max_reading_age_ms=0` forces a fresh reading.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    enable_high_accuracy: bool = False
    timeout_ms: int | None = Field(default=None, ge=0)
    max_reading_age_ms: int = Field(default=0, ge=0)


class PositionErrorCode(IntEnum):
    UNKNOWN = 0
    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


class PositionError(BaseModel):
    """A failed acquisition as reported by the provider.

    `code` is kept as a plain int so codes outside `PositionErrorCode` survive
    round-trips and can still be displayed.
    """

    model_config = ConfigDict(frozen=True)

    code: int = PositionErrorCode.UNKNOWN
    message: str = ""


class LocationSuccess(BaseModel):
    status: Literal["ok"] = "ok"
    reading: Reading


class LocationFailure(BaseModel):
    status: Literal["error"] = "error"
    error: PositionError


LocationOutcome = Annotated[Union[LocationSuccess, LocationFailure], Field(discriminator="status")]
