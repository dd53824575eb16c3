"""
API routes.

Endpoints:
- POST `/api/distance`: great-circle distance between two points.
- POST `/api/proximity`: classify a location outcome (reading or provider error) and
  return the rendered messages.
- GET  `/api/reference`: configured reference point + threshold.
- GET  `/api/settings`: public settings for the web page.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from geoproximity.config.settings import get_settings
from geoproximity.core.geo import GeoPoint as CoreGeoPoint
from geoproximity.core.geo import distance_m, haversine_m
from geoproximity.domain.models import ClassificationResult, GeoPoint, LocationOutcome
from geoproximity.render.sinks import HtmlSink, MemorySink
from geoproximity.service import ProximityService

router = APIRouter()


class DistanceRequest(BaseModel):
    current: GeoPoint
    target: GeoPoint


class ProximityRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    outcome: LocationOutcome
    threshold_m: float | None = Field(default=None, ge=0)


class ProximityResponse(BaseModel):
    result: ClassificationResult | None
    messages: list[str]
    html: str


@router.post("/api/distance")
def post_distance(req: DistanceRequest) -> dict:
    """Return floored and exact great-circle distance in meters."""
    a = CoreGeoPoint(lat=req.current.lat, lon=req.current.lon)
    b = CoreGeoPoint(lat=req.target.lat, lon=req.target.lon)
    return {"distance_m": distance_m(a, b), "exact_m": haversine_m(a, b)}


@router.post("/api/proximity", response_model=ProximityResponse)
def post_proximity(req: ProximityRequest) -> ProximityResponse:
    """Classify a provider outcome against the configured reference point."""
    try:
        settings = get_settings()
        threshold_m = req.threshold_m if req.threshold_m is not None else settings.proximity.threshold_m

        sink = MemorySink()
        html_sink = HtmlSink()
        service = ProximityService(settings.proximity.reference, threshold_m, sink, html_sink=html_sink)
        result = service.handle(req.outcome)
        return ProximityResponse(result=result, messages=sink.messages, html=html_sink.html)
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": str(e)},
        ) from e
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail={"code": "INTERNAL_ERROR", "message": str(e)},
        ) from e


@router.get("/api/reference")
def get_reference() -> dict:
    settings = get_settings()
    return {
        "reference": settings.proximity.reference.model_dump(mode="json"),
        "threshold_m": settings.proximity.threshold_m,
    }


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return safe-to-expose settings for the web page (no lookup URL)."""
    settings = get_settings()
    return {
        "app": {"name": settings.app.name},
        "proximity": settings.proximity.model_dump(mode="json"),
        "position_options": settings.position_options.model_dump(mode="json"),
    }
