"""
Proximity service.

Glues acquisition, classification and rendering together:
- success: show the reading's coordinates, then the location-specific message
- failure: show the classified provider error

The service writes plain-text messages to `sink` and, when given, markup to
`html_sink` (the web page uses the latter).
"""

from __future__ import annotations

import logging

from geoproximity.domain.models import (
    ClassificationResult,
    LocationFailure,
    LocationOutcome,
    PositionOptions,
    ReferencePoint,
)
from geoproximity.location.provider import LocationProvider, LocationUnsupportedError, acquire_reading
from geoproximity.proximity.classify import classify
from geoproximity.render.messages import (
    format_classification,
    format_classification_html,
    format_error,
    format_error_html,
    format_location_info,
    format_location_info_html,
    format_position_error,
)
from geoproximity.render.sinks import RenderSink

logger = logging.getLogger(__name__)


class ProximityService:
    def __init__(
        self,
        reference: ReferencePoint,
        threshold_m: float,
        sink: RenderSink,
        *,
        html_sink: RenderSink | None = None,
    ):
        if threshold_m < 0:
            raise ValueError("threshold_m must be >= 0")
        self.reference = reference
        self.threshold_m = threshold_m
        self._sink = sink
        self._html_sink = html_sink

    def _clear(self) -> None:
        self._sink.clear()
        if self._html_sink is not None:
            self._html_sink.clear()

    def _show_error(self, text: str) -> None:
        self._sink.display(format_error(text))
        if self._html_sink is not None:
            self._html_sink.display(format_error_html(text))

    def handle(self, outcome: LocationOutcome) -> ClassificationResult | None:
        """Render `outcome`; returns the classification on success, else None."""
        self._clear()

        if isinstance(outcome, LocationFailure):
            text = format_position_error(outcome.error)
            logger.warning("Location acquisition failed: %s", text)
            self._show_error(text)
            return None

        reading = outcome.reading
        result = classify(reading, self.reference, self.threshold_m)
        logger.info(
            "Reading lat=%.5f lon=%.5f accuracy=%.0fm -> %s (%sm from %s)",
            reading.lat,
            reading.lon,
            reading.accuracy,
            result.kind,
            result.distance_m,
            self.reference.name,
        )

        for line in format_location_info(reading):
            self._sink.display(line)
        self._sink.display(format_classification(result))
        if self._html_sink is not None:
            self._html_sink.display(format_location_info_html(reading))
            self._html_sink.display(format_classification_html(result))
        return result

    def locate(
        self, provider: LocationProvider | None, options: PositionOptions | None = None
    ) -> ClassificationResult | None:
        """Acquire one reading from `provider` and render it."""
        try:
            outcome = acquire_reading(provider, options)
        except LocationUnsupportedError as e:
            logger.warning("No location provider available.")
            self._clear()
            self._show_error(str(e))
            return None
        return self.handle(outcome)
