"""
Message formatting.

Turns readings, classification results and position errors into short user-facing
messages. Plain-text variants are used by the CLI; `*_html` variants produce the
markup the web page shows (all interpolated text is escaped).
"""

from __future__ import annotations

from html import escape

from geoproximity.domain.models import (
    AtLocation,
    ClassificationResult,
    PositionError,
    PositionErrorCode,
    Reading,
)

_ERROR_LABELS: dict[int, str] = {
    PositionErrorCode.TIMEOUT: "TIMEOUT",
    PositionErrorCode.PERMISSION_DENIED: "PERMISSION DENIED",
    PositionErrorCode.POSITION_UNAVAILABLE: "POSITION UNAVAILABLE",
}


def format_location_info(reading: Reading) -> list[str]:
    lines = [f"Latitude: {reading.lat}", f"Longitude: {reading.lon}"]
    if reading.altitude is not None:
        lines.append(f"Altitude: {reading.altitude}")
    return lines


def format_location_info_html(reading: Reading) -> str:
    parts = []
    for line in format_location_info(reading):
        label, value = line.split(": ", 1)
        parts.append(f"<b>{escape(label)}:</b> {escape(value)}<br/>")
    return "<p>" + "".join(parts) + "</p>"


def format_classification(result: ClassificationResult) -> str:
    if isinstance(result, AtLocation):
        return f"You are in {result.name}."
    return f"You are {result.distance_km_text} km from {result.name}."


def format_classification_html(result: ClassificationResult) -> str:
    text = escape(format_classification(result))
    if isinstance(result, AtLocation):
        return f"<p><div>{text}</div></p>"
    return f"<p><div class=red>{text}</div></p>"


def format_position_error(error: PositionError) -> str:
    """Render a provider error as "LABEL: message".

    Codes outside the known set are shown verbatim as
    "UNHANDLED MESSAGE CODE (n): message".
    """
    label = _ERROR_LABELS.get(int(error.code))
    if label is None:
        return f"UNHANDLED MESSAGE CODE ({int(error.code)}): {error.message}"
    return f"{label}: {error.message}"


def format_error(text: str) -> str:
    return f"Error: {text}"


def format_error_html(text: str) -> str:
    return f"<span class='red'><b>Error</b>:{escape(text)}</span>"
