"""
IP-based location provider.

Looks up the caller's approximate position from a JSON IP-geolocation endpoint
(default: ipapi.co). IP lookups carry no accuracy estimate, so every reading uses the
configured `ip_lookup.accuracy_m` radius.

Failures are reported through the error callback with W3C-style codes:
- request timeout, or lookup slower than `timeout_ms` -> TIMEOUT
- HTTP 401/403 (lookup refused)                       -> PERMISSION_DENIED
- any other HTTP/transport error                      -> POSITION_UNAVAILABLE
- payload without coordinates                         -> POSITION_UNAVAILABLE
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

import httpx

from geoproximity.config.settings import Settings
from geoproximity.core.http import get_json
from geoproximity.domain.models import PositionError, PositionErrorCode, PositionOptions, Reading
from geoproximity.location.provider import ErrorCallback, SuccessCallback

logger = logging.getLogger(__name__)


def _first_present(payload: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def parse_lookup_payload(payload: Any, *, accuracy_m: float) -> Reading:
    """Turn an IP lookup JSON payload into a `Reading`.

    Accepts both `latitude`/`longitude` (ipapi.co) and `lat`/`lon` (ip-api.com) keys.

    Raises:
        ValueError: If the payload has no usable coordinates.
    """
    if not isinstance(payload, dict):
        raise ValueError("IP lookup returned a non-object payload")
    if payload.get("error"):
        raise ValueError(str(payload.get("reason") or payload.get("message") or "IP lookup reported an error"))

    lat = _first_present(payload, "latitude", "lat")
    lon = _first_present(payload, "longitude", "lon")
    if lat is None or lon is None:
        raise ValueError("IP lookup payload has no coordinates")
    try:
        return Reading(lat=float(lat), lon=float(lon), accuracy=accuracy_m)
    except (TypeError, ValueError) as e:
        raise ValueError(f"IP lookup payload has invalid coordinates: {e}") from e


class IpGeolocationProvider:
    """Resolves a reading over HTTP; reuses the last reading within `max_reading_age_ms`."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._lock = threading.Lock()
        self._last: tuple[float, Reading] | None = None

    def _cached_reading(self, max_age_ms: int) -> Reading | None:
        if max_age_ms <= 0:
            return None
        with self._lock:
            last = self._last
        if last is None:
            return None
        taken_at, reading = last
        if (time.monotonic() - taken_at) * 1000 <= max_age_ms:
            return reading
        return None

    def _timeout_seconds(self, options: PositionOptions) -> float:
        if options.timeout_ms is None:
            return float(self._settings.app.http_timeout_seconds)
        return options.timeout_ms / 1000

    def get_current_position(
        self,
        on_success: SuccessCallback,
        on_error: ErrorCallback,
        options: PositionOptions | None = None,
    ) -> None:
        options = options or self._settings.position_options
        if options.enable_high_accuracy:
            logger.debug("enable_high_accuracy requested; IP lookups cannot improve accuracy.")

        cached = self._cached_reading(options.max_reading_age_ms)
        if cached is not None:
            logger.info("Reusing cached IP location (max age %sms).", options.max_reading_age_ms)
            on_success(cached)
            return

        url = self._settings.ip_lookup.url
        timeout_seconds = self._timeout_seconds(options)
        started = time.monotonic()
        try:
            logger.info("Looking up location via %s", url)
            # httpx applies the timeout per phase (connect, read, ...); the deadline
            # check below bounds the acquisition as a whole.
            payload = get_json(url, timeout_seconds=timeout_seconds)
            reading = parse_lookup_payload(payload, accuracy_m=self._settings.ip_lookup.accuracy_m)
        except httpx.TimeoutException as e:
            logger.warning("IP location lookup timed out: %s", str(e))
            on_error(PositionError(code=PositionErrorCode.TIMEOUT, message=str(e) or "request timed out"))
            return
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("IP location lookup failed with HTTP %s", status)
            code = (
                PositionErrorCode.PERMISSION_DENIED
                if status in {401, 403}
                else PositionErrorCode.POSITION_UNAVAILABLE
            )
            on_error(PositionError(code=code, message=f"lookup returned HTTP {status}"))
            return
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("IP location lookup failed: %s", str(e))
            on_error(PositionError(code=PositionErrorCode.POSITION_UNAVAILABLE, message=str(e)))
            return

        elapsed = time.monotonic() - started
        if options.timeout_ms is not None and elapsed > timeout_seconds:
            logger.warning("IP location lookup took %.3fs, over the %sms timeout.", elapsed, options.timeout_ms)
            on_error(PositionError(code=PositionErrorCode.TIMEOUT, message=f"lookup exceeded {options.timeout_ms}ms"))
            return

        with self._lock:
            self._last = (time.monotonic(), reading)
        on_success(reading)
