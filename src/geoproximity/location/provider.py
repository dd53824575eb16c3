"""
Location acquisition.

Providers follow the callback shape of the W3C geolocation API:
`get_current_position(on_success, on_error, options)` calls exactly one of the two
callbacks. `acquire_reading()` adapts that into a typed `LocationOutcome` so the rest
of the system never has to catch-and-stringify provider failures.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from geoproximity.domain.models import (
    LocationFailure,
    LocationOutcome,
    LocationSuccess,
    PositionError,
    PositionErrorCode,
    PositionOptions,
    Reading,
)

logger = logging.getLogger(__name__)

SuccessCallback = Callable[[Reading], None]
ErrorCallback = Callable[[PositionError], None]


class LocationUnsupportedError(RuntimeError):
    """Raised when no location provider is available at all."""

    def __init__(self, message: str = "Geolocation is not supported."):
        super().__init__(message)


class LocationProvider(Protocol):
    def get_current_position(
        self,
        on_success: SuccessCallback,
        on_error: ErrorCallback,
        options: PositionOptions | None = None,
    ) -> None: ...


class FixedLocationProvider:
    """Delivers a preset reading (or a preset error).

    Used by the CLI when coordinates are given explicitly, and by tests.
    """

    def __init__(self, reading: Reading | None = None, error: PositionError | None = None):
        if (reading is None) == (error is None):
            raise ValueError("FixedLocationProvider needs exactly one of reading or error")
        self._reading = reading
        self._error = error

    def get_current_position(
        self,
        on_success: SuccessCallback,
        on_error: ErrorCallback,
        options: PositionOptions | None = None,
    ) -> None:
        if self._reading is not None:
            on_success(self._reading)
        else:
            on_error(self._error)  # type: ignore[arg-type]


def acquire_reading(
    provider: LocationProvider | None, options: PositionOptions | None = None
) -> LocationOutcome:
    """Ask `provider` for one reading and return a success/failure outcome.

    Raises:
        LocationUnsupportedError: If `provider` is None.
    """
    if provider is None:
        raise LocationUnsupportedError()

    outcomes: list[LocationOutcome] = []

    def on_success(reading: Reading) -> None:
        outcomes.append(LocationSuccess(reading=reading))

    def on_error(error: PositionError) -> None:
        outcomes.append(LocationFailure(error=error))

    provider.get_current_position(on_success, on_error, options)

    if not outcomes:
        logger.warning("Location provider %s returned without a result.", type(provider).__name__)
        return LocationFailure(
            error=PositionError(code=PositionErrorCode.UNKNOWN, message="provider returned no result")
        )
    if len(outcomes) > 1:
        logger.warning("Location provider %s reported %d results; using the first.", type(provider).__name__, len(outcomes))
    return outcomes[0]
