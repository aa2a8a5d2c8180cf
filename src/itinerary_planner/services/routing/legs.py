"""Single-leg resolution against a directions provider."""

from __future__ import annotations

import math
from typing import Protocol

import httpx

from ...errors import LegUnavailable
from ...models.domain import Coordinate, Leg, TravelMode


class DirectionsProvider(Protocol):
    def route(self, origin: Coordinate, destination: Coordinate, mode: TravelMode) -> dict:
        """Return ``{"distance_meters": ..., "duration_seconds": ...}`` or raise."""
        ...


def _coerce_metric(value: object, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} missing or not numeric: {value!r}")
    number = float(value)
    if math.isnan(number) or math.isinf(number) or number < 0:
        raise ValueError(f"{name} out of range: {value!r}")
    return number


class LegResolver:
    """Turns one origin/destination/mode triple into a Leg, or raises LegUnavailable."""

    def __init__(self, provider: DirectionsProvider) -> None:
        self.provider = provider

    def resolve_leg(self, origin: Coordinate, destination: Coordinate, mode: TravelMode) -> Leg:
        try:
            payload = self.provider.route(origin, destination, mode)
        except ConnectionError as e:
            raise LegUnavailable(f"{mode.value} leg: provider unreachable: {e}", unreachable=True) from e
        except (httpx.HTTPError, TimeoutError, ValueError, KeyError) as e:
            raise LegUnavailable(f"{mode.value} leg: {e}") from e
        except Exception as e:
            # Any other provider fault costs only this leg's candidate.
            raise LegUnavailable(f"{mode.value} leg: provider error {type(e).__name__}: {e}") from e

        if not isinstance(payload, dict):
            raise LegUnavailable(f"{mode.value} leg: provider returned no route")
        try:
            distance = _coerce_metric(payload.get("distance_meters"), "distance_meters")
            duration = _coerce_metric(payload.get("duration_seconds"), "duration_seconds")
        except ValueError as e:
            raise LegUnavailable(f"{mode.value} leg: unusable route: {e}") from e

        return Leg(
            mode=mode,
            distance_meters=distance,
            duration_seconds=duration,
            origin=origin,
            destination=destination,
        )
