"""Exceptions raised by the itinerary planning engine."""

from __future__ import annotations


class LegUnavailable(Exception):
    """A single leg could not be resolved (timeout, no route, provider error)."""

    def __init__(self, message: str, *, unreachable: bool = False) -> None:
        super().__init__(message)
        # True when the provider itself could not be contacted.
        self.unreachable = unreachable


class InvalidOptions(ValueError):
    """Planning options rejected before any provider call is made."""


class InvalidPriority(InvalidOptions):
    pass


class DirectionsProviderUnavailable(ConnectionError):
    """Every candidate failed because the directions provider could not be reached."""
