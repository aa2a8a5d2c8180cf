"""Route group exports."""

from . import geocoding, health, hubs, itineraries

__all__ = ["itineraries", "hubs", "geocoding", "health"]
