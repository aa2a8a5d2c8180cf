"""Multi-modal itinerary stitching and ranking service."""

__version__ = "0.1.0"
