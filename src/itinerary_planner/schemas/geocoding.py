"""Geocoding response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class BoundingBoxModel(BaseModel):
    south: float
    north: float
    west: float
    east: float


class PlaceModel(BaseModel):
    id: str
    name: str
    latitude: float
    longitude: float
    source: str
    bbox: Optional[BoundingBoxModel] = None
    place_type: Optional[str] = None
    place_class: Optional[str] = None


class PlaceSearchResponse(BaseModel):
    query: str
    results: List[PlaceModel]


class ReverseGeocodeResponse(BaseModel):
    latitude: float
    longitude: float
    name: str
