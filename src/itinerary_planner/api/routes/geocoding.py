"""Place search endpoints feeding origin/destination coordinates to the planner."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from fastapi import APIRouter, HTTPException, Query, status

from ...models.domain import Coordinate
from ...schemas.geocoding import PlaceSearchResponse, ReverseGeocodeResponse
from ...services.geocoding.client import GeocodingClient
from ...services.outputs.formatter import place_to_model

router = APIRouter(prefix="/geocode", tags=["geocoding"])


@router.get("/search", response_model=PlaceSearchResponse, status_code=status.HTTP_200_OK)
def search(
    q: str = Query(..., description="Free-text place query."),
    lat: Optional[float] = Query(default=None, ge=-90, le=90, description="Bias latitude."),
    lng: Optional[float] = Query(default=None, ge=-180, le=180, description="Bias longitude."),
    limit: Optional[int] = Query(default=None, ge=1, le=25),
) -> PlaceSearchResponse:
    near = Coordinate(lat, lng) if lat is not None and lng is not None else None
    try:
        places = GeocodingClient().search(q, near=near, limit=limit)
    except httpx.HTTPError as exc:
        logging.exception(f"Geocoding search failed for '{q}': {exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Geocoding service failed: {str(exc)}",
        ) from exc
    return PlaceSearchResponse(query=q, results=[place_to_model(place) for place in places])


@router.get("/reverse", response_model=ReverseGeocodeResponse, status_code=status.HTTP_200_OK)
def reverse(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
) -> ReverseGeocodeResponse:
    try:
        name = GeocodingClient().reverse(Coordinate(lat, lng))
    except httpx.HTTPError as exc:
        logging.exception(f"Reverse geocoding failed for ({lat}, {lng}): {exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Geocoding service failed: {str(exc)}",
        ) from exc
    return ReverseGeocodeResponse(latitude=lat, longitude=lng, name=name)
