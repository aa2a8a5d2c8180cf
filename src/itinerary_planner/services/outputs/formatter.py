"""Serializers from domain objects to API response models."""

from __future__ import annotations

from typing import Optional

from ...models.domain import Coordinate, Hub, Itinerary, Leg
from ...schemas.geocoding import BoundingBoxModel, PlaceModel
from ...schemas.itineraries import CoordinateModel, HubModel, ItineraryModel, LegModel
from ..geocoding.client import Place


def coordinate_to_model(coordinate: Optional[Coordinate]) -> Optional[CoordinateModel]:
    if coordinate is None:
        return None
    return CoordinateModel(latitude=coordinate.latitude, longitude=coordinate.longitude)


def hub_to_model(hub: Optional[Hub], distance_m: Optional[float] = None) -> Optional[HubModel]:
    if hub is None:
        return None
    return HubModel(
        id=hub.id,
        name=hub.name,
        latitude=hub.coordinate.latitude,
        longitude=hub.coordinate.longitude,
        distance_m=distance_m,
    )


def leg_to_model(leg: Leg) -> LegModel:
    return LegModel(
        mode=leg.mode,
        distance_meters=leg.distance_meters,
        duration_seconds=leg.duration_seconds,
        origin=coordinate_to_model(leg.origin),
        destination=coordinate_to_model(leg.destination),
    )


def itinerary_to_model(itinerary: Itinerary) -> ItineraryModel:
    if itinerary.raw_score is None:
        raise ValueError(f"Itinerary {itinerary.id} must be ranked before serialization.")
    return ItineraryModel(
        id=itinerary.id,
        label=itinerary.label,
        legs=[leg_to_model(leg) for leg in itinerary.legs],
        total_duration_seconds=itinerary.total_duration_seconds,
        total_distance_meters=itinerary.total_distance_meters,
        total_cost_units=itinerary.total_cost_units,
        total_co2_grams=itinerary.total_co2_grams,
        transfer_count=itinerary.transfer_count,
        reliability_score=itinerary.reliability_score,
        raw_score=itinerary.raw_score,
        origin_hub=hub_to_model(itinerary.origin_hub),
        destination_hub=hub_to_model(itinerary.destination_hub),
    )


def place_to_model(place: Place) -> PlaceModel:
    bbox = place.bbox
    return PlaceModel(
        id=place.id,
        name=place.name,
        latitude=place.coordinate.latitude,
        longitude=place.coordinate.longitude,
        source=place.source,
        bbox=BoundingBoxModel(south=bbox.south, north=bbox.north, west=bbox.west, east=bbox.east) if bbox else None,
        place_type=place.place_type,
        place_class=place.place_class,
    )
