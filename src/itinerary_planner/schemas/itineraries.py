"""Itinerary planning request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import TravelMode


class CoordinateModel(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class HubModel(BaseModel):
    id: str
    name: str
    latitude: float
    longitude: float
    distance_m: Optional[float] = Field(default=None, description="Great-circle distance from the query point.")


class PlanOptionsModel(BaseModel):
    # Range checks happen in the service so bad values surface as InvalidOptions.
    hub_fanout: Optional[int] = Field(default=None, description="Nearest hubs considered on each side.")
    connector_modes: Optional[List[str]] = Field(
        default=None,
        description="Connector modes to combine (driving, walking, bicycling).",
    )
    priority: str = Field(default="time", description="One of time, cost, co2, reliability.")
    top_k: Optional[int] = Field(default=None, description="Maximum itineraries returned.")


class PlanRequest(BaseModel):
    origin: CoordinateModel
    destination: CoordinateModel
    options: PlanOptionsModel = Field(default_factory=PlanOptionsModel)


class LegModel(BaseModel):
    mode: TravelMode
    distance_meters: float
    duration_seconds: float
    origin: Optional[CoordinateModel] = None
    destination: Optional[CoordinateModel] = None


class ItineraryModel(BaseModel):
    id: str
    label: str
    legs: List[LegModel]
    total_duration_seconds: float
    total_distance_meters: float
    total_cost_units: float
    total_co2_grams: float
    transfer_count: int
    reliability_score: float
    raw_score: float
    origin_hub: Optional[HubModel] = None
    destination_hub: Optional[HubModel] = None


class PlanResponse(BaseModel):
    status: Literal["ok", "empty"]
    metadata: dict
    itineraries: List[ItineraryModel]
