"""Domain models for hubs, legs and stitched itineraries."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional, Tuple


class TravelMode(str, Enum):
    DRIVING = "driving"
    WALKING = "walking"
    BICYCLING = "bicycling"
    TRANSIT = "transit"


CONNECTOR_MODES: Tuple[TravelMode, ...] = (
    TravelMode.DRIVING,
    TravelMode.WALKING,
    TravelMode.BICYCLING,
)
TRUNK_MODE = TravelMode.TRANSIT

Priority = Literal["time", "cost", "co2", "reliability"]
PRIORITIES: Tuple[str, ...] = ("time", "cost", "co2", "reliability")


@dataclass(frozen=True, slots=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Hub:
    """Named interchange point between a connector trip and the trunk segment."""

    id: str
    name: str
    coordinate: Coordinate


@dataclass(frozen=True, slots=True)
class Leg:
    mode: TravelMode
    distance_meters: float
    duration_seconds: float
    origin: Optional[Coordinate] = None
    destination: Optional[Coordinate] = None


@dataclass(frozen=True, slots=True)
class ScoringWeights:
    time: float = 0.45
    cost: float = 0.25
    co2: float = 0.20
    reliability: float = 0.10


@dataclass(frozen=True, slots=True)
class Itinerary:
    """Three-leg itinerary: connector, trunk between two hubs, connector.

    Built unscored by the candidate generator; the ranking engine returns
    scored and labeled copies.
    """

    id: str
    legs: Tuple[Leg, Leg, Leg]
    total_duration_seconds: float
    total_cost_units: float
    total_co2_grams: float
    reliability_score: float
    origin_hub: Optional[Hub] = None
    destination_hub: Optional[Hub] = None
    transfer_count: int = 1
    raw_score: Optional[float] = None
    label: str = field(default="Recommended")

    @property
    def total_distance_meters(self) -> float:
        return sum(leg.distance_meters for leg in self.legs)
