"""Per-mode fare and emission estimation for itinerary legs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from ...models.domain import Leg, TravelMode

# Currency units per kilometer.
COST_PER_KM: Mapping[TravelMode, float] = {
    TravelMode.WALKING: 0.0,
    TravelMode.BICYCLING: 0.0,
    TravelMode.DRIVING: 28.0,
    TravelMode.TRANSIT: 5.0,
}

# Grams of CO2 per kilometer.
CO2_GRAMS_PER_KM: Mapping[TravelMode, float] = {
    TravelMode.WALKING: 0.0,
    TravelMode.BICYCLING: 0.0,
    TravelMode.DRIVING: 170.0,
    TravelMode.TRANSIT: 30.0,
}


@dataclass(frozen=True, slots=True)
class CostEstimate:
    cost_units: float
    co2_grams: float


def estimate(
    legs: Sequence[Leg],
    *,
    cost_rates: Mapping[TravelMode, float] = COST_PER_KM,
    co2_rates: Mapping[TravelMode, float] = CO2_GRAMS_PER_KM,
) -> CostEstimate:
    """Sum distance-proportional cost and CO2 over legs; unknown modes add nothing."""
    cost = 0.0
    co2 = 0.0
    for leg in legs:
        km = leg.distance_meters / 1000.0
        cost += cost_rates.get(leg.mode, 0.0) * km
        co2 += co2_rates.get(leg.mode, 0.0) * km
    return CostEstimate(cost_units=cost, co2_grams=co2)
