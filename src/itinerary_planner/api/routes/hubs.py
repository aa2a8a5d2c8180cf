"""Hub registry endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Query, status

from ...data.hub_repository import get_hub_registry
from ...models.domain import Coordinate
from ...schemas.itineraries import HubModel
from ...services.hubs.locator import HubLocator
from ...services.outputs.formatter import hub_to_model

router = APIRouter(prefix="/hubs", tags=["hubs"])


@router.get("", response_model=List[HubModel], status_code=status.HTTP_200_OK)
def list_hubs() -> List[HubModel]:
    return [hub_to_model(hub) for hub in get_hub_registry()]


@router.get("/nearest", response_model=List[HubModel], status_code=status.HTTP_200_OK)
def nearest_hubs(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    count: int = Query(default=2, ge=1, le=50),
) -> List[HubModel]:
    point = Coordinate(lat, lng)
    locator = HubLocator(get_hub_registry())
    hubs = locator.nearest_hubs(point, count)
    return [hub_to_model(hub, distance) for hub, distance in zip(hubs, locator.distances_m(point, hubs))]
