"""Itinerary planning endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...errors import DirectionsProviderUnavailable, InvalidOptions
from ...models.domain import CONNECTOR_MODES, Coordinate
from ...schemas.itineraries import PlanRequest, PlanResponse
from ...services.itineraries import service as itinerary_service
from ...services.outputs.formatter import itinerary_to_model

router = APIRouter(prefix="/itineraries", tags=["itineraries"])


def _options_from_payload(payload: PlanRequest) -> itinerary_service.PlanningOptions:
    requested = payload.options
    defaults = itinerary_service.PlanningOptions()
    return itinerary_service.PlanningOptions(
        hub_fanout=requested.hub_fanout if requested.hub_fanout is not None else defaults.hub_fanout,
        connector_modes=tuple(requested.connector_modes) if requested.connector_modes is not None else CONNECTOR_MODES,
        priority=requested.priority,
        top_k=requested.top_k if requested.top_k is not None else defaults.top_k,
    )


@router.post("/plan", response_model=PlanResponse, status_code=status.HTTP_200_OK)
def plan(payload: PlanRequest) -> PlanResponse:
    origin = Coordinate(payload.origin.latitude, payload.origin.longitude)
    destination = Coordinate(payload.destination.latitude, payload.destination.longitude)
    try:
        outcome = itinerary_service.plan(origin, destination, _options_from_payload(payload))
    except InvalidOptions as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except DirectionsProviderUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error planning itineraries: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to plan itineraries: {str(exc)}",
        ) from exc

    return PlanResponse(
        status=outcome.status,
        metadata={
            "attempted": outcome.attempted,
            "failed": outcome.failed,
            "priority": outcome.options.priority,
            "hub_fanout": outcome.options.hub_fanout,
            "connector_modes": [mode.value for mode in outcome.options.connector_modes],
            "top_k": outcome.options.top_k,
            "message": None if outcome.itineraries else "No itineraries found",
        },
        itineraries=[itinerary_to_model(it) for it in outcome.itineraries],
    )
