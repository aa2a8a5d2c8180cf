"""Itinerary planning orchestration service."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ...config import settings
from ...data.hub_repository import HubRegistry, get_hub_registry
from ...errors import InvalidOptions, InvalidPriority
from ...models.domain import CONNECTOR_MODES, PRIORITIES, Coordinate, Itinerary, TravelMode
from ..hubs.locator import HubLocator
from ..routing.legs import LegResolver
from ..routing.osrm_client import OSRMClient
from .candidates import CandidateGenerator
from .ranking import rank_and_label

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PlanningOptions:
    hub_fanout: int = field(default_factory=lambda: settings.default_hub_fanout)
    connector_modes: tuple[TravelMode, ...] = CONNECTOR_MODES
    priority: str = "time"
    top_k: int = field(default_factory=lambda: settings.default_top_k)


@dataclass(slots=True)
class PlanOutcome:
    itineraries: list[Itinerary]
    attempted: int
    failed: int
    options: PlanningOptions

    @property
    def status(self) -> str:
        return "ok" if self.itineraries else "empty"


def _normalize_modes(modes: Iterable[TravelMode | str]) -> tuple[TravelMode, ...]:
    normalized: list[TravelMode] = []
    for mode in modes:
        try:
            value = TravelMode(mode)
        except ValueError:
            raise InvalidOptions(f"Unknown connector mode '{mode}'.") from None
        if value not in CONNECTOR_MODES:
            raise InvalidOptions(f"'{value.value}' cannot be used as a connector mode.")
        if value not in normalized:
            normalized.append(value)
    if not normalized:
        raise InvalidOptions("At least one connector mode is required.")
    return tuple(normalized)


def validate_options(options: PlanningOptions) -> PlanningOptions:
    """Reject unusable options before any directions request is issued."""
    if options.priority not in PRIORITIES:
        raise InvalidPriority(
            f"Unknown priority '{options.priority}'. Expected one of: {', '.join(PRIORITIES)}."
        )
    if options.top_k <= 0:
        raise InvalidOptions(f"top_k must be a positive integer, got {options.top_k}.")
    if options.hub_fanout <= 0:
        raise InvalidOptions(f"hub_fanout must be a positive integer, got {options.hub_fanout}.")
    return PlanningOptions(
        hub_fanout=options.hub_fanout,
        connector_modes=_normalize_modes(options.connector_modes),
        priority=options.priority,
        top_k=options.top_k,
    )


def build_generator(registry: Optional[HubRegistry] = None) -> CandidateGenerator:
    try:
        osrm_client = OSRMClient()
    except ValueError as e:
        logger.error(f"OSRM client initialization failed: {e}")
        raise ValueError("OSRM service is not configured. Please check OSRM_BASE_URL setting.") from e
    hub_registry = registry if registry is not None else get_hub_registry()
    return CandidateGenerator(HubLocator(hub_registry), LegResolver(osrm_client))


def plan(
    origin: Coordinate,
    destination: Coordinate,
    options: Optional[PlanningOptions] = None,
    *,
    generator: Optional[CandidateGenerator] = None,
) -> PlanOutcome:
    opts = validate_options(options or PlanningOptions())
    generator = generator or build_generator()

    batch = generator.generate_candidates(
        origin,
        destination,
        hub_fanout=opts.hub_fanout,
        connector_modes=opts.connector_modes,
    )
    ranked = rank_and_label(batch.itineraries, priority=opts.priority, top_k=opts.top_k)
    if not ranked:
        logger.info(
            f"No itineraries found from ({origin.latitude}, {origin.longitude}) "
            f"to ({destination.latitude}, {destination.longitude}); {batch.attempted} combinations tried."
        )
    return PlanOutcome(itineraries=ranked, attempted=batch.attempted, failed=batch.failed, options=opts)


def plan_itineraries(
    origin: Coordinate,
    destination: Coordinate,
    options: Optional[PlanningOptions] = None,
    *,
    generator: Optional[CandidateGenerator] = None,
) -> list[Itinerary]:
    """Primary entry point: ranked, labeled itineraries (possibly empty)."""
    return plan(origin, destination, options, generator=generator).itineraries
