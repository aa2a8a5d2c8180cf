"""Candidate generation: hub pairs × connector modes stitched into 3-leg itineraries."""

from __future__ import annotations

import itertools
import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Sequence

from ...config import settings
from ...errors import DirectionsProviderUnavailable, LegUnavailable
from ...models.domain import CONNECTOR_MODES, TRUNK_MODE, Coordinate, Hub, Itinerary, TravelMode
from ..hubs.locator import HubLocator
from ..routing.legs import LegResolver
from .costs import estimate

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Combination:
    index: int
    origin_hub: Hub
    destination_hub: Hub
    origin_mode: TravelMode
    destination_mode: TravelMode


@dataclass(slots=True)
class CandidateBatch:
    itineraries: list[Itinerary]
    attempted: int
    failed: int
    unreachable_failures: int = 0
    origin_hubs: tuple[Hub, ...] = field(default_factory=tuple)
    destination_hubs: tuple[Hub, ...] = field(default_factory=tuple)


def _new_itinerary_id() -> str:
    return f"it_{uuid.uuid4().hex[:12]}"


class CandidateGenerator:
    def __init__(
        self,
        locator: HubLocator,
        resolver: LegResolver,
        *,
        max_parallel_requests: int | None = None,
        reliability_score: float | None = None,
        id_factory: Callable[[], str] = _new_itinerary_id,
    ) -> None:
        self.locator = locator
        self.resolver = resolver
        self.max_parallel_requests = max_parallel_requests or settings.max_parallel_requests
        self.reliability_score = (
            reliability_score if reliability_score is not None else settings.default_reliability_score
        )
        self.id_factory = id_factory

    def combinations(
        self,
        origin_hubs: Sequence[Hub],
        destination_hubs: Sequence[Hub],
        connector_modes: Sequence[TravelMode],
    ) -> list[Combination]:
        product = itertools.product(origin_hubs, destination_hubs, connector_modes, connector_modes)
        return [
            Combination(index=i, origin_hub=oh, destination_hub=dh, origin_mode=m1, destination_mode=m3)
            for i, (oh, dh, m1, m3) in enumerate(product)
        ]

    def assemble(self, origin: Coordinate, destination: Coordinate, combo: Combination) -> Itinerary:
        """Resolve the three legs of one combination; raises LegUnavailable on any failure."""
        first = self.resolver.resolve_leg(origin, combo.origin_hub.coordinate, combo.origin_mode)
        trunk = self.resolver.resolve_leg(
            combo.origin_hub.coordinate, combo.destination_hub.coordinate, TRUNK_MODE
        )
        last = self.resolver.resolve_leg(combo.destination_hub.coordinate, destination, combo.destination_mode)

        legs = (first, trunk, last)
        totals = estimate(legs)
        return Itinerary(
            id=self.id_factory(),
            legs=legs,
            total_duration_seconds=sum(leg.duration_seconds for leg in legs),
            total_cost_units=totals.cost_units,
            total_co2_grams=totals.co2_grams,
            reliability_score=self.reliability_score,
            origin_hub=combo.origin_hub,
            destination_hub=combo.destination_hub,
            transfer_count=1,
        )

    def _evaluate(
        self, origin: Coordinate, destination: Coordinate, combo: Combination
    ) -> tuple[int, Itinerary | None, LegUnavailable | None]:
        try:
            return combo.index, self.assemble(origin, destination, combo), None
        except LegUnavailable as e:
            logger.warning(
                f"Discarding candidate {combo.origin_hub.id}->{combo.destination_hub.id} "
                f"({combo.origin_mode.value}/{combo.destination_mode.value}): {e}"
            )
            return combo.index, None, e

    def generate_candidates(
        self,
        origin: Coordinate,
        destination: Coordinate,
        hub_fanout: int | None = None,
        connector_modes: Sequence[TravelMode] = CONNECTOR_MODES,
    ) -> CandidateBatch:
        """Stitch and cost every hub/mode combination, skipping the ones that fail.

        Attempts exactly ``hub_fanout² × len(connector_modes)²`` combinations when the
        registry holds at least ``hub_fanout`` hubs. Results keep combination order.
        """
        fanout = hub_fanout if hub_fanout is not None else settings.default_hub_fanout
        origin_hubs = self.locator.nearest_hubs(origin, fanout)
        destination_hubs = self.locator.nearest_hubs(destination, fanout)
        combos = self.combinations(origin_hubs, destination_hubs, connector_modes)

        if not combos:
            logger.info("No hub combinations available; returning no candidates.")
            return CandidateBatch(
                itineraries=[],
                attempted=0,
                failed=0,
                origin_hubs=origin_hubs,
                destination_hubs=destination_hubs,
            )

        start_time = time.time()
        results: list[Itinerary | None] = [None] * len(combos)
        failures: list[LegUnavailable] = []

        workers = min(self.max_parallel_requests, len(combos))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._evaluate, origin, destination, combo) for combo in combos]
            for future in futures:
                index, itinerary, error = future.result()
                if error is not None:
                    failures.append(error)
                    continue
                results[index] = itinerary

        itineraries = [it for it in results if it is not None]
        unreachable = sum(1 for error in failures if error.unreachable)
        elapsed = time.time() - start_time
        logger.info(
            f"Generated {len(itineraries)}/{len(combos)} candidates in {elapsed:.2f}s "
            f"({len(failures)} failed, {unreachable} provider unreachable)"
        )

        if not itineraries and failures and unreachable == len(failures):
            raise DirectionsProviderUnavailable(
                f"Directions provider unreachable: all {len(combos)} candidate combinations failed to connect."
            )

        return CandidateBatch(
            itineraries=itineraries,
            attempted=len(combos),
            failed=len(failures),
            unreachable_failures=unreachable,
            origin_hubs=origin_hubs,
            destination_hubs=destination_hubs,
        )
