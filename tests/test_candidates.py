import threading

import httpx
import pytest

from itinerary_planner.data.hub_repository import DEFAULT_HUBS, HubRegistry
from itinerary_planner.errors import DirectionsProviderUnavailable
from itinerary_planner.models.domain import Coordinate, TravelMode
from itinerary_planner.services.geospatial import haversine_km
from itinerary_planner.services.hubs.locator import HubLocator
from itinerary_planner.services.itineraries.candidates import CandidateGenerator
from itinerary_planner.services.routing.legs import LegResolver
from itinerary_planner.services.routing.osrm_client import OSRMClient

ORIGIN = Coordinate(23.7461, 90.3742)  # Dhanmondi 27
DESTINATION = Coordinate(23.8690, 90.3950)  # Uttara

SPEED_MPS = {
    TravelMode.WALKING: 1.4,
    TravelMode.BICYCLING: 4.0,
    TravelMode.DRIVING: 8.0,
    TravelMode.TRANSIT: 10.0,
}


class DummyDirections:
    """Straight-line directions with optional failure injection."""

    def __init__(self, fail=None):
        self.fail = fail
        self.calls = []
        self._lock = threading.Lock()

    def route(self, origin, destination, mode):
        with self._lock:
            self.calls.append((origin, destination, mode))
            should_fail = self.fail(origin, destination, mode) if self.fail else False
        if should_fail:
            raise should_fail if isinstance(should_fail, Exception) else ValueError("no route")
        meters = haversine_km(origin.latitude, origin.longitude, destination.latitude, destination.longitude) * 1000
        return {"distance_meters": meters, "duration_seconds": meters / SPEED_MPS[mode]}


def _generator(provider, hubs=DEFAULT_HUBS, workers=4):
    return CandidateGenerator(
        HubLocator(HubRegistry(hubs)),
        LegResolver(provider),
        max_parallel_requests=workers,
        reliability_score=0.8,
    )


def test_attempts_every_hub_and_mode_combination():
    provider = DummyDirections()
    generator = _generator(provider)

    batch = generator.generate_candidates(
        ORIGIN, DESTINATION, hub_fanout=2, connector_modes=(TravelMode.DRIVING, TravelMode.WALKING)
    )

    assert batch.attempted == 16
    assert batch.failed == 0
    assert len(batch.itineraries) == 16
    assert len(provider.calls) == 16 * 3


def test_default_modes_give_thirty_six_combinations():
    batch = _generator(DummyDirections()).generate_candidates(ORIGIN, DESTINATION, hub_fanout=2)
    assert batch.attempted == 36


def test_itineraries_are_stitched_through_both_hubs():
    batch = _generator(DummyDirections()).generate_candidates(
        ORIGIN, DESTINATION, hub_fanout=1, connector_modes=(TravelMode.WALKING,)
    )

    (itinerary,) = batch.itineraries
    first, trunk, last = itinerary.legs
    assert first.mode is TravelMode.WALKING
    assert trunk.mode is TravelMode.TRANSIT
    assert last.mode is TravelMode.WALKING
    assert first.origin == ORIGIN
    assert first.destination == itinerary.origin_hub.coordinate
    assert trunk.destination == itinerary.destination_hub.coordinate
    assert last.destination == DESTINATION
    assert itinerary.transfer_count == 1
    assert itinerary.reliability_score == 0.8
    assert itinerary.raw_score is None
    assert itinerary.total_duration_seconds == pytest.approx(sum(leg.duration_seconds for leg in itinerary.legs))


def test_cost_and_emissions_populated_from_legs():
    batch = _generator(DummyDirections()).generate_candidates(
        ORIGIN, DESTINATION, hub_fanout=1, connector_modes=(TravelMode.DRIVING,)
    )

    (itinerary,) = batch.itineraries
    first, trunk, last = itinerary.legs
    expected_cost = (first.distance_meters + last.distance_meters) / 1000 * 28 + trunk.distance_meters / 1000 * 5
    assert itinerary.total_cost_units == pytest.approx(expected_cost)
    assert itinerary.total_co2_grams > 0


def test_itinerary_ids_are_unique():
    batch = _generator(DummyDirections()).generate_candidates(ORIGIN, DESTINATION, hub_fanout=2)
    ids = [it.id for it in batch.itineraries]
    assert len(ids) == len(set(ids))


def test_results_keep_combination_order():
    batch = _generator(DummyDirections(), workers=8).generate_candidates(
        ORIGIN, DESTINATION, hub_fanout=2, connector_modes=(TravelMode.DRIVING, TravelMode.WALKING)
    )

    observed = [
        (it.origin_hub.id, it.destination_hub.id, it.legs[0].mode, it.legs[2].mode) for it in batch.itineraries
    ]
    expected = [
        (combo.origin_hub.id, combo.destination_hub.id, combo.origin_mode, combo.destination_mode)
        for combo in _generator(DummyDirections()).combinations(
            batch.origin_hubs, batch.destination_hubs, (TravelMode.DRIVING, TravelMode.WALKING)
        )
    ]
    assert observed == expected


def test_failed_mode_discards_only_its_combinations():
    provider = DummyDirections(fail=lambda o, d, mode: mode is TravelMode.BICYCLING)

    batch = _generator(provider).generate_candidates(ORIGIN, DESTINATION, hub_fanout=2)

    # 4 hub pairs × 4 driving/walking mode pairs survive out of 36.
    assert batch.attempted == 36
    assert len(batch.itineraries) == 16
    assert batch.failed == 20
    assert all(
        leg.mode is not TravelMode.BICYCLING for it in batch.itineraries for leg in it.legs
    )


def test_single_failure_drops_exactly_one_candidate():
    state = {"failed": False}

    def fail_once(origin, destination, mode):
        if mode is TravelMode.TRANSIT and not state["failed"]:
            state["failed"] = True
            return True
        return False

    batch = _generator(DummyDirections(fail=fail_once)).generate_candidates(ORIGIN, DESTINATION, hub_fanout=2)

    assert batch.attempted == 36
    assert batch.failed == 1
    assert len(batch.itineraries) == 35


def test_unusable_route_payload_counts_as_failure():
    class NegativeDuration(DummyDirections):
        def route(self, origin, destination, mode):
            payload = super().route(origin, destination, mode)
            if mode is TravelMode.DRIVING:
                payload["duration_seconds"] = -1
            return payload

    batch = _generator(NegativeDuration()).generate_candidates(
        ORIGIN, DESTINATION, hub_fanout=1, connector_modes=(TravelMode.DRIVING, TravelMode.WALKING)
    )

    assert batch.attempted == 4
    assert len(batch.itineraries) == 1
    assert batch.itineraries[0].legs[0].mode is TravelMode.WALKING


def test_empty_registry_produces_no_candidates():
    provider = DummyDirections()

    batch = _generator(provider, hubs=()).generate_candidates(ORIGIN, DESTINATION, hub_fanout=2)

    assert batch.attempted == 0
    assert batch.itineraries == []
    assert provider.calls == []


def test_unreachable_provider_is_a_hard_failure():
    provider = DummyDirections(fail=lambda o, d, m: ConnectionError("connection refused"))

    with pytest.raises(DirectionsProviderUnavailable):
        _generator(provider).generate_candidates(ORIGIN, DESTINATION, hub_fanout=2)


def test_missing_routes_return_empty_without_error():
    provider = DummyDirections(fail=lambda o, d, mode: mode is TravelMode.TRANSIT)

    batch = _generator(provider).generate_candidates(
        ORIGIN, DESTINATION, hub_fanout=1, connector_modes=(TravelMode.WALKING,)
    )

    assert batch.itineraries == []
    assert batch.failed == 1
    assert batch.unreachable_failures == 0


def test_mixed_failures_without_success_return_empty():
    def fail(origin, destination, mode):
        if mode is TravelMode.TRANSIT:
            return ValueError("NoRoute")
        if mode is TravelMode.DRIVING:
            return ConnectionError("connection refused")
        return False

    batch = _generator(DummyDirections(fail=fail)).generate_candidates(
        ORIGIN, DESTINATION, hub_fanout=1, connector_modes=(TravelMode.WALKING, TravelMode.DRIVING)
    )

    assert batch.itineraries == []
    assert batch.failed == 4
    assert batch.unreachable_failures == 2


def test_unexpected_provider_error_discards_only_its_candidates():
    def fail(origin, destination, mode):
        return RuntimeError("sdk blew up") if mode is TravelMode.BICYCLING else False

    batch = _generator(DummyDirections(fail=fail)).generate_candidates(ORIGIN, DESTINATION, hub_fanout=2)

    assert batch.attempted == 36
    assert len(batch.itineraries) == 16
    assert batch.failed == 20
    assert batch.unreachable_failures == 0


def test_malformed_osrm_body_for_one_profile_keeps_other_candidates():
    def handler(request: httpx.Request) -> httpx.Response:
        if "/route/v1/bike/" in request.url.path:
            return httpx.Response(200, content=b"null", headers={"content-type": "application/json"})
        return httpx.Response(200, json={"code": "Ok", "routes": [{"distance": 1500.0, "duration": 300.0}]})

    client = OSRMClient(
        base_url="http://osrm.test",
        profiles={"driving": "driving", "walking": "foot", "bicycling": "bike", "transit": "driving"},
        max_retries=0,
        backoff_seconds=0,
        transport=httpx.MockTransport(handler),
    )

    batch = _generator(client).generate_candidates(ORIGIN, DESTINATION, hub_fanout=2)

    assert batch.attempted == 36
    assert len(batch.itineraries) == 16
    assert all(leg.mode is not TravelMode.BICYCLING for it in batch.itineraries for leg in it.legs)
