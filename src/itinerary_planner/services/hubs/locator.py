"""Nearest-hub lookup over an injected hub registry."""

from __future__ import annotations

from ...data.hub_repository import HubRegistry
from ...models.domain import Coordinate, Hub
from ..geospatial import haversine_m


class HubLocator:
    def __init__(self, registry: HubRegistry) -> None:
        self.registry = registry

    def nearest_hubs(self, point: Coordinate, count: int) -> tuple[Hub, ...]:
        """Return up to ``count`` hubs ordered by great-circle distance to ``point``.

        Equal distances keep registry order, so the result is deterministic.
        """
        if count <= 0:
            return ()
        ranked = sorted(self.registry, key=lambda hub: haversine_m(point, hub.coordinate))
        return tuple(ranked[:count])

    def distances_m(self, point: Coordinate, hubs: tuple[Hub, ...]) -> list[float]:
        return [haversine_m(point, hub.coordinate) for hub in hubs]
