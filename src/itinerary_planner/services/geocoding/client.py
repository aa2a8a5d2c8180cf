"""Place search against Nominatim with a Photon fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ...config import settings
from ...models.domain import Coordinate

logger = logging.getLogger(__name__)

# Degrees around the bias point used for Nominatim's viewbox. Bias only, never bounded.
VIEWBOX_DELTA = 0.25
MIN_USEFUL_RESULTS = 2
AREA_PLACE_TYPES = {"suburb", "district", "neighbourhood", "quarter", "ward", "thana"}
SETTLEMENT_PLACE_TYPES = {"city", "town"}


@dataclass(frozen=True, slots=True)
class BoundingBox:
    south: float
    north: float
    west: float
    east: float


@dataclass(frozen=True, slots=True)
class Place:
    id: str
    name: str
    coordinate: Coordinate
    source: str
    bbox: Optional[BoundingBox] = None
    place_type: Optional[str] = None
    place_class: Optional[str] = None


def build_viewbox(near: Coordinate, delta: float = VIEWBOX_DELTA) -> str:
    # Nominatim viewbox format: lonW,latN,lonE,latS
    return (
        f"{near.longitude - delta},{near.latitude + delta},"
        f"{near.longitude + delta},{near.latitude - delta}"
    )


class GeocodingClient:
    def __init__(
        self,
        nominatim_url: str | None = None,
        photon_url: str | None = None,
        country: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.nominatim_url = (nominatim_url or settings.geocoder_nominatim_url).rstrip("/")
        self.photon_url = (photon_url or settings.geocoder_photon_url).rstrip("/")
        self.country = country if country is not None else settings.geocoder_country
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self.transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.timeout,
            headers={"Accept-Language": "en", "User-Agent": settings.geocoder_user_agent},
            transport=self.transport,
        )

    def _nominatim_search(self, client: httpx.Client, query: str, near: Optional[Coordinate], limit: int) -> list[Place]:
        params = {"q": query, "format": "json", "addressdetails": "1", "limit": str(limit)}
        if self.country:
            params["countrycodes"] = self.country
        if near is not None:
            params["viewbox"] = build_viewbox(near)
        response = client.get(f"{self.nominatim_url}/search", params=params)
        response.raise_for_status()

        places: list[Place] = []
        for item in response.json() or []:
            bbox = item.get("boundingbox")
            places.append(
                Place(
                    id=f"nominatim:{item.get('place_id')}",
                    name=item.get("display_name") or "Unnamed",
                    coordinate=Coordinate(float(item["lat"]), float(item["lon"])),
                    source="nominatim",
                    bbox=BoundingBox(*(float(v) for v in bbox)) if bbox and len(bbox) == 4 else None,
                    place_type=item.get("type"),
                    place_class=item.get("class"),
                )
            )
        return places

    def _photon_search(self, client: httpx.Client, query: str, near: Optional[Coordinate], limit: int) -> list[Place]:
        params = {"q": query, "lang": "en", "limit": str(limit)}
        if near is not None:
            params["lat"] = str(near.latitude)
            params["lon"] = str(near.longitude)
        response = client.get(f"{self.photon_url}/api/", params=params)
        response.raise_for_status()

        places: list[Place] = []
        for idx, feature in enumerate((response.json() or {}).get("features") or []):
            coordinates = (feature.get("geometry") or {}).get("coordinates") or []
            if len(coordinates) < 2:
                continue
            props = feature.get("properties") or {}
            lon, lat = coordinates[0], coordinates[1]
            if props.get("name"):
                name = ", ".join(str(p) for p in (props["name"], props.get("city"), props.get("country")) if p)
            else:
                name = props.get("label") or "Unnamed"
            extent = props.get("extent")
            places.append(
                Place(
                    id=f"photon:{props.get('osm_id', idx)}",
                    name=name,
                    coordinate=Coordinate(float(lat), float(lon)),
                    source="photon",
                    # Photon extent is [west, south, east, north].
                    bbox=BoundingBox(
                        south=float(extent[1]), north=float(extent[3]), west=float(extent[0]), east=float(extent[2])
                    )
                    if isinstance(extent, list) and len(extent) == 4
                    else None,
                    place_type=props.get("type"),
                    place_class="place",
                )
            )
        return places

    def search(self, query: str, near: Optional[Coordinate] = None, limit: int | None = None) -> list[Place]:
        """Resolve free text to candidate places, best matches first.

        Biased Nominatim search, then an unbiased retry, then Photon, each only
        while fewer than two results are known.
        """
        limit = limit or settings.geocoder_limit
        if not query or len(query.strip()) < 2:
            return []
        query = query.strip()

        with self._get_client() as client:
            results = self._nominatim_search(client, query, near, limit)
            if len(results) < MIN_USEFUL_RESULTS and near is not None:
                results += self._nominatim_search(client, query, None, limit)
            if len(results) < MIN_USEFUL_RESULTS:
                try:
                    results += self._photon_search(client, query, near, limit)
                except httpx.HTTPError as e:
                    logger.warning(f"Photon fallback failed for '{query}': {e}")

        ranked = sorted(dedupe(results), key=score_place, reverse=True)
        return ranked[:limit]

    def reverse(self, coordinate: Coordinate) -> str:
        params = {"format": "json", "lat": str(coordinate.latitude), "lon": str(coordinate.longitude)}
        fallback = f"{coordinate.latitude:.5f}, {coordinate.longitude:.5f}"
        with self._get_client() as client:
            response = client.get(f"{self.nominatim_url}/reverse", params=params)
            response.raise_for_status()
            data = response.json() or {}
        return data.get("display_name") or fallback


def score_place(place: Place) -> int:
    """Preference score: home country and city names, admin-level places, areas over points."""
    score = 0
    name = place.name.lower()
    if settings.geocoder_country_name and settings.geocoder_country_name in name:
        score += 3
    if settings.geocoder_city_name and settings.geocoder_city_name in name:
        score += 2
    place_type = (place.place_type or "").lower()
    if place_type in SETTLEMENT_PLACE_TYPES:
        score += 2
    if place_type in AREA_PLACE_TYPES:
        score += 1
    if place.bbox is not None:
        score += 1
    return score


def dedupe(places: list[Place]) -> list[Place]:
    seen: set[str] = set()
    unique: list[Place] = []
    for place in places:
        key = f"{place.name}|{place.coordinate.latitude:.6f}|{place.coordinate.longitude:.6f}"
        if key not in seen:
            seen.add(key)
            unique.append(place)
    return unique
