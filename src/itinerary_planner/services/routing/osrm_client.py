"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import logging
import time

import httpx

from ...config import settings
from ...models.domain import Coordinate, TravelMode

logger = logging.getLogger(__name__)


class NoRouteFound(ValueError):
    """OSRM answered but returned no usable route."""


class OSRMClient:
    """Directions provider backed by OSRM's ``route`` endpoint, one profile per mode."""

    def __init__(
        self,
        base_url: str | None = None,
        profiles: dict[str, str] | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profiles = dict(profiles or settings.osrm_profiles)
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        self.transport = transport

    def _get_client(self) -> httpx.Client:
        """Get a fresh HTTP client; requests may run on several worker threads."""
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            limits=httpx.Limits(max_connections=1, max_keepalive_connections=0),
            transport=self.transport,
        )

    def profile_for(self, mode: TravelMode | str) -> str:
        key = mode.value if isinstance(mode, TravelMode) else str(mode)
        try:
            return self.profiles[key]
        except KeyError:
            raise ValueError(f"No OSRM profile configured for mode '{key}'.") from None

    def route(self, origin: Coordinate, destination: Coordinate, mode: TravelMode | str) -> dict:
        """Fetch the best route between two points for a travel mode.

        Returns:
            Dictionary with ``distance_meters`` and ``duration_seconds``.

        Raises:
            NoRouteFound: OSRM has no route for this pair.
            ConnectionError: the OSRM service could not be reached.
            httpx.HTTPError: any other transport failure after retries.
        """
        profile = self.profile_for(mode)
        coordinate_str = f"{origin.longitude},{origin.latitude};{destination.longitude},{destination.latitude}"
        params = {
            "overview": "false",
            "steps": "false",
            "alternatives": "false",
        }
        url = f"{self.base_url}/route/v1/{profile}/{coordinate_str}"

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    if response.status_code == 400:
                        # OSRM signals NoRoute / NoSegment with a 400 and a JSON body.
                        raise NoRouteFound(self._error_message(response))
                    response.raise_for_status()
                    return self._parse_route(response.json())
                except NoRouteFound:
                    raise
                except httpx.HTTPStatusError:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"OSRM route request timed out after {self.max_retries} retries: {e}")
                        raise
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM route timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except (httpx.ConnectError, httpx.NetworkError, OSError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(
                            f"Failed to connect to OSRM service at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
        finally:
            client.close()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return f"OSRM returned HTTP {response.status_code}"
        if not isinstance(data, dict):
            return f"OSRM returned HTTP {response.status_code}"
        return data.get("message") or data.get("code") or "OSRM found no route"

    @staticmethod
    def _parse_route(data: object) -> dict:
        if not isinstance(data, dict):
            raise NoRouteFound(f"OSRM returned an unexpected payload: {data!r}")
        if data.get("code") != "Ok":
            raise NoRouteFound(data.get("message") or f"OSRM route request failed: {data.get('code')}")
        routes = data.get("routes") or []
        if not routes:
            raise NoRouteFound("OSRM response contained no routes.")
        best = routes[0]
        if not isinstance(best, dict):
            raise NoRouteFound("OSRM route entry is not an object.")
        return {
            "distance_meters": best.get("distance"),
            "duration_seconds": best.get("duration"),
        }


def check_health(base_url: str | None = None, timeout: float = 5.0) -> bool:
    """Check OSRM service health with a minimal driving route request.

    Public OSRM endpoints have no /health endpoint, so connectivity is tested
    by routing between two points in central Dhaka.
    """
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    try:
        profile = settings.osrm_profiles.get("driving", "driving")
        url = f"{base.rstrip('/')}/route/v1/{profile}/90.4142,23.7339;90.3933,23.7523"
        response = httpx.get(url, params={"overview": "false"}, timeout=timeout)
        response.raise_for_status()
        data = response.json()
        return isinstance(data, dict) and data.get("code") == "Ok"
    except (httpx.HTTPError, ValueError):
        return False
