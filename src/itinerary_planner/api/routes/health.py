"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_osrm_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.routing.osrm_client import check_health as osrm_health_check
    return osrm_health_check


@router.get("/health/osrm", status_code=status.HTTP_200_OK)
def health_osrm() -> dict:
    """Check OSRM service health."""
    try:
        osrm_health_check = _get_osrm_health_check()
        status_flag = osrm_health_check()
        return {"service": "osrm", "healthy": status_flag}
    except Exception as e:
        return {"service": "osrm", "healthy": False, "error": str(e)}


@router.get("/health/hubs", status_code=status.HTTP_200_OK)
def health_hubs() -> dict:
    """Report whether the hub registry loads and how many hubs it holds."""
    from ...data.hub_repository import get_hub_registry

    try:
        registry = get_hub_registry()
    except (OSError, ValueError) as e:
        return {"service": "hubs", "healthy": False, "error": str(e)}
    return {"service": "hubs", "healthy": len(registry) > 0, "hub_count": len(registry)}
