"""Application configuration and settings management."""

from pathlib import Path
from typing import Annotated, Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ITP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Multi-modal Itinerary Planner API"
    api_prefix: str = "/api"
    hub_file: Optional[Path] = Field(
        default=None,
        description="Optional hub registry workbook (.xlsx) or CSV. Built-in hubs are used when unset.",
    )
    osrm_base_url: Optional[str] = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profiles: Annotated[dict[str, str], NoDecode] = Field(
        default={
            "driving": "driving",
            "walking": "foot",
            "bicycling": "bike",
            "transit": "driving",
        },
        description="OSRM profile used for each travel mode.",
    )
    osrm_timeout_seconds: float = Field(default=10.0, gt=0.0)
    osrm_max_retries: int = Field(default=1, ge=0)
    osrm_backoff_seconds: float = Field(default=0.5, ge=0.0)
    max_parallel_requests: int = Field(
        default=8,
        ge=1,
        description="Concurrent directions requests allowed per planning request.",
    )
    default_hub_fanout: int = Field(default=2, ge=1)
    default_top_k: int = Field(default=5, ge=1)
    default_reliability_score: float = Field(default=0.8, ge=0.0, le=1.0)
    geocoder_nominatim_url: str = "https://nominatim.openstreetmap.org"
    geocoder_photon_url: str = "https://photon.komoot.io"
    geocoder_country: Optional[str] = Field(default="bd", description="Country code passed to Nominatim.")
    geocoder_country_name: str = "bangladesh"
    geocoder_city_name: str = "dhaka"
    geocoder_user_agent: str = "itinerary-planner/0.1"
    geocoder_limit: int = Field(default=8, ge=1)
    geocoder_timeout_seconds: float = Field(default=10.0, gt=0.0)
    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "http://localhost:8081",
            "http://127.0.0.1:8081",
            "http://localhost:19006",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("hub_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Optional[Path]:
        if value is None or value == "":
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("osrm_profiles", mode="before")
    @classmethod
    def _parse_profile_map(cls, value: Any) -> dict[str, str]:
        """Parse the mode→profile map from a dict or a JSON object string."""
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except (json.JSONDecodeError, TypeError) as exc:
                raise ValueError("osrm_profiles must be a JSON object") from exc
        if isinstance(value, dict):
            return {str(k).lower(): str(v) for k, v in value.items()}
        raise ValueError("osrm_profiles must be a mapping of mode to OSRM profile")


settings = Settings()
