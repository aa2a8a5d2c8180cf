import pytest
from pydantic import ValidationError

from itinerary_planner.config import Settings


def test_profiles_parsed_from_json_env(monkeypatch):
    monkeypatch.setenv("ITP_OSRM_PROFILES", '{"Driving": "car", "walking": "foot"}')

    settings = Settings(_env_file=None)

    assert settings.osrm_profiles == {"driving": "car", "walking": "foot"}


def test_profiles_must_be_a_mapping(monkeypatch):
    monkeypatch.setenv("ITP_OSRM_PROFILES", "driving=car")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_allowed_origins_accept_comma_separated(monkeypatch):
    monkeypatch.setenv("ITP_FRONTEND_ALLOWED_ORIGINS", "http://a.test, http://b.test")

    settings = Settings(_env_file=None)

    assert settings.frontend_allowed_origins == ("http://a.test", "http://b.test")


def test_empty_hub_file_means_built_in_hubs(monkeypatch):
    monkeypatch.setenv("ITP_HUB_FILE", "")

    assert Settings(_env_file=None).hub_file is None
