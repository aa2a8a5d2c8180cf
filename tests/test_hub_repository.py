from pathlib import Path

import pytest
from openpyxl import Workbook

from itinerary_planner.data.hub_repository import (
    DEFAULT_HUBS,
    HubRegistry,
    get_hub_registry,
    load_hubs_from_file,
)
from itinerary_planner.models.domain import Coordinate, Hub


@pytest.fixture(autouse=True)
def clear_registry_cache():
    get_hub_registry.cache_clear()
    yield
    get_hub_registry.cache_clear()


def test_default_registry_has_builtin_hubs():
    registry = get_hub_registry()

    assert len(registry) == len(DEFAULT_HUBS) == 6
    names = {hub.id: hub.name for hub in registry}
    assert names["dmrt_agargaon"] == "Agargaon (Metro)"


def test_load_hubs_from_workbook(tmp_path: Path):
    path = tmp_path / "hubs.xlsx"
    wb = Workbook()
    sheet = wb.active
    sheet.append(["ID", "Name", "Latitude", "Longitude"])
    sheet.append(["h1", "Central", 23.70, 90.40])
    sheet.append(["h2", "North", 23.90, 90.38])
    sheet.append([None, None, None, None])
    wb.save(path)

    hubs = load_hubs_from_file(path)

    assert [hub.id for hub in hubs] == ["h1", "h2"]
    assert hubs[1].coordinate == Coordinate(23.90, 90.38)


def test_load_hubs_from_csv_skips_invalid_rows(tmp_path: Path):
    path = tmp_path / "hubs.csv"
    path.write_text(
        "id,name,latitude,longitude\n"
        "h1,Central,23.70,90.40\n"
        "h2,Broken,not-a-number,90.40\n",
        encoding="utf-8",
    )

    hubs = load_hubs_from_file(path)

    assert [hub.id for hub in hubs] == ["h1"]


def test_load_hubs_missing_columns(tmp_path: Path):
    path = tmp_path / "hubs.csv"
    path.write_text("id,name\nh1,Central\n", encoding="utf-8")

    with pytest.raises(ValueError, match="latitude"):
        load_hubs_from_file(path)


def test_load_hubs_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_hubs_from_file(tmp_path / "nope.xlsx")


def test_registry_from_file_source(tmp_path: Path):
    path = tmp_path / "hubs.csv"
    path.write_text("id,name,latitude,longitude\nh1,Central,23.70,90.40\n", encoding="utf-8")

    registry = get_hub_registry(path)

    assert len(registry) == 1
    assert next(iter(registry)).name == "Central"


def test_registry_rejects_duplicate_ids():
    hub = Hub(id="dup", name="Dup", coordinate=Coordinate(0.0, 0.0))
    with pytest.raises(ValueError):
        HubRegistry([hub, hub])
