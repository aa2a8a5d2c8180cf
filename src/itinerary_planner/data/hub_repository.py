"""Hub registry loader: built-in interchange hubs or an operator-supplied file."""

from __future__ import annotations

import csv
import functools
import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional

from openpyxl import load_workbook

from ..config import settings
from ..models.domain import Coordinate, Hub

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"id", "name", "latitude", "longitude"}

DEFAULT_HUBS: tuple[Hub, ...] = (
    Hub(id="dhk_motijheel", name="Motijheel Bus Hub", coordinate=Coordinate(23.7339, 90.4142)),
    Hub(id="dmrt_uttara_north", name="Uttara North (Metro)", coordinate=Coordinate(23.8760, 90.3862)),
    Hub(id="dmrt_agargaon", name="Agargaon (Metro)", coordinate=Coordinate(23.7779, 90.3778)),
    Hub(id="dhk_farmgate", name="Farmgate", coordinate=Coordinate(23.7523, 90.3933)),
    Hub(id="dhk_gulistan", name="Gulistan", coordinate=Coordinate(23.7254, 90.4116)),
    Hub(id="dhk_mirpur10", name="Mirpur 10", coordinate=Coordinate(23.8049, 90.3667)),
)


class HubRegistry:
    """Immutable, ordered collection of hubs shared read-only by all requests."""

    __slots__ = ("_hubs",)

    def __init__(self, hubs: Iterable[Hub] = ()) -> None:
        self._hubs: tuple[Hub, ...] = tuple(hubs)
        if len({hub.id for hub in self._hubs}) != len(self._hubs):
            raise ValueError("Hub registry contains duplicate hub ids.")

    def __iter__(self) -> Iterator[Hub]:
        return iter(self._hubs)

    def __len__(self) -> int:
        return len(self._hubs)

    def __repr__(self) -> str:
        return f"HubRegistry({len(self._hubs)} hubs)"


def _normalize_header(value: object) -> str:
    return str(value or "").strip().lower()


def _hub_from_row(row: dict) -> Hub:
    return Hub(
        id=str(row["id"]).strip(),
        name=str(row["name"]).strip(),
        coordinate=Coordinate(float(row["latitude"]), float(row["longitude"])),
    )


def _rows_from_workbook(path: Path) -> list[dict]:
    wb = load_workbook(path, data_only=True, read_only=True)
    try:
        sheet = wb.active
        rows = sheet.iter_rows(min_row=1, values_only=True)
        header = next(rows, None)
        if header is None:
            raise ValueError(f"Hub workbook '{path}' is empty.")
        names = [_normalize_header(cell) for cell in header]
        return [dict(zip(names, row)) for row in rows if any(cell is not None for cell in row)]
    finally:
        wb.close()


def _rows_from_csv(path: Path) -> list[dict]:
    with path.open(mode="r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise ValueError(f"Hub file '{path}' is missing a header row.")
        return [{_normalize_header(k): v for k, v in row.items()} for row in reader]


def load_hubs_from_file(source: Path) -> tuple[Hub, ...]:
    """Load hubs from an Excel workbook or CSV with id/name/latitude/longitude columns."""
    if not source.exists():
        raise FileNotFoundError(f"Hub file not found: {source}")

    if source.suffix.lower() in {".xlsx", ".xlsm"}:
        rows = _rows_from_workbook(source)
    else:
        rows = _rows_from_csv(source)

    if rows:
        missing_columns = REQUIRED_COLUMNS - set(rows[0])
        if missing_columns:
            raise ValueError(f"Hub file missing columns: {', '.join(sorted(missing_columns))}")

    hubs: list[Hub] = []
    for row in rows:
        if not row.get("id"):
            continue
        try:
            hubs.append(_hub_from_row(row))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Skipping invalid hub row {row!r}: {e}")
    return tuple(hubs)


@functools.lru_cache(maxsize=1)
def get_hub_registry(source: Optional[Path] = None) -> HubRegistry:
    """Build the process-wide registry from the configured file, or the built-in hubs."""
    path = source or settings.hub_file
    if path is None:
        return HubRegistry(DEFAULT_HUBS)
    hubs = load_hubs_from_file(path)
    logger.info(f"Loaded {len(hubs)} hubs from {path}")
    return HubRegistry(hubs)
