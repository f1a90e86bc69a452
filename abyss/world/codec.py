"""JSON conversion for cells, grids and flat row/col records.

Two shapes cross the wire:

- the ``/api/gamestate`` payload, ``{"grid": Cell[][], "metadata": {...}}``
  where each cell uses the short field names of the client
  (``desc``, ``value``, ``cover`` ...);
- flat record lists (``/api/hazards`` and friends) that keep the CSV
  column names (``notes``, ``description``, ``coral_cover_pct`` ...).

Parsing is lenient.  A malformed cell becomes an empty cell at its
coordinate; only a payload without a grid array is rejected.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from abyss.errors import GridFormatError
from abyss.world.cell import (
    Biome,
    Cell,
    Coral,
    Hazard,
    Lifeform,
    PointOfInterest,
    Resource,
)
from abyss.world.grid import Grid

logger = logging.getLogger(__name__)


def _float(value: Any, default: float = 0.0) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    # NaN and +/-inf (JSON ``NaN``, ``Infinity``, ``1e999``) count as missing
    return result if math.isfinite(result) else default


def _int(value: Any) -> int | None:
    number = _float(value, math.nan)
    return None if math.isnan(number) else int(number)


def _str(value: Any, default: str = "") -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return default
    return str(value)


# -- Entity <-> dict -----------------------------------------------------------


def hazard_from_dict(data: Mapping[str, Any]) -> Hazard:
    return Hazard(
        type=_str(data.get("type")),
        label=_str(data.get("label", data.get("notes"))),
        severity=_int(data.get("severity")),
    )


def poi_from_dict(data: Mapping[str, Any]) -> PointOfInterest:
    return PointOfInterest(
        id=_str(data.get("id")),
        label=_str(data.get("label")),
        description=_str(data.get("desc", data.get("description"))),
        category=data.get("category") or None,
        research_value=_int(data.get("value", data.get("research_value"))),
    )


def life_from_dict(data: Mapping[str, Any]) -> Lifeform:
    return Lifeform(
        species=_str(data.get("species")),
        threat=_int(data.get("threat")) or 0,
    )


def resource_from_dict(data: Mapping[str, Any]) -> Resource:
    return Resource(type=_str(data.get("type")), value=_int(data.get("value")) or 0)


def coral_from_dict(data: Mapping[str, Any]) -> Coral:
    return Coral(
        cover=_float(data.get("cover", data.get("coral_cover_pct"))),
        health=_float(data.get("health", data.get("health_index"))),
        bleaching=_float(data.get("bleaching", data.get("bleaching_risk"))),
        biodiversity=_float(
            data.get("biodiversity", data.get("biodiversity_index")),
        ),
    )


def cell_to_dict(cell: Cell) -> dict[str, Any]:
    """Serialise a cell in the client's ``gamestate`` shape.

    Collected items are reported as absent.
    """
    hazard = poi = life = resource = coral = None
    if cell.hazard is not None:
        hazard = {"type": cell.hazard.type, "label": cell.hazard.label}
        if cell.hazard.severity is not None:
            hazard["severity"] = cell.hazard.severity
    if cell.poi is not None:
        poi = {
            "id": cell.poi.id,
            "label": cell.poi.label,
            "desc": cell.poi.description,
        }
        if cell.poi.category is not None:
            poi["category"] = cell.poi.category
        if cell.poi.research_value is not None:
            poi["value"] = cell.poi.research_value
    if cell.life is not None:
        life = {"species": cell.life.species, "threat": cell.life.threat}
    if cell.resource is not None:
        resource = {"type": cell.resource.type, "value": cell.resource.value}
    if cell.coral is not None:
        coral = {
            "cover": cell.coral.cover,
            "health": cell.coral.health,
            "bleaching": cell.coral.bleaching,
            "biodiversity": cell.coral.biodiversity,
        }
    return {
        "row": cell.row,
        "col": cell.col,
        "depth": cell.depth,
        "pressure": cell.pressure,
        "biome": cell.biome.value,
        "hazard": hazard,
        "poi": poi,
        "life": life,
        "resource": resource,
        "coral": coral,
    }


def cell_from_dict(row: int, col: int, data: Any) -> Cell:
    """Build the cell at ``(row, col)`` from a decoded JSON object.

    Anything that is not a mapping yields an empty cell.
    """
    cell = Cell(row=row, col=col)
    if not isinstance(data, Mapping):
        return cell
    cell.depth = _float(data.get("depth"))
    cell.pressure = _float(data.get("pressure"))
    cell.biome = Biome.parse(data.get("biome"))
    if isinstance(data.get("hazard"), Mapping):
        cell.hazard = hazard_from_dict(data["hazard"])
    if isinstance(data.get("poi"), Mapping):
        cell.poi = poi_from_dict(data["poi"])
    if isinstance(data.get("life"), Mapping):
        cell.life = life_from_dict(data["life"])
    if isinstance(data.get("resource"), Mapping):
        cell.place(resource_from_dict(data["resource"]))
    elif isinstance(data.get("coral"), Mapping):
        cell.place(coral_from_dict(data["coral"]))
    return cell


# -- Grid <-> payload ----------------------------------------------------------


def grid_to_payload(grid: Grid) -> dict[str, Any]:
    """Return the ``/api/gamestate`` body for a grid."""
    return {
        "grid": [[cell_to_dict(cell) for cell in row] for row in grid.cells],
        "metadata": {"rows": grid.rows, "cols": grid.cols},
    }


def grid_from_payload(payload: Any) -> Grid:
    """Parse a ``/api/gamestate`` body.

    Short or missing rows are padded with empty cells up to the widest
    row (or ``metadata.cols`` when given).

    Raises:
        GridFormatError: If the payload carries no grid array.
    """
    if not isinstance(payload, Mapping) or not isinstance(payload.get("grid"), list):
        msg = "payload has no 'grid' array"
        raise GridFormatError(msg)
    raw_rows = payload["grid"]
    if not raw_rows:
        msg = "payload grid is empty"
        raise GridFormatError(msg)

    metadata = payload.get("metadata")
    metadata = metadata if isinstance(metadata, Mapping) else {}
    rows = _int(metadata.get("rows")) or len(raw_rows)
    widest = max((len(r) for r in raw_rows if isinstance(r, list)), default=0)
    cols = _int(metadata.get("cols")) or widest
    if cols <= 0:
        msg = "payload grid has no columns"
        raise GridFormatError(msg)

    cells: list[list[Cell]] = []
    for r in range(rows):
        raw = raw_rows[r] if r < len(raw_rows) and isinstance(raw_rows[r], list) else []
        cells.append(
            [cell_from_dict(r, c, raw[c] if c < len(raw) else None) for c in range(cols)],
        )
    return Grid.from_cells(cells)


# -- Flat records --------------------------------------------------------------


def _attach_hazard(cell: Cell, record: Mapping[str, Any]) -> None:
    cell.hazard = hazard_from_dict(record)


def _attach_poi(cell: Cell, record: Mapping[str, Any]) -> None:
    cell.poi = poi_from_dict(record)


def _attach_life(cell: Cell, record: Mapping[str, Any]) -> None:
    cell.life = life_from_dict(record)


def _attach_resource(cell: Cell, record: Mapping[str, Any]) -> None:
    cell.place(resource_from_dict(record))


def _attach_coral(cell: Cell, record: Mapping[str, Any]) -> None:
    cell.place(coral_from_dict(record))


RECORD_KINDS: dict[str, Callable[[Cell, Mapping[str, Any]], None]] = {
    "hazards": _attach_hazard,
    "poi": _attach_poi,
    "life": _attach_life,
    "resources": _attach_resource,
    "corals": _attach_coral,
}


def apply_records(
    grid: Grid,
    kind: str,
    records: Iterable[Mapping[str, Any]],
) -> int:
    """Merge flat row/col records of one kind into the grid.

    Records whose coordinates are missing or outside the grid are
    skipped.

    Args:
        grid: Grid to mutate.
        kind: One of the keys of ``RECORD_KINDS``.
        records: Records carrying ``row`` and ``col`` plus kind fields.

    Returns:
        Number of records applied.

    Raises:
        KeyError: If ``kind`` is unknown.
    """
    attach = RECORD_KINDS[kind]
    applied = 0
    skipped = 0
    for record in records:
        row, col = _int(record.get("row")), _int(record.get("col"))
        cell = grid.get(row, col) if row is not None and col is not None else None
        if cell is None:
            skipped += 1
            continue
        attach(cell, record)
        applied += 1
    if skipped:
        logger.debug("Skipped %d %s records outside the grid", skipped, kind)
    return applied
