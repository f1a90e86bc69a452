"""WorldState — the backend's in-memory copy of the survey data.

The CSV sources are read once at start-up with pandas.  Each file becomes
a list of plain dict records (NaN cells turned into None so they encode as
JSON ``null``) and the records are merged into a Grid that backs the
``/api/gamestate`` payload.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd

from abyss.world import generation
from abyss.world.cell import Biome
from abyss.world.codec import apply_records, grid_to_payload

if TYPE_CHECKING:
    from numpy.random import Generator

    from abyss.world.grid import Grid

logger = logging.getLogger(__name__)

# Columns each source file is expected to carry, in output order.
DATASETS: dict[str, tuple[str, ...]] = {
    "seafloor": ("row", "col", "depth", "pressure", "biome"),
    "hazards": ("row", "col", "type", "severity", "notes"),
    "poi": ("row", "col", "id", "category", "label", "description", "research_value"),
    "life": ("row", "col", "species", "threat"),
    "resources": ("row", "col", "type", "value"),
    "corals": (
        "row",
        "col",
        "coral_cover_pct",
        "health_index",
        "bleaching_risk",
        "biodiversity_index",
    ),
}

# Columns read as numbers; anything unparseable becomes None.
NUMERIC_COLUMNS: dict[str, tuple[str, ...]] = {
    "seafloor": ("depth", "pressure"),
    "hazards": ("severity",),
    "poi": ("research_value",),
    "life": ("threat",),
    "resources": ("value",),
    "corals": DATASETS["corals"][2:],
}

# Record kinds merged into the gamestate grid, in overlay order.
GRID_LAYERS = ("hazards", "poi", "life", "resources")


def load_records(
    path: Path,
    columns: tuple[str, ...],
    rows: int,
    cols: int,
    numeric: tuple[str, ...] = (),
) -> list[dict[str, Any]]:
    """Read one CSV file into a list of records.

    A missing or unreadable file, or one without ``row``/``col``
    columns, yields an empty list.  Rows whose coordinates are not
    integers inside the grid are dropped, and values in ``numeric``
    columns that are not finite numbers become None.

    Args:
        path: CSV file to read.
        columns: Expected columns; missing ones are filled with None.
        rows: Grid rows.
        cols: Grid columns.
        numeric: Columns coerced to numbers.
    """
    try:
        frame = pd.read_csv(path)
    except FileNotFoundError:
        logger.warning("%s not found, serving no %s records", path, path.stem)
        return []
    except (pd.errors.EmptyDataError, pd.errors.ParserError, OSError) as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return []

    if not {"row", "col"} <= set(frame.columns):
        logger.warning("%s has no row/col columns, ignoring it", path)
        return []

    for name in ("row", "col"):
        frame[name] = pd.to_numeric(frame[name], errors="coerce")
    inside = frame["row"].between(0, rows - 1) & frame["col"].between(0, cols - 1)
    inside &= (frame["row"] % 1 == 0) & (frame["col"] % 1 == 0)
    dropped = int((~inside).sum())
    if dropped:
        logger.warning(
            "Dropped %d record(s) from %s outside the %dx%d grid",
            dropped,
            path.name,
            rows,
            cols,
        )
    frame = frame[inside].astype({"row": int, "col": int})

    for name in columns:
        if name not in frame.columns:
            frame[name] = None
    for name in numeric:
        values = pd.to_numeric(frame[name], errors="coerce")
        values = values.where(np.isfinite(values))
        bad = int((values.isna() & frame[name].notna()).sum())
        if bad:
            logger.warning("Ignoring %d non-numeric %s value(s) in %s", bad, name, path.name)
        frame[name] = values
    frame = frame[list(columns)]
    frame = frame.astype(object).where(frame.notna(), None)
    return frame.to_dict(orient="records")


def build_grid(
    records: dict[str, list[dict[str, Any]]],
    rows: int,
    cols: int,
    rng: Generator,
) -> Grid:
    """Assemble the gamestate grid from loaded records.

    Cells start with deep-sea depth and pressure drawn from ``rng``;
    seafloor records override them, then the entity layers are applied.
    """
    grid = generation.seabed(rng, rows, cols)
    for record in records.get("seafloor", []):
        cell = grid.cells[record["row"]][record["col"]]
        if record.get("depth") is not None:
            cell.depth = float(record["depth"])
        if record.get("pressure") is not None:
            cell.pressure = float(record["pressure"])
        cell.biome = Biome.parse(record.get("biome"))
    for kind in GRID_LAYERS:
        apply_records(grid, kind, records.get(kind, []))
    return grid


@dataclass
class WorldState:
    """Everything the backend serves, loaded once and then read-only.

    Attributes:
        rows: Grid rows.
        cols: Grid columns.
        records: Flat records per dataset name.
        grid: Merged grid behind ``/api/gamestate``.
        loaded_at: When the data was read (UTC).
    """

    rows: int
    cols: int
    records: dict[str, list[dict[str, Any]]]
    grid: Grid
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    _payload: dict[str, Any] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._payload = grid_to_payload(self.grid)

    @classmethod
    def from_directory(
        cls,
        data_dir: str | Path,
        *,
        rows: int = generation.GRID_SIZE,
        cols: int = generation.GRID_SIZE,
        rng: Generator | None = None,
    ) -> WorldState:
        """Load every known CSV under ``data_dir``.

        Args:
            data_dir: Directory holding ``<dataset>.csv`` files.
            rows: Grid rows.
            cols: Grid columns.
            rng: Generator for filler depth/pressure.
        """
        data_dir = Path(data_dir)
        if rng is None:
            rng = np.random.default_rng()
        records = {
            name: load_records(
                data_dir / f"{name}.csv",
                columns,
                rows,
                cols,
                NUMERIC_COLUMNS.get(name, ()),
            )
            for name, columns in DATASETS.items()
        }
        logger.info(
            "Loaded %s from %s",
            ", ".join(f"{len(v)} {k}" for k, v in records.items()),
            data_dir,
        )
        return cls(
            rows=rows,
            cols=cols,
            records=records,
            grid=build_grid(records, rows, cols, rng),
        )

    def gamestate(self) -> dict[str, Any]:
        """Return the ``/api/gamestate`` body."""
        return self._payload

    def dataset(self, name: str) -> list[dict[str, Any]]:
        """Return the flat records of one dataset.

        Raises:
            KeyError: If ``name`` is not a known dataset.
        """
        return self.records[name]
