"""Procedural fallback worlds, used when the data service is unreachable.

Both game variants build the same way:

1. Draw depth and pressure for every cell from a uniform range.
2. Sprinkle biome changes and collectibles with fixed probabilities.
3. Overlay the fixed survey records (hazards, wrecks, sightings).
4. Scatter procedural thermal vents at random coordinates.  A vent
   replaces any hazard already at that cell, so colliding draws leave
   fewer vents than were drawn.

All randomness comes from the ``Generator`` passed in, so a seeded
generator reproduces the same world.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from abyss.world.cell import Biome, Coral, Hazard, Lifeform, PointOfInterest, Resource
from abyss.world.grid import Grid

if TYPE_CHECKING:
    from numpy.random import Generator

GRID_SIZE = 50

DEEP_SEA_DEPTH = (4000.0, 6000.0)
DEEP_SEA_PRESSURE = (400.0, 600.0)
REEF_DEPTH = (10.0, 100.0)
REEF_PRESSURE = (1.0, 10.0)

MOCK_HAZARDS: tuple[tuple[int, int, Hazard], ...] = (
    (26, 11, Hazard("thermal_vent", "Active Chimney")),
    (42, 44, Hazard("acidic_zone", "Low pH Mass")),
    (0, 4, Hazard("trench_wall", "Steep Escarpment")),
    (42, 34, Hazard("methane_leak", "Bubbling Seep")),
    (12, 46, Hazard("methane_leak", "Bubbling Seep")),
)

MOCK_POIS: tuple[tuple[int, int, PointOfInterest], ...] = (
    (2, 0, PointOfInterest("WRECK_001", "Sunken Freighter", "20th Century hull.")),
    (0, 0, PointOfInterest("WRECK_002", "Sunken Freighter", "Cargo hold breach.")),
    (32, 0, PointOfInterest("REEF_032", "Reef Sanctuary", "High biodiversity.")),
    (5, 7, PointOfInterest("WRECK_005", "Sunken Freighter", "Deep resting state.")),
)

MOCK_LIFE: tuple[tuple[int, int, Lifeform], ...] = (
    (22, 45, Lifeform("Abyssal_Ray", threat=2)),
    (44, 38, Lifeform("Abyssal_Ray", threat=2)),
    (47, 31, Lifeform("Abyssal_Plant", threat=0)),
    (25, 29, Lifeform("Giant_Isopod", threat=1)),
)

VENT = Hazard("thermal_vent", "Unknown Thermal Spike")
NODULE = "Manganese_Nodule"


def seabed(
    rng: Generator,
    rows: int = GRID_SIZE,
    cols: int = GRID_SIZE,
    *,
    depth_range: tuple[float, float] = DEEP_SEA_DEPTH,
    pressure_range: tuple[float, float] = DEEP_SEA_PRESSURE,
) -> Grid:
    """Return a plain grid with uniformly drawn depth and pressure.

    Args:
        rng: Random generator.
        rows: Grid rows.
        cols: Grid columns.
        depth_range: (min, max) depth in metres.
        pressure_range: (min, max) pressure in atmospheres.
    """
    depth = rng.uniform(*depth_range, size=(rows, cols))
    pressure = rng.uniform(*pressure_range, size=(rows, cols))
    grid = Grid(rows=rows, cols=cols)
    for cell in grid:
        cell.depth = float(depth[cell.row, cell.col])
        cell.pressure = float(pressure[cell.row, cell.col])
    return grid


def overlay_survey(grid: Grid, *, include_life: bool = True) -> None:
    """Place the fixed mock hazards, POIs and (optionally) lifeforms."""
    for r, c, hazard in MOCK_HAZARDS:
        if grid.in_bounds(r, c):
            grid.cells[r][c].hazard = hazard
    for r, c, poi in MOCK_POIS:
        if grid.in_bounds(r, c):
            grid.cells[r][c].poi = poi
    if include_life:
        for r, c, life in MOCK_LIFE:
            if grid.in_bounds(r, c):
                grid.cells[r][c].life = life


def scatter_vents(grid: Grid, rng: Generator, count: int) -> list[tuple[int, int]]:
    """Drop ``count`` thermal vents at random cells.

    Returns:
        The drawn ``(row, col)`` pairs, duplicates included.
    """
    rows = rng.integers(0, grid.rows, size=count)
    cols = rng.integers(0, grid.cols, size=count)
    draws = [(int(r), int(c)) for r, c in zip(rows, cols)]
    for r, c in draws:
        grid.cells[r][c].hazard = VENT
    return draws


def generate_deep_sea(
    rng: Generator,
    size: int = GRID_SIZE,
    *,
    vent_count: int = 40,
    slope_chance: float = 0.10,
    resource_chance: float = 0.05,
    resource_value: tuple[int, int] = (20000, 50000),
) -> Grid:
    """Build the deep-sea fallback world.

    Args:
        rng: Random generator.
        size: Rows and columns of the square grid.
        vent_count: Procedural thermal vents to scatter.
        slope_chance: Probability that a cell is slope biome.
        resource_chance: Probability that a cell holds a nodule.
        resource_value: Inclusive (min, max) nodule value.

    Returns:
        A populated grid.
    """
    grid = seabed(
        rng,
        size,
        size,
        depth_range=DEEP_SEA_DEPTH,
        pressure_range=DEEP_SEA_PRESSURE,
    )
    lo, hi = resource_value
    for cell in grid:
        if rng.random() < slope_chance:
            cell.biome = Biome.SLOPE
        if rng.random() < resource_chance:
            cell.place(Resource(NODULE, int(rng.integers(lo, hi + 1))))
    overlay_survey(grid, include_life=True)
    scatter_vents(grid, rng, vent_count)
    return grid


def random_coral(rng: Generator) -> Coral:
    """Draw a coral colony; bleaching risk mirrors health."""
    health = float(rng.random())
    return Coral(
        cover=float(rng.integers(50, 101)),
        health=health,
        bleaching=1.0 - health,
        biodiversity=float(rng.random()),
    )


def generate_coral_reef(
    rng: Generator,
    size: int = GRID_SIZE,
    *,
    vent_count: int = 20,
    coral_chance: float = 0.15,
) -> Grid:
    """Build the shallow coral-reef fallback world.

    Args:
        rng: Random generator.
        size: Rows and columns of the square grid.
        vent_count: Procedural thermal vents to scatter.
        coral_chance: Probability that a cell holds a coral colony.

    Returns:
        A populated grid.
    """
    grid = seabed(
        rng,
        size,
        size,
        depth_range=REEF_DEPTH,
        pressure_range=REEF_PRESSURE,
    )
    for cell in grid:
        if rng.random() < coral_chance:
            cell.place(random_coral(rng))
    overlay_survey(grid, include_life=False)
    scatter_vents(grid, rng, vent_count)
    return grid
