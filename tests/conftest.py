"""Shared fixtures for the Project Abyss test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from abyss.game.camera import ViewportCamera
from abyss.game.config import GameConfig, Variant
from abyss.game.session import GameSession
from abyss.game.state import GameStateMachine
from abyss.game.tracker import InteractionTracker
from abyss.world.cell import Coral, Hazard, Lifeform, PointOfInterest, Resource
from abyss.world.grid import Grid

CELL = 40


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def small_grid() -> Grid:
    """An 8x8 grid with one of each entity kind.

    Layout (row, col):
        (1, 1) thermal vent, (1, 2) acidic zone,
        (2, 2) wreck POI, (2, 3) lifeform,
        (3, 3) nodule, (4, 4) coral colony.
    """
    grid = Grid(rows=8, cols=8)
    for cell in grid:
        cell.depth = 4500.7
        cell.pressure = 450.2
    grid.cells[1][1].hazard = Hazard("thermal_vent", "Active Chimney")
    grid.cells[1][2].hazard = Hazard("acidic_zone", "Low pH Mass")
    grid.cells[2][2].poi = PointOfInterest("WRECK_005", "Sunken Freighter", "Deep resting state.")
    grid.cells[2][3].life = Lifeform("Giant_Isopod", threat=1)
    grid.cells[3][3].place(Resource("Manganese_Nodule", 30000))
    grid.cells[4][4].place(Coral(cover=80.0, health=0.95, bleaching=0.05, biodiversity=0.6))
    return grid


@pytest.fixture
def default_config() -> GameConfig:
    """Default deep-sea config (no YAML file needed)."""
    return GameConfig()


@pytest.fixture
def reef_config() -> GameConfig:
    return GameConfig.for_variant(Variant.CORAL_REEF)


@pytest.fixture
def camera(small_grid: Grid) -> ViewportCamera:
    """A camera whose viewport exactly fits the small grid at the origin."""
    return ViewportCamera(viewport=(8 * CELL, 8 * CELL), extent=(8 * CELL, 8 * CELL))


@pytest.fixture
def tracker(small_grid: Grid, camera: ViewportCamera) -> InteractionTracker:
    state = GameStateMachine(hazard_threshold=5, collection_goal=10)
    return InteractionTracker(small_grid, camera, state, cell_size=CELL)


@pytest.fixture
def session(small_grid: Grid, rng: Generator) -> GameSession:
    """A session on the small grid with a viewport smaller than the grid."""
    config = GameConfig(viewport=(200, 160), cell_size=CELL)
    return GameSession(config=config, grid=small_grid, rng=rng)

