"""Per-frame maths for the render loop, free of any display library.

Everything the renderer decides (which cells are visible, what icon a
cell shows, how strong the flashlight is at a given distance, where the
shake jitter lands, what the HUD says) is computed here so it can be
tested without opening a window.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from abyss.game.config import Variant
from abyss.game.state import GameStatus
from abyss.world.cell import Biome

if TYPE_CHECKING:
    from numpy.random import Generator

    from abyss.game.session import GameSession
    from abyss.game.tracker import ScanResult
    from abyss.world.cell import Cell

RGB = tuple[int, int, int]

# Inner radius of every radial gradient, in pixels.
GRADIENT_INNER = 10.0


@dataclass(frozen=True)
class Window:
    """Half-open row/column range of cells to draw."""

    row_min: int
    row_max: int
    col_min: int
    col_max: int

    @property
    def rows(self) -> range:
        return range(self.row_min, self.row_max)

    @property
    def cols(self) -> range:
        return range(self.col_min, self.col_max)

    @property
    def is_empty(self) -> bool:
        return self.row_min >= self.row_max or self.col_min >= self.col_max

    def __len__(self) -> int:
        if self.is_empty:
            return 0
        return (self.row_max - self.row_min) * (self.col_max - self.col_min)


EMPTY_WINDOW = Window(0, 0, 0, 0)


def visible_window(
    pointer: tuple[float, float] | None,
    origin: tuple[float, float],
    cell_size: int,
    rows: int,
    cols: int,
    radius: int,
) -> Window:
    """Return the cells within ``radius`` of the pointer's cell, inclusive.

    Rows and columns ``row - radius`` through ``row + radius`` are kept,
    clamped to the grid, so at most ``(2 * radius + 1) ** 2`` cells are
    drawn (13x13 at radius 6) whatever the grid size.

    Args:
        pointer: Pointer position on screen, or None if unknown.
        origin: Screen position of the grid's top-left corner.
        cell_size: Pixel size of one cell.
        rows: Grid rows.
        cols: Grid columns.
        radius: Cells to include on each side of the pointer's cell.
    """
    if pointer is None:
        return EMPTY_WINDOW
    col = math.floor((pointer[0] - origin[0]) / cell_size)
    row = math.floor((pointer[1] - origin[1]) / cell_size)
    window = Window(
        row_min=max(0, row - radius),
        row_max=min(rows, row + radius + 1),
        col_min=max(0, col - radius),
        col_max=min(cols, col + radius + 1),
    )
    return EMPTY_WINDOW if window.is_empty else window


class IconKind(Enum):
    """Icon drawn on top of a cell."""

    HAZARD = "hazard"
    POI = "poi"
    LIFE = "life"
    RESOURCE = "resource"
    CORAL = "coral"


def icon_for(cell: Cell) -> IconKind | None:
    """Pick the single icon for a cell: hazard > poi > life > collectible."""
    if cell.hazard is not None:
        return IconKind.HAZARD
    if cell.poi is not None:
        return IconKind.POI
    if cell.life is not None:
        return IconKind.LIFE
    if cell.resource is not None:
        return IconKind.RESOURCE
    if cell.coral is not None:
        return IconKind.CORAL
    return None


@dataclass(frozen=True)
class Palette:
    """Colours and flashlight falloff for one game variant.

    Attributes:
        background: Screen clear colour.
        floor: Plain seabed.
        slope: Slope biome.
        hazard: Any hazard cell (overrides biome).
        coral_healthy: Coral with health > 0.9.
        coral_fair: Coral with health > 0.7.
        coral_poor: Any other coral.
        text: HUD text and debug labels.
        flashlight_stops: ``(offset, alpha)`` gradient stops from the
            inner radius (offset 0) to the outer radius (offset 1).
    """

    background: RGB
    floor: RGB
    slope: RGB
    hazard: RGB = (26, 10, 10)
    coral_healthy: RGB = (26, 77, 46)
    coral_fair: RGB = (77, 77, 26)
    coral_poor: RGB = (77, 26, 26)
    text: RGB = (0, 255, 157)
    flashlight_stops: tuple[tuple[float, float], ...] = (
        (0.0, 1.0),
        (0.8, 0.5),
        (1.0, 0.0),
    )


PALETTES: dict[Variant, Palette] = {
    Variant.DEEP_SEA: Palette(
        background=(5, 5, 5),
        floor=(0, 26, 17),
        slope=(0, 38, 26),
    ),
    Variant.CORAL_REEF: Palette(
        background=(10, 22, 40),
        floor=(13, 40, 64),
        slope=(13, 40, 64),
        flashlight_stops=((0.0, 1.0), (0.7, 0.6), (1.0, 0.0)),
    ),
}

PANIC_STOPS: tuple[tuple[float, float], ...] = ((0.0, 0.3), (1.0, 0.0))


def cell_colour(cell: Cell, palette: Palette) -> RGB:
    """Background colour for a cell."""
    if cell.hazard is not None:
        return palette.hazard
    coral = cell.coral
    if cell.biome is Biome.CORAL and coral is not None:
        if coral.health > 0.9:
            return palette.coral_healthy
        if coral.health > 0.7:
            return palette.coral_fair
        return palette.coral_poor
    if cell.biome is Biome.SLOPE:
        return palette.slope
    return palette.floor


def shake_offset(
    rng: Generator,
    strength: float,
    amplitude: float = 20.0,
) -> tuple[float, float]:
    """Random jitter for the draw origin; zero when not shaking."""
    if strength <= 0:
        return 0.0, 0.0
    return (
        (float(rng.random()) - 0.5) * amplitude,
        (float(rng.random()) - 0.5) * amplitude,
    )


def radial_ramp(
    distance: NDArray[np.float64] | float,
    outer: float,
    stops: tuple[tuple[float, float], ...],
    inner: float = GRADIENT_INNER,
) -> NDArray[np.float64]:
    """Evaluate a radial gradient's alpha at the given distances.

    Distances inside ``inner`` take the first stop, those beyond
    ``outer`` the last; in between the stops are interpolated linearly.
    """
    span = max(outer - inner, 1e-9)
    t = np.clip((np.asarray(distance, dtype=np.float64) - inner) / span, 0.0, 1.0)
    offsets = [s[0] for s in stops]
    alphas = [s[1] for s in stops]
    return np.interp(t, offsets, alphas)


def radial_sprite(
    outer: float,
    stops: tuple[tuple[float, float], ...],
) -> NDArray[np.float64]:
    """Return a square ``(2R, 2R)`` alpha map of a radial gradient.

    The array is indexed ``[x, y]`` to match ``pygame.surfarray``; values
    are in 0.0-1.0 and the centre sits at ``(R, R)``.
    """
    size = max(1, math.ceil(outer)) * 2
    centre = size / 2
    xs = np.arange(size, dtype=np.float64)[:, None] + 0.5 - centre
    ys = np.arange(size, dtype=np.float64)[None, :] + 0.5 - centre
    return radial_ramp(np.hypot(xs, ys), outer, stops)


def glitch_line(rng: Generator, height: int) -> tuple[int, float]:
    """Return ``(y, alpha)`` of one random horizontal scanline."""
    return int(rng.random() * height), float(rng.random()) * 0.2


# -- HUD text ------------------------------------------------------------------


def hull_fraction(hull: int, hull_max: int | None) -> float:
    """Remaining hull as a fraction of ``hull_max``, clamped to [0, 1]."""
    if hull_max is None or hull_max <= 0:
        return 0.0
    return min(1.0, max(0.0, hull / hull_max))


def status_lines(session: GameSession) -> list[str]:
    """Lines of the status panel."""
    readout = session.tracker.status
    run = session.state.run
    noun = "SAMPLES" if session.config.variant is Variant.CORAL_REEF else "RESOURCES"
    lines = [
        f"STATUS [{session.connection.value}]",
        f"DEPTH: {readout.depth}",
        f"PRESSURE: {readout.pressure}",
        f"COORDS: {readout.coords}",
        f"{noun}: {run.collected}/{session.state.collection_goal}",
    ]
    hull = session.state.hull
    if hull is None:
        lines.append(f"HAZARDS: {run.hazard_hits}/{session.state.hazard_threshold}")
    else:
        percent = round(hull_fraction(hull, session.state.hull_max) * 100)
        lines.append(f"HULL: {percent}%")
    return lines


def scan_lines(scan: ScanResult | None) -> list[str]:
    """Lines of the scan panel (empty when there is nothing to report)."""
    if scan is None:
        return []
    lines: list[str] = []
    if scan.poi is not None:
        lines += [f"POI: {scan.poi.label}", scan.poi.description]
        if scan.poi.research_value is not None:
            lines.append(f"Research Value: {scan.poi.research_value}")
    if scan.life is not None:
        lines += [f"Bio-sign: {scan.life.species}", f"Threat: {scan.life.threat}"]
    if scan.resource is not None:
        suffix = " (collected)" if scan.collected else ""
        lines += [
            f"Mineral: {scan.resource.type}{suffix}",
            f"Value: ${scan.resource.value}",
        ]
    if scan.coral is not None:
        lines += [
            "Coral Sample Collected!" if scan.collected else "Coral colony",
            f"Coverage: {scan.coral.cover:.0f}%",
            f"Health: {scan.coral.health * 100:.1f}%",
            f"Bleaching Risk: {scan.coral.bleaching * 100:.1f}%",
            f"Biodiversity: {scan.coral.biodiversity * 100:.1f}%",
        ]
    return lines


def end_card_lines(session: GameSession) -> list[str]:
    """Lines of the end-of-run card; empty while still playing."""
    status = session.state.status
    if status is GameStatus.PLAYING:
        return []
    run = session.state.run
    dead = status is GameStatus.DEAD
    lines = ["MISSION FAILED" if dead else "RESEARCH COMPLETE", ""]
    hull = session.state.hull
    if hull is not None:
        percent = round(hull_fraction(hull, session.state.hull_max) * 100)
        lines.append(f"Final hull integrity: {percent}%")
    else:
        lines.append(f"Hazard contacts: {run.hazard_hits}")
    lines.append(f"Items collected: {run.collected}")
    if not dead:
        lines.append("Excellent work! Your samples are on their way to the lab.")
    lines += ["", "R: retry mission" if dead else "R: explore again"]
    return lines
