"""InteractionTracker — hit-testing the pointer against the grid.

Every pointer move is converted to a ``(row, col)`` through the camera
offset.  Nothing happens until the pointer enters a different cell; at
that point the tracker refreshes the readouts, handles hazard contact
and collection, and rebuilds the scan projection.  Counting is
idempotent per cell: the run state remembers visited hazards and a cell
gives up its collectible only once.

Each call returns the events it produced so the HUD can react without
polling, and the latest projections stay readable as attributes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from abyss.game.state import GameStatus
from abyss.world.cell import Coral, Resource

if TYPE_CHECKING:
    from abyss.game.camera import ViewportCamera
    from abyss.game.state import GameStateMachine
    from abyss.world.cell import Cell, Hazard, Item, Lifeform, PointOfInterest
    from abyss.world.grid import Grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusReadout:
    """Formatted depth, pressure and coordinate readouts."""

    depth: str = "--"
    pressure: str = "--"
    coords: str = "--"


@dataclass(frozen=True)
class ScanResult:
    """What the scanner reports for the active cell.

    Attributes:
        poi: Point of interest at the cell.
        life: Lifeform at the cell.
        resource: Resource at the cell, or the one just collected.
        coral: Coral at the cell, or the one just sampled.
        collected: True if the item was collected on this visit.
    """

    poi: PointOfInterest | None = None
    life: Lifeform | None = None
    resource: Resource | None = None
    coral: Coral | None = None
    collected: bool = False


@dataclass(frozen=True)
class StatusEvent:
    readout: StatusReadout


@dataclass(frozen=True)
class ScanEvent:
    scan: ScanResult | None


@dataclass(frozen=True)
class WarningEvent:
    panic: bool
    message: str = ""


@dataclass(frozen=True)
class ScoreEvent:
    hazard_hits: int
    collected: int
    hull: int | None = None


@dataclass(frozen=True)
class TransitionEvent:
    status: GameStatus


@dataclass(frozen=True)
class ClearedEvent:
    """The pointer left the grid and the transient UI was cleared."""


Event = Union[
    StatusEvent,
    ScanEvent,
    WarningEvent,
    ScoreEvent,
    TransitionEvent,
    ClearedEvent,
]


def warning_text(hazard: Hazard) -> str:
    """Return the banner text for a hazard (``thermal_vent`` -> ``thermal vent``)."""
    if not hazard.type:
        return "DANGER"
    return hazard.type.replace("_", " ", 1)


class InteractionTracker:
    """Maps pointer positions to cells and applies contact rules.

    Attributes:
        grid: The grid being explored (collectibles are mutated in place).
        camera: Supplies the screen-to-grid offset.
        state: Run counters and win/lose rules.
        cell_size: Pixel size of one cell.
        shake_level: Shake strength to set while over a hazard.
        active_cell: Cell under the pointer, or None.
        status: Latest readouts.
        scan: Latest scan projection, or None.
        panic: True while over a hazard during play.
        warning: Banner text for the current hazard.
        shake_strength: Current shake strength (0 when calm).
    """

    def __init__(
        self,
        grid: Grid,
        camera: ViewportCamera,
        state: GameStateMachine,
        *,
        cell_size: int = 40,
        shake_level: float = 5.0,
    ) -> None:
        self.grid = grid
        self.camera = camera
        self.state = state
        self.cell_size = cell_size
        self.shake_level = shake_level
        self.active_cell: Cell | None = None
        self.status = StatusReadout()
        self.scan: ScanResult | None = None
        self.panic = False
        self.warning = ""
        self.shake_strength = 0.0

    def on_pointer_move(self, sx: float, sy: float) -> list[Event]:
        """Process a pointer position in screen coordinates.

        Args:
            sx: Pointer x relative to the viewport.
            sy: Pointer y relative to the viewport.

        Returns:
            Events produced by this move (empty when nothing changed).
        """
        if not self.state.is_playing:
            return []
        row, col = self.camera.screen_to_cell(sx, sy, self.cell_size)
        cell = self.grid.get(row, col)
        if cell is None:
            return self._leave_grid()
        if cell is self.active_cell:
            return []
        return self._enter(cell)

    def reset(self) -> None:
        """Start a new run and clear every projection."""
        self.state.reset(self.grid)
        self.active_cell = None
        self.status = StatusReadout()
        self.scan = None
        self.warning = ""
        self._calm()

    def _leave_grid(self) -> list[Event]:
        if self.active_cell is None:
            return []
        self.active_cell = None
        self.scan = None
        self._calm()
        self.status = StatusReadout(
            depth=self.status.depth,
            pressure=self.status.pressure,
        )
        return [ClearedEvent()]

    def _enter(self, cell: Cell) -> list[Event]:
        self.active_cell = cell
        self.status = StatusReadout(
            depth=f"{math.floor(cell.depth)}m",
            pressure=f"{math.floor(cell.pressure)}atm",
            coords=f"{cell.row}, {cell.col}",
        )
        events: list[Event] = [StatusEvent(self.status)]

        if cell.hazard is not None:
            events.extend(self._touch_hazard(cell, cell.hazard))
            if self.state.status is GameStatus.DEAD:
                return events
        elif self.panic:
            self._calm()
            events.append(WarningEvent(panic=False))

        taken: Item | None = None
        if cell.item is not None:
            taken = cell.collect()
            events.extend(self._score_collection(cell))

        self.scan = self._scan(cell, taken)
        events.append(ScanEvent(self.scan))
        return events

    def _touch_hazard(self, cell: Cell, hazard: Hazard) -> list[Event]:
        self.panic = True
        self.warning = warning_text(hazard)
        self.shake_strength = self.shake_level
        events: list[Event] = [WarningEvent(panic=True, message=self.warning)]
        if not self.state.record_hazard_contact(cell.key):
            return events
        events.append(self._score())
        if self.state.status is GameStatus.DEAD:
            self._calm()
            events.append(TransitionEvent(GameStatus.DEAD))
        return events

    def _score_collection(self, cell: Cell) -> list[Event]:
        self.state.record_collection()
        logger.debug("Collected item at %s", cell.key)
        events: list[Event] = [self._score()]
        if self.state.status is GameStatus.SUCCESS:
            self._calm()
            events.append(TransitionEvent(GameStatus.SUCCESS))
        return events

    def _score(self) -> ScoreEvent:
        run = self.state.run
        return ScoreEvent(run.hazard_hits, run.collected, self.state.hull)

    def _scan(self, cell: Cell, taken: Item | None) -> ScanResult | None:
        resource = cell.resource or (taken if isinstance(taken, Resource) else None)
        coral = cell.coral or (taken if isinstance(taken, Coral) else None)
        if cell.poi is None and cell.life is None and resource is None and coral is None:
            return None
        return ScanResult(
            poi=cell.poi,
            life=cell.life,
            resource=resource,
            coral=coral,
            collected=taken is not None,
        )

    def _calm(self) -> None:
        self.panic = False
        self.shake_strength = 0.0
