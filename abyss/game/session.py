"""GameSession — owns the state of one play session.

The session wires the grid, camera, interaction tracker and state
machine together and exposes the input operations a front end needs:

1. Pointer events (down/up/move) from the windowing layer.
2. ``update()`` once per displayed frame (autopan, frame counter).
3. ``reset()`` to start a new run on the same grid.

Pointer events and frame updates run on the same thread, one after the
other, so the grid is never read and written at the same time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.random import Generator

from abyss.data.provider import ConnectionMode, GridProvider
from abyss.game.camera import ViewportCamera
from abyss.game.state import GameStateMachine
from abyss.game.tracker import InteractionTracker

if TYPE_CHECKING:
    from abyss.game.config import GameConfig
    from abyss.game.tracker import Event
    from abyss.world.grid import Grid


@dataclass
class GameSession:
    """All mutable state of a running game.

    Attributes:
        config: Loaded game configuration.
        grid: The seabed grid.
        connection: Whether the grid came from the data service.
        rng: Random generator for render effects.
        camera: Pan offset of the grid.
        state: Run counters and lifecycle.
        tracker: Pointer hit-testing and contact rules.
        pointer: Last pointer position, or None before the first move.
        frame: Frames updated while playing.
    """

    config: GameConfig
    grid: Grid
    connection: ConnectionMode = ConnectionMode.OFFLINE
    rng: Generator | None = None
    camera: ViewportCamera = field(init=False)
    state: GameStateMachine = field(init=False)
    tracker: InteractionTracker = field(init=False)
    pointer: tuple[float, float] | None = field(init=False, default=None)
    frame: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        """Build camera, state machine and tracker from config."""
        if self.rng is None:
            self.rng = np.random.default_rng(self.config.seed)
        self.camera = ViewportCamera(
            viewport=self.config.viewport,
            extent=self.grid.pixel_size(self.config.cell_size),
            edge_threshold=self.config.edge_threshold,
            pan_speed=self.config.pan_speed,
        )
        self._place_camera()
        self.state = GameStateMachine.from_config(self.config)
        self.tracker = InteractionTracker(
            self.grid,
            self.camera,
            self.state,
            cell_size=self.config.cell_size,
            shake_level=self.config.shake_strength,
        )

    @classmethod
    def start(
        cls,
        config: GameConfig,
        provider: GridProvider | None = None,
    ) -> GameSession:
        """Load a grid through the provider and open a session on it."""
        provider = provider or GridProvider(config)
        grid = provider.load()
        return cls(
            config=config,
            grid=grid,
            connection=provider.connection,
            rng=provider.rng,
        )

    @property
    def paused(self) -> bool:
        """True once the run has ended, until reset."""
        return not self.state.is_playing

    def pointer_down(self, x: float, y: float) -> None:
        if self.paused or not self.config.camera_pan:
            return
        self.camera.begin_drag(x, y)

    def pointer_up(self) -> None:
        self.camera.end_drag()

    def pointer_move(self, x: float, y: float) -> list[Event]:
        """Route a pointer move to drag-pan or hit-testing.

        While dragging, the move only pans the camera.
        """
        if self.paused:
            return []
        if self.camera.drag_to(x, y):
            return []
        self.pointer = (x, y)
        return self.tracker.on_pointer_move(x, y)

    def update(self) -> None:
        """Advance one frame: autopan toward the edge under the pointer."""
        if self.paused:
            return
        self.frame += 1
        if self.config.camera_pan and self.pointer is not None:
            self.camera.autopan(*self.pointer)

    def resize(self, width: int, height: int) -> None:
        self.camera.viewport = (width, height)
        self._place_camera()

    def reset(self) -> None:
        """Begin a new run on the same grid."""
        self.camera.end_drag()
        self.tracker.reset()

    def _place_camera(self) -> None:
        if self.config.camera_pan:
            self.camera.clamp()
        else:
            self.camera.centre()
