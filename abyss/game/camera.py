"""ViewportCamera — pan offset of the grid inside the window.

The offset is the screen position of the grid's top-left corner, so it
is always <= 0 once the grid is wider than the viewport.  Two pan modes
exist: edge autopan (pointer near a screen edge) and drag-pan (primary
button held).  Dragging suppresses autopan.  Every update ends with a
clamp that keeps the grid covering the viewport.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def _axis_bounds(view: float, extent: float) -> tuple[float, float]:
    if extent >= view:
        return float(view - extent), 0.0
    centred = (view - extent) / 2
    return centred, centred


@dataclass
class ViewportCamera:
    """Pan state for the grid view.

    Attributes:
        viewport: Window ``(width, height)`` in pixels.
        extent: Grid ``(width, height)`` in pixels.
        edge_threshold: Distance from an edge that triggers autopan.
        pan_speed: Autopan step per frame in pixels.
        x: Horizontal offset of the grid origin on screen.
        y: Vertical offset of the grid origin on screen.
        dragging: True while the primary button is held.
        last_pointer: Pointer position at the previous drag step.
    """

    viewport: tuple[int, int]
    extent: tuple[int, int]
    edge_threshold: float = 100.0
    pan_speed: float = 5.0
    x: float = 0.0
    y: float = 0.0
    dragging: bool = False
    last_pointer: tuple[float, float] = (0.0, 0.0)

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """Return ``(min_x, max_x, min_y, max_y)`` for the offset.

        When the grid is smaller than the viewport along an axis, that
        axis is pinned to the centred position.
        """
        min_x, max_x = _axis_bounds(self.viewport[0], self.extent[0])
        min_y, max_y = _axis_bounds(self.viewport[1], self.extent[1])
        return min_x, max_x, min_y, max_y

    def clamp(self) -> None:
        min_x, max_x, min_y, max_y = self.bounds
        self.x = max(min_x, min(max_x, self.x))
        self.y = max(min_y, min(max_y, self.y))

    def centre(self) -> None:
        """Centre the grid in the viewport without clamping."""
        self.x = (self.viewport[0] - self.extent[0]) / 2
        self.y = (self.viewport[1] - self.extent[1]) / 2

    def resize(self, width: int, height: int) -> None:
        self.viewport = (width, height)
        self.clamp()

    def begin_drag(self, px: float, py: float) -> None:
        self.dragging = True
        self.last_pointer = (px, py)

    def end_drag(self) -> None:
        self.dragging = False

    def drag_to(self, px: float, py: float) -> bool:
        """Move the offset by the pointer's delta since the last step.

        Returns:
            True if a drag was in progress.
        """
        if not self.dragging:
            return False
        lx, ly = self.last_pointer
        self.x += px - lx
        self.y += py - ly
        self.clamp()
        self.last_pointer = (px, py)
        return True

    def autopan(self, px: float, py: float) -> bool:
        """Shift toward whichever screen edge the pointer is close to.

        A pointer near the right edge moves the grid left (revealing
        more of its right side) and so on.  Does nothing while dragging.

        Returns:
            True if the offset changed.
        """
        if self.dragging:
            return False
        vw, vh = self.viewport
        before = (self.x, self.y)
        if px > vw - self.edge_threshold:
            self.x -= self.pan_speed
        elif px < self.edge_threshold:
            self.x += self.pan_speed
        if py > vh - self.edge_threshold:
            self.y -= self.pan_speed
        elif py < self.edge_threshold:
            self.y += self.pan_speed
        self.clamp()
        return (self.x, self.y) != before

    def screen_to_cell(self, sx: float, sy: float, cell_size: int) -> tuple[int, int]:
        """Return the ``(row, col)`` under a screen point (may be off-grid)."""
        col = math.floor((sx - self.x) / cell_size)
        row = math.floor((sy - self.y) / cell_size)
        return row, col
