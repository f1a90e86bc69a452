"""Grid — the dense 2D container of seabed cells.

The grid's shape is fixed once built.  Cells are reached by
``(row, col)``; the interaction code mutates collectibles in place while
the renderer only reads.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from abyss.errors import GridFormatError
from abyss.world.cell import Cell


@dataclass
class Grid:
    """A rows x cols grid of cells.

    Attributes:
        rows: Number of rows.
        cols: Number of columns.
        cells: 2D list of Cell objects indexed as ``cells[row][col]``.
    """

    rows: int
    cols: int
    cells: list[list[Cell]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Fill the grid with empty plain cells."""
        self.cells = [
            [Cell(row=r, col=c) for c in range(self.cols)] for r in range(self.rows)
        ]

    @classmethod
    def from_cells(cls, cells: list[list[Cell]]) -> Grid:
        """Wrap an existing rectangular cell array.

        Raises:
            GridFormatError: If the array is empty or ragged.
        """
        if not cells or not cells[0]:
            msg = "grid has no cells"
            raise GridFormatError(msg)
        width = len(cells[0])
        if any(len(row) != width for row in cells):
            msg = "grid rows have different lengths"
            raise GridFormatError(msg)
        grid = cls.__new__(cls)
        grid.rows = len(cells)
        grid.cols = width
        grid.cells = cells
        return grid

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell_at(self, row: int, col: int) -> Cell:
        """Return the cell at ``(row, col)``.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        if not self.in_bounds(row, col):
            msg = f"({row}, {col}) out of bounds for {self.rows}x{self.cols}"
            raise IndexError(msg)
        return self.cells[row][col]

    def get(self, row: int, col: int) -> Cell | None:
        """Return the cell at ``(row, col)``, or None outside the grid."""
        if not self.in_bounds(row, col):
            return None
        return self.cells[row][col]

    def __iter__(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    def pixel_size(self, cell_size: int) -> tuple[int, int]:
        """Return the grid's full ``(width, height)`` in pixels."""
        return self.cols * cell_size, self.rows * cell_size

    def hazard_cells(self) -> list[Cell]:
        return [cell for cell in self if cell.hazard is not None]

    def collected_keys(self) -> set[str]:
        """Return the keys of every cell whose collectible was taken."""
        return {
            cell.key
            for cell in self
            if cell.collectible is not None and not cell.collectible.available
        }

    def restore_collectibles(self) -> int:
        """Put every collected item back.

        Returns:
            Number of items restored.
        """
        return sum(1 for cell in self if cell.restore())
