"""Cell — a single tile of the ocean-floor grid.

Each cell holds environmental readings (depth, pressure, biome) and at
most one entity of each kind.  Hazards, points of interest and lifeforms
are read-only once loaded.  The collectible (a mineral resource or a
coral sample) is a tagged value that flips from available to collected
exactly once per run; hazard contact is tracked by the run state, not
the cell.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Biome(Enum):
    """Seabed type, used for the cell's background colour."""

    PLAIN = "plain"
    SLOPE = "slope"
    CORAL = "coral"

    @classmethod
    def parse(cls, value: object) -> Biome:
        """Return the biome named by ``value``, or PLAIN if unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.PLAIN


@dataclass(frozen=True)
class Hazard:
    """A dangerous seabed feature.

    Attributes:
        type: Machine name such as ``thermal_vent``.
        label: Human-readable description (``notes`` in the CSV source).
        severity: Optional severity rating.
    """

    type: str
    label: str = ""
    severity: int | None = None


@dataclass(frozen=True)
class PointOfInterest:
    """A discoverable, non-consumable landmark."""

    id: str
    label: str
    description: str = ""
    category: str | None = None
    research_value: int | None = None


@dataclass(frozen=True)
class Lifeform:
    """A creature sighting."""

    species: str
    threat: int = 0


@dataclass(frozen=True)
class Resource:
    """A mineral deposit worth collecting."""

    type: str
    value: int


@dataclass(frozen=True)
class Coral:
    """A coral colony that can be sampled.

    All values except ``cover`` are fractions in 0.0-1.0.
    """

    cover: float
    health: float
    bleaching: float
    biodiversity: float


Item = Union[Resource, Coral]


class CollectState(Enum):
    """Whether a collectible is still on the seabed."""

    AVAILABLE = "available"
    COLLECTED = "collected"


@dataclass
class Collectible:
    """A collectible item together with its collection state."""

    item: Item
    state: CollectState = CollectState.AVAILABLE

    @property
    def available(self) -> bool:
        """Return True if the item has not been collected this run."""
        return self.state is CollectState.AVAILABLE


@dataclass
class Cell:
    """A single tile of the grid.

    Attributes:
        row: Row index.
        col: Column index.
        depth: Depth in metres.
        pressure: Pressure in atmospheres.
        biome: Seabed type.
        hazard: Hazard present at this cell, if any.
        poi: Point of interest at this cell, if any.
        life: Lifeform sighted at this cell, if any.
        collectible: Resource or coral sample and its state, if any.
    """

    row: int
    col: int
    depth: float = 0.0
    pressure: float = 0.0
    biome: Biome = Biome.PLAIN
    hazard: Hazard | None = None
    poi: PointOfInterest | None = None
    life: Lifeform | None = None
    collectible: Collectible | None = None

    @property
    def key(self) -> str:
        """Return the ``"row,col"`` key used by the run's visited set."""
        return f"{self.row},{self.col}"

    @property
    def item(self) -> Item | None:
        """Return the collectible item if it is still available."""
        if self.collectible is None or not self.collectible.available:
            return None
        return self.collectible.item

    @property
    def resource(self) -> Resource | None:
        item = self.item
        return item if isinstance(item, Resource) else None

    @property
    def coral(self) -> Coral | None:
        item = self.item
        return item if isinstance(item, Coral) else None

    def place(self, item: Item) -> None:
        """Put an available collectible on this cell.

        Placing a coral turns the cell into coral biome.
        """
        self.collectible = Collectible(item=item)
        if isinstance(item, Coral):
            self.biome = Biome.CORAL

    def collect(self) -> Item | None:
        """Take the collectible, if it is still available.

        Returns:
            The collected item, or None when there is nothing to take.
            Collecting a coral resets the cell to plain biome.
        """
        if self.collectible is None or not self.collectible.available:
            return None
        self.collectible.state = CollectState.COLLECTED
        if isinstance(self.collectible.item, Coral):
            self.biome = Biome.PLAIN
        return self.collectible.item

    def restore(self) -> bool:
        """Return a collected item to the seabed.

        Returns:
            True if something was restored.
        """
        if self.collectible is None or self.collectible.available:
            return False
        self.collectible.state = CollectState.AVAILABLE
        if isinstance(self.collectible.item, Coral):
            self.biome = Biome.CORAL
        return True
