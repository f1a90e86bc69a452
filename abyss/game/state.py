"""GameStateMachine — run scoring and the playing/dead/success states.

``PLAYING`` moves to ``DEAD`` when distinct hazard contacts reach the
threshold and to ``SUCCESS`` when collections reach the goal.  Both are
terminal; only :meth:`GameStateMachine.reset` returns to ``PLAYING``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from abyss.game.config import GameConfig
    from abyss.world.grid import Grid

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    """Lifecycle of a single run."""

    PLAYING = "playing"
    DEAD = "dead"
    SUCCESS = "success"


@dataclass
class RunState:
    """Counters for the current run.

    Attributes:
        hazard_hits: Distinct hazard cells touched.
        collected: Collectibles taken.
        status: Current lifecycle state.
        visited_hazards: ``"row,col"`` keys of hazard cells already counted.
    """

    hazard_hits: int = 0
    collected: int = 0
    status: GameStatus = GameStatus.PLAYING
    visited_hazards: set[str] = field(default_factory=set)


@dataclass
class GameStateMachine:
    """Owns the RunState and applies the win/lose rules.

    Attributes:
        hazard_threshold: Distinct contacts that end the run.
        collection_goal: Collections that win the run.
        hull_max: Starting hull integrity, or None when not tracked.
        hazard_damage: Hull lost per distinct contact.
        run: Mutable counters for the current run.
    """

    hazard_threshold: int = 5
    collection_goal: int = 10
    hull_max: int | None = None
    hazard_damage: int = 10
    run: RunState = field(default_factory=RunState)

    @classmethod
    def from_config(cls, config: GameConfig) -> GameStateMachine:
        return cls(
            hazard_threshold=config.hazard_threshold,
            collection_goal=config.collection_goal,
            hull_max=config.hull_max,
            hazard_damage=config.hazard_damage,
        )

    @property
    def status(self) -> GameStatus:
        return self.run.status

    @property
    def is_playing(self) -> bool:
        return self.run.status is GameStatus.PLAYING

    @property
    def hull(self) -> int | None:
        """Remaining hull integrity, or None when no hull is configured."""
        if self.hull_max is None:
            return None
        return max(0, self.hull_max - self.run.hazard_hits * self.hazard_damage)

    def record_hazard_contact(self, key: str) -> bool:
        """Count a hazard contact unless this cell was already counted.

        Contacts are ignored once the run is over.

        Args:
            key: ``"row,col"`` of the hazard cell.

        Returns:
            True if the contact was new and counted.
        """
        if not self.is_playing or key in self.run.visited_hazards:
            return False
        self.run.visited_hazards.add(key)
        self.run.hazard_hits += 1
        if self.run.hazard_hits >= self.hazard_threshold:
            self.run.status = GameStatus.DEAD
            logger.info("Run lost after %d hazard contacts", self.run.hazard_hits)
        return True

    def record_collection(self) -> int:
        """Count one collected item.

        Returns:
            The collection count after this item.
        """
        if not self.is_playing:
            return self.run.collected
        self.run.collected += 1
        if self.run.collected >= self.collection_goal:
            self.run.status = GameStatus.SUCCESS
            logger.info("Run won with %d items collected", self.run.collected)
        return self.run.collected

    def reset(self, grid: Grid | None = None) -> None:
        """Start a fresh run.

        Zeroes the counters, forgets visited hazards and, when a grid is
        given, puts every collected item back on it.
        """
        self.run = RunState()
        if grid is not None:
            restored = grid.restore_collectibles()
            logger.debug("Reset restored %d collectibles", restored)
