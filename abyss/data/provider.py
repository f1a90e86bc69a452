"""GridProvider — fetch the world from the data service or build one.

The provider makes one attempt against the data service with a bounded
timeout.  Any failure (timeout, connection error, non-2xx status, bad
JSON, malformed payload) switches to the procedural fallback world and
marks the connection OFFLINE.  Nothing is retried.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

import numpy as np
import requests

from abyss.errors import GridFormatError
from abyss.game.config import GameConfig, Variant
from abyss.world import generation
from abyss.world.codec import apply_records, grid_from_payload

if TYPE_CHECKING:
    from numpy.random import Generator

    from abyss.world.grid import Grid

logger = logging.getLogger(__name__)

_FETCH_ERRORS = (requests.RequestException, ValueError, GridFormatError)


class ConnectionMode(Enum):
    """Connectivity badge shown in the HUD."""

    CONNECTING = "CONNECTING"
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"


class GridProvider:
    """Supplies the grid for a run.

    Attributes:
        config: Game configuration (variant, URL, timeout, grid size).
        session: HTTP session used for requests.
        rng: Random generator for fallback worlds and online filler data.
        connection: Result of the last :meth:`load`.
    """

    def __init__(
        self,
        config: GameConfig,
        *,
        session: requests.Session | None = None,
        rng: Generator | None = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.connection = ConnectionMode.CONNECTING

    def load(self) -> Grid:
        """Return the grid, falling back to a generated one on failure."""
        self.connection = ConnectionMode.CONNECTING
        try:
            grid = self._fetch()
        except _FETCH_ERRORS as exc:
            logger.warning("Backend unreachable, using simulation mode: %s", exc)
            grid = self.generate()
            self.connection = ConnectionMode.OFFLINE
        else:
            self.connection = ConnectionMode.ONLINE
        logger.info(
            "Loaded %dx%d grid (%s)",
            grid.rows,
            grid.cols,
            self.connection.value,
        )
        return grid

    def generate(self) -> Grid:
        """Build the procedural world for the configured variant."""
        if self.config.variant is Variant.CORAL_REEF:
            return generation.generate_coral_reef(
                self.rng,
                self.config.grid_size,
                vent_count=self.config.vent_count,
            )
        return generation.generate_deep_sea(
            self.rng,
            self.config.grid_size,
            vent_count=self.config.vent_count,
        )

    def health(self) -> dict[str, Any] | None:
        """Query ``/api/health``; return its payload or None if unreachable."""
        try:
            payload = self._get_json("/api/health")
        except (requests.RequestException, ValueError) as exc:
            logger.debug("Health check failed: %s", exc)
            return None
        return payload if isinstance(payload, dict) else None

    def _fetch(self) -> Grid:
        if self.config.variant is Variant.CORAL_REEF:
            return self._fetch_records()
        return grid_from_payload(self._get_json("/api/gamestate"))

    def _fetch_records(self) -> Grid:
        """Assemble a reef grid from the flat coral/hazard/POI endpoints."""
        datasets = {
            "corals": self._get_json("/api/corals"),
            "hazards": self._get_json("/api/hazards"),
            "poi": self._get_json("/api/poi"),
        }
        for name, records in datasets.items():
            if not isinstance(records, list):
                msg = f"/api/{name} did not return a list"
                raise GridFormatError(msg)
        size = self.config.grid_size
        grid = generation.seabed(
            self.rng,
            size,
            size,
            depth_range=generation.REEF_DEPTH,
            pressure_range=generation.REEF_PRESSURE,
        )
        for name, records in datasets.items():
            apply_records(grid, name, (r for r in records if isinstance(r, dict)))
        return grid

    def _get_json(self, path: str) -> Any:
        url = f"{self.config.api_base_url.rstrip('/')}{path}"
        response = self.session.get(url, timeout=self.config.fetch_timeout)
        response.raise_for_status()
        return response.json()
