"""Config — load game parameters from YAML files.

Every tunable constant (grid size, thresholds, camera speeds, render
radii) lives here as a typed dataclass.  Two presets reproduce the two
revisions of the game; a YAML file picks a preset with ``variant`` and
overrides individual keys on top of it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from abyss.errors import ConfigError

logger = logging.getLogger(__name__)


class Variant(Enum):
    """Which revision of the game to play."""

    DEEP_SEA = "deep_sea"
    CORAL_REEF = "coral_reef"


@dataclass
class GameConfig:
    """Top-level game configuration.

    Attributes:
        variant: Game revision (collectible kind, data contract, palette).
        seed: RNG seed; None draws fresh entropy every run.
        grid_size: Rows and columns of the square grid.
        cell_size: Pixel size of one cell.
        api_base_url: Root URL of the data service.
        fetch_timeout: Seconds to wait for the data service.
        vent_count: Procedural thermal vents in the fallback world.
        hazard_limit: Distinct hazard contacts that end the run when no
            hull is configured.
        hull_max: Starting hull integrity, or None to count contacts only.
        hazard_damage: Hull lost per distinct hazard contact.
        collection_goal: Collectibles needed to win.
        shake_strength: Shake strength set while over a hazard.
        shake_amplitude: Peak-to-peak jitter in pixels while shaking.
        edge_threshold: Pointer distance from a screen edge that starts
            autopan, in pixels.
        pan_speed: Autopan distance per frame, in pixels.
        camera_pan: If False the grid is centred and never pans.
        view_radius: Cells drawn on each side of the pointer's cell, inclusive,
            so at most a (2r+1) x (2r+1) window (13x13 at radius 6).
        flashlight_radius: Outer radius of the reveal mask, in pixels.
        panic_radius: Outer radius of the red panic tint, in pixels.
        show_debug_coords: Draw ``row,col`` labels on cells.
        viewport: Initial window ``(width, height)`` in pixels.
        icon_paths: Optional image per icon kind (``hazard``, ``poi``,
            ``life``, ``resource``, ``coral``, ``cursor``).
    """

    variant: Variant = Variant.DEEP_SEA
    seed: int | None = None
    grid_size: int = 50
    cell_size: int = 40
    api_base_url: str = "http://localhost:3000"
    fetch_timeout: float = 3.0
    vent_count: int = 40

    hazard_limit: int = 5
    hull_max: int | None = None
    hazard_damage: int = 10
    collection_goal: int = 10

    shake_strength: float = 5.0
    shake_amplitude: float = 20.0
    edge_threshold: int = 100
    pan_speed: float = 5.0
    camera_pan: bool = True

    view_radius: int = 6
    flashlight_radius: float = 180.0
    panic_radius: float = 200.0
    show_debug_coords: bool = True
    viewport: tuple[int, int] = (1280, 800)
    icon_paths: dict[str, str] = field(default_factory=dict)

    @property
    def hazard_threshold(self) -> int:
        """Distinct hazard contacts after which the run is lost."""
        if self.hull_max is not None and self.hazard_damage > 0:
            return max(1, math.ceil(self.hull_max / self.hazard_damage))
        return self.hazard_limit

    @classmethod
    def for_variant(cls, variant: Variant | str) -> GameConfig:
        """Return the preset for a game revision.

        Raises:
            ConfigError: If the variant name is unknown.
        """
        try:
            variant = Variant(variant)
        except ValueError:
            msg = f"unknown variant {variant!r}"
            raise ConfigError(msg) from None
        if variant is Variant.CORAL_REEF:
            return cls(
                variant=variant,
                vent_count=20,
                hull_max=100,
                hazard_damage=10,
                collection_goal=30,
                flashlight_radius=200.0,
            )
        return cls(variant=variant)

    @classmethod
    def from_yaml(cls, path: str | Path, **overrides: Any) -> GameConfig:
        """Load configuration from a YAML file.

        Unknown keys are logged and ignored.

        Args:
            path: Path to the YAML config file.
            **overrides: Values that take precedence over the file.

        Returns:
            A populated GameConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ConfigError: If the file is not a mapping or names an
                unknown variant.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            msg = f"{path}: expected a mapping at top level"
            raise ConfigError(msg)
        return cls.from_dict({**data, **overrides})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameConfig:
        """Apply a mapping of overrides on top of the variant preset."""
        base = cls.for_variant(data.get("variant", Variant.DEEP_SEA.value))
        known = {f.name for f in fields(cls)} - {"variant"}
        overrides: dict[str, Any] = {}
        for key, value in data.items():
            if key == "variant":
                continue
            if key not in known:
                logger.warning("Ignoring unknown config key %r", key)
                continue
            overrides[key] = value
        if "viewport" in overrides:
            overrides["viewport"] = tuple(overrides["viewport"])
        return replace(base, **overrides)
