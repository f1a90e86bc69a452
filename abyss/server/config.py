"""ServerConfig — settings for the data-serving backend."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from abyss.errors import ConfigError


@dataclass
class ServerConfig:
    """Backend configuration.

    Attributes:
        host: Interface to bind.
        port: TCP port to listen on.
        data_dir: Directory holding the CSV source files.
        rows: Grid rows.
        cols: Grid columns.
        seed: Seed for filler depth/pressure; None for fresh entropy.
        cors_origins: Origins allowed by CORS (``"*"`` for any).
    """

    host: str = "127.0.0.1"
    port: int = 3000
    data_dir: Path = Path("data")
    rows: int = 50
    cols: int = 50
    seed: int | None = None
    cors_origins: str | list[str] = "*"

    @classmethod
    def from_yaml(cls, path: str | Path, **overrides: Any) -> ServerConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.
            **overrides: Values that take precedence over the file.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ConfigError: If the file holds unknown keys.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            msg = f"{path}: expected a mapping at top level"
            raise ConfigError(msg)
        return cls().with_overrides({**data, **overrides})

    def with_overrides(self, data: dict[str, Any]) -> ServerConfig:
        """Return a copy with the given keys replaced.

        Raises:
            ConfigError: If a key is not a ServerConfig field.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(data) - known)
        if unknown:
            msg = f"unknown server config keys: {', '.join(unknown)}"
            raise ConfigError(msg)
        if "data_dir" in data:
            data = {**data, "data_dir": Path(data["data_dir"])}
        return replace(self, **data)
