"""Entry point for ``python -m abyss.server``.

Loads the CSV survey data and serves it over HTTP for the game client.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

import numpy as np

from abyss.server.app import create_app
from abyss.server.config import ServerConfig
from abyss.server.world_state import WorldState

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent.parent / "config" / "server.yaml"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="abyss-server",
        description="Project Abyss data service",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/server.yaml)",
    )
    parser.add_argument("--host", help="Interface to bind")
    parser.add_argument("--port", type=int, help="Port to listen on")
    parser.add_argument(
        "--data-dir",
        type=pathlib.Path,
        help="Directory holding the CSV files",
    )
    parser.add_argument("--seed", type=int, help="Seed for filler seabed values")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser


def load_config(args: argparse.Namespace) -> ServerConfig:
    """Read the config file (if present) and apply CLI overrides."""
    overrides = {
        key: value
        for key, value in (
            ("host", args.host),
            ("port", args.port),
            ("data_dir", args.data_dir),
            ("seed", args.seed),
        )
        if value is not None
    }
    if args.config.exists():
        return ServerConfig.from_yaml(args.config, **overrides)
    logger.info("No config file at %s, using defaults", args.config)
    return ServerConfig().with_overrides(overrides)


def main() -> None:
    """Parse CLI args, load the data, run the server."""
    args = build_parser().parse_args()
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args)
    world = WorldState.from_directory(
        config.data_dir,
        rows=config.rows,
        cols=config.cols,
        rng=np.random.default_rng(config.seed),
    )
    app = create_app(world, cors_origins=config.cors_origins)
    logger.info("Serving on http://%s:%d", config.host, config.port)
    app.run(host=config.host, port=config.port)


if __name__ == "__main__":
    main()
