"""Entry point for ``python -m abyss``.

Loads the YAML config, fetches (or generates) the seabed grid, and
opens a Pygame window to explore it.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from abyss.data.provider import GridProvider
from abyss.game.config import GameConfig, Variant
from abyss.game.session import GameSession
from abyss.ui.pygame_client import PygameRenderer

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="abyss",
        description="Project Abyss - explore the ocean floor by flashlight",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--variant",
        choices=[v.value for v in Variant],
        help="Game revision to play (overrides the config file)",
    )
    parser.add_argument(
        "--api",
        help="Base URL of the data service (overrides the config file)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the offline world and render effects",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=60,
        help="Target frames per second (default: 60)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser


def load_config(args: argparse.Namespace) -> GameConfig:
    """Read the config file (if present) and apply CLI overrides."""
    overrides: dict[str, object] = {}
    if args.variant is not None:
        overrides["variant"] = args.variant
    if args.api is not None:
        overrides["api_base_url"] = args.api
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.config.exists():
        return GameConfig.from_yaml(args.config, **overrides)
    logger.info("No config file at %s, using defaults", args.config)
    return GameConfig.from_dict(overrides)


def main() -> None:
    """Parse CLI args, load the grid, launch the renderer."""
    args = build_parser().parse_args()
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args)
    session = GameSession.start(config, GridProvider(config))
    renderer = PygameRenderer(session=session, fps=args.fps)
    renderer.run()


if __name__ == "__main__":
    main()
