"""Smoke tests for the Pygame front end, run against the dummy video driver."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from numpy.random import Generator

from abyss.game.config import GameConfig
from abyss.game.session import GameSession
from abyss.ui.pygame_client import PygameRenderer
from abyss.world.grid import Grid


def test_pygame_renderer_importable() -> None:
    """PygameRenderer class is importable without initialising pygame."""
    assert PygameRenderer is not None


def test_main_modules_importable() -> None:
    """Both entry points expose main()."""
    from abyss.__main__ import main
    from abyss.server.__main__ import main as server_main

    assert callable(main)
    assert callable(server_main)


@pytest.fixture
def headless(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    import pygame

    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    yield
    pygame.quit()


@pytest.fixture
def renderer(headless: None, small_grid: Grid, rng: Generator) -> PygameRenderer:
    config = GameConfig(viewport=(320, 240), icon_paths={"poi": "/missing/poi.png"})
    session = GameSession(config=config, grid=small_grid, rng=rng)
    return PygameRenderer(session=session, fps=30)


class TestRenderer:
    """Draws frames into an off-screen display."""

    def test_draw_without_pointer(self, renderer: PygameRenderer) -> None:
        renderer.draw_frame()
        assert renderer.screen.get_size() == (320, 240)

    def test_draw_over_hazard(self, renderer: PygameRenderer) -> None:
        renderer.session.pointer_move(60, 60)
        assert renderer.session.tracker.panic
        renderer.draw_frame()

    def test_draw_end_card(self, renderer: PygameRenderer) -> None:
        renderer.session.state.hazard_threshold = 1
        renderer.session.pointer_move(60, 60)
        renderer.draw_frame()
        renderer.draw_frame()
        assert renderer.session.paused

    def test_draw_large_hull(self, renderer: PygameRenderer) -> None:
        renderer.session.state.hull_max = 200
        renderer.session.state.run.hazard_hits = 3
        renderer.draw_frame()

    def test_broken_icon_is_skipped(self, renderer: PygameRenderer) -> None:
        assert "poi" in renderer._broken_icons
        renderer.session.pointer_move(100, 100)
        renderer.draw_frame()

    def test_resize(self, renderer: PygameRenderer) -> None:
        renderer._resize(400, 300)
        renderer.draw_frame()
        assert renderer.session.camera.viewport == (400, 300)


def test_shipped_config_exists() -> None:
    config = Path(__file__).resolve().parent.parent / "config" / "default.yaml"
    assert config.is_file()
