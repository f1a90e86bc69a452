"""Tests for abyss.game.session."""

from __future__ import annotations

import requests

from abyss.data.provider import ConnectionMode, GridProvider
from abyss.game.config import GameConfig
from abyss.game.session import GameSession
from abyss.game.state import GameStatus
from abyss.game.tracker import StatusEvent


class _DownSession:
    def get(self, url: str, timeout: float) -> None:
        raise requests.ConnectionError("refused")


class TestPointer:
    """Tests for routing pointer input."""

    def test_move_hits_tracker(self, session: GameSession) -> None:
        events = session.pointer_move(60, 60)
        assert session.pointer == (60, 60)
        assert any(isinstance(e, StatusEvent) for e in events)
        assert session.tracker.status.coords == "1, 1"

    def test_drag_pans_instead_of_hit_testing(self, session: GameSession) -> None:
        session.pointer_down(100, 100)
        assert session.pointer_move(60, 80) == []
        assert (session.camera.x, session.camera.y) == (-40.0, -20.0)
        assert session.tracker.active_cell is None

    def test_pointer_up_ends_drag(self, session: GameSession) -> None:
        session.pointer_down(100, 100)
        session.pointer_up()
        assert session.pointer_move(20, 20) != []

    def test_no_drag_when_panning_disabled(self, session: GameSession) -> None:
        session.config.camera_pan = False
        session.pointer_down(100, 100)
        assert session.camera.dragging is False


class TestUpdate:
    """Tests for per-frame updates."""

    def test_autopan_follows_pointer(self, session: GameSession) -> None:
        session.pointer_move(195, 80)
        session.update()
        assert session.frame == 1
        assert session.camera.x == -5.0

    def test_no_autopan_without_pointer(self, session: GameSession) -> None:
        session.update()
        assert (session.camera.x, session.camera.y) == (0.0, 0.0)

    def test_paused_after_death(self, session: GameSession) -> None:
        session.state.hazard_threshold = 1
        session.pointer_move(60, 60)
        assert session.state.status is GameStatus.DEAD
        assert session.paused
        session.update()
        assert session.frame == 0
        assert session.pointer_move(140, 140) == []


class TestReset:
    """Tests for session reset."""

    def test_reset_resumes_play(self, session: GameSession) -> None:
        session.state.hazard_threshold = 1
        session.pointer_move(60, 60)
        session.reset()
        assert not session.paused
        assert session.state.run.hazard_hits == 0
        session.pointer_move(60, 60)
        assert session.state.run.hazard_hits == 1

    def test_reset_ends_drag(self, session: GameSession) -> None:
        session.pointer_down(10, 10)
        session.reset()
        assert session.camera.dragging is False


class TestStart:
    """Tests for opening a session through the provider."""

    def test_offline_start(self) -> None:
        config = GameConfig(seed=3, grid_size=20, vent_count=5)
        provider = GridProvider(config, session=_DownSession())
        session = GameSession.start(config, provider)
        assert session.connection is ConnectionMode.OFFLINE
        assert (session.grid.rows, session.grid.cols) == (20, 20)
        assert session.rng is provider.rng

    def test_centred_when_panning_disabled(self) -> None:
        config = GameConfig(seed=3, grid_size=10, camera_pan=False, viewport=(800, 600))
        session = GameSession.start(config, GridProvider(config, session=_DownSession()))
        assert (session.camera.x, session.camera.y) == (200.0, 100.0)

    def test_resize_reclamps(self, session: GameSession) -> None:
        session.camera.x = -120.0
        session.resize(300, 300)
        assert session.camera.x == -20.0
