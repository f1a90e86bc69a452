"""Tests for abyss.data.provider against a fake HTTP session."""

from __future__ import annotations

from typing import Any

import pytest
import requests

from abyss.data.provider import ConnectionMode, GridProvider
from abyss.game.config import GameConfig, Variant
from abyss.game.session import GameSession
from abyss.world.cell import Biome
from abyss.world.codec import grid_to_payload
from abyss.world.grid import Grid


class FakeResponse:
    """Just enough of requests.Response for the provider."""

    def __init__(self, payload: Any = None, status: int = 200, raw: str | None = None) -> None:
        self.payload = payload
        self.status_code = status
        self.raw = raw

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            msg = f"{self.status_code} error"
            raise requests.HTTPError(msg, response=self)

    def json(self) -> Any:
        if self.raw is not None:
            raise ValueError(f"not JSON: {self.raw!r}")
        return self.payload


class FakeSession:
    """Maps URL paths to responses (or exceptions) and records calls."""

    def __init__(self, routes: dict[str, FakeResponse | Exception]) -> None:
        self.routes = routes
        self.calls: list[tuple[str, float]] = []

    def get(self, url: str, timeout: float) -> FakeResponse:
        self.calls.append((url, timeout))
        path = url.split("localhost:3000", 1)[-1]
        result = self.routes.get(path, FakeResponse(status=404))
        if isinstance(result, Exception):
            raise result
        return result


def _config(**kwargs: Any) -> GameConfig:
    return GameConfig(seed=11, grid_size=8, vent_count=3, **kwargs)


class TestDeepSeaOnline:
    """Tests for the gamestate endpoint."""

    def test_loads_backend_grid(self, small_grid: Grid) -> None:
        session = FakeSession({"/api/gamestate": FakeResponse(grid_to_payload(small_grid))})
        provider = GridProvider(_config(), session=session)
        grid = provider.load()
        assert provider.connection is ConnectionMode.ONLINE
        assert grid.cell_at(2, 2).poi is not None
        assert session.calls == [("http://localhost:3000/api/gamestate", 3.0)]

    def test_non_finite_values_load_and_play(self, small_grid: Grid) -> None:
        payload = grid_to_payload(small_grid)
        payload["grid"][0][0]["depth"] = float("inf")
        payload["grid"][3][3]["resource"]["value"] = float("inf")
        session = FakeSession({"/api/gamestate": FakeResponse(payload)})
        provider = GridProvider(_config(), session=session)
        grid = provider.load()
        assert provider.connection is ConnectionMode.ONLINE
        assert grid.cell_at(0, 0).depth == 0.0
        assert grid.cell_at(3, 3).resource is not None
        assert grid.cell_at(3, 3).resource.value == 0

        game = GameSession(config=GameConfig(viewport=(320, 320)), grid=grid)
        game.pointer_move(10, 10)
        assert game.tracker.status.depth == "0m"

    def test_base_url_trailing_slash(self, small_grid: Grid) -> None:
        session = FakeSession({"/api/gamestate": FakeResponse(grid_to_payload(small_grid))})
        GridProvider(_config(api_base_url="http://localhost:3000/"), session=session).load()
        assert session.calls[0][0] == "http://localhost:3000/api/gamestate"


class TestFallback:
    """Any fetch failure falls back to the generated world."""

    @pytest.mark.parametrize(
        "response",
        [
            requests.Timeout("timed out"),
            requests.ConnectionError("refused"),
            FakeResponse(status=500),
            FakeResponse(raw="<html>"),
            FakeResponse({"rows": 50}),
            FakeResponse({"grid": []}),
        ],
    )
    def test_offline_on_failure(
        self,
        response: FakeResponse | Exception,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        provider = GridProvider(_config(), session=FakeSession({"/api/gamestate": response}))
        grid = provider.load()
        assert provider.connection is ConnectionMode.OFFLINE
        assert (grid.rows, grid.cols) == (8, 8)
        assert "simulation mode" in caplog.text

    def test_single_attempt(self) -> None:
        session = FakeSession({"/api/gamestate": requests.Timeout("slow")})
        GridProvider(_config(), session=session).load()
        assert len(session.calls) == 1

    def test_fallback_is_seeded(self) -> None:
        down = {"/api/gamestate": requests.ConnectionError("down")}
        a = GridProvider(_config(), session=FakeSession(down)).load()
        b = GridProvider(_config(), session=FakeSession(down)).load()
        assert grid_to_payload(a) == grid_to_payload(b)

    def test_reef_fallback(self) -> None:
        provider = GridProvider(
            _config(variant=Variant.CORAL_REEF),
            session=FakeSession({}),
        )
        grid = provider.load()
        assert provider.connection is ConnectionMode.OFFLINE
        assert all(c.life is None for c in grid)


class TestCoralOnline:
    """Tests for merging the flat reef endpoints."""

    def _routes(self, corals: Any) -> dict[str, FakeResponse]:
        return {
            "/api/corals": FakeResponse(corals),
            "/api/hazards": FakeResponse(
                [{"row": 1, "col": 1, "type": "thermal_vent", "severity": 4, "notes": "Chimney"}],
            ),
            "/api/poi": FakeResponse(
                [
                    {
                        "row": 2,
                        "col": 0,
                        "id": "WRECK_001",
                        "label": "Sunken Freighter",
                        "description": "20th Century hull.",
                    },
                    {"row": 99, "col": 99, "id": "FAR", "label": "Off grid"},
                ],
            ),
        }

    def test_merges_records(self) -> None:
        corals = [
            {
                "row": 3,
                "col": 4,
                "coral_cover_pct": 80,
                "health_index": 0.75,
                "bleaching_risk": 0.25,
                "biodiversity_index": 0.4,
            },
        ]
        provider = GridProvider(
            _config(variant=Variant.CORAL_REEF),
            session=FakeSession(self._routes(corals)),
        )
        grid = provider.load()
        assert provider.connection is ConnectionMode.ONLINE
        assert grid.cell_at(3, 4).biome is Biome.CORAL
        assert grid.cell_at(3, 4).coral is not None
        assert grid.cell_at(1, 1).hazard is not None
        assert grid.cell_at(1, 1).hazard.label == "Chimney"
        assert grid.cell_at(2, 0).poi is not None
        assert all(10.0 <= c.depth <= 100.0 for c in grid)

    def test_non_list_dataset_falls_back(self) -> None:
        provider = GridProvider(
            _config(variant=Variant.CORAL_REEF),
            session=FakeSession(self._routes({"error": "oops"})),
        )
        provider.load()
        assert provider.connection is ConnectionMode.OFFLINE


class TestHealth:
    """Tests for the health endpoint."""

    def test_health_ok(self) -> None:
        body = {"status": "ok", "timestamp": "2024-01-01T00:00:00+00:00"}
        provider = GridProvider(_config(), session=FakeSession({"/api/health": FakeResponse(body)}))
        assert provider.health() == body

    def test_health_down(self) -> None:
        provider = GridProvider(
            _config(),
            session=FakeSession({"/api/health": requests.ConnectionError("down")}),
        )
        assert provider.health() is None
