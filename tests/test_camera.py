"""Tests for abyss.game.camera."""

from __future__ import annotations

import pytest
from numpy.random import Generator

from abyss.game.camera import ViewportCamera


def _camera() -> ViewportCamera:
    # 2000x2000 grid behind a 1280x800 window
    return ViewportCamera(viewport=(1280, 800), extent=(2000, 2000))


def _in_bounds(camera: ViewportCamera) -> bool:
    min_x, max_x, min_y, max_y = camera.bounds
    return min_x <= camera.x <= max_x and min_y <= camera.y <= max_y


class TestBounds:
    """Tests for offset limits."""

    def test_large_grid(self) -> None:
        assert _camera().bounds == (-720.0, 0.0, -1200.0, 0.0)

    def test_small_grid_is_centred(self) -> None:
        camera = ViewportCamera(viewport=(1000, 800), extent=(400, 2000))
        min_x, max_x, _, _ = camera.bounds
        assert min_x == max_x == 300.0
        camera.clamp()
        assert camera.x == 300.0

    def test_resize_reclamps(self) -> None:
        camera = _camera()
        camera.x, camera.y = -720.0, -1200.0
        camera.resize(1600, 1000)
        assert (camera.x, camera.y) == (-400.0, -1000.0)


class TestAutopan:
    """Tests for edge-triggered panning."""

    def test_right_edge_moves_left(self) -> None:
        camera = _camera()
        assert camera.autopan(1250, 400)
        assert camera.x == -5.0
        assert camera.y == 0.0

    def test_left_edge_at_limit_does_nothing(self) -> None:
        camera = _camera()
        assert camera.autopan(10, 400) is False
        assert camera.x == 0.0

    def test_bottom_right_corner_moves_both(self) -> None:
        camera = _camera()
        camera.autopan(1279, 799)
        assert (camera.x, camera.y) == (-5.0, -5.0)

    def test_centre_does_nothing(self) -> None:
        camera = _camera()
        camera.x = -100.0
        assert camera.autopan(640, 400) is False

    def test_suppressed_while_dragging(self) -> None:
        camera = _camera()
        camera.begin_drag(1250, 400)
        assert camera.autopan(1250, 400) is False
        assert camera.x == 0.0


class TestDrag:
    """Tests for drag-pan."""

    def test_drag_moves_by_delta(self) -> None:
        camera = _camera()
        camera.begin_drag(600, 400)
        assert camera.drag_to(500, 350)
        assert (camera.x, camera.y) == (-100.0, -50.0)
        assert camera.last_pointer == (500, 350)

    def test_drag_is_clamped(self) -> None:
        camera = _camera()
        camera.begin_drag(0, 0)
        camera.drag_to(-5000, 5000)
        assert (camera.x, camera.y) == (-720.0, 0.0)

    def test_drag_without_button(self) -> None:
        camera = _camera()
        assert camera.drag_to(10, 10) is False
        camera.begin_drag(0, 0)
        camera.end_drag()
        assert camera.drag_to(10, 10) is False

    def test_random_sequences_stay_in_bounds(self, rng: Generator) -> None:
        camera = _camera()
        for _ in range(500):
            px = float(rng.uniform(-200, 1500))
            py = float(rng.uniform(-200, 1000))
            action = rng.integers(0, 4)
            if action == 0:
                camera.begin_drag(px, py)
            elif action == 1:
                camera.end_drag()
            elif action == 2:
                camera.drag_to(px, py)
            else:
                camera.autopan(px, py)
            assert _in_bounds(camera)


@pytest.mark.parametrize(
    ("offset", "point", "expected"),
    [
        ((0.0, 0.0), (0, 0), (0, 0)),
        ((0.0, 0.0), (39.9, 79.9), (1, 0)),
        ((-400.0, -80.0), (10, 10), (2, 10)),
        ((0.0, 0.0), (-1, 5), (0, -1)),
    ],
)
def test_screen_to_cell(
    offset: tuple[float, float],
    point: tuple[float, float],
    expected: tuple[int, int],
) -> None:
    camera = _camera()
    camera.x, camera.y = offset
    assert camera.screen_to_cell(*point, cell_size=40) == expected
