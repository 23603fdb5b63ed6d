from __future__ import annotations

import pytest

from blockbot.config import DEFAULT_GRID, GridConfig
from blockbot.geometry import is_cell_aligned, is_out_of_bounds, movement_delta, normalize_angle


def test_normalize_angle_always_lands_on_a_quarter_turn_and_is_idempotent() -> None:
    for angle in range(-1080, 1081, 5):
        n = normalize_angle(angle)
        assert n in {0, 90, 180, 270}, angle
        assert normalize_angle(n) == n, angle


@pytest.mark.parametrize(
    ("angle", "expected"),
    [
        (0, 0),
        (90, 90),
        (-90, 270),
        (-180, 180),
        (360, 0),
        (450, 90),
        (-450, 270),
        (44, 0),
        (45, 90),
        (315, 0),
        (1000, 270),
    ],
)
def test_normalize_angle_values(angle: int, expected: int) -> None:
    assert normalize_angle(angle) == expected


@pytest.mark.parametrize(
    ("angle", "delta"),
    [
        (0, (50, 0)),
        (90, (0, 50)),
        (180, (-50, 0)),
        (270, (0, -50)),
        (-90, (0, -50)),
        (-270, (0, 50)),
        (720, (50, 0)),
    ],
)
def test_movement_delta_follows_facing(angle: int, delta: tuple[int, int]) -> None:
    assert movement_delta(angle) == delta


def test_movement_delta_scales_with_cell_size() -> None:
    grid = GridConfig(cell_size=20, cols=5, rows=5)
    assert movement_delta(180, grid) == (-20, 0)


def test_grid_dimensions() -> None:
    assert DEFAULT_GRID.width == 800
    assert DEFAULT_GRID.height == 200
    assert DEFAULT_GRID.max_x == 750
    assert DEFAULT_GRID.max_y == 150


@pytest.mark.parametrize(
    ("x", "y", "out"),
    [
        (0, 0, False),
        (750, 150, False),
        (400, 100, False),
        (-50, 0, True),
        (0, -50, True),
        (800, 0, True),
        (0, 200, True),
    ],
)
def test_is_out_of_bounds(x: int, y: int, out: bool) -> None:
    assert is_out_of_bounds(x, y) is out


def test_is_cell_aligned() -> None:
    assert is_cell_aligned(100, 50)
    assert not is_cell_aligned(25, 0)
