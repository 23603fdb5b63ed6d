"""Direction mapping and bounds policy for grid movement.

Every movement command goes through these helpers; nothing else derives
step vectors or bounds on its own.
"""

from __future__ import annotations

from blockbot.config import DEFAULT_GRID, GridConfig


def normalize_angle(angle: int) -> int:
    """Reduce any degree value to one of 0, 90, 180, 270.

    Negative inputs wrap (``-90 -> 270``). Off-axis values round half-up to
    the nearest quarter turn; anything rounding up to 360 wraps to 0.
    """

    angle = angle % 360
    return int((angle + 45) // 90) * 90 % 360


def movement_delta(angle: int, grid: GridConfig = DEFAULT_GRID) -> tuple[int, int]:
    normalized = normalize_angle(angle)
    step = grid.cell_size
    if normalized == 0:
        return step, 0
    if normalized == 90:
        return 0, step
    if normalized == 180:
        return -step, 0
    if normalized == 270:
        return 0, -step
    return 0, 0


def is_out_of_bounds(x: int, y: int, grid: GridConfig = DEFAULT_GRID) -> bool:
    return x < 0 or x > grid.max_x or y < 0 or y > grid.max_y


def is_cell_aligned(x: int, y: int, grid: GridConfig = DEFAULT_GRID) -> bool:
    return x % grid.cell_size == 0 and y % grid.cell_size == 0
