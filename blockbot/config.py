from __future__ import annotations

import os
from dataclasses import dataclass, field

CELL_SIZE = 50
GRID_COLS = 16
GRID_ROWS = 4
ICON_SIZE = 32

GRID_WIDTH = GRID_COLS * CELL_SIZE
GRID_HEIGHT = GRID_ROWS * CELL_SIZE

STEP_DELAY_MS = 500
BOUNDS_DELAY_MS = 200


@dataclass(frozen=True, slots=True)
class GridConfig:
    """Coordinate space shared by the interpreter and the renderer."""

    cell_size: int = CELL_SIZE
    cols: int = GRID_COLS
    rows: int = GRID_ROWS
    icon_size: int = ICON_SIZE

    @property
    def width(self) -> int:
        return self.cols * self.cell_size

    @property
    def height(self) -> int:
        return self.rows * self.cell_size

    @property
    def max_x(self) -> int:
        return self.width - self.cell_size

    @property
    def max_y(self) -> int:
        return self.height - self.cell_size


DEFAULT_GRID = GridConfig()


@dataclass(frozen=True, slots=True)
class Settings:
    grid: GridConfig = field(default_factory=GridConfig)
    step_delay_ms: int = STEP_DELAY_MS
    bounds_delay_ms: int = BOUNDS_DELAY_MS


def _env_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer (got {raw!r})") from e
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum} (got {value})")
    return value


def load_settings() -> Settings:
    grid = GridConfig(
        cell_size=_env_int("BLOCKBOT_CELL_SIZE", CELL_SIZE, minimum=1),
        cols=_env_int("BLOCKBOT_GRID_COLS", GRID_COLS, minimum=1),
        rows=_env_int("BLOCKBOT_GRID_ROWS", GRID_ROWS, minimum=1),
        icon_size=_env_int("BLOCKBOT_ICON_SIZE", ICON_SIZE, minimum=1),
    )
    return Settings(
        grid=grid,
        step_delay_ms=_env_int("BLOCKBOT_STEP_DELAY_MS", STEP_DELAY_MS),
        bounds_delay_ms=_env_int("BLOCKBOT_BOUNDS_DELAY_MS", BOUNDS_DELAY_MS),
    )
