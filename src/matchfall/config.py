"""Runtime configuration for a matchfall world."""
from __future__ import annotations

from dataclasses import dataclass, replace as _replace

from matchfall.constants import (
    BOARD_PADDING,
    CELL_SIZE,
    FALL_GRAVITY,
    GRID_COLS,
    GRID_ROWS,
    MAX_INIT_ATTEMPTS,
    REFERENCE_FPS,
    SCORE_PER_TILE,
    SHRINK_STEP,
    SMOOTHING_FACTOR,
    SNAP_DISTANCE,
    SYMBOL_COUNT,
)


@dataclass(frozen=True, slots=True)
class GameConfig:
    """Board dimensions, scoring and animation tuning.

    Every field defaults from ``matchfall.constants``. Values are validated on creation so a
    bad configuration fails before any world is built.
    """

    rows: int = GRID_ROWS
    cols: int = GRID_COLS
    symbol_count: int = SYMBOL_COUNT
    score_per_tile: int = SCORE_PER_TILE
    cell_size: float = CELL_SIZE
    padding: float = BOARD_PADDING
    smoothing_factor: float = SMOOTHING_FACTOR
    snap_distance: float = SNAP_DISTANCE
    fall_gravity: float = FALL_GRAVITY
    shrink_step: float = SHRINK_STEP
    reference_fps: float = REFERENCE_FPS
    max_init_attempts: int = MAX_INIT_ATTEMPTS

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Board must have at least one cell, got {self.rows}x{self.cols}")
        if self.symbol_count < 1:
            raise ValueError("symbol_count must be at least 1")
        # Fewer than three symbols leaves almost no match-free deal once a run of three fits.
        if self.symbol_count < 3 and max(self.rows, self.cols) >= 3:
            raise ValueError(
                f"symbol_count must be at least 3 on a {self.rows}x{self.cols} board, got {self.symbol_count}"
            )
        if self.score_per_tile < 0:
            raise ValueError("score_per_tile must not be negative")
        if self.cell_size <= 0:
            raise ValueError("cell_size must be positive")
        if not 0.0 < self.smoothing_factor <= 1.0:
            raise ValueError("smoothing_factor must be in (0, 1]")
        if self.snap_distance <= 0:
            raise ValueError("snap_distance must be positive")
        if self.fall_gravity <= 0 or self.shrink_step <= 0:
            raise ValueError("fall_gravity and shrink_step must be positive")
        if self.reference_fps <= 0:
            raise ValueError("reference_fps must be positive")
        if self.max_init_attempts < 1:
            raise ValueError("max_init_attempts must be at least 1")

    def replace(self, **changes) -> "GameConfig":
        return _replace(self, **changes)
