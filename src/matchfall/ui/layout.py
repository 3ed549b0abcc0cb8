from typing import Optional, Tuple

from matchfall.config import GameConfig


def cell_origin(row: float, col: float, config: GameConfig) -> Tuple[float, float]:
    """Return the layout-space (x, y) of a cell's top-left corner.

    Fractional and negative rows are allowed; spawning tiles start above row 0.
    """
    return (
        config.padding + col * config.cell_size,
        config.padding + row * config.cell_size,
    )


def board_extent(config: GameConfig) -> Tuple[float, float]:
    """Total (width, height) of the board in layout space, padding included."""
    return (
        config.padding * 2 + config.cols * config.cell_size,
        config.padding * 2 + config.rows * config.cell_size,
    )


def cell_at_point(x: float, y: float, config: GameConfig) -> Optional[Tuple[int, int]]:
    """Map a layout-space point to (row, col), or None when outside the grid."""
    local_x = x - config.padding
    local_y = y - config.padding
    if local_x < 0 or local_y < 0:
        return None
    col = int(local_x // config.cell_size)
    row = int(local_y // config.cell_size)
    if 0 <= row < config.rows and 0 <= col < config.cols:
        return row, col
    return None
