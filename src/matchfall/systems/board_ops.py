from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set, Tuple

from esper import World

from matchfall.components.animation_phase import Clearing, Falling, Idle, Sliding, Spawning, TileAnimation, AnimationPhase
from matchfall.components.board import Board
from matchfall.components.board_position import BoardPosition
from matchfall.components.motion import Motion
from matchfall.components.tile import Tile
from matchfall.ui.layout import cell_origin
from matchfall.world import get_config

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


@dataclass(slots=True)
class GravityMove:
    entity: int
    source: Position
    target: Position


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board component not found")


def board_dimensions(world: World) -> Tuple[int, int] | None:
    for _, board in world.get_component(Board):
        return board.rows, board.cols
    return None


def _check_bounds(board: Board, row: int, col: int) -> None:
    assert board.in_bounds(row, col), f"({row}, {col}) is outside the {board.rows}x{board.cols} board"


def get_entity_at(world: World, row: int, col: int) -> int | None:
    board = get_board(world)
    _check_bounds(board, row, col)
    return board.slots[row][col]


def value_grid(world: World) -> List[List[Optional[int]]]:
    """Return tile values by slot; empty slots are None."""
    board = get_board(world)
    grid: List[List[Optional[int]]] = []
    for row in board.slots:
        values: List[Optional[int]] = []
        for entity in row:
            if entity is None:
                values.append(None)
            else:
                values.append(world.component_for_entity(entity, Tile).value)
        grid.append(values)
    return grid


def random_value(rng: random.Random, symbol_count: int) -> int:
    return rng.randint(1, symbol_count)


def spawn_tile(
    world: World,
    row: int,
    col: int,
    value: int,
    *,
    phase: AnimationPhase | None = None,
    visual_row: float | None = None,
) -> int:
    """Create a tile entity whose motion starts at ``visual_row`` (defaults to its own row)."""
    config = get_config(world)
    x, y = cell_origin(row if visual_row is None else visual_row, col, config)
    return world.create_entity(
        Tile(value=value),
        BoardPosition(row=row, col=col),
        Motion(x=x, y=y),
        TileAnimation(phase=phase or Idle()),
    )


def fill_board(world: World, rng: random.Random) -> int:
    """Populate every slot with fresh tiles and re-roll matched values until match-free.

    Existing tile entities are deleted first. Re-rolling keeps tile identity and only changes
    values. Returns the number of re-roll rounds that were needed; raises RuntimeError once
    ``max_init_attempts`` rounds have not produced a match-free board.
    """
    board = get_board(world)
    config = get_config(world)
    for row in range(board.rows):
        for col in range(board.cols):
            existing = board.slots[row][col]
            if existing is not None:
                world.delete_entity(existing, immediate=True)
            board.slots[row][col] = spawn_tile(world, row, col, random_value(rng, config.symbol_count))
    for attempt in range(config.max_init_attempts):
        matches = find_matches(world)
        if not matches:
            return attempt
        logger.debug("Initial layout has %d matched tiles, re-rolling (round %d)", len(matches), attempt + 1)
        for row, col in matches:
            tile = world.component_for_entity(board.slots[row][col], Tile)
            tile.value = random_value(rng, config.symbol_count)
    raise RuntimeError("Unable to initialize board without matches")


def swap_tiles(world: World, a: Position, b: Position) -> None:
    """Exchange the tiles at two slots and update their cached positions.

    Adjacency is the caller's responsibility.
    """
    board = get_board(world)
    _check_bounds(board, *a)
    _check_bounds(board, *b)
    ent_a = board.slots[a[0]][a[1]]
    ent_b = board.slots[b[0]][b[1]]
    board.slots[a[0]][a[1]] = ent_b
    board.slots[b[0]][b[1]] = ent_a
    for entity, (row, col) in ((ent_a, b), (ent_b, a)):
        if entity is None:
            continue
        position = world.component_for_entity(entity, BoardPosition)
        position.row, position.col = row, col
        anim = world.component_for_entity(entity, TileAnimation)
        if not anim.is_clearing:
            anim.phase = Sliding()


def find_matches(world: World) -> Set[Position]:
    """Return every slot that belongs to a horizontal or vertical run of three or more."""
    board = get_board(world)
    values = value_grid(world)
    rows, cols = board.rows, board.cols
    matched: Set[Position] = set()
    # Horizontal runs
    for r in range(rows):
        for c in range(cols - 2):
            tval = values[r][c]
            if tval is None or values[r][c + 1] != tval or values[r][c + 2] != tval:
                continue
            matched.update(((r, c), (r, c + 1), (r, c + 2)))
            k = c + 3
            while k < cols and values[r][k] == tval:
                matched.add((r, k))
                k += 1
    # Vertical runs
    for c in range(cols):
        for r in range(rows - 2):
            tval = values[r][c]
            if tval is None or values[r + 1][c] != tval or values[r + 2][c] != tval:
                continue
            matched.update(((r, c), (r + 1, c), (r + 2, c)))
            k = r + 3
            while k < rows and values[k][c] == tval:
                matched.add((k, c))
                k += 1
    return matched


def mark_matched(world: World, positions: Iterable[Position]) -> List[int]:
    """Start the clear animation on the tiles at positions; they stay on the board."""
    board = get_board(world)
    marked: List[int] = []
    for row, col in positions:
        _check_bounds(board, row, col)
        entity = board.slots[row][col]
        if entity is None:
            continue
        anim = world.component_for_entity(entity, TileAnimation)
        if not anim.is_clearing:
            anim.phase = Clearing(scale=1.0)
        marked.append(entity)
    return marked


def clear_marked(world: World) -> List[Position]:
    """Remove every tile in its clearing phase from the board and delete its entity."""
    board = get_board(world)
    cleared: List[Position] = []
    for row in range(board.rows):
        for col in range(board.cols):
            entity = board.slots[row][col]
            if entity is None:
                continue
            if not world.component_for_entity(entity, TileAnimation).is_clearing:
                continue
            board.slots[row][col] = None
            world.delete_entity(entity, immediate=True)
            cleared.append((row, col))
    return cleared


def apply_gravity(world: World) -> List[GravityMove]:
    """Compact each column downward, keeping the relative order of surviving tiles."""
    board = get_board(world)
    moves: List[GravityMove] = []
    for col in range(board.cols):
        for row in range(board.rows - 1, -1, -1):
            if board.slots[row][col] is not None:
                continue
            source_row = row - 1
            while source_row >= 0 and board.slots[source_row][col] is None:
                source_row -= 1
            if source_row < 0:
                # Nothing left above this slot in the column.
                break
            entity = board.slots[source_row][col]
            board.slots[row][col] = entity
            board.slots[source_row][col] = None
            world.component_for_entity(entity, BoardPosition).row = row
            world.component_for_entity(entity, TileAnimation).phase = Falling(velocity=0.0)
            moves.append(GravityMove(entity=entity, source=(source_row, col), target=(row, col)))
    return moves


def refill_empty_slots(world: World, rng: random.Random) -> List[Position]:
    """Spawn new tiles into the empty slots at the top of each column.

    Within a column the lowest new tile enters one row above the board, the next one two
    rows above, and so on, so tiles from the same refill stack instead of overlapping.
    """
    board = get_board(world)
    config = get_config(world)
    spawned: List[Position] = []
    for col in range(board.cols):
        spawn_count = 0
        for row in range(board.rows - 1, -1, -1):
            if board.slots[row][col] is not None:
                continue
            offset_row = -1 - spawn_count
            board.slots[row][col] = spawn_tile(
                world,
                row,
                col,
                random_value(rng, config.symbol_count),
                phase=Spawning(offset_row=offset_row),
                visual_row=offset_row,
            )
            spawned.append((row, col))
            spawn_count += 1
    return spawned
