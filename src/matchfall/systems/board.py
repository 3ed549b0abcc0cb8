import logging
import random
from typing import Iterable, List, Optional, Set, Tuple

from esper import World

from matchfall.components.board import Board
from matchfall.events.bus import (
    EventBus,
    EVENT_BOARD_RESET,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_REFILL_COMPLETED,
)
from matchfall.systems import board_ops
from matchfall.world import get_config

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class BoardSystem:
    """Owns the board entity and exposes the board operations to the round controller."""

    def __init__(self, world: World, event_bus: EventBus, rows: Optional[int] = None, cols: Optional[int] = None):
        self.world = world
        self.event_bus = event_bus
        config = get_config(world)
        if (rows is not None and rows != config.rows) or (cols is not None and cols != config.cols):
            # Explicit dimensions win; keep the world config in step so layout agrees.
            config = config.replace(rows=rows or config.rows, cols=cols or config.cols)
            setattr(world, "config", config)
        self.board_entity = self.world.create_entity(Board(rows=config.rows, cols=config.cols))
        self.initialize()

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    @property
    def rng(self) -> random.Random:
        rng = getattr(self.world, "random", None)
        if isinstance(rng, random.Random):
            return rng
        rng = random.Random()
        setattr(self.world, "random", rng)
        return rng

    def initialize(self) -> None:
        rounds = board_ops.fill_board(self.world, self.rng)
        board = self.board
        logger.debug("Board %dx%d initialized after %d re-roll rounds", board.rows, board.cols, rounds)
        self.event_bus.emit(EVENT_BOARD_RESET, rows=board.rows, cols=board.cols)

    def swap(self, a: Position, b: Position) -> None:
        board_ops.swap_tiles(self.world, a, b)

    def find_matches(self) -> Set[Position]:
        return board_ops.find_matches(self.world)

    def mark_matched(self, positions: Iterable[Position]) -> List[int]:
        return board_ops.mark_matched(self.world, positions)

    def clear_marked(self) -> List[Position]:
        cleared = board_ops.clear_marked(self.world)
        if cleared:
            logger.debug("Cleared %d tiles", len(cleared))
            self.event_bus.emit(EVENT_MATCH_CLEARED, positions=cleared)
        return cleared

    def apply_gravity_and_refill(self) -> bool:
        moves = board_ops.apply_gravity(self.world)
        new_tiles = board_ops.refill_empty_slots(self.world, self.rng)
        if moves:
            self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=moves)
        if new_tiles:
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=new_tiles)
        logger.debug("Gravity moved %d tiles, refill spawned %d", len(moves), len(new_tiles))
        return bool(moves or new_tiles)

    def tile_at(self, row: int, col: int) -> Optional[int]:
        return board_ops.get_entity_at(self.world, row, col)

    def values(self) -> List[List[Optional[int]]]:
        return board_ops.value_grid(self.world)

    def in_bounds(self, cell: Position) -> bool:
        return self.board.in_bounds(*cell)

    @staticmethod
    def is_adjacent(a: Position, b: Position) -> bool:
        ar, ac = a
        br, bc = b
        return (abs(ar - br) == 1 and ac == bc) or (abs(ac - bc) == 1 and ar == br)
