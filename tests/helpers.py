from __future__ import annotations

import random
from typing import Optional, Sequence

from esper import World

from matchfall.components.animation_phase import Idle, TileAnimation
from matchfall.components.board_position import BoardPosition
from matchfall.components.motion import Motion
from matchfall.components.round_state import RoundMode
from matchfall.components.tile import Tile
from matchfall.config import GameConfig
from matchfall.events.bus import EventBus, EVENT_TICK
from matchfall.game import Game
from matchfall.systems import board_ops
from matchfall.ui.layout import cell_origin
from matchfall.world import get_config, get_round_state

FRAME = 1 / 60


class ScriptedRandom(random.Random):
    """Random generator that hands out queued values from ``randint`` before falling back."""

    def __init__(self, seed=0):
        super().__init__(seed)
        self.queue: list[int] = []

    def randint(self, a, b):
        if self.queue:
            return self.queue.pop(0)
        return super().randint(a, b)


def make_game(rows: int = 8, cols: int = 8, seed: int = 1, **config_changes) -> Game:
    config = GameConfig(rows=rows, cols=cols, **config_changes)
    return Game(config, rng=ScriptedRandom(seed))


def set_values(world: World, grid: Sequence[Sequence[Optional[int]]]) -> None:
    """Overwrite tile values in place, row by row (top row first)."""
    board = board_ops.get_board(world)
    assert len(grid) == board.rows and all(len(row) == board.cols for row in grid)
    for r, row in enumerate(grid):
        for c, value in enumerate(row):
            ent = board.slots[r][c]
            world.component_for_entity(ent, Tile).value = value


def settle_all(world: World) -> None:
    """Snap every tile onto its slot at rest."""
    config = get_config(world)
    for _, (pos, motion, anim) in world.get_components(BoardPosition, Motion, TileAnimation):
        motion.x, motion.y = cell_origin(pos.row, pos.col, config)
        anim.phase = Idle()


def drive_ticks(bus: EventBus, count: int = 1, dt: float = FRAME) -> None:
    for _ in range(count):
        bus.emit(EVENT_TICK, dt=dt)


def run_until_idle(game: Game, max_ticks: int = 2000, dt: float = FRAME) -> int:
    """Tick until the round controller is back to IDLE; returns ticks used."""
    for tick in range(1, max_ticks + 1):
        game.tick(dt)
        if get_round_state(game.world).mode is RoundMode.IDLE:
            return tick
    raise AssertionError(f"Round did not return to IDLE within {max_ticks} ticks")


def run_until_mode(game: Game, mode: RoundMode, max_ticks: int = 2000, dt: float = FRAME) -> int:
    for tick in range(1, max_ticks + 1):
        game.tick(dt)
        if get_round_state(game.world).mode is mode:
            return tick
    raise AssertionError(f"Mode {mode.name} not reached within {max_ticks} ticks")
