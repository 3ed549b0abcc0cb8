"""Public entry point wiring the world, event bus and systems of one game."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List

from matchfall.components.animation_phase import TileAnimation
from matchfall.components.board_position import BoardPosition
from matchfall.components.motion import Motion
from matchfall.components.round_state import RoundMode
from matchfall.components.tile import Tile
from matchfall.config import GameConfig
from matchfall.events.bus import EVENT_TICK, EventBus
from matchfall.systems.animation import AnimationSystem
from matchfall.systems.board import BoardSystem
from matchfall.systems.round_controller import RoundController
from matchfall.world import create_world, get_config, get_round_state


@dataclass(frozen=True, slots=True)
class RenderableTile:
    """Read-only snapshot of one tile for a rendering collaborator."""

    entity: int
    value: int
    row: int
    col: int
    x: float
    y: float
    scale: float


class Game:
    """In-process interface used by rendering and input collaborators.

    ``tick`` publishes the ``tick`` event; the round controller answers it by advancing the
    animation and then taking at most one state transition.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        rng: random.Random | None = None,
        seed: int | None = None,
        event_bus: EventBus | None = None,
    ):
        if rng is None and seed is not None:
            rng = random.Random(seed)
        self.event_bus = event_bus or EventBus()
        self.world = create_world(self.event_bus, config, rng=rng)
        self.board_system = BoardSystem(self.world, self.event_bus)
        self.animation_system = AnimationSystem(self.world, self.event_bus)
        self.round_controller = RoundController(
            self.world, self.event_bus, self.board_system, self.animation_system
        )

    @property
    def config(self) -> GameConfig:
        return get_config(self.world)

    @property
    def mode(self) -> RoundMode:
        return get_round_state(self.world).mode

    def submit_swap(self, a: Iterable[int], b: Iterable[int]) -> bool:
        return self.round_controller.submit_swap(a, b)

    def tick(self, dt: float) -> None:
        self.event_bus.emit(EVENT_TICK, dt=dt)

    def get_score(self) -> int:
        return get_round_state(self.world).score

    def reset(self) -> bool:
        return self.round_controller.reset()

    def get_renderable_tiles(self) -> List[RenderableTile]:
        tiles: List[RenderableTile] = []
        for row in self.board_system.board.slots:
            for ent in row:
                if ent is None:
                    continue
                tile = self.world.component_for_entity(ent, Tile)
                pos = self.world.component_for_entity(ent, BoardPosition)
                motion = self.world.component_for_entity(ent, Motion)
                anim = self.world.component_for_entity(ent, TileAnimation)
                tiles.append(
                    RenderableTile(
                        entity=ent,
                        value=tile.value,
                        row=pos.row,
                        col=pos.col,
                        x=motion.x,
                        y=motion.y,
                        scale=anim.scale,
                    )
                )
        return tiles
