import math
from typing import Tuple

from esper import World

from matchfall.components.animation_phase import Clearing, Falling, Idle, Sliding, Spawning, TileAnimation
from matchfall.components.board_position import BoardPosition
from matchfall.components.motion import Motion
from matchfall.config import GameConfig
from matchfall.events.bus import EventBus
from matchfall.ui.layout import cell_origin
from matchfall.world import get_config


class AnimationSystem:
    """Advances every tile's continuous visual state and reports whether the board settled.

    Step constants in the config are per reference frame; a step of ``dt`` seconds covers
    ``dt * reference_fps`` frames so the motion is frame-rate independent.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus

    def advance(self, dt: float) -> bool:
        """Advance all tiles by ``dt`` seconds; return True when nothing is animating."""
        assert dt >= 0.0, f"elapsed time must not be negative, got {dt}"
        config = get_config(self.world)
        frames = dt * config.reference_fps
        settled = True
        for ent, (pos, motion, anim) in self.world.get_components(BoardPosition, Motion, TileAnimation):
            target = cell_origin(pos.row, pos.col, config)
            if not self._step_tile(motion, anim, target, frames, config):
                settled = False
        return settled

    def is_settled(self) -> bool:
        """Settlement check without advancing time."""
        config = get_config(self.world)
        for _, (pos, motion, anim) in self.world.get_components(BoardPosition, Motion, TileAnimation):
            if not self._tile_settled(motion, anim, cell_origin(pos.row, pos.col, config), config):
                return False
        return True

    def _step_tile(self, motion: Motion, anim: TileAnimation, target: Tuple[float, float],
                   frames: float, config: GameConfig) -> bool:
        phase = anim.phase
        if isinstance(phase, Spawning):
            # First step after spawning: place the tile above the board, then let it fall.
            motion.y = cell_origin(phase.offset_row, 0, config)[1]
            phase = Falling(velocity=0.0)
            anim.phase = phase
        if isinstance(phase, Falling):
            self._step_fall(motion, anim, phase, target, frames, config)
        elif isinstance(phase, Clearing):
            self._step_slide(motion, target, frames, config)
            phase.scale = max(0.0, phase.scale - config.shrink_step * frames)
        elif isinstance(phase, (Idle, Sliding)):
            if self._step_slide(motion, target, frames, config):
                anim.phase = Idle()
        return self._tile_settled(motion, anim, target, config)

    @staticmethod
    def _step_slide(motion: Motion, target: Tuple[float, float], frames: float, config: GameConfig) -> bool:
        """Ease toward target; returns True once the tile sits exactly on it."""
        tx, ty = target
        if math.hypot(tx - motion.x, ty - motion.y) > config.snap_distance and frames > 0.0:
            blend = 1.0 - (1.0 - config.smoothing_factor) ** frames
            motion.x += (tx - motion.x) * blend
            motion.y += (ty - motion.y) * blend
        if math.hypot(tx - motion.x, ty - motion.y) <= config.snap_distance:
            motion.x, motion.y = tx, ty
            return True
        return False

    @staticmethod
    def _step_fall(motion: Motion, anim: TileAnimation, phase: Falling, target: Tuple[float, float],
                   frames: float, config: GameConfig) -> None:
        tx, ty = target
        # Only vertical motion is physical; x stays locked to the column.
        motion.x = tx
        phase.velocity += config.fall_gravity * frames
        motion.y += phase.velocity * frames
        if motion.y >= ty:
            motion.y = ty
            anim.phase = Idle()

    @staticmethod
    def _tile_settled(motion: Motion, anim: TileAnimation, target: Tuple[float, float], config: GameConfig) -> bool:
        phase = anim.phase
        if isinstance(phase, (Falling, Spawning)):
            return False
        if isinstance(phase, Clearing) and phase.scale > 0.0:
            return False
        tx, ty = target
        return math.hypot(tx - motion.x, ty - motion.y) <= config.snap_distance
