import logging
from typing import Iterable, Set, Tuple

from esper import World

from matchfall.components.round_state import RoundMode, RoundState
from matchfall.events.bus import (
    EventBus,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_MATCH_FOUND,
    EVENT_ROUND_MODE_CHANGED,
    EVENT_SCORE_CHANGED,
    EVENT_TICK,
    EVENT_TILE_SWAP_DO,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REJECTED,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
)
from matchfall.systems.animation import AnimationSystem
from matchfall.systems.board import BoardSystem
from matchfall.world import get_config, get_round_state

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class RoundController:
    """Drives the swap, match, clear, refill cycle.

    Every tick runs in two phases: the animation system advances all tiles, then, only if
    nothing is animating any more, exactly one transition out of the current mode is taken.
    Board mutations therefore never overlap a running animation.
    """

    def __init__(self, world: World, event_bus: EventBus, board: BoardSystem, animation: AnimationSystem):
        self.world = world
        self.event_bus = event_bus
        self.board = board
        self.animation = animation
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    @property
    def state(self) -> RoundState:
        return get_round_state(self.world)

    @property
    def mode(self) -> RoundMode:
        return self.state.mode

    def submit_swap(self, a: Iterable[int], b: Iterable[int]) -> bool:
        """Start a swap if idle and the cells are adjacent; otherwise drop the request."""
        src: Position = tuple(a)
        dst: Position = tuple(b)
        state = self.state
        if state.mode is not RoundMode.IDLE:
            self.event_bus.emit(EVENT_TILE_SWAP_REJECTED, src=src, dst=dst, reason="busy")
            return False
        if not BoardSystem.is_adjacent(src, dst):
            self.event_bus.emit(EVENT_TILE_SWAP_REJECTED, src=src, dst=dst, reason="not_adjacent")
            return False
        self.board.swap(src, dst)
        state.pending_swap = (src, dst)
        state.cascade_depth = 0
        logger.debug("Swap accepted %s <-> %s", src, dst)
        self._set_mode(RoundMode.SWAPPED)
        self.event_bus.emit(EVENT_TILE_SWAP_DO, src=src, dst=dst)
        return True

    def reset(self) -> bool:
        """Re-deal the board and zero the score; only allowed while idle."""
        state = self.state
        if state.mode is not RoundMode.IDLE:
            return False
        self.board.initialize()
        previous = state.score
        state.score = 0
        state.pending_swap = None
        state.cascade_depth = 0
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=0, delta=-previous)
        return True

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        self.submit_swap(src, dst)

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        self.update(dt)

    def update(self, dt: float) -> None:
        settled = self.animation.advance(dt)
        state = self.state
        state.animating = not settled
        if not settled:
            return
        mode = state.mode
        if mode is RoundMode.SWAPPED:
            self._check_post_swap(state)
        elif mode is RoundMode.MATCHING:
            self._handle_post_match(state)
        elif mode is RoundMode.REFILLING:
            self._check_cascade(state)
        elif mode is RoundMode.REVERTING:
            self._finish_round(state)
        # A transition may have started new motion this tick.
        state.animating = not self.animation.is_settled()

    def _check_post_swap(self, state: RoundState) -> None:
        assert state.pending_swap is not None, "SWAPPED without a pending swap"
        src, dst = state.pending_swap
        matches = self.board.find_matches()
        if matches:
            self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
            self._process_matches(state, matches)
            return
        self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst)
        # Undo the swap; the tiles slide back before the round ends.
        self.board.swap(src, dst)
        self._set_mode(RoundMode.REVERTING)

    def _handle_post_match(self, state: RoundState) -> None:
        self.board.clear_marked()
        self.board.apply_gravity_and_refill()
        self._set_mode(RoundMode.REFILLING)

    def _check_cascade(self, state: RoundState) -> None:
        matches = self.board.find_matches()
        if matches:
            self._process_matches(state, matches)
            return
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=state.cascade_depth)
        self._finish_round(state)

    def _process_matches(self, state: RoundState, matches: Set[Position]) -> None:
        positions = sorted(matches)
        self.board.mark_matched(positions)
        state.pending_swap = None
        state.cascade_depth += 1
        delta = len(positions) * get_config(self.world).score_per_tile
        state.score += delta
        self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=len(positions), depth=state.cascade_depth)
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=state.cascade_depth, positions=positions)
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=state.score, delta=delta)
        self._set_mode(RoundMode.MATCHING)

    def _finish_round(self, state: RoundState) -> None:
        state.pending_swap = None
        state.cascade_depth = 0
        self._set_mode(RoundMode.IDLE)

    def _set_mode(self, new_mode: RoundMode) -> None:
        state = self.state
        previous = state.mode
        if previous is new_mode:
            return
        state.mode = new_mode
        logger.debug("Round mode %s -> %s", previous.name, new_mode.name)
        self.event_bus.emit(EVENT_ROUND_MODE_CHANGED, previous_mode=previous, new_mode=new_mode)
