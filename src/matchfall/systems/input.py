from typing import Optional, Tuple

from esper import World

from matchfall.components.round_state import RoundMode
from matchfall.events.bus import (
    EventBus,
    EVENT_BOARD_RESET,
    EVENT_MOUSE_MOVE,
    EVENT_MOUSE_PRESS,
    EVENT_MOUSE_RELEASE,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAP_REQUEST,
)
from matchfall.systems.board import BoardSystem
from matchfall.ui.layout import cell_at_point
from matchfall.world import get_config, get_round_state

# Arcade button codes.
MOUSE_BUTTON_LEFT = 1
MOUSE_BUTTON_RIGHT = 4


class InputSystem:
    """Turns layout-space mouse input into swap requests.

    Two gestures are supported: clicking a tile and then an adjacent one, or pressing on a
    tile and dragging more than half a cell towards a neighbour. The drag direction is the
    dominant axis of the pointer offset from the press point.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.selected: Optional[Tuple[int, int]] = None
        self.drag_start: Optional[Tuple[float, float]] = None
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self.event_bus.subscribe(EVENT_MOUSE_MOVE, self.on_mouse_move)
        self.event_bus.subscribe(EVENT_MOUSE_RELEASE, self.on_mouse_release)
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_BOARD_RESET, self.on_board_reset)

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        button = kwargs.get('button', MOUSE_BUTTON_LEFT)
        if x is None or y is None:
            return
        self.drag_start = None
        if button == MOUSE_BUTTON_RIGHT:
            self._deselect('right_click')
            return
        if button != MOUSE_BUTTON_LEFT:
            return
        cell = cell_at_point(x, y, get_config(self.world))
        if cell is None:
            self._deselect('outside_board')
            return
        self.event_bus.emit(EVENT_TILE_CLICK, row=cell[0], col=cell[1])
        # A press that leaves its own cell selected can turn into a drag.
        if self.selected == cell:
            self.drag_start = (x, y)

    def on_mouse_move(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if self.drag_start is None or self.selected is None or x is None or y is None:
            return
        if get_round_state(self.world).mode is not RoundMode.IDLE:
            return
        config = get_config(self.world)
        dx = x - self.drag_start[0]
        dy = y - self.drag_start[1]
        threshold = config.cell_size / 2
        if abs(dx) <= threshold and abs(dy) <= threshold:
            return
        row, col = self.selected
        if abs(dx) > abs(dy):
            col += 1 if dx > 0 else -1
        else:
            row += 1 if dy > 0 else -1
        if not (0 <= row < config.rows and 0 <= col < config.cols):
            return
        self._request_swap((row, col))

    def on_mouse_release(self, sender, **kwargs):
        self.drag_start = None

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        # Input is locked while a swap or cascade resolves.
        if get_round_state(self.world).mode is not RoundMode.IDLE:
            return
        if self.selected is None:
            self._select((row, col))
        elif BoardSystem.is_adjacent(self.selected, (row, col)):
            self._request_swap((row, col))
        elif self.selected == (row, col):
            self._deselect('same_tile')
        else:
            self._select((row, col))

    def on_board_reset(self, sender, **kwargs):
        self.drag_start = None
        self._deselect('reset')

    def _request_swap(self, dst: Tuple[int, int]) -> None:
        src = self.selected
        self.drag_start = None
        self._deselect('swap')
        self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=dst)

    def _select(self, cell: Tuple[int, int]) -> None:
        self.selected = cell
        self.event_bus.emit(EVENT_TILE_SELECTED, row=cell[0], col=cell[1])

    def _deselect(self, reason: str) -> None:
        if self.selected is None:
            return
        self.selected = None
        self.event_bus.emit(EVENT_TILE_DESELECTED, reason=reason)
