from typing import Dict, Tuple

from matchfall.events.bus import EVENT_TILE_DESELECTED, EVENT_TILE_SELECTED
from matchfall.game import Game
from matchfall.ui.layout import board_extent, cell_origin

PADDING = 4

# Fill colors per tile value.
VALUE_COLORS: Dict[int, Tuple[int, int, int]] = {
    1: (231, 76, 60),
    2: (46, 204, 113),
    3: (52, 152, 219),
    4: (241, 196, 15),
    5: (155, 89, 182),
    6: (230, 126, 34),
    7: (26, 188, 156),
}
FALLBACK_COLOR = (200, 200, 200)
BOARD_COLOR = (52, 73, 94)


class RenderSystem:
    """Draws the renderable tile snapshot; layout y (down) is flipped to arcade y (up)."""

    def __init__(self, game: Game, window):
        self.game = game
        self.window = window
        self.selected = None
        game.event_bus.subscribe(EVENT_TILE_SELECTED, self.on_tile_selected)
        game.event_bus.subscribe(EVENT_TILE_DESELECTED, self.on_tile_deselected)

    def on_tile_selected(self, sender, **kwargs):
        self.selected = (kwargs.get('row'), kwargs.get('col'))

    def on_tile_deselected(self, sender, **kwargs):
        self.selected = None

    def to_layout(self, x: float, y: float) -> Tuple[float, float]:
        """Convert window coordinates to layout space."""
        return x, self.window.height - y

    def process(self):
        # Local import keeps tests headless.
        import arcade
        config = self.game.config
        width, height = board_extent(config)
        arcade.draw_lrbt_rectangle_filled(0, width, self.window.height - height, self.window.height, BOARD_COLOR)
        size = config.cell_size
        for tile in self.game.get_renderable_tiles():
            if tile.scale <= 0.0:
                continue
            inner = (size - PADDING * 2) * tile.scale
            center_x = tile.x + size / 2
            center_y = self.window.height - (tile.y + size / 2)
            arcade.draw_lbwh_rectangle_filled(
                center_x - inner / 2,
                center_y - inner / 2,
                inner,
                inner,
                VALUE_COLORS.get(tile.value, FALLBACK_COLOR),
            )
        if self.selected is not None:
            sx, sy = cell_origin(self.selected[0], self.selected[1], config)
            arcade.draw_lrbt_rectangle_outline(
                sx, sx + size, self.window.height - sy - size, self.window.height - sy, arcade.color.WHITE, 3
            )
        arcade.draw_text(
            f"Score: {self.game.get_score()}",
            width + 20,
            self.window.height - 40,
            arcade.color.WHITE,
            20,
        )
