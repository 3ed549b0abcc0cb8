"""Entry point for the matchfall demo window.

Sets up the game, input and render systems, and an Arcade window.
"""
import logging

from arcade import Window, run, set_background_color, color, key

from matchfall.constants import WINDOW_HEIGHT, WINDOW_TITLE, WINDOW_WIDTH
from matchfall.events.bus import EVENT_MOUSE_MOVE, EVENT_MOUSE_PRESS, EVENT_MOUSE_RELEASE
from matchfall.game import Game
from matchfall.systems.input import InputSystem
from matchfall.systems.render import RenderSystem


class MatchfallWindow(Window):
    def __init__(self):
        super().__init__(WINDOW_WIDTH, WINDOW_HEIGHT, WINDOW_TITLE)
        self.set_update_rate(1/60)
        self.game = Game()
        self.input_system = InputSystem(self.game.world, self.game.event_bus)
        self.render_system = RenderSystem(self.game, self)
        set_background_color(color.BLACK)

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.game.tick(delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        layout_x, layout_y = self.render_system.to_layout(x, y)
        self.game.event_bus.emit(EVENT_MOUSE_PRESS, x=layout_x, y=layout_y, button=button)

    def on_mouse_motion(self, x: float, y: float, dx: float, dy: float):
        layout_x, layout_y = self.render_system.to_layout(x, y)
        self.game.event_bus.emit(EVENT_MOUSE_MOVE, x=layout_x, y=layout_y)

    def on_mouse_drag(self, x: float, y: float, dx: float, dy: float, buttons: int, modifiers: int):
        self.on_mouse_motion(x, y, dx, dy)

    def on_mouse_release(self, x: float, y: float, button: int, modifiers: int):
        layout_x, layout_y = self.render_system.to_layout(x, y)
        self.game.event_bus.emit(EVENT_MOUSE_RELEASE, x=layout_x, y=layout_y, button=button)

    def on_key_press(self, symbol: int, modifiers: int):
        if symbol == key.R:
            self.game.reset()


def main():
    logging.basicConfig(level=logging.INFO)
    MatchfallWindow()
    run()

if __name__ == "__main__":
    main()
