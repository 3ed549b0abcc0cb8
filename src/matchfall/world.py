import random

from esper import World

from matchfall.config import GameConfig
from matchfall.components.round_state import RoundState
from .events.bus import EventBus


def create_world(
    event_bus: EventBus,
    config: GameConfig | None = None,
    *,
    rng: random.Random | None = None,
) -> World:
    """Create the ECS world with its shared resources.

    ``config`` and ``random`` are attached as world attributes so every system reads the same
    tuning and draws from the same generator. The board itself is created by ``BoardSystem``.
    """
    world = World()
    setattr(world, "config", config or GameConfig())
    setattr(world, "random", rng or random.Random())
    # Register the round state resource.
    world.create_entity(RoundState())
    return world


def get_config(world: World) -> GameConfig:
    config = getattr(world, "config", None)
    if isinstance(config, GameConfig):
        return config
    return GameConfig()


def get_round_state(world: World) -> RoundState:
    """Return the shared RoundState component, creating it if absent."""
    for _, state in world.get_component(RoundState):
        return state
    world.create_entity(RoundState())
    return list(world.get_component(RoundState))[0][1]
