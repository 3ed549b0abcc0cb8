import pytest

from matchfall import constants
from matchfall.config import GameConfig
from matchfall.events.bus import EventBus
from matchfall.world import create_world, get_config


def test_defaults_follow_constants():
    config = GameConfig()
    assert config.rows == constants.GRID_ROWS
    assert config.cols == constants.GRID_COLS
    assert config.symbol_count == constants.SYMBOL_COUNT
    assert config.score_per_tile == constants.SCORE_PER_TILE
    assert config.smoothing_factor == constants.SMOOTHING_FACTOR


@pytest.mark.parametrize(
    "changes",
    [
        {"rows": 0},
        {"cols": -1},
        {"symbol_count": 0},
        {"symbol_count": 2},
        {"rows": 3, "cols": 1, "symbol_count": 1},
        {"score_per_tile": -5},
        {"cell_size": 0},
        {"smoothing_factor": 0.0},
        {"smoothing_factor": 1.5},
        {"snap_distance": 0},
        {"fall_gravity": 0},
        {"shrink_step": -0.1},
        {"reference_fps": 0},
        {"max_init_attempts": 0},
    ],
)
def test_invalid_values_rejected(changes):
    with pytest.raises(ValueError):
        GameConfig(**changes)


def test_replace_returns_validated_copy():
    config = GameConfig()
    smaller = config.replace(rows=4, cols=5)
    assert (smaller.rows, smaller.cols) == (4, 5)
    assert (config.rows, config.cols) == (constants.GRID_ROWS, constants.GRID_COLS)
    with pytest.raises(ValueError):
        config.replace(rows=0)


def test_world_carries_config_and_rng():
    config = GameConfig(rows=3, cols=3)
    world = create_world(EventBus(), config)
    assert get_config(world) is config
    assert getattr(world, "random") is not None


def test_few_symbols_allowed_when_no_run_fits():
    config = GameConfig(rows=2, cols=2, symbol_count=1)
    assert config.symbol_count == 1
    assert GameConfig(rows=1, cols=2, symbol_count=2).symbol_count == 2
