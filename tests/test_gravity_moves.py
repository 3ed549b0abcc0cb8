from matchfall.components.animation_phase import Falling, Spawning, TileAnimation
from matchfall.components.board_position import BoardPosition
from matchfall.components.motion import Motion
from matchfall.events.bus import EVENT_GRAVITY_APPLIED, EVENT_MATCH_CLEARED, EVENT_REFILL_COMPLETED
from matchfall.systems import board_ops
from matchfall.ui.layout import cell_origin
from tests.helpers import make_game


def _remove(game, row, col):
    board = board_ops.get_board(game.world)
    ent = board.slots[row][col]
    board.slots[row][col] = None
    game.world.delete_entity(ent, immediate=True)


def test_gravity_compacts_column_preserving_order():
    game = make_game(rows=5, cols=1)
    board = board_ops.get_board(game.world)
    # Top to bottom: [A, _, B, _, _]
    tile_a = board.slots[0][0]
    tile_b = board.slots[2][0]
    for row in (1, 3, 4):
        _remove(game, row, 0)
    moves = board_ops.apply_gravity(game.world)
    assert [row[0] for row in board.slots] == [None, None, None, tile_a, tile_b]
    assert game.world.component_for_entity(tile_a, BoardPosition).row == 3
    assert game.world.component_for_entity(tile_b, BoardPosition).row == 4
    assert [(m.entity, m.source, m.target) for m in moves] == [
        (tile_b, (2, 0), (4, 0)),
        (tile_a, (0, 0), (3, 0)),
    ]
    for ent in (tile_a, tile_b):
        phase = game.world.component_for_entity(ent, TileAnimation).phase
        assert isinstance(phase, Falling)
        assert phase.velocity == 0.0


def test_moved_tile_keeps_its_visual_position():
    game = make_game(rows=3, cols=1)
    board = board_ops.get_board(game.world)
    top = board.slots[0][0]
    _remove(game, 2, 0)
    board_ops.apply_gravity(game.world)
    motion = game.world.component_for_entity(top, Motion)
    # Still drawn at its old slot; the fall animation carries it down.
    assert (motion.x, motion.y) == cell_origin(0, 0, game.config)


def test_refill_spawns_above_board_in_stacking_order():
    game = make_game(rows=4, cols=1)
    for row in (0, 1, 2):
        _remove(game, row, 0)
    board_ops.apply_gravity(game.world)
    spawned = board_ops.refill_empty_slots(game.world, getattr(game.world, "random"))
    assert spawned == [(2, 0), (1, 0), (0, 0)]
    board = board_ops.get_board(game.world)
    expected_offsets = {2: -1, 1: -2, 0: -3}
    for row, offset in expected_offsets.items():
        ent = board.slots[row][0]
        phase = game.world.component_for_entity(ent, TileAnimation).phase
        assert isinstance(phase, Spawning)
        assert phase.offset_row == offset
        motion = game.world.component_for_entity(ent, Motion)
        assert (motion.x, motion.y) == cell_origin(offset, 0, game.config)
        pos = game.world.component_for_entity(ent, BoardPosition)
        assert (pos.row, pos.col) == (row, 0)


def test_refill_counts_spawns_per_column():
    game = make_game(rows=3, cols=2)
    _remove(game, 0, 0)
    _remove(game, 0, 1)
    _remove(game, 1, 1)
    board_ops.apply_gravity(game.world)
    board_ops.refill_empty_slots(game.world, getattr(game.world, "random"))
    board = board_ops.get_board(game.world)
    offsets = {
        (r, c): game.world.component_for_entity(board.slots[r][c], TileAnimation).phase.offset_row
        for r, c in ((0, 0), (1, 1), (0, 1))
    }
    assert offsets == {(0, 0): -1, (1, 1): -1, (0, 1): -2}


def test_refill_draws_values_from_generator():
    game = make_game(rows=3, cols=1)
    _remove(game, 0, 0)
    _remove(game, 1, 0)
    rng = getattr(game.world, "random")
    rng.queue.extend([4, 2])
    board_ops.refill_empty_slots(game.world, rng)
    values = game.board_system.values()
    assert values[1][0] == 4
    assert values[0][0] == 2


def test_apply_gravity_and_refill_reports_movement_and_events():
    game = make_game(rows=4, cols=2)
    board = game.board_system
    events = {}
    game.event_bus.subscribe(EVENT_GRAVITY_APPLIED, lambda s, **k: events.setdefault('gravity', k))
    game.event_bus.subscribe(EVENT_REFILL_COMPLETED, lambda s, **k: events.setdefault('refill', k))
    _remove(game, 3, 0)
    assert board.apply_gravity_and_refill() is True
    assert len(events['gravity']['moves']) == 3
    assert events['refill']['new_tiles'] == [(0, 0)]
    assert all(ent is not None for row in board.board.slots for ent in row)


def test_full_board_reports_nothing_moved():
    game = make_game(rows=3, cols=3)
    assert game.board_system.apply_gravity_and_refill() is False


def test_clear_marked_removes_only_marked_tiles():
    game = make_game(rows=3, cols=3)
    board = game.board_system
    cleared_events = []
    game.event_bus.subscribe(EVENT_MATCH_CLEARED, lambda s, **k: cleared_events.append(k['positions']))
    marked = board.mark_matched([(0, 0), (1, 1)])
    survivor = board.tile_at(2, 2)
    # Marking alone keeps the tiles on the board.
    assert board.tile_at(0, 0) == marked[0]
    cleared = board.clear_marked()
    assert cleared == [(0, 0), (1, 1)]
    assert board.tile_at(0, 0) is None
    assert board.tile_at(1, 1) is None
    assert board.tile_at(2, 2) == survivor
    assert all(not game.world.entity_exists(ent) for ent in marked)
    assert cleared_events == [[(0, 0), (1, 1)]]
