import random

from neondrop.config import GameConfig
from neondrop.controller import GameController, Phase
from neondrop.game_state import GameState
from neondrop.piece import BALL_COLORS, BallColor

FAST = GameConfig(match_delay_ms=0, chain_delay_ms=0)


def _controller(seed: int = 0) -> GameController:
    return GameController(state=GameState(config=FAST, rng=random.Random(seed)))


def test_start_spawns_falling_piece():
    controller = _controller()
    assert controller.phase is Phase.IDLE
    controller.start()
    assert controller.phase is Phase.FALLING
    assert controller.running
    assert controller.active is not None
    assert (controller.active.row, controller.active.col) == (-1, 2)


def test_queue_stays_full_with_valid_colours():
    controller = _controller(5)
    controller.start()
    for _ in range(10):
        assert len(controller.state.queue) >= 3
        assert all(c in BALL_COLORS for pair in controller.state.queue for c in pair)
        controller.spawn_piece()
    assert len(controller.view().next_pieces) == 2


def test_spawn_collision_triggers_game_over():
    controller = _controller()
    controller.start()
    controller.state.score = 120
    controller.state.board.set_cell(0, 2, BallColor.RED)
    controller.spawn_piece()
    assert controller.phase is Phase.GAME_OVER
    assert controller.game_over
    assert not controller.running
    assert controller.active is None
    assert controller.final_score == 120
    assert controller.state.score == 120


def test_stacking_to_the_top_ends_the_game():
    controller = _controller()
    controller.start()
    board = controller.state.board
    for row in range(2, board.height):
        board.set_cell(row, 2, BallColor.BLUE if row % 2 else BallColor.YELLOW)
    controller.state.active.colors = (BallColor.RED, BallColor.GREEN)
    controller.hard_drop()
    assert board.get_cell(0, 2) == BallColor.RED
    assert board.get_cell(1, 2) == BallColor.GREEN
    assert controller.game_over


def test_commands_ignored_after_game_over():
    controller = _controller()
    controller.start()
    controller.state.board.set_cell(0, 2, BallColor.RED)
    controller.spawn_piece()
    controller.move_left()
    controller.rotate()
    controller.hard_drop()
    controller.toggle_pause()
    assert controller.game_over
    assert not controller.paused


def test_restart_after_game_over():
    controller = _controller()
    controller.start()
    controller.state.score = 70
    controller.state.board.set_cell(0, 2, BallColor.RED)
    controller.spawn_piece()
    controller.start()
    assert controller.phase is Phase.FALLING
    assert controller.state.score == 0
    assert controller.final_score is None
    assert not controller.state.board.grid.any()


def test_game_over_is_logged(caplog):
    controller = _controller()
    controller.start()
    controller.state.board.set_cell(0, 2, BallColor.RED)
    with caplog.at_level("INFO", logger="neondrop.controller"):
        controller.spawn_piece()
    assert "Game over" in caplog.text


def test_lock_above_the_well_ends_the_game():
    controller = _controller()
    controller.start()
    board = controller.state.board
    for row in range(board.height):
        board.set_cell(row, 0, BallColor.BLUE if row % 2 else BallColor.YELLOW)
    controller.state.score = 90
    controller.rotate()
    controller.move_left()
    controller.move_left()
    assert (controller.active.row, controller.active.col) == (-1, 0)
    before = board.grid.copy()
    controller.soft_drop()
    assert controller.game_over
    assert controller.final_score == 90
    assert controller.state.pieces == 0
    assert (board.grid == before).all()


def test_vertical_piece_stuck_at_spawn_ends_the_game():
    controller = _controller()
    controller.start()
    board = controller.state.board
    for row in range(1, board.height):
        board.set_cell(row, 2, BallColor.BLUE if row % 2 else BallColor.YELLOW)
    controller.hard_drop()
    assert controller.game_over
    assert board.get_cell(0, 2) == 0
