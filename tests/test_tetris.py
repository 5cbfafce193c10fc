import random

import numpy as np
import pytest

from brickgame.game.events import EventType, Move
from brickgame.game.pieces import SHAPES, PieceGenerator
from brickgame.game.tetris import Action, GameState, TetrisGame
from brickgame.game.ticker import ManualTicker


# ── State machine ────────────────────────────────────────────────────────


def test_new_game_waits_in_menu(game):
    state = game.get_state()
    assert state["state"] == GameState.MENU
    assert state["current_shape"] is None
    assert state["next_shape"] is None
    assert state["score"] == 0
    assert state["level"] == 1
    assert state["game_speed"] == 500
    assert not game.ticker.running


def test_commands_in_menu_are_no_ops(game, recorder):
    assert not game.move_left()
    assert not game.move_down()
    assert not game.rotate()
    assert not game.soft_drop()
    assert not game.toggle_pause()
    assert not game.acknowledge_game_over()
    game.tick()
    assert game.state == GameState.MENU
    assert recorder.events == []


def test_start_spawns_piece_and_runs_ticker(game, recorder):
    assert game.start()
    assert game.state == GameState.PLAYING
    assert game.ticker.running
    assert game.ticker.interval == 500
    assert game.current_piece is not None
    assert game.current_piece.y == 0
    assert game.next_piece is not None
    assert [e.type for e in recorder.events] == [EventType.GAME_STARTED, EventType.PIECE_SPAWNED]


def test_start_only_from_menu(playing):
    assert not playing.start()
    assert playing.state == GameState.PLAYING


def test_first_piece_comes_from_lookahead():
    game = TetrisGame(rng=random.Random(99))
    game.start()
    expected = PieceGenerator(random.Random(99))
    first, second = expected.next(), expected.next()
    assert game.current_piece.name == first.name
    assert game.current_piece.color == first.color
    assert game.next_piece.name == second.name


def test_pause_suspends_ticks_and_moves(playing):
    piece = playing.current_piece
    x, y = piece.x, piece.y
    assert playing.toggle_pause()
    assert playing.state == GameState.PAUSED
    assert playing.get_state()["paused"]
    assert not playing.ticker.running

    playing.tick()
    assert not playing.move_left()
    assert not playing.rotate()
    assert (piece.x, piece.y) == (x, y)

    assert playing.toggle_pause()
    assert playing.state == GameState.PLAYING
    assert playing.ticker.running
    playing.tick()
    assert piece.y == y + 1


def test_invalid_soft_drop_mode_rejected():
    with pytest.raises(ValueError):
        TetrisGame(soft_drop_steps=3)


# ── Movement ─────────────────────────────────────────────────────────────


def test_o_piece_falls_eighteen_rows_then_locks(playing, place, recorder):
    piece = place(playing, "O", 4, 0, color=3)
    for _ in range(18):
        assert playing.move_down()
    assert piece.y == 18
    assert not playing.move_down()
    assert piece.y == 18

    playing.tick()
    grid = playing.board.grid
    assert grid[18:20, 4:6].tolist() == [[3, 3], [3, 3]]
    assert playing.board.filled_cells() == 4
    assert playing.current_piece is not piece
    assert playing.current_piece.y == 0
    assert len(recorder.of_type(EventType.PIECE_MOVED)) == 18
    assert len(recorder.of_type(EventType.PIECE_SPAWNED)) == 1


def test_moves_stop_at_walls(playing, place, recorder):
    piece = place(playing, "O", 0, 5)
    assert not playing.move_left()
    assert piece.x == 0
    for _ in range(8):
        assert playing.move_right()
    assert piece.x == 8
    assert not playing.move_right()
    assert piece.x == 8
    kinds = [e.value for e in recorder.of_type(EventType.PIECE_MOVED)]
    assert kinds == [Move.RIGHT] * 8


def test_moves_blocked_by_locked_blocks(playing, place):
    playing.board.grid[5, 3] = 1
    piece = place(playing, "O", 4, 4)
    assert not playing.move_left()
    assert piece.x == 4


def test_rotation_applies_when_free(playing, place, recorder):
    piece = place(playing, "I", 3, 5)
    assert playing.rotate()
    assert piece.shape.shape == (4, 1)
    assert (piece.x, piece.y) == (3, 5)
    assert recorder.of_type(EventType.PIECE_MOVED)[-1].value == Move.ROTATE


def test_rejected_rotation_leaves_piece_unchanged(playing, place, recorder):
    piece = place(playing, "I", 0, 0)
    playing.board.grid[2, 0] = 5
    shape_before = piece.shape
    assert not playing.rotate()
    assert piece.shape is shape_before
    assert np.array_equal(piece.shape, SHAPES["I"])
    assert (piece.x, piece.y) == (0, 0)
    assert recorder.events == []


def test_rotation_against_wall_is_rejected_without_kick(playing, place):
    # Vertical I in the last column cannot turn flat: it would stick out
    piece = place(playing, "I", 9, 5, turns=1)
    assert not playing.rotate()
    assert piece.shape.shape == (4, 1)
    assert piece.x == 9


def test_soft_drop_moves_two_rows(playing, place):
    piece = place(playing, "T", 4, 0)
    assert playing.soft_drop()
    assert piece.y == 2


def test_soft_drop_second_failure_does_not_lock(playing, place):
    piece = place(playing, "O", 4, 17)
    assert playing.soft_drop()
    assert playing.current_piece is piece
    assert piece.y == 18
    assert playing.board.filled_cells() == 0


def test_soft_drop_first_failure_locks(playing, place):
    piece = place(playing, "O", 4, 18, color=2)
    assert not playing.soft_drop()
    assert playing.current_piece is not piece
    assert playing.board.grid[18:20, 4:6].tolist() == [[2, 2], [2, 2]]


def test_single_step_soft_drop():
    game = TetrisGame(rng=random.Random(5), soft_drop_steps=1)
    game.start()
    piece = game.current_piece
    assert game.soft_drop()
    assert piece.y == 1


# ── Line clears, scoring and levels ──────────────────────────────────────


def _fill_rows(game, rows, upto=9):
    for row in rows:
        game.board.grid[row, :upto] = 1


def test_single_line_clear_scores(playing, place, recorder):
    _fill_rows(playing, [19])
    place(playing, "I", 9, 16, color=2, turns=1)
    playing.tick()
    assert playing.lines_cleared == 1
    assert playing.score == 100
    assert playing.board.grid[17:20, 9].tolist() == [2, 2, 2]
    assert [e.value for e in recorder.of_type(EventType.LINES_CLEARED)] == [1]
    assert recorder.of_type(EventType.LEVEL_UP) == []


def test_four_line_clear_scores(playing, place):
    _fill_rows(playing, [16, 17, 18, 19])
    place(playing, "I", 9, 16, turns=1)
    playing.tick()
    assert playing.lines_cleared == 4
    assert playing.score == 800
    assert playing.board.filled_cells() == 0


def test_score_scales_with_level(playing, place):
    playing.level = 3
    playing.lines_cleared = 20
    _fill_rows(playing, [18, 19])
    place(playing, "I", 9, 16, turns=1)
    playing.tick()
    assert playing.score == 900
    assert playing.level == 3


def test_no_clear_scores_nothing(playing, place, recorder):
    place(playing, "O", 0, 18)
    playing.tick()
    assert playing.score == 0
    assert playing.lines_cleared == 0
    assert recorder.of_type(EventType.LINES_CLEARED) == []


def test_tenth_line_raises_level_once(playing, place, recorder):
    playing.lines_cleared = 9
    _fill_rows(playing, [19])
    place(playing, "I", 9, 16, turns=1)
    playing.tick()

    assert playing.lines_cleared == 10
    assert playing.level == 2
    # Points use the level in effect before the level-up
    assert playing.score == 100
    assert playing.game_speed == 420
    assert playing.ticker.interval == 420
    level_ups = recorder.of_type(EventType.LEVEL_UP)
    assert [e.value for e in level_ups] == [2]

    # Another clear within the same level does not fire again
    _fill_rows(playing, [19])
    playing.board.grid[19, 9] = 0
    playing.board.grid[16:19, 9] = 0
    place(playing, "I", 9, 16, turns=1)
    playing.tick()
    assert playing.level == 2
    assert len(recorder.of_type(EventType.LEVEL_UP)) == 1


def test_level_invariant_holds_over_many_clears(playing, place):
    for _ in range(25):
        playing.board.reset()
        _fill_rows(playing, [19])
        place(playing, "I", 9, 16, turns=1)
        playing.tick()
        assert playing.level == 1 + playing.lines_cleared // 10
    assert playing.lines_cleared == 25
    assert playing.level == 3
    assert playing.game_speed == 380


# ── Game over ────────────────────────────────────────────────────────────


def _block_spawn_area(game):
    game.board.grid[0:2, 2:8] = 6


def test_spawn_collision_ends_game(playing, place, recorder):
    _block_spawn_area(playing)
    place(playing, "O", 0, 18)
    playing.tick()

    assert playing.state == GameState.GAME_OVER
    assert not playing.ticker.running
    assert playing.current_piece is None
    assert len(recorder.of_type(EventType.GAME_OVER)) == 1


def test_game_over_freezes_session(playing, place):
    _block_spawn_area(playing)
    place(playing, "O", 0, 18)
    playing.tick()
    grid = playing.board.get_grid()
    score = playing.score

    for action in (Action.LEFT, Action.RIGHT, Action.ROTATE, Action.SOFT_DROP, Action.TICK, Action.PAUSE, Action.START):
        playing.step(action)

    assert playing.state == GameState.GAME_OVER
    assert np.array_equal(playing.board.grid, grid)
    assert playing.score == score


def test_acknowledge_returns_to_menu_and_restart_resets(playing, place):
    _block_spawn_area(playing)
    playing.score = 1200
    place(playing, "O", 0, 18)
    playing.tick()

    assert playing.acknowledge_game_over()
    assert playing.state == GameState.MENU
    # Nothing is reset until the next start
    assert playing.score == 1200
    assert playing.board.filled_cells() > 0

    assert playing.start()
    assert playing.score == 0
    assert playing.lines_cleared == 0
    assert playing.level == 1
    assert playing.game_speed == 500
    assert playing.board.filled_cells() == 0
    assert playing.ticker.running


# ── Snapshot and dispatch ────────────────────────────────────────────────


def test_step_dispatches_commands(game):
    state = game.step(Action.START)
    assert state["state"] == GameState.PLAYING
    x = state["current_x"]
    state = game.step(Action.LEFT)
    assert state["current_x"] == x - 1
    state = game.step(Action.PAUSE)
    assert state["paused"]


def test_snapshot_is_detached_from_board(playing):
    state = playing.get_state()
    state["board_grid"][:] = 7
    assert playing.board.filled_cells() == 0


def test_snapshot_fields(playing):
    state = playing.get_state()
    piece = playing.current_piece
    assert state["current_shape"] is piece.shape
    assert (state["current_x"], state["current_y"]) == (piece.x, piece.y)
    assert state["current_color"] == piece.color
    assert state["next_color"] == playing.next_piece.color
    assert state["lines_cleared"] == 0
    assert state["game_speed"] == 500


def test_ticker_drives_gravity():
    ticker = ManualTicker()
    game = TetrisGame(rng=random.Random(3), ticker=ticker)
    game.start()
    piece = game.current_piece
    for _ in range(ticker.advance(1200)):
        game.tick()
    assert piece.y == 2


def test_same_seed_same_game():
    def run(seed):
        game = TetrisGame(rng=random.Random(seed))
        game.start()
        names = []
        for _ in range(200):
            if game.state != GameState.PLAYING:
                break
            names.append(game.current_piece.name)
            game.soft_drop()
        return names, game.board.get_grid()

    names_a, grid_a = run(11)
    names_b, grid_b = run(11)
    assert names_a == names_b
    assert np.array_equal(grid_a, grid_b)
