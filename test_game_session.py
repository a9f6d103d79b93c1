"""
Tests for the board/rules engine.
"""

import threading

import numpy as np
import pytest

from logic.game_session import GameSession, GameOutcome, Move
from logic.player import Player, EMPTY
from logic.win_checker import WinChecker


def play(session, moves):
    for row, col in moves:
        assert session.apply_move(row, col), f"move ({row}, {col}) rejected"


def state_of(session):
    return (
        session.snapshot().tobytes(),
        session.current_player,
        session.move_count,
        session.outcome,
        session.moves,
    )


def test_fresh_session():
    session = GameSession()
    assert session.current_player is Player.X
    assert session.move_count == 0
    assert session.outcome is GameOutcome.ONGOING
    assert session.get_empty_cells() == [(r, c) for r in range(3) for c in range(3)]


def test_player_alternation():
    assert Player.X.next() is Player.O
    assert Player.O.next() is Player.X
    assert Player.X.symbol != Player.O.symbol


def test_move_alternates_players_and_records_history():
    session = GameSession()
    assert session.apply_move(1, 1)
    assert session.get_cell(1, 1) is Player.X
    assert session.cell_symbol(1, 1) == "X"
    assert session.current_player is Player.O
    assert session.move_count == 1

    assert session.apply_move(0, 0)
    assert session.get_cell(0, 0) is Player.O
    assert session.moves == [Move(Player.X, 1, 1, 1), Move(Player.O, 0, 0, 2)]


@pytest.mark.parametrize("line", WinChecker.WINNING_LINES)
@pytest.mark.parametrize("player", [Player.X, Player.O])
def test_every_winning_line(line, player):
    board = np.zeros((3, 3), dtype=np.int8)
    for row, col in line:
        board[row, col] = player.value
    assert WinChecker().check_winner(board) is player
    assert WinChecker().get_winning_line(board) == line


@pytest.mark.parametrize("index", range(3))
def test_row_win_through_play(index):
    session = GameSession()
    other = (index + 1) % 3
    play(session, [(index, 0), (other, 0), (index, 1), (other, 1), (index, 2)])
    assert session.outcome is GameOutcome.X_WINS
    assert session.outcome.winner is Player.X
    # Winner keeps the turn once the round is over
    assert session.current_player is Player.X


@pytest.mark.parametrize("index", range(3))
def test_column_win_through_play(index):
    session = GameSession()
    other = (index + 1) % 3
    play(session, [(0, index), (0, other), (1, index), (1, other), (2, index)])
    assert session.outcome is GameOutcome.X_WINS


def test_diagonal_wins_for_o():
    session = GameSession()
    play(session, [(0, 1), (0, 0), (0, 2), (1, 1), (1, 0), (2, 2)])
    assert session.outcome is GameOutcome.O_WINS
    assert session.get_winning_line() == [(0, 0), (1, 1), (2, 2)]

    session.reset()
    play(session, [(0, 0), (0, 2), (0, 1), (1, 1), (1, 2), (2, 0)])
    assert session.outcome is GameOutcome.O_WINS
    assert session.get_winning_line() == [(0, 2), (1, 1), (2, 0)]


def test_full_board_without_line_is_draw():
    session = GameSession()
    # X O X / X O O / O X X
    play(session, [(0, 0), (0, 1), (0, 2), (1, 1), (1, 0), (1, 2), (2, 1), (2, 0), (2, 2)])
    assert session.move_count == 9
    assert session.outcome is GameOutcome.DRAW


def test_win_on_last_move_is_not_a_draw():
    session = GameSession()
    # X completes the main diagonal with the ninth mark
    play(session, [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2), (2, 1), (2, 0), (2, 2)])
    assert session.outcome is GameOutcome.X_WINS


@pytest.mark.parametrize("row, col", [(-1, 0), (0, -1), (3, 0), (0, 3), (5, 5)])
def test_out_of_range_rejected_without_change(row, col):
    session = GameSession()
    play(session, [(1, 1)])
    before = state_of(session)
    assert not session.apply_move(row, col)
    assert state_of(session) == before


def test_occupied_cell_rejected_without_change():
    session = GameSession()
    play(session, [(1, 1), (0, 0)])
    before = state_of(session)
    assert not session.apply_move(1, 1)
    assert not session.apply_move(0, 0)
    assert state_of(session) == before


def test_no_moves_after_game_over():
    session = GameSession()
    play(session, [(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)])
    before = state_of(session)
    assert not session.apply_move(2, 2)
    assert state_of(session) == before


def test_force_time_up_overrides_any_outcome():
    session = GameSession()
    session.force_time_up()
    assert session.outcome is GameOutcome.TIMED_OUT
    assert not session.apply_move(0, 0)

    session.reset()
    play(session, [(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)])
    session.force_time_up()
    assert session.outcome is GameOutcome.TIMED_OUT
    assert session.outcome.winner is None


def test_reset_matches_fresh_session():
    session = GameSession()
    play(session, [(0, 0), (1, 1), (2, 2)])
    session.force_time_up()
    session.reset()
    assert state_of(session) == state_of(GameSession())
    assert (session.snapshot() == EMPTY).all()


def test_snapshot_is_a_read_only_copy():
    session = GameSession()
    play(session, [(1, 1)])
    snap = session.snapshot()
    with pytest.raises(ValueError):
        snap[0, 0] = Player.O.value
    play(session, [(0, 0)])
    assert snap[0, 0] == EMPTY


def test_force_time_up_races_moves():
    # Whatever the interleaving, nothing lands on the board once TIMED_OUT is set
    for _ in range(50):
        session = GameSession()
        cells = [(r, c) for r in range(3) for c in range(3)]
        barrier = threading.Barrier(2)
        count_at_timeout = []

        def mover():
            barrier.wait()
            for row, col in cells:
                session.apply_move(row, col)

        def timer():
            barrier.wait()
            session.force_time_up()
            count_at_timeout.append(session.move_count)

        threads = [threading.Thread(target=mover), threading.Thread(target=timer)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert session.outcome is GameOutcome.TIMED_OUT
        assert session.move_count == count_at_timeout[0]


def test_render_shows_marks():
    session = GameSession()
    play(session, [(0, 0), (2, 2)])
    text = session.render()
    assert "X" in text and "O" in text
