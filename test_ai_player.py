"""
Tests for the AI strategies.
"""

import random
import threading
import time

import numpy as np
import pytest

from logic.ai_player import (
    CORNERS,
    Difficulty,
    HeuristicAI,
    MinimaxAI,
    RandomAI,
    SearchCancelled,
    create_ai,
)
from logic.config import GameConfig
from logic.player import Player, EMPTY
from logic.win_checker import WinChecker


class FastConfig(GameConfig):
    RANDOM_DELAY_RANGE = (0.0, 0.0)
    HEURISTIC_DELAY_RANGE = (0.0, 0.0)


def make_board(*rows):
    """Build a read-only grid from rows like "XO." ('.' = empty)."""
    values = {"X": Player.X.value, "O": Player.O.value, ".": EMPTY}
    board = np.array([[values[ch] for ch in row] for row in rows], dtype=np.int8)
    board.flags.writeable = False
    return board


EMPTY_BOARD = make_board("...", "...", "...")
FULL_BOARD = make_board("XOX", "XOO", "OXX")


@pytest.mark.parametrize("strategy_cls", [RandomAI, HeuristicAI, MinimaxAI])
def test_full_board_gives_no_move(strategy_cls):
    ai = strategy_cls(Player.O, config=FastConfig())
    assert ai.select_move(FULL_BOARD) is None


@pytest.mark.parametrize("strategy_cls", [RandomAI, HeuristicAI, MinimaxAI])
def test_move_is_an_empty_cell(strategy_cls):
    board = make_board("XO.", ".X.", "O..")
    ai = strategy_cls(Player.O, config=FastConfig(), rng=random.Random(3))
    row, col = ai.select_move(board)
    assert board[row, col] == EMPTY


def test_random_ai_covers_all_empty_cells():
    board = make_board("X..", ".O.", "..X")
    ai = RandomAI(Player.O, config=FastConfig(), rng=random.Random(7))
    seen = {ai.select_move(board) for _ in range(300)}
    assert seen == {(0, 1), (0, 2), (1, 0), (1, 2), (2, 0), (2, 1)}


class TestHeuristicAI:

    def make(self, seed=0):
        return HeuristicAI(Player.O, config=FastConfig(), rng=random.Random(seed))

    def test_prefers_winning_over_blocking(self):
        board = make_board("OO.", "XX.", "X..")
        assert self.make().select_move(board) == (0, 2)

    def test_blocks_opponent(self):
        board = make_board("XX.", ".O.", "...")
        assert self.make().select_move(board) == (0, 2)

    def test_takes_center(self):
        board = make_board("X..", "...", "...")
        assert self.make().select_move(board) == (1, 1)

    def test_takes_a_corner_when_center_is_gone(self):
        board = make_board("...", ".X.", "...")
        moves = {self.make(seed).select_move(board) for seed in range(40)}
        assert moves <= set(CORNERS)
        assert len(moves) > 1

    def test_falls_back_to_any_empty_cell(self):
        board = make_board("XOX", ".X.", "OXO")
        moves = {self.make(seed).select_move(board) for seed in range(40)}
        assert moves == {(1, 0), (1, 2)}


class TestMinimaxAI:

    def test_takes_immediate_win(self):
        board = make_board("OO.", "XX.", "X..")
        assert MinimaxAI(Player.O).select_move(board) == (0, 2)

    def test_blocks_opponent(self):
        board = make_board("XX.", ".O.", "...")
        assert MinimaxAI(Player.O).select_move(board) == (0, 2)

    def test_single_empty_cell_returned_directly(self):
        board = make_board("XOX", "XOO", "OX.")
        ai = MinimaxAI(Player.X)
        assert ai.select_move(board) == (2, 2)
        assert ai.moves_evaluated == 0

    def test_first_maximum_wins_ties(self):
        # Every opening draws under perfect play, so the first cell is kept
        ai = MinimaxAI(Player.X)
        assert ai.select_move(EMPTY_BOARD) == (0, 0)
        assert ai.moves_evaluated > 0

    def test_prefers_faster_win(self):
        # O can win now at (2, 2); other cells only win later, if at all
        board = make_board("O.X", "XO.", "X..")
        assert MinimaxAI(Player.O).select_move(board) == (2, 2)

    def test_never_loses_moving_second(self):
        """Exhaustive: every possible X line of play against HARD as O."""
        checker = WinChecker()
        ai = MinimaxAI(Player.O)
        results = {"draw": 0, "ai_win": 0}

        def opponent_turn(board):
            for row, col in zip(*np.where(board == EMPTY)):
                after_x = board.copy()
                after_x[row, col] = Player.X.value
                assert checker.check_winner(after_x) is not Player.X, after_x
                if checker.is_full(after_x):
                    results["draw"] += 1
                    continue

                move = ai.select_move(after_x)
                after_o = after_x.copy()
                after_o[move] = Player.O.value
                if checker.check_winner(after_o) is Player.O:
                    results["ai_win"] += 1
                elif checker.is_full(after_o):
                    results["draw"] += 1
                else:
                    opponent_turn(after_o)

        opponent_turn(np.zeros((3, 3), dtype=np.int8))
        assert results["draw"] + results["ai_win"] > 0

    def test_never_loses_moving_first_against_random_play(self):
        checker = WinChecker()
        ai = MinimaxAI(Player.X)
        rng = random.Random(11)

        for _ in range(10):
            board = np.zeros((3, 3), dtype=np.int8)
            mover = Player.X
            while checker.check_winner(board) is None and not checker.is_full(board):
                if mover is Player.X:
                    move = ai.select_move(board)
                else:
                    empty = list(zip(*np.where(board == EMPTY)))
                    move = rng.choice(empty)
                board[move] = mover.value
                mover = mover.next()
            assert checker.check_winner(board) is not Player.O

    def test_cancelled_search_raises(self):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(SearchCancelled):
            MinimaxAI(Player.X).select_move(EMPTY_BOARD, cancel_event=cancel)

    def test_cancel_during_search_stops_root_workers(self):
        ai = MinimaxAI(Player.X)
        uncancelled_started = time.monotonic()
        ai.select_move(EMPTY_BOARD)
        full_search = time.monotonic() - uncancelled_started

        cancel = threading.Event()
        timer = threading.Timer(0.03, cancel.set)
        started = time.monotonic()
        timer.start()
        try:
            with pytest.raises(SearchCancelled):
                ai.select_move(EMPTY_BOARD, cancel_event=cancel)
        finally:
            timer.cancel()
        assert time.monotonic() - started < max(0.5, full_search / 2)


def test_think_delay_wakes_on_cancel():
    class SlowConfig(GameConfig):
        RANDOM_DELAY_RANGE = (5.0, 5.0)

    ai = RandomAI(Player.O, config=SlowConfig())
    cancel = threading.Event()
    threading.Timer(0.05, cancel.set).start()

    started = time.monotonic()
    with pytest.raises(SearchCancelled):
        ai.select_move(EMPTY_BOARD, cancel_event=cancel)
    assert time.monotonic() - started < 2.0


def test_factory_builds_fresh_strategy_per_tier():
    expected = {
        Difficulty.EASY: RandomAI,
        Difficulty.MEDIUM: HeuristicAI,
        Difficulty.HARD: MinimaxAI,
    }
    for difficulty, cls in expected.items():
        first = create_ai(difficulty, Player.X)
        second = create_ai(difficulty, Player.X)
        assert type(first) is cls
        assert first is not second
        assert first.player is Player.X
        assert first.opponent is Player.O
        assert first.difficulty is difficulty


def test_tier_profiles_and_progress_messages():
    for difficulty in Difficulty:
        assert difficulty.profile.label
        assert difficulty.progress_messages
    assert len(Difficulty.HARD.progress_messages) == 2
