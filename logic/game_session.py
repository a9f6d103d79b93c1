"""
Game session management for the TicTacToe core.
Tracks the board, current player, move history and outcome.
"""

import logging
import threading
from enum import Enum
from typing import Optional, List, Tuple
from dataclasses import dataclass

import numpy as np

from .config import GameConfig
from .player import Player, EMPTY
from .move_validator import MoveValidator
from .win_checker import WinChecker


logger = logging.getLogger(__name__)


class GameOutcome(Enum):
    """Result of a round. Anything but ONGOING is terminal."""
    ONGOING = "ongoing"
    X_WINS = "x_wins"
    O_WINS = "o_wins"
    DRAW = "draw"
    TIMED_OUT = "timed_out"

    @classmethod
    def won_by(cls, player: Player) -> "GameOutcome":
        return cls.X_WINS if player is Player.X else cls.O_WINS

    @property
    def winner(self) -> Optional[Player]:
        if self is GameOutcome.X_WINS:
            return Player.X
        if self is GameOutcome.O_WINS:
            return Player.O
        return None

    @property
    def is_terminal(self) -> bool:
        return self is not GameOutcome.ONGOING


@dataclass(frozen=True)
class Move:
    """
    A move in the game.
    """
    player: Player          # Who made the move
    row: int                # Row (0-2)
    col: int                # Column (0-2)
    move_number: int        # 1-based position in the round


class GameSession:
    """
    The complete state of one TicTacToe round.

    Tracks:
    - The 3x3 board (int8 grid: 0 empty, 1 X, -1 O)
    - Current player
    - Move count and history
    - Outcome (ongoing, won, draw, timed out)

    Board and outcome are guarded by one lock: the round timer may call
    force_time_up() from its own thread while a move is being applied.
    """

    STARTING_PLAYER = Player.X

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self.validator = MoveValidator(self.config)
        self.win_checker = WinChecker()

        self._lock = threading.RLock()
        size = self.config.BOARD_SIZE
        self._board = np.full((size, size), EMPTY, dtype=np.int8)
        self._current_player = self.STARTING_PLAYER
        self._move_count = 0
        self._moves: List[Move] = []
        self._outcome = GameOutcome.ONGOING

    # ==================== MUTATORS ====================

    def apply_move(self, row: int, col: int) -> bool:
        """
        Mark (row, col) for the current player.

        Args:
            row: Row index (0-2).
            col: Column index (0-2).

        Returns:
            True if the move was applied, False if it was rejected
            (off the board, occupied cell, or round already over).
            A rejected move leaves the session untouched.
        """
        with self._lock:
            result = self.validator.validate_move(
                self._board, row, col,
                is_game_over=self._outcome.is_terminal
            )
            if not result.is_valid:
                logger.debug("Rejected move (%s, %s): %s", row, col, result.error_message)
                return False

            player = self._current_player
            self._board[row, col] = player.value
            self._move_count += 1
            self._moves.append(Move(player, row, col, self._move_count))

            self._outcome = self.evaluate_outcome()

            # Only hand over the turn while the round continues
            if self._outcome is GameOutcome.ONGOING:
                self._current_player = player.next()

            logger.debug("%s -> (%s, %s), outcome %s", player.symbol, row, col, self._outcome.value)
            return True

    def evaluate_outcome(self) -> GameOutcome:
        """
        Work out the outcome from the board alone.

        Rows, then columns, then the two diagonals; the first complete
        line decides. A full board with no line is a draw.
        """
        with self._lock:
            winner = self.win_checker.check_winner(self._board)
            if winner is not None:
                return GameOutcome.won_by(winner)
            if self._move_count == self.config.TOTAL_CELLS:
                return GameOutcome.DRAW
            return GameOutcome.ONGOING

    def force_time_up(self):
        """End the round because the clock ran out, whatever the current outcome."""
        with self._lock:
            self._outcome = GameOutcome.TIMED_OUT
        logger.debug("Round forced to TIMED_OUT")

    def reset(self):
        """Clear the board for a new round. X moves first."""
        with self._lock:
            self._board.fill(EMPTY)
            self._current_player = self.STARTING_PLAYER
            self._move_count = 0
            self._moves = []
            self._outcome = GameOutcome.ONGOING

    # ==================== READ ACCESSORS ====================

    @property
    def current_player(self) -> Player:
        with self._lock:
            return self._current_player

    @property
    def move_count(self) -> int:
        with self._lock:
            return self._move_count

    @property
    def outcome(self) -> GameOutcome:
        with self._lock:
            return self._outcome

    @property
    def moves(self) -> List[Move]:
        with self._lock:
            return list(self._moves)

    def is_finished(self) -> bool:
        return self.outcome.is_terminal

    def get_cell(self, row: int, col: int) -> Optional[Player]:
        """Player occupying (row, col), None if empty or off the board."""
        if not self.validator.in_bounds(row, col):
            return None
        with self._lock:
            value = int(self._board[row, col])
        return None if value == EMPTY else Player(value)

    def cell_symbol(self, row: int, col: int) -> str:
        """Display mark at (row, col), or an empty string."""
        player = self.get_cell(row, col)
        return player.symbol if player else ""

    def get_empty_cells(self) -> List[Tuple[int, int]]:
        """
        Get all empty cells on the board.

        Returns:
            List of (row, col) tuples.
        """
        with self._lock:
            return self.validator.get_valid_moves(self._board)

    def get_winning_line(self) -> Optional[List[Tuple[int, int]]]:
        with self._lock:
            return self.win_checker.get_winning_line(self._board)

    def snapshot(self) -> np.ndarray:
        """
        Read-only copy of the grid, safe to hand to another thread.
        """
        with self._lock:
            board = self._board.copy()
        board.flags.writeable = False
        return board

    def render(self) -> str:
        """Board as text, for the console."""
        lines = ["", "    0   1   2", "  +---+---+---+"]
        for row in range(self.config.BOARD_SIZE):
            cells = " | ".join(self.cell_symbol(row, col) or " " for col in range(self.config.BOARD_SIZE))
            lines.append(f"{row} | {cells} |")
            lines.append("  +---+---+---+")
        return "\n".join(lines)

    def print_board(self):
        """Print the board to console."""
        print(self.render())

        outcome = self.outcome
        if outcome.winner:
            print(f"\n{outcome.winner.symbol} WINS!")
        elif outcome is GameOutcome.DRAW:
            print("\nIt's a DRAW!")
        elif outcome is GameOutcome.TIMED_OUT:
            print("\nTime's up!")
        else:
            print(f"\nCurrent turn: {self.current_player.symbol}")


# Quick test
if __name__ == "__main__":
    print("Testing GameSession...")

    game = GameSession()

    # Simulate a game
    moves = [
        (1, 1),  # X center
        (0, 0),  # O top-left
        (0, 2),  # X top-right
        (2, 2),  # O bottom-right
        (2, 0),  # X bottom-left - anti-diagonal win
    ]

    for row, col in moves:
        print(f"\n{game.current_player.symbol} moves to ({row}, {col})")
        game.apply_move(row, col)
        game.print_board()

    print("\nGameSession test done!")
