"""
Move validator for the TicTacToe core.
Validates that moves follow the rules.
"""

from typing import Optional, Tuple, List
from dataclasses import dataclass

import numpy as np

from .config import GameConfig
from .player import EMPTY


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


class MoveValidator:
    """
    Validates TicTacToe moves.

    Rules:
    1. Row and column must be on the board
    2. Can only place on empty cells
    3. Game must not be over
    """

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()

    def in_bounds(self, row: int, col: int) -> bool:
        size = self.config.BOARD_SIZE
        return 0 <= row < size and 0 <= col < size

    def validate_move(
        self,
        board: np.ndarray,
        row: int,
        col: int,
        is_game_over: bool = False
    ) -> ValidationResult:
        """
        Validate a move.

        Args:
            board: Current 3x3 grid.
            row: Row to mark (0-2).
            col: Column to mark (0-2).
            is_game_over: Whether the round already has an outcome.

        Returns:
            ValidationResult with is_valid and error_message.
        """
        # Check if game is over
        if is_game_over:
            return ValidationResult(
                is_valid=False,
                error_message="Game is already over!"
            )

        # Check if row/col are in valid range
        if not self.in_bounds(row, col):
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid position ({row}, {col}). Must be 0-2."
            )

        # Check if cell is empty
        if board[row, col] != EMPTY:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell ({row}, {col}) is already occupied"
            )

        return ValidationResult(is_valid=True)

    def get_valid_moves(self, board: np.ndarray, is_game_over: bool = False) -> List[Tuple[int, int]]:
        """
        Get all valid moves, in row-major order.

        Returns:
            List of (row, col) valid move positions.
        """
        if is_game_over:
            return []

        rows, cols = np.where(board == EMPTY)
        return list(zip(rows.tolist(), cols.tolist()))


# Quick test
if __name__ == "__main__":
    print("Testing MoveValidator...")

    board = np.zeros((3, 3), dtype=np.int8)
    validator = MoveValidator()

    # Test valid move
    result = validator.validate_move(board, 1, 1)
    print(f"Move (1,1): valid={result.is_valid}, error={result.error_message}")

    # Make the move
    board[1, 1] = 1

    # Test invalid move (same cell)
    result = validator.validate_move(board, 1, 1)
    print(f"Move (1,1) again: valid={result.is_valid}, error={result.error_message}")

    # Test out of range
    result = validator.validate_move(board, 5, 5)
    print(f"Move (5,5): valid={result.is_valid}, error={result.error_message}")

    # Get valid moves
    print(f"Valid moves: {validator.get_valid_moves(board)}")

    print("\nMoveValidator test done!")
