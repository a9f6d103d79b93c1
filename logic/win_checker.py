"""
Win checker for the TicTacToe core.
Finds completed lines on a board grid.
"""

from typing import Optional, List, Tuple

import numpy as np

from .player import Player, EMPTY


class WinChecker:
    """
    Checks for win conditions in TicTacToe.

    Win condition: 3 marks of the same player in a row
    (horizontally, vertically, or diagonally).

    Works directly on the numpy grid so it can be shared by the
    session and by the AI strategies (which only see snapshots).
    """

    # All possible winning lines (as list of (row, col) tuples).
    # Scan order: rows, columns, main diagonal, anti-diagonal.
    WINNING_LINES = [
        # Rows
        [(0, 0), (0, 1), (0, 2)],
        [(1, 0), (1, 1), (1, 2)],
        [(2, 0), (2, 1), (2, 2)],
        # Columns
        [(0, 0), (1, 0), (2, 0)],
        [(0, 1), (1, 1), (2, 1)],
        [(0, 2), (1, 2), (2, 2)],
        # Diagonals
        [(0, 0), (1, 1), (2, 2)],
        [(0, 2), (1, 1), (2, 0)],
    ]

    # Index arrays for pulling all 8 lines out of the grid at once -> shape (8, 3)
    _LINE_ROWS = np.array([[r for r, _ in line] for line in WINNING_LINES])
    _LINE_COLS = np.array([[c for _, c in line] for line in WINNING_LINES])

    def _winning_line_index(self, board: np.ndarray) -> Optional[int]:
        """Index into WINNING_LINES of the first completed line, or None."""
        lines = board[self._LINE_ROWS, self._LINE_COLS]
        # Cells are +1 / -1 / 0, so only a full line of one player sums to +-3
        sums = lines.sum(axis=1, dtype=np.int16)
        hits = np.flatnonzero(np.abs(sums) == 3)
        if hits.size == 0:
            return None
        return int(hits[0])

    def check_winner(self, board: np.ndarray) -> Optional[Player]:
        """
        Check if there's a winner.

        Args:
            board: 3x3 int8 grid (0 empty, 1 X, -1 O).

        Returns:
            The winning Player, or None if no line is complete.
        """
        index = self._winning_line_index(board)
        if index is None:
            return None
        row, col = self.WINNING_LINES[index][0]
        return Player(int(board[row, col]))

    def get_winning_line(self, board: np.ndarray) -> Optional[List[Tuple[int, int]]]:
        """
        Get the winning line if there is one.

        Returns:
            The winning line as list of (row, col), or None.
        """
        index = self._winning_line_index(board)
        if index is None:
            return None
        return list(self.WINNING_LINES[index])

    def is_full(self, board: np.ndarray) -> bool:
        """True if no empty cell remains."""
        return not bool((board == EMPTY).any())

    def completes_line(self, board: np.ndarray, row: int, col: int, player: Player) -> bool:
        """
        Would placing `player` at (row, col) complete a line for them?

        The mark is simulated on a scratch copy; `board` is never touched.
        """
        scratch = board.copy()
        scratch[row, col] = player.value
        return self.check_winner(scratch) == player


# Quick test
if __name__ == "__main__":
    print("Testing WinChecker...")

    checker = WinChecker()

    # Test 1: Horizontal win
    board = np.array([
        [1, 1, 1],
        [0, -1, 0],
        [-1, 0, 0],
    ], dtype=np.int8)
    winner = checker.check_winner(board)
    print(f"Test 1 (horizontal): winner = {winner}")
    assert winner is Player.X

    # Test 2: Anti-diagonal win
    board = np.array([
        [1, 1, -1],
        [0, -1, 1],
        [-1, 0, 0],
    ], dtype=np.int8)
    winner = checker.check_winner(board)
    print(f"Test 2 (anti-diagonal): winner = {winner}, line = {checker.get_winning_line(board)}")
    assert winner is Player.O

    # Test 3: No winner yet, but X can complete the top row
    board = np.array([
        [1, 1, 0],
        [0, -1, 0],
        [-1, 0, 0],
    ], dtype=np.int8)
    print(f"Test 3 (open): winner = {checker.check_winner(board)}, "
          f"X completes (0,2) = {checker.completes_line(board, 0, 2, Player.X)}")
    assert checker.check_winner(board) is None

    print("\nWinChecker test done!")
