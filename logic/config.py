"""
Game configuration for the TicTacToe core.
Board dimensions, search limits and AI pacing.
"""

from typing import Tuple


class GameConfig:
    """
    Configuration class for game rules and AI settings.
    Override values by subclassing or by setting attributes on an instance.
    """

    # ==================== BOARD SETTINGS ====================
    # TicTacToe is a 3x3 grid
    BOARD_SIZE = 3
    TOTAL_CELLS = BOARD_SIZE * BOARD_SIZE

    # ==================== SEARCH SETTINGS ====================
    # Full remaining game tree fits in 9 plies
    MAX_SEARCH_DEPTH = 9

    # Worker threads for evaluating HARD root moves (None = one per candidate)
    SEARCH_WORKERS = None

    # ==================== AI PACING (seconds) ====================
    # Artificial "thinking" time so moves are perceptible.
    # Set both ends to 0.0 to disable.
    RANDOM_DELAY_RANGE: Tuple[float, float] = (0.5, 1.5)
    HEURISTIC_DELAY_RANGE: Tuple[float, float] = (0.3, 0.8)

    # Gap between the two HARD progress messages
    HARD_PROGRESS_DELAY_S = 0.5
