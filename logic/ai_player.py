"""
AI players for the TicTacToe core.

Three difficulty tiers, each with its own move-selection algorithm:
- EASY:   random empty cell
- MEDIUM: win / block / centre / corner heuristic
- HARD:   minimax with alpha-beta pruning, root moves evaluated in parallel
"""

import abc
import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, List

import numpy as np

from .config import GameConfig
from .player import Player
from .move_validator import MoveValidator
from .win_checker import WinChecker


logger = logging.getLogger(__name__)

Position = Tuple[int, int]

CENTER: Position = (1, 1)
CORNERS: List[Position] = [(0, 0), (0, 2), (2, 0), (2, 2)]


class SearchCancelled(Exception):
    """Raised inside a strategy when its cancellation token is set."""


@dataclass(frozen=True)
class TierProfile:
    """Human-readable description of a difficulty tier."""
    label: str
    description: str
    thinking_time: str
    algorithm: str


class Difficulty(Enum):
    """AI difficulty levels."""
    EASY = 1      # Random moves
    MEDIUM = 2    # Win / block heuristic
    HARD = 3      # Full minimax

    @property
    def profile(self) -> TierProfile:
        return TIER_PROFILES[self]

    @property
    def progress_messages(self) -> List[str]:
        """What the AI reports while it thinks, in order."""
        return PROGRESS_MESSAGES[self]


TIER_PROFILES = {
    Difficulty.EASY: TierProfile(
        label="Easy",
        description="Completely random moves",
        thinking_time="0.5-1.5 seconds",
        algorithm="Random selection",
    ),
    Difficulty.MEDIUM: TierProfile(
        label="Medium",
        description="Basic defensive strategy",
        thinking_time="0.3-0.8 seconds",
        algorithm="Heuristic (win / block / centre / corner)",
    ),
    Difficulty.HARD: TierProfile(
        label="Hard",
        description="Optimal play, never loses",
        thinking_time="0.5-2.0 seconds",
        algorithm="Minimax with alpha-beta pruning",
    ),
}

PROGRESS_MESSAGES = {
    Difficulty.EASY: ["Generating random move..."],
    Difficulty.MEDIUM: ["Analyzing defensive positions..."],
    Difficulty.HARD: ["Building decision tree...", "Evaluating with minimax..."],
}


class AIPlayer(abc.ABC):
    """
    Base class for the AI strategies.

    A strategy only ever sees a snapshot of the grid and never touches
    the live session. `select_move` may block (think delay, search), so
    callers run it off the thread that drives the UI.
    """

    difficulty: Difficulty

    def __init__(
        self,
        player: Player = Player.O,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize the AI player.

        Args:
            player: Which player the AI controls (default: O)
            config: Game configuration (delays, search depth).
            rng: Random source, injectable for reproducible games.
        """
        self.player = player
        self.opponent = player.next()
        self.config = config or GameConfig()
        self.rng = rng or random.Random()
        self.validator = MoveValidator(self.config)
        self.win_checker = WinChecker()

    @abc.abstractmethod
    def select_move(
        self,
        board: np.ndarray,
        cancel_event: Optional[threading.Event] = None
    ) -> Optional[Position]:
        """
        Pick the next move for `self.player`.

        Args:
            board: 3x3 grid snapshot.
            cancel_event: Cancellation token; when set the strategy raises
                SearchCancelled at its next check point.

        Returns:
            (row, col), or None if there is no empty cell.
        """

    def get_available_positions(self, board: np.ndarray) -> List[Position]:
        return self.validator.get_valid_moves(board)

    def _check_cancelled(self, cancel_event: Optional[threading.Event]):
        if cancel_event is not None and cancel_event.is_set():
            raise SearchCancelled()

    def _think(self, delay_range: Tuple[float, float], cancel_event: Optional[threading.Event]):
        """Pause for a random time in delay_range, waking early on cancel."""
        low, high = delay_range
        delay = self.rng.uniform(low, high) if high > 0 else 0.0
        if delay > 0:
            if cancel_event is None:
                time.sleep(delay)
            elif cancel_event.wait(delay):
                raise SearchCancelled()
        self._check_cancelled(cancel_event)


class RandomAI(AIPlayer):
    """Level 1: picks uniformly among empty cells."""

    difficulty = Difficulty.EASY

    def select_move(self, board, cancel_event=None):
        self._think(self.config.RANDOM_DELAY_RANGE, cancel_event)

        available = self.get_available_positions(board)
        if not available:
            return None

        return self.rng.choice(available)


class HeuristicAI(AIPlayer):
    """
    Level 2: basic attack and defence.

    Priority, first match wins:
    1. Complete our own line
    2. Block the opponent's line
    3. Take the centre
    4. Take a random free corner
    5. Anything free
    """

    difficulty = Difficulty.MEDIUM

    def select_move(self, board, cancel_event=None):
        self._think(self.config.HEURISTIC_DELAY_RANGE, cancel_event)

        available = self.get_available_positions(board)
        if not available:
            return None

        winning = self._find_winning_move(board, available, self.player)
        if winning is not None:
            return winning

        blocking = self._find_winning_move(board, available, self.opponent)
        if blocking is not None:
            return blocking

        if CENTER in available:
            return CENTER

        free_corners = [corner for corner in CORNERS if corner in available]
        if free_corners:
            return self.rng.choice(free_corners)

        return self.rng.choice(available)

    def _find_winning_move(
        self,
        board: np.ndarray,
        available: List[Position],
        player: Player
    ) -> Optional[Position]:
        for row, col in available:
            if self.win_checker.completes_line(board, row, col, player):
                return (row, col)
        return None


class MinimaxAI(AIPlayer):
    """
    Level 3: plays optimally using Minimax with alpha-beta pruning.

    The AI will win if possible, block the opponent if needed, and
    never lose (at worst, draw). Each candidate first move is scored
    in its own worker on its own board copy; ties go to the first
    maximum in row-major order.
    """

    difficulty = Difficulty.HARD

    WIN_SCORE = 10

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Positions evaluated by the last select_move (for debugging)
        self.moves_evaluated = 0

    def select_move(self, board, cancel_event=None):
        self.moves_evaluated = 0
        self._check_cancelled(cancel_event)

        available = self.get_available_positions(board)
        if not available:
            return None

        # Only one move, just take it
        if len(available) == 1:
            return available[0]

        workers = self.config.SEARCH_WORKERS or len(available)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="minimax") as pool:
            # map() keeps submission order, which fixes the tie-break
            results = list(pool.map(
                lambda position: self._score_root_move(board, position, cancel_event),
                available
            ))

        best_score = None
        best_move = None
        for position, (score, evaluated) in zip(available, results):
            self.moves_evaluated += evaluated
            if best_score is None or score > best_score:
                best_score = score
                best_move = position

        logger.debug(
            "Minimax evaluated %d positions. Best move: %s (score: %s)",
            self.moves_evaluated, best_move, best_score
        )
        return best_move

    def _score_root_move(
        self,
        board: np.ndarray,
        position: Position,
        cancel_event: Optional[threading.Event]
    ) -> Tuple[int, int]:
        """Score one candidate first move. Returns (score, positions evaluated)."""
        counter = [0]
        child = board.copy()
        child[position] = self.player.value
        score = self._minimax(
            child, depth=0, is_maximizing=False,
            alpha=float('-inf'), beta=float('inf'),
            counter=counter, cancel_event=cancel_event
        )
        return score, counter[0]

    def _minimax(
        self,
        board: np.ndarray,
        depth: int,
        is_maximizing: bool,
        alpha: float,
        beta: float,
        counter: List[int],
        cancel_event: Optional[threading.Event] = None
    ) -> int:
        """
        Minimax algorithm with alpha-beta pruning.

        Args:
            board: Position to evaluate (owned by this branch).
            depth: Plies below the root move.
            is_maximizing: True if it's the AI's turn.
            alpha: Alpha value for pruning.
            beta: Beta value for pruning.
            counter: One-element list accumulating positions visited.
            cancel_event: Checked on every call.

        Returns:
            The score of the position.
        """
        self._check_cancelled(cancel_event)
        counter[0] += 1

        # Check terminal states
        winner = self.win_checker.check_winner(board)
        if winner is self.player:
            return self.WIN_SCORE - depth   # Win (prefer faster wins)
        if winner is self.opponent:
            return depth - self.WIN_SCORE   # Loss (prefer slower losses)
        if self.win_checker.is_full(board) or depth >= self.config.MAX_SEARCH_DEPTH:
            return 0

        mark = self.player.value if is_maximizing else self.opponent.value

        if is_maximizing:
            max_score = float('-inf')
            for row, col in self.get_available_positions(board):
                child = board.copy()
                child[row, col] = mark
                score = self._minimax(child, depth + 1, False, alpha, beta, counter, cancel_event)
                max_score = max(max_score, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break  # Prune
            return max_score
        else:
            min_score = float('inf')
            for row, col in self.get_available_positions(board):
                child = board.copy()
                child[row, col] = mark
                score = self._minimax(child, depth + 1, True, alpha, beta, counter, cancel_event)
                min_score = min(min_score, score)
                beta = min(beta, score)
                if beta <= alpha:
                    break  # Prune
            return min_score


# Immutable tier -> strategy mapping
STRATEGIES = {
    Difficulty.EASY: RandomAI,
    Difficulty.MEDIUM: HeuristicAI,
    Difficulty.HARD: MinimaxAI,
}


def create_ai(
    difficulty: Difficulty,
    player: Player = Player.O,
    config: Optional[GameConfig] = None,
    rng: Optional[random.Random] = None
) -> AIPlayer:
    """
    Build a fresh strategy for a difficulty tier.

    Every call returns a new instance, so nothing carries over
    when the tier changes.
    """
    return STRATEGIES[difficulty](player, config=config, rng=rng)


# Quick test
if __name__ == "__main__":
    print("Testing AI players...")

    # X has two in the top row and threatens (0, 2)
    board = np.array([
        [1, 1, 0],
        [0, -1, 0],
        [0, 0, 0],
    ], dtype=np.int8)
    board.flags.writeable = False

    for difficulty in Difficulty:
        ai = create_ai(difficulty, Player.O)
        move = ai.select_move(board)
        print(f"{difficulty.profile.label:6} ({difficulty.profile.algorithm}): {move}")

    move = create_ai(Difficulty.HARD, Player.O).select_move(board)
    assert move == (0, 2), f"Expected (0, 2), got {move}"
    print("✓ Minimax correctly blocks the win!")

    print("\nAI players test done!")
