"""
Running statistics across rounds.
"""

import threading
from dataclasses import dataclass, field

from .game_session import GameOutcome


@dataclass
class RunningStatistics:
    """
    Aggregate counters for every finished round.

    A timed-out round is counted as a draw. Ongoing outcomes are ignored.
    """
    x_wins: int = 0
    o_wins: int = 0
    draws: int = 0
    total_rounds: int = 0
    total_elapsed_seconds: int = 0

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_round(self, outcome: GameOutcome, elapsed_seconds: int) -> bool:
        """
        Count one finished round.

        Returns:
            False if the outcome was ONGOING and nothing was recorded.
        """
        with self._lock:
            if outcome is GameOutcome.X_WINS:
                self.x_wins += 1
            elif outcome is GameOutcome.O_WINS:
                self.o_wins += 1
            elif outcome in (GameOutcome.DRAW, GameOutcome.TIMED_OUT):
                self.draws += 1
            else:
                return False

            self.total_rounds += 1
            self.total_elapsed_seconds += max(0, int(elapsed_seconds))
            return True

    @property
    def average_time(self) -> float:
        """Mean round length in seconds, 0 before any round is recorded."""
        with self._lock:
            if self.total_rounds == 0:
                return 0.0
            return self.total_elapsed_seconds / self.total_rounds

    def reset(self):
        with self._lock:
            self.x_wins = 0
            self.o_wins = 0
            self.draws = 0
            self.total_rounds = 0
            self.total_elapsed_seconds = 0
