"""
Control module for the TicTacToe core.
Sequences human and AI turns against the round clock.
"""

from .events import (
    AIListener,
    GameListener,
    EventQueue,
    RoundStarted,
    TimerUpdate,
    TimerWarning,
    TimerFinished,
    AIThinking,
    AIProgress,
    AIMoveCompleted,
    AIError,
    RoundFinished,
)
from .game_controller import GameController
