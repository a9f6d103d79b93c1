"""
Logic module for the TicTacToe core.
Handles game state, rules, statistics and the AI opponents.
"""

__version__ = "1.0.0"

from .config import GameConfig
from .player import Player, EMPTY
from .game_session import GameSession, GameOutcome, Move
from .move_validator import MoveValidator, ValidationResult
from .win_checker import WinChecker
from .ai_player import (
    AIPlayer,
    Difficulty,
    RandomAI,
    HeuristicAI,
    MinimaxAI,
    SearchCancelled,
    TierProfile,
    create_ai,
)
from .statistics import RunningStatistics
