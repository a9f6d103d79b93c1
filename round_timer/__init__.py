"""
Round timer module for the TicTacToe core.
Counts each round down independently of the game logic.
"""

from .config import TimerConfig
from .round_clock import RoundClock, ClockState, TimerListener
