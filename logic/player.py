"""
Players and cell codes shared by the session, win checker and AI.
"""

from enum import Enum


# Cell value for an unmarked square. Player marks use the Player values.
EMPTY = 0


class Player(Enum):
    """The two players in the game. X always moves first."""
    X = 1
    O = -1

    @property
    def symbol(self) -> str:
        """Display mark placed on the board."""
        return self.name

    def next(self) -> "Player":
        """Get the player who moves after this one."""
        return Player.O if self is Player.X else Player.X
