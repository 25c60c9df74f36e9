"""Player actions."""

from enum import Enum


class Action(Enum):
    """Everything a player can do during their turn."""

    HIT = "hit"
    STAND = "stand"
    DOUBLE = "double"
    QUIT = "quit"

    def __str__(self) -> str:
        return self.value
