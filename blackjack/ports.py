"""Display/input port the engine talks to."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Sequence

from blackjack.cards import Card
from blackjack.game.actions import Action


class TablePort(ABC):
    """
    Everything the engine needs from a user interface.

    Implementations own all rendering and raw input; they must only hand
    legal values back to the engine.
    """

    @abstractmethod
    def render_hand(self, cards: Sequence[Card], hide_first: bool = False) -> list[str]:
        """
        Render a hand as fixed-height display lines.

        Args:
            cards: Cards to draw, in deal order
            hide_first: Draw the first card face down (dealer hole card)
        """

    @abstractmethod
    def read_action(self, can_double: bool) -> Action:
        """Ask for the next action; DOUBLE only when ``can_double``."""

    @abstractmethod
    def read_bet(self, bankroll: Decimal) -> Decimal | None:
        """Ask for a bet in ``(0, bankroll]``; None ends the session."""

    @abstractmethod
    def read_yes_no(self, prompt: str) -> bool:
        """Ask a yes/no question."""
