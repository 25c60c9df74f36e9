"""Round state enumeration."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round state machine states.

    Flow: DEALING → NATURAL_CHECK → PLAYER_TURN → DEALER_TURN → SETTLEMENT → DONE
    """

    # Initial two cards each
    DEALING = auto()

    # Either hand a blackjack?
    NATURAL_CHECK = auto()

    # Player actions
    PLAYER_TURN = auto()

    # Dealer draws to 17
    DEALER_TURN = auto()

    # Computing the payout
    SETTLEMENT = auto()

    # Round finished, result available
    DONE = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()
