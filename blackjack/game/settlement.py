"""Payout rules for a finished round."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from blackjack.hand import Hand

# 3:2
BLACKJACK_PAYOUT = Decimal("1.5")


class Outcome(Enum):
    """How a round ended, from the player's point of view."""

    BLACKJACK = "blackjack"
    DEALER_BLACKJACK = "dealer blackjack"
    DEALER_BUST = "dealer bust"
    WIN = "win"
    LOSS = "loss"
    PUSH = "push"
    BUST = "bust"
    FORFEIT = "forfeit"

    def __str__(self) -> str:
        return self.value

    @property
    def is_win(self) -> bool:
        return self in (Outcome.BLACKJACK, Outcome.DEALER_BUST, Outcome.WIN)

    @property
    def is_loss(self) -> bool:
        return self in (
            Outcome.DEALER_BLACKJACK,
            Outcome.LOSS,
            Outcome.BUST,
            Outcome.FORFEIT,
        )


@dataclass(frozen=True)
class Settlement:
    """Bankroll change and outcome label for one bet."""

    outcome: Outcome
    delta: Decimal


def settle_natural(player: Hand, dealer: Hand, bet: Decimal) -> Settlement:
    """
    Settle a round where at least one side was dealt a blackjack.

    Raises:
        ValueError: If neither hand is a blackjack
    """
    if player.is_blackjack and dealer.is_blackjack:
        return Settlement(Outcome.PUSH, Decimal("0"))
    if player.is_blackjack:
        return Settlement(Outcome.BLACKJACK, bet * BLACKJACK_PAYOUT)
    if dealer.is_blackjack:
        return Settlement(Outcome.DEALER_BLACKJACK, -bet)
    raise ValueError("settle_natural called without a blackjack on the table")


def settle(player: Hand, dealer: Hand, bet: Decimal) -> Settlement:
    """
    Settle a finished round.

    Args:
        player: The player's final hand
        dealer: The dealer's final hand (as dealt if the player busted)
        bet: The final bet, already doubled if the player doubled down

    Returns:
        Settlement with the signed bankroll delta
    """
    if player.is_blackjack or dealer.is_blackjack:
        return settle_natural(player, dealer, bet)

    if player.is_busted:
        return Settlement(Outcome.BUST, -bet)

    if dealer.is_busted:
        return Settlement(Outcome.DEALER_BUST, bet)

    player_value = player.value
    dealer_value = dealer.value
    if player_value > dealer_value:
        return Settlement(Outcome.WIN, bet)
    if player_value < dealer_value:
        return Settlement(Outcome.LOSS, -bet)
    return Settlement(Outcome.PUSH, Decimal("0"))


def forfeit(bet: Decimal) -> Settlement:
    """Settlement for a round abandoned mid-play."""
    return Settlement(Outcome.FORFEIT, -bet)
