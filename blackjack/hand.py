"""Blackjack hand scoring."""

from dataclasses import dataclass, field
from typing import Iterator, NamedTuple

from blackjack.cards import Card

BLACKJACK = 21


class Score(NamedTuple):
    total: int
    soft: bool


def score(cards: list[Card]) -> Score:
    """
    Score a run of cards.

    Aces are counted as 11 and then dropped to 1, one at a time, for as
    long as the total is over 21. The hand is soft when an Ace is still
    counted as 11 at the end.
    """
    total = sum(card.value for card in cards)
    high_aces = sum(1 for card in cards if card.is_ace)
    while total > BLACKJACK and high_aces:
        total -= 10
        high_aces -= 1
    return Score(total, high_aces > 0)


@dataclass
class Hand:
    """Cards held by the player or the dealer for one round."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        self.cards.append(card)

    @property
    def value(self) -> int:
        """Current score; never cached, so it always reflects every card."""
        return score(self.cards).total

    @property
    def is_soft(self) -> bool:
        return score(self.cards).soft

    @property
    def is_blackjack(self) -> bool:
        """A two-card 21."""
        return len(self.cards) == 2 and self.value == BLACKJACK

    @property
    def is_busted(self) -> bool:
        return self.value > BLACKJACK

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        total, soft = score(self.cards)
        if self.is_blackjack:
            status = "BLACKJACK"
        elif total > BLACKJACK:
            status = "BUST"
        else:
            status = f"soft {total}" if soft else str(total)
        return " ".join([*map(str, self.cards), f"({status})"])

    def __repr__(self) -> str:
        return f"<Hand {' '.join(map(str, self.cards))} = {self.value}>"
