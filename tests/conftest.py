"""Pytest fixtures for blackjack tests."""

from collections import deque
from decimal import Decimal
from random import Random

import pytest

from blackjack.cards import Card, Shoe, Rank, Suit
from blackjack.game.events import EventEmitter
from blackjack.hand import Hand
from blackjack.ports import TablePort


def hand_of(*codes: str) -> Hand:
    """Build a hand from card codes like 'AS', '10H'."""
    hand = Hand()
    for code in codes:
        hand.add_card(Card.from_string(code))
    return hand


class StackedShoe(Shoe):
    """A shoe that deals the given cards first, in order.

    Deal order for a round is player, dealer, player, dealer, then hits.
    """

    def __init__(self, *codes: str, filler_decks: int = 1) -> None:
        super().__init__(num_decks=filler_decks, rng=Random(0))
        stacked = [Card.from_string(code) for code in codes]
        # draw() pops from the end of the list
        self._cards.extend(reversed(stacked))


class ScriptedPort(TablePort):
    """Table port that replays canned answers and records what it was asked."""

    def __init__(self, actions=(), bets=(), answers=()) -> None:
        self.actions = deque(actions)
        self.bets = deque(bets)
        self.answers = deque(answers)
        self.double_offers: list[bool] = []
        self.bankrolls_seen: list[Decimal] = []
        self.prompts: list[str] = []

    def render_hand(self, cards, hide_first=False):
        return [" ".join("??" if hide_first and i == 0 else str(c) for i, c in enumerate(cards))]

    def read_action(self, can_double):
        self.double_offers.append(can_double)
        return self.actions.popleft()

    def read_bet(self, bankroll):
        self.bankrolls_seen.append(bankroll)
        return self.bets.popleft() if self.bets else None

    def read_yes_no(self, prompt):
        self.prompts.append(prompt)
        return self.answers.popleft() if self.answers else False


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A shuffled 6-deck shoe."""
    return Shoe(num_decks=6, rng=rng)


@pytest.fixture
def events():
    return EventEmitter()


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.KING, Suit.HEARTS))
    return hand


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return hand_of("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return hand_of("10S", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return hand_of("10S", "6H", "KC")


@pytest.fixture
def port():
    return ScriptedPort()

