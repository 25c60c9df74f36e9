"""Cards and the multi-deck shoe they are dealt from."""

from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Iterator

from blackjack.errors import EmptyShoeError

DECK_SIZE = 52


class Suit(Enum):
    """The four suits; each member's value is its printed symbol."""

    CLUBS = "♣"
    DIAMONDS = "♦"
    HEARTS = "♥"
    SPADES = "♠"

    def __str__(self) -> str:
        return self.value

    @property
    def letter(self) -> str:
        return self.name[0]


class Rank(Enum):
    """
    Card ranks in deck order.

    Each member carries the label printed on the card face and its point
    value in a hand (Ace counts 11 here; ``Hand`` handles the drop to 1).
    """

    TWO = ("2", 2)
    THREE = ("3", 3)
    FOUR = ("4", 4)
    FIVE = ("5", 5)
    SIX = ("6", 6)
    SEVEN = ("7", 7)
    EIGHT = ("8", 8)
    NINE = ("9", 9)
    TEN = ("10", 10)
    JACK = ("J", 10)
    QUEEN = ("Q", 10)
    KING = ("K", 10)
    ACE = ("A", 11)

    def __init__(self, label: str, points: int) -> None:
        self.label = label
        self.points = points

    def __str__(self) -> str:
        return self.label

    @property
    def is_ace(self) -> bool:
        return self is Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        return self.points == 10


# Accepts "10" and "T" for tens, letters or symbols for suits.
_RANKS_BY_LABEL = {rank.label: rank for rank in Rank} | {"T": Rank.TEN}
_SUITS_BY_CODE = {suit.letter: suit for suit in Suit} | {suit.value: suit for suit in Suit}


@dataclass(frozen=True, slots=True)
class Card:
    """A single immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank.label}{self.suit.value}"

    def __repr__(self) -> str:
        return f"Card({self.rank.label}{self.suit.letter})"

    @property
    def value(self) -> int:
        """Points this card adds to a hand, 2 through 11."""
        return self.rank.points

    @property
    def label(self) -> str:
        return self.rank.label

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        return self.rank.is_ten_value

    @classmethod
    def from_string(cls, code: str) -> "Card":
        """
        Parse a short card code such as ``"AS"``, ``"10h"``, ``"T♦"``.

        Raises:
            ValueError: If the rank or suit part is not recognised
        """
        code = code.strip().upper()
        rank = _RANKS_BY_LABEL.get(code[:-1])
        suit = _SUITS_BY_CODE.get(code[-1:])
        if rank is None or suit is None:
            raise ValueError(f"Invalid card code: {code!r}")
        return cls(rank, suit)


def standard_deck() -> list[Card]:
    """Return one ordered 52-card deck."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


class Shoe:
    """
    Several decks shuffled together and dealt from the top.

    A shoe only ever shrinks. When it runs low the session discards it
    and builds a new one instead of refilling it.
    """

    def __init__(self, num_decks: int = 6, rng: Random | None = None) -> None:
        """
        Build and shuffle ``num_decks`` standard decks.

        Args:
            num_decks: Number of 52-card decks in the shoe
            rng: Source of randomness for the shuffle; pass a seeded
                instance for a reproducible card order
        """
        if num_decks < 1:
            raise ValueError(f"A shoe needs at least one deck, got {num_decks}")

        self._num_decks = num_decks
        self._cards = standard_deck() * num_decks
        (rng or Random()).shuffle(self._cards)

    def draw(self) -> Card:
        """
        Deal the top card.

        Raises:
            EmptyShoeError: If every card has been dealt
        """
        try:
            return self._cards.pop()
        except IndexError:
            raise EmptyShoeError(f"All {self.total_cards} cards have been dealt") from None

    @property
    def num_decks(self) -> int:
        return self._num_decks

    @property
    def total_cards(self) -> int:
        return self._num_decks * DECK_SIZE

    @property
    def cards_remaining(self) -> int:
        return len(self._cards)

    @property
    def cards_dealt(self) -> int:
        return self.total_cards - self.cards_remaining

    def __len__(self) -> int:
        return self.cards_remaining

    def __iter__(self) -> Iterator[Card]:
        """Iterate over undealt cards, bottom of the shoe first."""
        return iter(self._cards)

    def __repr__(self) -> str:
        return f"<Shoe {self._num_decks} decks, {self.cards_remaining} left>"
