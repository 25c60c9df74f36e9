"""Box-drawing card art for the terminal."""

from typing import Sequence

from blackjack.cards import Card

CARD_HEIGHT = 7
CARD_WIDTH = 11


def render_card(card: Card) -> list[str]:
    """Render one face-up card as seven lines of box art."""
    rank = card.label
    suit = str(card.suit)
    return [
        "┌─────────┐",
        f"│{rank:<2}       │",
        "│         │",
        f"│    {suit}    │",
        "│         │",
        f"│       {rank:>2}│",
        "└─────────┘",
    ]


def render_hidden() -> list[str]:
    """Render a face-down card, same size as a face-up one."""
    return ["┌─────────┐"] + ["│░░░░░░░░░│"] * 5 + ["└─────────┘"]


def render_hand(cards: Sequence[Card], hide_first: bool = False) -> list[str]:
    """
    Render a hand side by side.

    Args:
        cards: Cards in deal order
        hide_first: Show the first card face down

    Returns:
        Seven display lines, cards separated by one space
    """
    rendered = [
        render_hidden() if hide_first and i == 0 else render_card(card)
        for i, card in enumerate(cards)
    ]
    return [" ".join(art[row] for art in rendered) for row in range(CARD_HEIGHT)]
