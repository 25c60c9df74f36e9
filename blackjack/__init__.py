"""Blackjack engine - 100% UI-agnostic."""

from blackjack.cards import Card, Shoe, Rank, Suit
from blackjack.errors import (
    BlackjackError,
    EmptyShoeError,
    IllegalActionError,
    InvalidBetError,
)
from blackjack.hand import Hand
from blackjack.ports import TablePort
from blackjack.session import EndReason, SessionController, SessionSummary

__all__ = [
    "Card",
    "Shoe",
    "Rank",
    "Suit",
    "Hand",
    "BlackjackError",
    "EmptyShoeError",
    "IllegalActionError",
    "InvalidBetError",
    "TablePort",
    "EndReason",
    "SessionController",
    "SessionSummary",
]
