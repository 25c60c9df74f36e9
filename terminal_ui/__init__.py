"""Terminal front end for the blackjack engine."""

from terminal_ui.ascii_cards import render_card, render_hand, render_hidden
from terminal_ui.console import ConsoleTable

__all__ = [
    "render_card",
    "render_hand",
    "render_hidden",
    "ConsoleTable",
]
