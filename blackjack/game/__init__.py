"""Round engine and state management."""

from blackjack.game.actions import Action
from blackjack.game.events import EventEmitter, GameEvent, EventType
from blackjack.game.settlement import Outcome, Settlement, settle
from blackjack.game.state import RoundState
from blackjack.game.engine import RoundEngine, RoundResult

__all__ = [
    "Action",
    "EventEmitter",
    "GameEvent",
    "EventType",
    "Outcome",
    "Settlement",
    "settle",
    "RoundState",
    "RoundEngine",
    "RoundResult",
]
