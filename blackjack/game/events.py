"""Events published by the round engine and session controller."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """What happened at the table, named ``<actor>.<what>``."""

    # Session
    GAME_STARTED = "game.started"
    GAME_ENDED = "game.ended"
    SHOE_SHUFFLED = "shoe.shuffled"
    BET_PLACED = "bet.placed"

    # Round
    ROUND_STARTED = "round.started"
    ROUND_ENDED = "round.ended"
    CARD_DEALT = "card.dealt"

    # Player
    PLAYER_HIT = "player.hit"
    PLAYER_STAND = "player.stand"
    PLAYER_DOUBLE = "player.double"
    PLAYER_QUIT = "player.quit"
    PLAYER_BLACKJACK = "player.blackjack"
    PLAYER_BUSTS = "player.busts"

    # Dealer
    DEALER_REVEALS = "dealer.reveals"
    DEALER_HITS = "dealer.hits"
    DEALER_STANDS = "dealer.stands"
    DEALER_BUSTS = "dealer.busts"
    DEALER_BLACKJACK = "dealer.blackjack"

    @property
    def actor(self) -> str:
        return self.value.partition(".")[0]


@dataclass(frozen=True)
class GameEvent:
    """
    Something that happened during play, with the details a renderer needs.

    The engine never prints; a presentation layer subscribes to these.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        details = ", ".join(f"{key}={value}" for key, value in self.data.items())
        return f"{self.event_type.value}({details})"


EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Synchronous publish/subscribe hub that also keeps every event it sends.

    Handlers registered for a specific type run before catch-all handlers,
    each group in subscription order.
    """

    def __init__(self) -> None:
        self._handlers: defaultdict[EventType | None, list[EventHandler]] = defaultdict(list)
        self._history: list[GameEvent] = []

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        """
        Register ``handler``.

        Args:
            handler: Called with each matching event
            event_type: Only deliver this type; None delivers everything
        """
        self._handlers[event_type].append(handler)

    def unsubscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        """Remove a handler registered with the same ``event_type``; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def emit(self, event: GameEvent) -> None:
        logger.debug("%s", event)
        self._history.append(event)
        for handler in [*self._handlers.get(event.event_type, ()), *self._handlers.get(None, ())]:
            handler(event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Build an event from keyword data, emit it and return it."""
        event = GameEvent(event_type, data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """A copy of every event emitted so far."""
        return list(self._history)

    def types(self) -> list[EventType]:
        return [event.event_type for event in self._history]

    def clear_history(self) -> None:
        self._history.clear()
