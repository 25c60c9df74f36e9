"""Exceptions raised by the blackjack engine."""


class BlackjackError(Exception):
    """Base class for all engine errors."""


class EmptyShoeError(BlackjackError, IndexError):
    """A card was drawn from an exhausted shoe.

    The session replaces the shoe before it can run dry, so this signals a
    broken reshuffle policy rather than a recoverable condition.
    """


class InvalidBetError(BlackjackError, ValueError):
    """A bet outside ``(0, bankroll]`` reached the engine."""


class IllegalActionError(BlackjackError, ValueError):
    """A player action that is not allowed in the current round state."""
