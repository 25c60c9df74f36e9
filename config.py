"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation


def _env_int(name: str, default: str) -> int:
    """Read an integer environment variable, naming it when it is malformed."""
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} is not an integer: {raw!r}") from None


def _parse_seed() -> int | None:
    """Parse BLACKJACK_SEED; unset or blank means an unseeded shuffle."""
    if not os.getenv("BLACKJACK_SEED", "").strip():
        return None
    return _env_int("BLACKJACK_SEED", "")


def _parse_bankroll() -> Decimal:
    """Parse BLACKJACK_BANKROLL as an exact decimal amount."""
    raw = os.getenv("BLACKJACK_BANKROLL", "200")
    try:
        amount = Decimal(raw)
    except InvalidOperation:
        amount = None
    if amount is None or not amount.is_finite():
        raise ValueError(f"BLACKJACK_BANKROLL is not a number: {raw!r}")
    return amount


@dataclass(frozen=True)
class GameConfig:
    """Table configuration; every other house rule is fixed."""

    num_decks: int = field(default_factory=lambda: _env_int("BLACKJACK_DECKS", "6"))
    starting_bankroll: Decimal = field(default_factory=_parse_bankroll)
    seed: int | None = field(default_factory=_parse_seed)

    def __post_init__(self) -> None:
        """Validate settings."""
        if self.num_decks < 1 or self.num_decks > 8:
            raise ValueError("num_decks must be between 1 and 8")
        if not self.starting_bankroll > 0:
            raise ValueError("starting_bankroll must be positive")


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING").upper())
    file: str | None = field(default_factory=lambda: os.getenv("LOG_FILE") or None)


@dataclass(frozen=True)
class AppConfig:
    """
    Application configuration.

    Construction reads the environment and raises ValueError on a bad
    value; command-line overrides are passed in as keyword arguments.
    """

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    clear_screen: bool = field(
        default_factory=lambda: os.getenv("BLACKJACK_CLEAR_SCREEN", "true").lower() == "true"
    )

    game: GameConfig = field(default_factory=GameConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

