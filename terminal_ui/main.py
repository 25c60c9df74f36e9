"""Command-line entry point for terminal blackjack."""

import argparse
import logging
import sys
from decimal import Decimal, InvalidOperation
from random import Random
from typing import Any, Callable, Iterable, TextIO

from blackjack.game.events import EventEmitter
from blackjack.session import EndReason, SessionController
from config import AppConfig, GameConfig, LoggingConfig
from terminal_ui.console import ConsoleTable

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _amount(value: str) -> Decimal:
    """argparse type for money amounts."""
    try:
        amount = Decimal(value)
    except InvalidOperation:
        amount = None
    if amount is None or not amount.is_finite():
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    return amount


def build_parser() -> argparse.ArgumentParser:
    """Command-line flags; anything left unset falls back to the environment."""
    parser = argparse.ArgumentParser(description="Play blackjack against the house in your terminal.")
    parser.add_argument("--decks", type=int, help="Number of decks in the shoe (BLACKJACK_DECKS)")
    parser.add_argument("--bankroll", type=_amount, help="Starting bankroll (BLACKJACK_BANKROLL)")
    parser.add_argument("--seed", type=int, help="Seed the shuffle for a repeatable game (BLACKJACK_SEED)")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging verbosity (LOG_LEVEL)",
    )
    parser.add_argument("--log-file", dest="log_file", help="Write logs to this file (LOG_FILE)")
    parser.add_argument(
        "--no-clear",
        dest="clear_screen",
        action="store_false",
        default=None,
        help="Do not clear the screen between moves",
    )
    return parser


def _given(**values: Any) -> dict[str, Any]:
    return {name: value for name, value in values.items() if value is not None}


def load_config(args: argparse.Namespace) -> AppConfig:
    """
    Merge command-line flags over environment settings.

    Raises:
        ValueError: If a setting from either source is invalid
    """
    game = GameConfig(**_given(num_decks=args.decks, starting_bankroll=args.bankroll, seed=args.seed))
    log = LoggingConfig(**_given(level=args.log_level, file=args.log_file))
    return AppConfig(game=game, logging=log, **_given(clear_screen=args.clear_screen))


def setup_logging(level: str, log_file: str | None = None) -> None:
    """Send logs to ``log_file``, or stderr when none is given."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        filename=log_file,
        force=True,
    )


def main(
    argv: Iterable[str] | None = None,
    input_fn: Callable[[str], str] = input,
    stream: TextIO | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        app_config = load_config(args)
    except ValueError as exc:
        parser.error(str(exc))

    game_config = app_config.game
    setup_logging("DEBUG" if app_config.debug else app_config.logging.level, app_config.logging.file)
    logger.info(
        "Starting: %d decks, bankroll %s, seed %s",
        game_config.num_decks,
        game_config.starting_bankroll,
        game_config.seed,
    )

    console = ConsoleTable(input_fn=input_fn, stream=stream, clear_screen=app_config.clear_screen)
    console.show_banner()

    # One random source for every shoe of every session
    rng = Random(game_config.seed)
    try:
        while True:
            events = EventEmitter()
            events.subscribe(console.handle_event)
            session = SessionController(
                console,
                num_decks=game_config.num_decks,
                starting_bankroll=game_config.starting_bankroll,
                rng=rng,
                events=events,
            )
            summary = session.run()
            if summary.end_reason is EndReason.QUIT:
                break
            if not console.read_yes_no("Start a new game?"):
                break
    except KeyboardInterrupt:
        console.write()
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
