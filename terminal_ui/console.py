"""Line-based terminal implementation of the table port."""

import logging
import sys
from decimal import Decimal, InvalidOperation
from typing import Callable, Sequence, TextIO

from blackjack.cards import Card
from blackjack.game.actions import Action
from blackjack.game.events import EventType, GameEvent
from blackjack.game.settlement import Outcome
from blackjack.ports import TablePort
from blackjack.session import EndReason
from terminal_ui.ascii_cards import render_hand

logger = logging.getLogger(__name__)

CLEAR_SCREEN = "\033[2J\033[H"

KEY_BINDINGS = {
    "h": Action.HIT,
    "s": Action.STAND,
    "d": Action.DOUBLE,
    "q": Action.QUIT,
}


def format_money(amount: Decimal) -> str:
    """Format an amount as dollars, e.g. ``$1,250.00`` or ``-$5.00``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_delta(amount: Decimal) -> str:
    """Format a bankroll change with an explicit sign."""
    return ("+" if amount >= 0 else "") + format_money(amount)


class ConsoleTable(TablePort):
    """
    Plays the game on a text terminal.

    Input is read a line at a time through ``input_fn`` so tests can script
    it; output goes to ``stream``.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        stream: TextIO | None = None,
        clear_screen: bool = True,
    ) -> None:
        self._input = input_fn
        self._out = stream or sys.stdout
        self._clear_screen = clear_screen
        self._handlers: dict[EventType, Callable[[GameEvent], None]] = {
            EventType.SHOE_SHUFFLED: self._on_shoe_shuffled,
            EventType.ROUND_STARTED: self._on_table_changed,
            EventType.PLAYER_HIT: self._on_table_changed,
            EventType.PLAYER_DOUBLE: self._on_table_changed,
            EventType.PLAYER_BUSTS: self._on_player_busts,
            EventType.DEALER_REVEALS: self._on_dealer_reveals,
            EventType.DEALER_HITS: self._on_dealer_reveals,
            EventType.ROUND_ENDED: self._on_round_ended,
            EventType.GAME_ENDED: self._on_game_ended,
        }

    # Output

    def write(self, text: str = "") -> None:
        print(text, file=self._out)

    def clear(self) -> None:
        if self._clear_screen:
            self._out.write(CLEAR_SCREEN)
            self._out.flush()

    def show_banner(self) -> None:
        """Print the title and house rules."""
        self.write("=== BLACKJACK ===")
        self.write("Rules: blackjack pays 3:2, dealer stands on all 17s (soft 17 included).")
        self.write("Commands: [H]it, [S]tand, [D]ouble (first move only), [Q]uit")

    def render_hand(self, cards: Sequence[Card], hide_first: bool = False) -> list[str]:
        return render_hand(cards, hide_first)

    # Input

    def _ask(self, prompt: str) -> str | None:
        """Read one line; None once input is exhausted."""
        try:
            return self._input(prompt)
        except EOFError:
            logger.debug("Input closed while waiting for %r", prompt)
            return None

    def read_action(self, can_double: bool) -> Action:
        """Ask for the next move until a legal one is entered."""
        options = "[H]it/[S]tand" + ("/[D]ouble" if can_double else "") + "/[Q]uit"
        while True:
            line = self._ask(f"\nYour move ({options}): ")
            if line is None:
                return Action.QUIT

            action = KEY_BINDINGS.get(line.strip()[:1].lower())
            if action is Action.DOUBLE and not can_double:
                self.write("You can only double as your first move, with bankroll to cover it.")
                continue
            if action is not None:
                return action
            self.write("Unknown command.")

    def read_bet(self, bankroll: Decimal) -> Decimal | None:
        """Ask for a bet until a valid one (or nothing) is entered."""
        self.write(f"\nBankroll: {format_money(bankroll)}")
        while True:
            line = self._ask("Bet (ENTER to leave): ")
            if line is None or not line.strip():
                return None

            try:
                bet = Decimal(line.strip())
            except InvalidOperation:
                bet = None

            if bet is not None and bet.is_finite() and 0 < bet <= bankroll:
                return bet
            self.write("Invalid bet.")

    def read_yes_no(self, prompt: str) -> bool:
        """Blank means yes; anything starting with ``n`` means no."""
        line = self._ask(f"{prompt} [Y/n]: ")
        if line is None:
            return False
        return not line.strip().lower().startswith("n")

    # Events

    def handle_event(self, event: GameEvent) -> None:
        """Render an engine event; subscribe this to the session emitter."""
        handler = self._handlers.get(event.event_type)
        if handler is not None:
            handler(event)

    def _on_shoe_shuffled(self, event: GameEvent) -> None:
        self.write(f"Shuffling a fresh shoe ({event.data['cards']} cards).")

    def _on_table_changed(self, event: GameEvent) -> None:
        data = event.data
        self.clear()
        self.write("DEALER:")
        self._write_lines(self.render_hand(data["dealer"], hide_first=data["hide_dealer"]))
        self.write()
        self.write("PLAYER:")
        self._write_lines(self.render_hand(data["player"]))
        self.write(f"Score: {data['player_value']}    Bet: {format_money(data['bet'])}")

    def _on_player_busts(self, event: GameEvent) -> None:
        self.write(f"Bust! {event.data['hand_value']}")

    def _on_dealer_reveals(self, event: GameEvent) -> None:
        data = event.data
        self.write("\nDealer reveals:")
        self._write_lines(self.render_hand(data["dealer"]))
        self.write(f"Dealer score: {data['dealer_value']}")

    def _on_round_ended(self, event: GameEvent) -> None:
        data = event.data
        outcome: Outcome = data["outcome"]
        player, dealer = data["player_value"], data["dealer_value"]
        delta = format_delta(data["delta"])

        messages = {
            Outcome.BLACKJACK: f"BLACKJACK! {delta}",
            Outcome.DEALER_BLACKJACK: f"Dealer has blackjack. {delta}",
            Outcome.DEALER_BUST: f"Dealer bust ({dealer}). {delta}",
            Outcome.WIN: f"You win {player} vs {dealer}. {delta}",
            Outcome.LOSS: f"You lose {player} vs {dealer}. {delta}",
            Outcome.PUSH: f"Push {player} vs {dealer}.",
            Outcome.BUST: f"You lose {delta}.",
            Outcome.FORFEIT: f"Round forfeited. {delta}",
        }
        self.write(messages[outcome])
        self.write(f"Bankroll: {format_money(data['bankroll'])}")

    def _on_game_ended(self, event: GameEvent) -> None:
        data = event.data
        if data["reason"] is EndReason.BANKRUPT:
            self.write("Bankroll exhausted.")
        wins, losses, pushes = data["record"]
        self.write(
            f"Session over after {data['rounds']} rounds ({wins}W-{losses}L-{pushes}P). "
            f"Final bankroll {format_money(data['bankroll'])} ({format_delta(data['net'])})."
        )

    def _write_lines(self, lines: Sequence[str]) -> None:
        for line in lines:
            self.write(line)
