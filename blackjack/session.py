"""Session controller - bankroll and shoe across rounds."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from random import Random

from blackjack.cards import Shoe
from blackjack.errors import InvalidBetError
from blackjack.game.engine import RoundEngine, RoundResult
from blackjack.game.events import EventEmitter, EventType
from blackjack.ports import TablePort

logger = logging.getLogger(__name__)

# Replace the shoe once fewer than one deck's worth of cards is left; a
# single round can never use that many.
RESHUFFLE_THRESHOLD = 52


class EndReason(Enum):
    """Why a session stopped."""

    NO_BET = "no bet"
    DECLINED = "declined to continue"
    QUIT = "quit"
    BANKRUPT = "bankroll exhausted"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SessionSummary:
    """Final tally of a session."""

    end_reason: EndReason
    rounds_played: int
    starting_bankroll: Decimal
    final_bankroll: Decimal
    wins: int = 0
    losses: int = 0
    pushes: int = 0

    @property
    def net(self) -> Decimal:
        return self.final_bankroll - self.starting_bankroll


class SessionController:
    """
    Plays rounds against one bankroll until the player stops or goes broke.

    Owns the bankroll, the random source and the shoe; rounds only ever see
    them through a ``RoundEngine``.
    """

    def __init__(
        self,
        port: TablePort,
        num_decks: int = 6,
        starting_bankroll: Decimal = Decimal("200"),
        rng: Random | None = None,
        events: EventEmitter | None = None,
    ) -> None:
        """
        Initialize a session.

        Args:
            port: User interface to read bets and actions from
            num_decks: Decks per shoe
            starting_bankroll: Bankroll at the start of the session
            rng: Random number generator for reproducible shuffles
            events: Emitter shared with every round of the session
        """
        if starting_bankroll <= 0:
            raise ValueError("Starting bankroll must be positive")

        self.port = port
        self.num_decks = num_decks
        self.starting_bankroll = starting_bankroll
        self.bankroll = starting_bankroll
        self.rounds_played = 0
        self.wins = 0
        self.losses = 0
        self.pushes = 0
        self.events = events or EventEmitter()

        self._rng = rng or Random()
        self.shoe = Shoe(num_decks=num_decks, rng=self._rng)

    def ensure_shoe(self) -> bool:
        """
        Replace the shoe if it has run low.

        Returns:
            True if a fresh shoe was built
        """
        if self.shoe.cards_remaining >= RESHUFFLE_THRESHOLD:
            return False

        logger.info(
            "Shoe down to %d cards, reshuffling %d decks",
            self.shoe.cards_remaining,
            self.num_decks,
        )
        self.shoe = Shoe(num_decks=self.num_decks, rng=self._rng)
        self.events.emit_new(EventType.SHOE_SHUFFLED, cards=self.shoe.cards_remaining)
        return True

    def play_round(self, bet: Decimal) -> RoundResult:
        """
        Play one round and apply its result to the bankroll.

        Args:
            bet: Stake in ``(0, bankroll]``

        Returns:
            The settled round
        """
        if bet <= 0 or bet > self.bankroll:
            raise InvalidBetError(f"Bet {bet} must be greater than 0 and at most {self.bankroll}")

        self.ensure_shoe()
        self.events.emit_new(EventType.BET_PLACED, amount=bet, bankroll=self.bankroll)
        logger.info("Round %d: bet %s of %s", self.rounds_played + 1, bet, self.bankroll)

        engine = RoundEngine(self.shoe, bet, self.bankroll, events=self.events)
        result = engine.play(self.port)

        self.bankroll += result.delta
        self.rounds_played += 1
        if result.outcome.is_win:
            self.wins += 1
        elif result.outcome.is_loss:
            self.losses += 1
        else:
            self.pushes += 1
        logger.info(
            "Round %d: %s, %+.2f, bankroll %s",
            self.rounds_played,
            result.outcome,
            result.delta,
            self.bankroll,
        )
        return result

    def run(self) -> SessionSummary:
        """Play rounds until the session ends."""
        self.events.emit_new(EventType.GAME_STARTED, bankroll=self.bankroll)

        reason = EndReason.BANKRUPT
        while self.bankroll > 0:
            self.ensure_shoe()

            bet = self.port.read_bet(self.bankroll)
            if not bet:
                reason = EndReason.NO_BET
                break

            result = self.play_round(bet)
            if result.quit:
                reason = EndReason.QUIT
                break
            if self.bankroll <= 0:
                break
            if not self.port.read_yes_no("Keep playing?"):
                reason = EndReason.DECLINED
                break

        summary = SessionSummary(
            end_reason=reason,
            rounds_played=self.rounds_played,
            starting_bankroll=self.starting_bankroll,
            final_bankroll=self.bankroll,
            wins=self.wins,
            losses=self.losses,
            pushes=self.pushes,
        )
        logger.info(
            "Session over (%s) after %d rounds, bankroll %s",
            reason,
            summary.rounds_played,
            summary.final_bankroll,
        )
        self.events.emit_new(
            EventType.GAME_ENDED,
            reason=reason,
            rounds=summary.rounds_played,
            record=(summary.wins, summary.losses, summary.pushes),
            bankroll=summary.final_bankroll,
            net=summary.net,
        )
        return summary
