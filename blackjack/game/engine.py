"""Round engine with state machine."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, TYPE_CHECKING

from transitions import Machine

from blackjack.cards import Card, Shoe
from blackjack.errors import IllegalActionError, InvalidBetError
from blackjack.hand import Hand
from blackjack.game.actions import Action
from blackjack.game.events import EventEmitter, EventType
from blackjack.game.settlement import Outcome, Settlement, forfeit, settle
from blackjack.game.state import RoundState

if TYPE_CHECKING:
    from blackjack.ports import TablePort

logger = logging.getLogger(__name__)

# Dealer stands on every 17, soft or hard
DEALER_STANDS_ON = 17


@dataclass(frozen=True)
class RoundResult:
    """What a finished round hands back to the session."""

    outcome: Outcome
    delta: Decimal  # relative to the bankroll the round started with
    bet: Decimal
    doubled: bool
    player_hand: Hand
    dealer_hand: Hand

    @property
    def quit(self) -> bool:
        """True if the player walked away mid-round."""
        return self.outcome is Outcome.FORFEIT


class RoundEngine:
    """
    One betting round of blackjack, driven by a state machine.

    The engine never touches the session bankroll. It keeps a running view
    of it (``bankroll``) so a double down is visible immediately, and reports
    the net change in ``RoundResult.delta``.
    """

    STATES = [s.name.lower() for s in RoundState]

    TRANSITIONS = [
        {"trigger": "dealt", "source": "dealing", "dest": "natural_check"},
        {"trigger": "natural", "source": "natural_check", "dest": "settlement"},
        {"trigger": "no_natural", "source": "natural_check", "dest": "player_turn"},
        {"trigger": "player_action", "source": "player_turn", "dest": "player_turn"},
        {"trigger": "player_busts", "source": "player_turn", "dest": "settlement"},
        {"trigger": "player_done", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "player_quits", "source": "player_turn", "dest": "done"},
        {"trigger": "dealer_done", "source": "dealer_turn", "dest": "settlement"},
        {"trigger": "settled", "source": "settlement", "dest": "done"},
    ]

    def __init__(
        self,
        shoe: Shoe,
        bet: Decimal,
        bankroll: Decimal,
        events: EventEmitter | None = None,
    ) -> None:
        """
        Set up a round; no cards are dealt until ``deal()``.

        Args:
            shoe: Shoe to draw from; must hold enough cards for a round
            bet: Stake for the round
            bankroll: Session bankroll at the start of the round
            events: Emitter to publish to (a private one if omitted)
        """
        if bet <= 0 or bet > bankroll:
            raise InvalidBetError(f"Bet {bet} must be greater than 0 and at most {bankroll}")

        self.shoe = shoe
        self.bet = bet
        self.bankroll = bankroll
        self.doubled = False
        self.player_hand = Hand()
        self.dealer_hand = Hand()
        self.events = events or EventEmitter()

        self._starting_bankroll = bankroll
        self._result: RoundResult | None = None

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="dealing",
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_log_state",
        )

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    @property
    def result(self) -> RoundResult | None:
        """The round result once the round is DONE."""
        return self._result

    def play(self, port: "TablePort") -> RoundResult:
        """
        Run the round to completion.

        Args:
            port: Source of player actions

        Returns:
            The settled round
        """
        if self.state is RoundState.DEALING:
            self.deal()

        while self.state is RoundState.PLAYER_TURN:
            self.apply(port.read_action(self.can_double))

        if self._result is None:
            raise IllegalActionError(f"Round stopped in state {self.state}")
        return self._result

    def deal(self) -> None:
        """Deal two cards each and check for naturals."""
        if self.state is not RoundState.DEALING:
            raise IllegalActionError("Cards have already been dealt")

        # Deal: player, dealer, player, dealer
        self._deal_card_to(self.player_hand)
        self._deal_card_to(self.dealer_hand, face_up=False)
        self._deal_card_to(self.player_hand)
        self._deal_card_to(self.dealer_hand)

        self.events.emit_new(EventType.ROUND_STARTED, **self._table(hide_dealer=True))
        self.dealt()

        player_bj = self.player_hand.is_blackjack
        dealer_bj = self.dealer_hand.is_blackjack
        if not (player_bj or dealer_bj):
            self.no_natural()
            return

        # A natural on either side ends the round before anyone acts
        self.events.emit_new(EventType.DEALER_REVEALS, **self._table())
        if player_bj:
            self.events.emit_new(EventType.PLAYER_BLACKJACK)
        if dealer_bj:
            self.events.emit_new(EventType.DEALER_BLACKJACK)
        self.natural()
        self._settle(settle(self.player_hand, self.dealer_hand, self.bet))

    def apply(self, action: Action) -> None:
        """Apply one player action."""
        handlers = {
            Action.HIT: self.hit,
            Action.STAND: self.stand,
            Action.DOUBLE: self.double_down,
            Action.QUIT: self.quit,
        }
        handlers[action]()

    def hit(self) -> None:
        """Player takes another card."""
        self._require_player_turn(Action.HIT)

        card = self._deal_card_to(self.player_hand)
        logger.debug("Player hits %s, now %d", card, self.player_hand.value)
        self.events.emit_new(
            EventType.PLAYER_HIT,
            card=str(card),
            **self._table(hide_dealer=True),
        )

        if self.player_hand.is_busted:
            self._player_bust()
            return

        self.player_action()  # Stay in player turn

    def stand(self) -> None:
        """Player keeps the current hand."""
        self._require_player_turn(Action.STAND)

        logger.debug("Player stands on %d", self.player_hand.value)
        self.events.emit_new(EventType.PLAYER_STAND, hand_value=self.player_hand.value)
        self.player_done()
        self._play_dealer()

    def double_down(self) -> None:
        """Double the bet, take exactly one card and end the turn."""
        self._require_player_turn(Action.DOUBLE)
        if len(self.player_hand) != 2:
            raise IllegalActionError("Double is only allowed as the first action")
        if self.bankroll < self.bet:
            raise IllegalActionError(
                f"Cannot double {self.bet} with {self.bankroll} available"
            )

        self.bankroll -= self.bet
        self.bet *= 2
        self.doubled = True

        card = self._deal_card_to(self.player_hand)
        logger.debug("Player doubles to %s, draws %s", self.bet, card)
        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            card=str(card),
            **self._table(hide_dealer=True),
        )

        # The turn is over whatever the card was
        if self.player_hand.is_busted:
            self._player_bust()
            return

        self.player_done()
        self._play_dealer()

    def quit(self) -> None:
        """Abandon the round; the bet is forfeited."""
        self._require_player_turn(Action.QUIT)

        logger.debug("Player quits mid-round")
        self.events.emit_new(EventType.PLAYER_QUIT)
        self.player_quits()
        self._finish(forfeit(self.bet))

    @property
    def can_double(self) -> bool:
        """Check if doubling is allowed."""
        return (
            self.state is RoundState.PLAYER_TURN
            and len(self.player_hand) == 2
            and self.bankroll >= self.bet
        )

    def _require_player_turn(self, action: Action) -> None:
        if self.state is not RoundState.PLAYER_TURN:
            raise IllegalActionError(f"Cannot {action} during {self.state}")

    def _deal_card_to(self, hand: Hand, face_up: bool = True) -> Card:
        """Deal a card to a hand."""
        card = self.shoe.draw()
        hand.add_card(card)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card) if face_up else "??",
            hand="dealer" if hand is self.dealer_hand else "player",
        )
        return card

    def _player_bust(self) -> None:
        """The dealer never draws against a busted player."""
        self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=self.player_hand.value)
        self.player_busts()
        self._settle(settle(self.player_hand, self.dealer_hand, self.bet))

    def _play_dealer(self) -> None:
        """Dealer draws to 17 and stands, soft 17 included."""
        self.events.emit_new(EventType.DEALER_REVEALS, **self._table())

        while self.dealer_hand.value < DEALER_STANDS_ON:
            card = self._deal_card_to(self.dealer_hand)
            self.events.emit_new(EventType.DEALER_HITS, card=str(card), **self._table())

        if self.dealer_hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.dealer_hand.value)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.value)

        self.dealer_done()
        self._settle(settle(self.player_hand, self.dealer_hand, self.bet))

    def _settle(self, settlement: Settlement) -> None:
        self.settled()
        self._finish(settlement)

    def _finish(self, settlement: Settlement) -> None:
        self._result = RoundResult(
            outcome=settlement.outcome,
            delta=settlement.delta,
            bet=self.bet,
            doubled=self.doubled,
            player_hand=self.player_hand,
            dealer_hand=self.dealer_hand,
        )
        logger.debug("Round settled: %s %+.2f", settlement.outcome, settlement.delta)
        self.events.emit_new(
            EventType.ROUND_ENDED,
            outcome=settlement.outcome,
            delta=settlement.delta,
            bet=self.bet,
            bankroll=self._starting_bankroll + settlement.delta,
            player_value=self.player_hand.value,
            dealer_value=self.dealer_hand.value,
        )

    def _table(self, hide_dealer: bool = False) -> dict[str, Any]:
        """Snapshot of both hands for event payloads."""
        return {
            "player": tuple(self.player_hand.cards),
            "dealer": tuple(self.dealer_hand.cards),
            "player_value": self.player_hand.value,
            "dealer_value": None if hide_dealer else self.dealer_hand.value,
            "hide_dealer": hide_dealer,
            "bet": self.bet,
            "bankroll": self.bankroll,
        }

    def _log_state(self) -> None:
        logger.debug("Round state -> %s", self.state)
