"""Tests for the round engine state machine."""

from decimal import Decimal
from random import Random

import pytest
from transitions import MachineError

from blackjack.cards import Card, Shoe
from blackjack.errors import IllegalActionError, InvalidBetError
from blackjack.game.actions import Action
from blackjack.game.engine import RoundEngine
from blackjack.game.events import EventType
from blackjack.game.settlement import Outcome
from blackjack.game.state import RoundState
from conftest import ScriptedPort, StackedShoe

BET = Decimal("10")
BANKROLL = Decimal("100")


def make_round(*codes, bet=BET, bankroll=BANKROLL, events=None):
    """Round over a shoe that deals ``codes`` as player, dealer, player, dealer, ..."""
    return RoundEngine(StackedShoe(*codes), bet, bankroll, events=events)


def play(*codes, actions=(), bet=BET, bankroll=BANKROLL):
    engine = make_round(*codes, bet=bet, bankroll=bankroll)
    port = ScriptedPort(actions=actions)
    result = engine.play(port)
    return engine, port, result


class TestDealing:
    def test_initial_state(self):
        engine = make_round("10S", "9H", "8D", "7C")
        assert engine.state is RoundState.DEALING
        assert engine.result is None

    def test_alternating_deal(self):
        engine = make_round("2S", "3H", "4D", "5C")
        engine.deal()
        assert engine.player_hand.cards == [Card.from_string("2S"), Card.from_string("4D")]
        assert engine.dealer_hand.cards == [Card.from_string("3H"), Card.from_string("5C")]
        assert engine.state is RoundState.PLAYER_TURN

    def test_dealer_hole_card_is_hidden(self, events):
        engine = make_round("2S", "3H", "4D", "5C", events=events)
        engine.deal()
        dealt = [e.data for e in events.history if e.event_type is EventType.CARD_DEALT]
        assert [d["hand"] for d in dealt] == ["player", "dealer", "player", "dealer"]
        assert dealt[1]["card"] == "??"
        assert dealt[3]["card"] == "5♣"

    def test_cannot_deal_twice(self):
        engine = make_round("2S", "3H", "4D", "5C")
        engine.deal()
        with pytest.raises(IllegalActionError):
            engine.deal()

    def test_seeded_rounds_repeat(self):
        first = RoundEngine(Shoe(rng=Random(42)), BET, BANKROLL)
        second = RoundEngine(Shoe(rng=Random(42)), BET, BANKROLL)
        first.deal()
        second.deal()
        assert first.player_hand.cards == second.player_hand.cards
        assert first.dealer_hand.cards == second.dealer_hand.cards

    @pytest.mark.parametrize("bet", [Decimal("0"), Decimal("-5"), Decimal("100.01")])
    def test_rejects_bets_outside_bankroll(self, bet):
        with pytest.raises(InvalidBetError):
            RoundEngine(StackedShoe(), bet, BANKROLL)

    def test_bet_of_whole_bankroll_is_allowed(self):
        engine = make_round("10S", "9H", "8D", "7C", bet=BANKROLL)
        assert engine.bet == BANKROLL


class TestNaturals:
    def test_player_blackjack_skips_player_turn(self):
        engine, port, result = play("AS", "9H", "KD", "9C")

        assert result.outcome is Outcome.BLACKJACK
        assert result.delta == Decimal("15")
        assert engine.state is RoundState.DONE
        assert port.double_offers == []  # never asked for an action

    def test_dealer_blackjack_player_never_acts(self):
        engine, port, result = play("10S", "AH", "9D", "KC")

        assert result.outcome is Outcome.DEALER_BLACKJACK
        assert result.delta == -BET
        assert len(engine.player_hand) == 2
        assert port.double_offers == []

    def test_both_blackjack_push(self):
        _, _, result = play("AS", "AH", "KD", "QC")
        assert result.outcome is Outcome.PUSH
        assert result.delta == 0

    def test_natural_events(self, events):
        engine = make_round("AS", "9H", "KD", "9C", events=events)
        engine.deal()
        types = events.types()
        assert EventType.PLAYER_BLACKJACK in types
        assert EventType.DEALER_BLACKJACK not in types
        assert EventType.DEALER_HITS not in types
        assert types[-1] is EventType.ROUND_ENDED


class TestPlayerTurn:
    def test_hit_then_stand(self):
        engine, port, result = play(
            "2S", "10H", "3D", "7C", "9S", actions=[Action.HIT, Action.STAND]
        )
        assert engine.player_hand.value == 14
        assert result.outcome is Outcome.LOSS
        assert port.double_offers == [True, False]

    def test_bust_skips_dealer_turn(self, events):
        engine = make_round("10S", "10H", "6D", "6C", "KS", events=events)
        result = engine.play(ScriptedPort(actions=[Action.HIT]))

        assert result.outcome is Outcome.BUST
        assert result.delta == -BET
        assert len(engine.dealer_hand) == 2
        assert EventType.DEALER_REVEALS not in events.types()
        assert EventType.PLAYER_BUSTS in events.types()

    def test_stand_runs_dealer(self):
        engine, _, result = play("10S", "10H", "9D", "6C", "2S", actions=[Action.STAND])
        assert len(engine.dealer_hand) == 3
        assert engine.dealer_hand.value == 18
        assert result.outcome is Outcome.WIN
        assert result.delta == BET

    def test_quit_forfeits_round(self):
        engine, _, result = play("10S", "10H", "6D", "7C", actions=[Action.QUIT])

        assert result.quit
        assert result.outcome is Outcome.FORFEIT
        assert result.delta == -BET
        assert len(engine.dealer_hand) == 2
        assert engine.state is RoundState.DONE

    def test_actions_after_round_rejected(self):
        engine, _, _ = play("10S", "10H", "9D", "7C", actions=[Action.STAND])
        with pytest.raises(IllegalActionError):
            engine.hit()

    def test_actions_before_deal_rejected(self):
        engine = make_round("10S", "10H", "9D", "7C")
        with pytest.raises(IllegalActionError):
            engine.stand()

    def test_machine_refuses_out_of_order_triggers(self):
        engine = make_round("10S", "10H", "9D", "7C")
        with pytest.raises(MachineError):
            engine.dealer_done()


class TestDoubleDown:
    def test_double_as_first_action(self):
        engine, port, result = play("5S", "10H", "6D", "7C", "9S", actions=[Action.DOUBLE])

        assert port.double_offers == [True]
        assert engine.bankroll == BANKROLL - BET
        assert engine.bet == BET * 2
        assert len(engine.player_hand) == 3
        assert result.doubled
        assert result.outcome is Outcome.WIN
        assert result.delta == Decimal("20")

    def test_double_ends_turn_even_on_low_total(self):
        """Only one card, no further prompt, even at 7."""
        engine, port, result = play("2S", "10H", "3D", "8C", "2C", actions=[Action.DOUBLE])
        assert engine.player_hand.value == 7
        assert len(port.double_offers) == 1
        assert result.outcome is Outcome.LOSS
        assert result.delta == Decimal("-20")

    def test_bust_after_double_goes_to_settlement(self, events):
        engine = make_round("10S", "9H", "6D", "8C", "KS", events=events)
        result = engine.play(ScriptedPort(actions=[Action.DOUBLE]))

        assert result.outcome is Outcome.BUST
        assert result.delta == Decimal("-20")
        assert len(engine.dealer_hand) == 2
        assert EventType.DEALER_REVEALS not in events.types()

    def test_double_after_hit_rejected(self):
        engine = make_round("2S", "10H", "3D", "7C", "4S")
        engine.deal()
        engine.hit()

        assert not engine.can_double
        with pytest.raises(IllegalActionError):
            engine.double_down()
        assert engine.bet == BET
        assert len(engine.player_hand) == 3

    def test_double_needs_bankroll_to_cover_bet(self):
        engine = make_round("5S", "10H", "6D", "7C", "9S")
        engine.deal()
        engine.bankroll = BET - 1

        assert not engine.can_double
        with pytest.raises(IllegalActionError):
            engine.apply(Action.DOUBLE)

    def test_double_with_whole_bankroll(self):
        engine, _, result = play(
            "5S", "10H", "6D", "7C", "9S", actions=[Action.DOUBLE], bet=BANKROLL
        )
        assert engine.bankroll == 0
        assert result.delta == BANKROLL * 2


class TestDealerTurn:
    def test_dealer_stands_on_hard_17(self):
        engine, _, result = play("10S", "10H", "8D", "7C", "2S", actions=[Action.STAND])
        assert len(engine.dealer_hand) == 2
        assert result.outcome is Outcome.WIN

    def test_dealer_stands_on_soft_17(self):
        engine, _, result = play("10S", "AH", "7D", "6C", "4S", actions=[Action.STAND])
        assert engine.dealer_hand.is_soft
        assert len(engine.dealer_hand) == 2
        assert result.outcome is Outcome.PUSH

    def test_dealer_draws_soft_16(self):
        engine, _, _ = play("10S", "AH", "8D", "5C", "2S", actions=[Action.STAND])
        assert len(engine.dealer_hand) == 3
        assert engine.dealer_hand.value == 18

    def test_dealer_draws_until_17(self):
        engine, _, _ = play(
            "10S", "2H", "9D", "3C", "4S", "2D", "6H", actions=[Action.STAND]
        )
        # 2+3+4+2 = 11, +6 = 17
        assert len(engine.dealer_hand) == 5
        assert engine.dealer_hand.value == 17

    def test_dealer_bust(self, events):
        engine = make_round("10S", "10H", "8D", "6C", "KS", events=events)
        result = engine.play(ScriptedPort(actions=[Action.STAND]))

        assert result.outcome is Outcome.DEALER_BUST
        assert result.delta == BET
        assert EventType.DEALER_BUSTS in events.types()


class TestConservation:
    @pytest.mark.parametrize("seed", range(40))
    def test_stand_deltas(self, seed):
        engine = RoundEngine(Shoe(rng=Random(seed)), BET, BANKROLL)
        result = engine.play(ScriptedPort(actions=[Action.STAND]))
        assert result.delta in {-BET, Decimal("0"), BET, BET * Decimal("1.5")}

    @pytest.mark.parametrize("seed", range(40))
    def test_double_deltas(self, seed):
        engine = RoundEngine(Shoe(rng=Random(seed)), BET, BANKROLL)
        result = engine.play(ScriptedPort(actions=[Action.DOUBLE]))
        if result.doubled:
            assert result.delta in {-2 * BET, Decimal("0"), 2 * BET}
        else:
            # a natural settled before the double was offered
            assert result.outcome in (Outcome.BLACKJACK, Outcome.DEALER_BLACKJACK, Outcome.PUSH)

    def test_round_ended_reports_new_bankroll(self, events):
        engine = make_round("AS", "9H", "KD", "9C", events=events)
        engine.deal()
        ended = events.history[-1]
        assert ended.event_type is EventType.ROUND_ENDED
        assert ended.data["bankroll"] == Decimal("115")
