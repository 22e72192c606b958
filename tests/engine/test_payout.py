"""Tests for payout calculation."""

import pytest

from blackjack.payout import (
    PAYOUT_TABLE,
    Outcome,
    ResultCategory,
    calculate_payout,
)


class TestPayoutTable:
    """The payout table covers every outcome exactly."""

    def test_every_outcome_has_a_rule(self):
        assert set(PAYOUT_TABLE) == set(Outcome)

    @pytest.mark.parametrize(
        "outcome, credit, category",
        [
            (Outcome.BLACKJACK, 250, ResultCategory.WIN),
            (Outcome.WIN, 200, ResultCategory.WIN),
            (Outcome.DEALER_BUST, 200, ResultCategory.WIN),
            (Outcome.PUSH, 100, ResultCategory.PUSH),
            (Outcome.BUST, 0, ResultCategory.LOSE),
            (Outcome.LOSE, 0, ResultCategory.LOSE),
            (Outcome.DEALER_BLACKJACK, 0, ResultCategory.LOSE),
        ],
    )
    def test_bet_of_100(self, outcome, credit, category):
        payout = calculate_payout(outcome, 100)
        assert payout.credit == credit
        assert payout.category == category
        assert payout.bet == 100

    def test_win_flag_follows_category(self):
        wins = {o for o in Outcome if calculate_payout(o, 10).is_win}
        assert wins == {Outcome.BLACKJACK, Outcome.WIN, Outcome.DEALER_BUST}


class TestCalculatePayout:
    """Edge cases of calculate_payout."""

    def test_odd_blackjack_rounds_down(self):
        assert calculate_payout(Outcome.BLACKJACK, 15).credit == 37

    def test_zero_bet(self):
        assert calculate_payout(Outcome.WIN, 0).credit == 0

    def test_negative_bet_rejected(self):
        with pytest.raises(ValueError):
            calculate_payout(Outcome.WIN, -1)

    def test_net(self):
        assert calculate_payout(Outcome.BLACKJACK, 100).net == 150
        assert calculate_payout(Outcome.PUSH, 100).net == 0
        assert calculate_payout(Outcome.LOSE, 100).net == -100

    def test_messages(self):
        assert calculate_payout(Outcome.BLACKJACK, 10).message == "Blackjack! You win!"
        assert calculate_payout(Outcome.DEALER_BUST, 10).message == "Dealer busts! You win!"
        assert calculate_payout(Outcome.BUST, 10).message == "Bust! You lose."

    def test_outcome_labels(self):
        assert str(Outcome.DEALER_BUST) == "dealer-bust"
        assert str(Outcome.DEALER_BLACKJACK) == "dealer-blackjack"
        assert str(ResultCategory.PUSH) == "push"
