"""Property-based tests for hand values, the deck and betting."""

from collections import Counter
from random import Random

from hypothesis import given, strategies as st

from blackjack.cards import Deck, full_deck
from blackjack.game import RoundState, RoundStateMachine
from blackjack.hand import Hand, hand_value

card_strategy = st.sampled_from(full_deck())
cards_strategy = st.lists(card_strategy, max_size=12)


@given(cards_strategy)
def test_value_at_most_21_unless_every_ace_is_reduced(cards):
    value = hand_value(cards)
    hard_total = sum(1 if card.is_ace else card.value for card in cards)

    if value > 21:
        assert value == hard_total
    else:
        assert value >= hard_total


@given(cards_strategy)
def test_value_is_idempotent_and_pure(cards):
    hand = Hand(list(cards))
    first = hand.value
    second = hand.value
    assert first == second
    assert hand.cards == cards


@given(st.integers(min_value=0, max_value=2**32))
def test_shuffle_is_a_permutation(seed):
    deck = Deck(rng=Random(seed))
    before = Counter(deck)
    deck.shuffle()
    assert Counter(deck) == before
    assert len(deck) == 52


@given(st.integers(min_value=0, max_value=120))
def test_draws_always_succeed(draws):
    deck = Deck(rng=Random(draws))
    for _ in range(draws):
        deck.draw()
    expected_remaining = 52 if draws == 0 else -draws % 52
    assert len(deck) == expected_remaining
    assert deck.reshuffles == max(0, (draws - 1) // 52)


@given(st.lists(st.integers(min_value=-50, max_value=1500), max_size=10))
def test_bets_never_overdraw(amounts):
    table = RoundStateMachine(rng=Random(0))
    for amount in amounts:
        before = table.balance
        accepted = table.place_bet(amount)
        if accepted:
            assert 0 < amount <= before
            assert table.balance == before - amount
        else:
            assert table.balance == before
        assert table.balance >= 0
    assert table.bet + table.balance == 1000
    assert table.state == RoundState.BETTING
