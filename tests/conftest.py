"""Pytest fixtures for blackjack table tests."""

import pytest
from random import Random

from blackjack.cards import Card, Deck, Rank, Suit
from blackjack.hand import Hand
from blackjack.persistence import InMemoryBalanceStore
from blackjack.game import RoundStateMachine


def _stacked_deck(*cards: str) -> Deck:
    """A deck that deals ``cards`` in the given order, e.g. 'AS', '10H'."""
    draw_order = [Card.from_string(c) for c in cards]
    return Deck.from_cards(reversed(draw_order), rng=Random(7))


def _make_hand(*cards: str) -> Hand:
    """A hand holding ``cards``."""
    return Hand([Card.from_string(c) for c in cards])


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A fresh shuffled deck."""
    return Deck(rng=rng)


@pytest.fixture
def make_deck():
    """Factory for a deck dealing the given cards in order."""
    return _stacked_deck


@pytest.fixture
def make_hand():
    """Factory for a hand holding the given cards."""
    return _make_hand


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.KING, Suit.HEARTS))
    return hand


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    return hand


@pytest.fixture
def bust_hand():
    """A busted hand."""
    hand = Hand()
    hand.add_card(Card(Rank.TEN, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    hand.add_card(Card(Rank.KING, Suit.CLUBS))
    return hand


@pytest.fixture
def store():
    """An empty in-memory balance store."""
    return InMemoryBalanceStore()


@pytest.fixture
def make_table(store):
    """Factory for a table dealing a fixed sequence of cards."""

    def _make(*cards: str, balance: int | None = None) -> RoundStateMachine:
        if balance is not None:
            store.record = {"balance": balance, "stats": {"wins": 0, "gamesPlayed": 0}}
        return RoundStateMachine(store=store, deck=_stacked_deck(*cards))

    return _make


@pytest.fixture
def table(store, rng):
    """A table with a randomly shuffled deck."""
    return RoundStateMachine(store=store, rng=rng)
