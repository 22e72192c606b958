"""Blackjack round engine - 100% UI-agnostic."""

from blackjack.cards import Card, Deck, Rank, Suit
from blackjack.hand import Hand, hand_value
from blackjack.ledger import BalanceLedger
from blackjack.payout import Outcome, Payout, ResultCategory, calculate_payout

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "Hand",
    "hand_value",
    "BalanceLedger",
    "Outcome",
    "Payout",
    "ResultCategory",
    "calculate_payout",
]
