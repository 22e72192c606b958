"""Card and Deck - immutable cards and a self-replenishing 52-card deck."""

import logging
from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Iterable, Iterator

logger = logging.getLogger(__name__)


class Suit(Enum):
    """Card suits, valued by their display symbol."""

    SPADES = "♠"
    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"

    def __str__(self) -> str:
        return self.value

    @property
    def is_red(self) -> bool:
        """Hearts and diamonds render red."""
        return self in (Suit.HEARTS, Suit.DIAMONDS)


class Rank(Enum):
    """Card ranks, valued by their face label."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    def __str__(self) -> str:
        return self.value

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING):
            return 10
        return int(self.value)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


_SUIT_ALIASES = {
    "S": Suit.SPADES,
    "H": Suit.HEARTS,
    "D": Suit.DIAMONDS,
    "C": Suit.CLUBS,
    **{suit.value: suit for suit in Suit},
}

_RANK_ALIASES = {
    "T": Rank.TEN,
    **{rank.value: rank for rank in Rank},
}


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card, identified by rank and suit alone."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the numeric blackjack value, counting an Ace as 11."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like 'AS', '10♥', 'Kd' or 'T♣'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str, suit_str = s[:-1], s[-1]
        if rank_str not in _RANK_ALIASES:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in _SUIT_ALIASES:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(_RANK_ALIASES[rank_str], _SUIT_ALIASES[suit_str])


def full_deck() -> list[Card]:
    """Return one card per (rank, suit) pair, suit-major."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


class Deck:
    """
    A single 52-card deck that never runs dry.

    Cards are drawn from the end of the internal sequence. When the deck is
    empty, the next draw first replaces it with a freshly shuffled deck.
    """

    SIZE = 52

    def __init__(self, rng: Random | None = None) -> None:
        """Initialize a new, shuffled deck."""
        self._rng = rng or Random()
        self._cards: list[Card] = []
        self._reshuffles = 0
        self.reset()

    @classmethod
    def from_cards(cls, cards: Iterable[Card], rng: Random | None = None) -> "Deck":
        """
        Build a deck holding exactly ``cards``, unshuffled.

        The last card in ``cards`` is drawn first. Once these cards run out
        the deck replenishes itself like any other.

        Raises:
            ValueError: If a rank+suit pair appears more than once
        """
        cards = list(cards)
        if len(set(cards)) != len(cards):
            raise ValueError("Deck cannot contain duplicate cards")

        deck = cls(rng=rng)
        deck._cards = cards
        return deck

    def reset(self) -> None:
        """Replace the contents with all 52 cards, then shuffle."""
        self._cards = full_deck()
        self.shuffle()

    def shuffle(self) -> None:
        """Fisher-Yates shuffle of the cards currently in the deck."""
        cards = self._cards
        for i in range(len(cards) - 1, 0, -1):
            j = self._rng.randint(0, i)
            cards[i], cards[j] = cards[j], cards[i]

    def draw(self) -> Card:
        """Remove and return the last card, replenishing an empty deck first."""
        if not self._cards:
            logger.debug("Deck exhausted, reshuffling a fresh deck")
            self._reshuffles += 1
            self.reset()
        assert self._cards, "Deck is empty after reset"
        return self._cards.pop()

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    @property
    def reshuffles(self) -> int:
        """Return how many times the deck replenished itself on exhaustion."""
        return self._reshuffles
