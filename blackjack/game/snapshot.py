"""Read-only view of the table for renderers."""

from dataclasses import dataclass

from blackjack.cards import Card
from blackjack.game.state import RoundState
from blackjack.payout import Outcome


@dataclass(frozen=True)
class TableSnapshot:
    """
    Everything a renderer needs to draw the table after a transition.

    While ``hide_dealer_hole_card`` is set, ``dealer_value`` is the value of
    the upcard alone and renderers must not show ``dealer_hand[1]``.
    """

    state: RoundState
    balance: int
    bet: int
    wins: int
    games_played: int
    player_hand: tuple[Card, ...]
    dealer_hand: tuple[Card, ...]
    player_value: int
    dealer_value: int
    hide_dealer_hole_card: bool
    message: str
    message_category: str | None
    outcome: Outcome | None
    bankrupt: bool

    @property
    def visible_dealer_cards(self) -> tuple[Card | None, ...]:
        """Dealer cards with the concealed hole card replaced by None."""
        if not self.hide_dealer_hole_card:
            return self.dealer_hand
        return tuple(
            None if i == 1 else card for i, card in enumerate(self.dealer_hand)
        )
