"""Round outcomes and the payouts they earn."""

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from enum import Enum


class Outcome(Enum):
    """Terminal outcome of a round."""

    BLACKJACK = "blackjack"
    WIN = "win"
    DEALER_BUST = "dealer-bust"
    PUSH = "push"
    BUST = "bust"
    LOSE = "lose"
    DEALER_BLACKJACK = "dealer-blackjack"

    def __str__(self) -> str:
        return self.value


class ResultCategory(Enum):
    """Display category of an outcome."""

    WIN = "win"
    PUSH = "push"
    LOSE = "lose"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PayoutRule:
    """How an outcome pays: multiple of the bet returned, category and message."""

    multiplier: Decimal
    category: ResultCategory
    message: str


PAYOUT_TABLE: dict[Outcome, PayoutRule] = {
    Outcome.BLACKJACK: PayoutRule(Decimal("2.5"), ResultCategory.WIN, "Blackjack! You win!"),
    Outcome.WIN: PayoutRule(Decimal("2"), ResultCategory.WIN, "You win!"),
    Outcome.DEALER_BUST: PayoutRule(Decimal("2"), ResultCategory.WIN, "Dealer busts! You win!"),
    Outcome.PUSH: PayoutRule(Decimal("1"), ResultCategory.PUSH, "Push! It's a tie."),
    Outcome.BUST: PayoutRule(Decimal("0"), ResultCategory.LOSE, "Bust! You lose."),
    Outcome.LOSE: PayoutRule(Decimal("0"), ResultCategory.LOSE, "You lose."),
    Outcome.DEALER_BLACKJACK: PayoutRule(
        Decimal("0"), ResultCategory.LOSE, "Dealer has blackjack! You lose."
    ),
}


@dataclass(frozen=True)
class Payout:
    """Result of settling a bet."""

    outcome: Outcome
    bet: int
    credit: int
    category: ResultCategory
    message: str

    @property
    def is_win(self) -> bool:
        """Check if the outcome counts towards the win statistic."""
        return self.category == ResultCategory.WIN

    @property
    def net(self) -> int:
        """Return the net gain or loss relative to the stake."""
        return self.credit - self.bet


def calculate_payout(outcome: Outcome, bet: int) -> Payout:
    """
    Map a round outcome to the amount credited back to the balance.

    The bet was already deducted when it was placed, so a push credits the
    bet back and a loss credits nothing. Fractional credits (an odd bet on a
    blackjack) are rounded down to whole units.

    Args:
        outcome: How the round ended
        bet: Total amount wagered this round

    Returns:
        The payout, including its display category and message
    """
    if bet < 0:
        raise ValueError("Bet cannot be negative")

    rule = PAYOUT_TABLE[outcome]
    credit = int((rule.multiplier * bet).to_integral_value(rounding=ROUND_FLOOR))
    return Payout(
        outcome=outcome,
        bet=bet,
        credit=credit,
        category=rule.category,
        message=rule.message,
    )
