"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Literal


class BetRequest(BaseModel):
    """Request to add a chip to the current bet."""

    amount: int = Field(..., ge=1, description="Bet amount")


class CardResponse(BaseModel):
    """Card representation. Concealed cards carry no rank or suit."""

    model_config = ConfigDict(from_attributes=True)

    rank: str | None
    suit: str | None
    value: int | None
    is_red: bool = False
    hidden: bool = False


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    value: int


class StatsResponse(BaseModel):
    """Lifetime statistics."""

    wins: int
    games_played: int


class TableStateResponse(BaseModel):
    """Snapshot of the table."""

    state: Literal["BETTING", "PLAYING", "DEALER_TURN", "RESOLVED"]
    balance: int
    bet: int
    stats: StatsResponse
    player_hand: HandResponse
    dealer_hand: HandResponse
    message: str
    message_category: Literal["win", "push", "lose"] | None
    outcome: Literal[
        "blackjack", "win", "dealer-bust", "push", "bust", "lose", "dealer-blackjack"
    ] | None
    bankrupt: bool
    can_bet: bool
    can_deal: bool
    can_hit: bool
    can_stand: bool
    can_reset: bool


class ChipsResponse(BaseModel):
    """Chip denominations offered by the table."""

    chips: list[int]
    starting_balance: int


class SessionResponse(BaseModel):
    """A newly created session."""

    session_id: str
