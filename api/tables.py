"""Per-session table cache shared by the REST and WebSocket endpoints."""

import logging

from api.schemas import (
    CardResponse,
    HandResponse,
    StatsResponse,
    TableStateResponse,
)
from api.session import (
    SESSION_KEY_LEDGER,
    SessionBalanceStore,
    extract_session_id,
    get_session,
)
from blackjack.cards import Card
from blackjack.game import RoundStateMachine

logger = logging.getLogger(__name__)

# In-memory table cache (the ledger itself is backed by the session store)
_tables: dict[str, RoundStateMachine] = {}


async def load_table(session_id: str) -> RoundStateMachine | None:
    """
    Get the table for a session.

    A cached table keeps its round in progress. Otherwise a fresh table is
    built from the ledger record stored in the session.

    Returns:
        The table, or None if the token is not validly signed or the
        session has expired
    """
    if extract_session_id(session_id) is None:
        return None

    session_data = await get_session(session_id)
    if session_data is None:
        forget_table(session_id)
        return None

    if session_id in _tables:
        return _tables[session_id]

    store = SessionBalanceStore(session_id, session_data.get(SESSION_KEY_LEDGER))
    table = RoundStateMachine(store=store)
    _tables[session_id] = table
    logger.debug("Restored table for session, balance %d", table.balance)
    return table


async def save_table(table: RoundStateMachine) -> None:
    """Write any ledger change the table made to its session."""
    if isinstance(table.store, SessionBalanceStore):
        await table.store.flush()


def forget_table(session_id: str) -> None:
    """Drop a cached table."""
    _tables.pop(session_id, None)


def _card_response(card: Card | None) -> CardResponse:
    if card is None:
        return CardResponse(rank=None, suit=None, value=None, hidden=True)
    return CardResponse(
        rank=str(card.rank),
        suit=str(card.suit),
        value=card.value,
        is_red=card.suit.is_red,
    )


def table_state_response(table: RoundStateMachine) -> TableStateResponse:
    """Convert the table snapshot to a response."""
    snapshot = table.snapshot()

    return TableStateResponse(
        state=snapshot.state.name,
        balance=snapshot.balance,
        bet=snapshot.bet,
        stats=StatsResponse(wins=snapshot.wins, games_played=snapshot.games_played),
        player_hand=HandResponse(
            cards=[_card_response(c) for c in snapshot.player_hand],
            value=snapshot.player_value,
        ),
        dealer_hand=HandResponse(
            cards=[_card_response(c) for c in snapshot.visible_dealer_cards],
            value=snapshot.dealer_value,
        ),
        message=snapshot.message,
        message_category=snapshot.message_category,
        outcome=str(snapshot.outcome) if snapshot.outcome else None,
        bankrupt=snapshot.bankrupt,
        can_bet=table.can_bet,
        can_deal=table.can_deal,
        can_hit=table.can_hit,
        can_stand=table.can_stand,
        can_reset=table.can_reset,
    )
