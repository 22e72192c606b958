"""Game API endpoints."""

from fastapi import APIRouter, HTTPException, Header
from typing import Annotated

from api.schemas import BetRequest, ChipsResponse, SessionResponse, TableStateResponse
from api.session import create_session
from api.tables import load_table, save_table, table_state_response
from blackjack.game import RoundState, RoundStateMachine
from blackjack.ledger import STARTING_BALANCE
from config import config

router = APIRouter()

SessionHeader = Annotated[str, Header(alias="X-Session-ID")]


async def _require_table(session_id: str) -> RoundStateMachine:
    """Get the session's table or fail with 404."""
    table = await load_table(session_id)
    if table is None:
        raise HTTPException(status_code=404, detail="Unknown session")
    return table


async def _respond(table: RoundStateMachine, accepted: bool) -> TableStateResponse:
    """Persist the table and return its state, or 400 with the advisory message."""
    await save_table(table)
    if not accepted:
        raise HTTPException(status_code=400, detail=table.message)
    return table_state_response(table)


@router.post("/new")
async def new_game() -> SessionResponse:
    """Open a new table with the starting balance."""
    session_id = await create_session()
    await _require_table(session_id)
    return SessionResponse(session_id=session_id)


@router.get("/chips")
async def get_chips() -> ChipsResponse:
    """List the chip denominations."""
    return ChipsResponse(
        chips=list(config.game.chip_values),
        starting_balance=STARTING_BALANCE,
    )


@router.get("/state")
async def get_state(session_id: SessionHeader) -> TableStateResponse:
    """Get current table state."""
    table = await _require_table(session_id)
    return table_state_response(table)


@router.post("/bet")
async def place_bet(request: BetRequest, session_id: SessionHeader) -> TableStateResponse:
    """Add a chip to the current bet."""
    table = await _require_table(session_id)
    return await _respond(table, table.place_bet(request.amount))


@router.post("/deal")
async def deal(session_id: SessionHeader) -> TableStateResponse:
    """Deal the opening cards."""
    table = await _require_table(session_id)
    return await _respond(table, table.start_round())


@router.post("/hit")
async def hit(session_id: SessionHeader, paced: bool = False) -> TableStateResponse:
    """
    Take another card.

    Reaching 21 ends the player's turn; unless ``paced`` is set, the dealer
    then plays out in the same request.
    """
    table = await _require_table(session_id)
    accepted = table.hit()
    if accepted and not paced:
        table.play_dealer()
    return await _respond(table, accepted)


@router.post("/stand")
async def stand(session_id: SessionHeader, paced: bool = False) -> TableStateResponse:
    """
    End the player's turn.

    With ``paced`` set the dealer turn is left open for the client to drive
    through ``/dealer/advance``; otherwise it is played out immediately.
    """
    table = await _require_table(session_id)
    accepted = table.stand()
    if accepted and not paced:
        table.play_dealer()
    return await _respond(table, accepted)


@router.post("/dealer/advance")
async def advance_dealer(session_id: SessionHeader) -> TableStateResponse:
    """Perform one dealer step."""
    table = await _require_table(session_id)
    if table.state != RoundState.DEALER_TURN:
        raise HTTPException(status_code=400, detail="The dealer is not playing")
    table.advance_dealer()
    return await _respond(table, True)


@router.post("/reset")
async def reset_game(session_id: SessionHeader) -> TableStateResponse:
    """Start over with the starting balance and zeroed statistics."""
    table = await _require_table(session_id)
    return await _respond(table, table.reset_game())
