"""WebSocket table endpoint with a paced dealer turn."""

import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from api.tables import load_table, save_table, table_state_response
from blackjack.game import RoundState, RoundStateMachine
from blackjack.game.engine import MSG_GAME_OVER
from config import config

logger = logging.getLogger(__name__)

router = APIRouter()


class ConnectionManager:
    """Track WebSocket connections and how fast the dealer is shown playing."""

    def __init__(
        self,
        dealer_delay: float | None = None,
        bankrupt_message_delay: float | None = None,
    ) -> None:
        self._connections: dict[str, WebSocket] = {}
        self.dealer_delay = (
            config.game.dealer_draw_delay if dealer_delay is None else dealer_delay
        )
        self.bankrupt_message_delay = (
            config.game.bankrupt_message_delay
            if bankrupt_message_delay is None
            else bankrupt_message_delay
        )

    async def connect(self, websocket: WebSocket, session_id: str) -> None:
        """Accept and register a new connection."""
        await websocket.accept()
        self._connections[session_id] = websocket

    def disconnect(self, session_id: str, websocket: WebSocket) -> None:
        """
        Remove a connection. The table stays cached for reconnection.

        A socket replaced by a newer one for the same session leaves the
        newer registration alone.
        """
        if self._connections.get(session_id) is websocket:
            del self._connections[session_id]

    async def send_message(self, session_id: str, message: dict[str, Any]) -> None:
        """Send a message to a specific session."""
        websocket = self._connections.get(session_id)
        if websocket is not None:
            await websocket.send_json(message)

    async def send_state(self, session_id: str, table: RoundStateMachine, kind: str = "state_update") -> None:
        await self.send_message(session_id, {
            "type": kind,
            "state": table_state_response(table).model_dump(),
        })

    async def send_error(self, session_id: str, message: str) -> None:
        await self.send_message(session_id, {"type": "error", "message": message})


# Global connection manager
manager = ConnectionManager()


async def _play_dealer_paced(session_id: str, table: RoundStateMachine) -> None:
    """Show the dealer turn one card at a time."""
    await manager.send_state(session_id, table)
    for _ in table.dealer_steps():
        await asyncio.sleep(manager.dealer_delay)
        await manager.send_state(session_id, table, kind="dealer_step")


async def _finish_action(session_id: str, table: RoundStateMachine, accepted: bool) -> None:
    """Report the outcome of an input verb to the client."""
    if not accepted:
        await manager.send_error(session_id, table.message)
        return

    if table.state == RoundState.DEALER_TURN:
        await _play_dealer_paced(session_id, table)
    await save_table(table)
    await manager.send_state(session_id, table)

    if table.bankrupt:
        await asyncio.sleep(manager.bankrupt_message_delay)
        await manager.send_message(session_id, {
            "type": "message",
            "message": MSG_GAME_OVER,
            "category": "lose",
        })


@router.websocket("/game/{session_id}")
async def game_websocket(websocket: WebSocket, session_id: str) -> None:
    """
    WebSocket endpoint for a table.

    Messages from client:
    - {"type": "bet", "amount": 100}
    - {"type": "deal"}
    - {"type": "hit"} / {"type": "stand"}
    - {"type": "reset_game"}
    - {"type": "get_state"}

    Messages to client:
    - {"type": "state_update", "state": {...}}
    - {"type": "dealer_step", "state": {...}}, one per dealer step
    - {"type": "message", "message": "...", "category": "..."}
    - {"type": "error", "message": "..."}

    Messages are handled one at a time, so nothing sent during the dealer
    turn is applied until the round is settled.
    """
    await manager.connect(websocket, session_id)

    table = await load_table(session_id)
    if table is None:
        await manager.send_error(session_id, "Unknown session")
        manager.disconnect(session_id, websocket)
        await websocket.close(code=4404)
        return

    await manager.send_state(session_id, table)

    verbs = {
        "deal": table.start_round,
        "hit": table.hit,
        "stand": table.stand,
        "reset_game": table.reset_game,
    }

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await manager.send_error(session_id, "Malformed message")
                continue
            if not isinstance(message, dict):
                await manager.send_error(session_id, "Malformed message")
                continue

            msg_type = message.get("type")

            if msg_type == "get_state":
                await manager.send_state(session_id, table)

            elif msg_type == "bet":
                amount = message.get("amount")
                if isinstance(amount, bool) or not isinstance(amount, int) or amount < 1:
                    await manager.send_error(session_id, "Bet must be a positive whole amount")
                    continue
                await _finish_action(session_id, table, table.place_bet(amount))

            elif msg_type in verbs:
                await _finish_action(session_id, table, verbs[msg_type]())

            else:
                await manager.send_error(session_id, f"Unknown message type: {msg_type}")

    except WebSocketDisconnect:
        logger.debug("WebSocket disconnected")
    finally:
        manager.disconnect(session_id, websocket)
