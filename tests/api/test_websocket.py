"""Tests for the WebSocket table endpoint."""

import pytest
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

import api.tables
from api.main import app
from api.websocket import ConnectionManager, manager
from blackjack.game.engine import MSG_GAME_OVER


@pytest.fixture
def ws_client(monkeypatch):
    """Synchronous client with the dealer pacing switched off."""
    monkeypatch.setattr(manager, "dealer_delay", 0)
    monkeypatch.setattr(manager, "bankrupt_message_delay", 0)
    return TestClient(app)


@pytest.fixture
def session_id(ws_client):
    return ws_client.post("/api/game/new").json()["session_id"]


def _play(websocket, *messages):
    for message in messages:
        websocket.send_json(message)


def test_initial_state_on_connect(ws_client, session_id):
    with ws_client.websocket_connect(f"/ws/game/{session_id}") as websocket:
        data = websocket.receive_json()

    assert data["type"] == "state_update"
    assert data["state"]["state"] == "BETTING"
    assert data["state"]["balance"] == 1000


def test_unknown_session(ws_client):
    with ws_client.websocket_connect("/ws/game/nope") as websocket:
        data = websocket.receive_json()

    assert data == {"type": "error", "message": "Unknown session"}


def test_bet_updates_state(ws_client, session_id):
    with ws_client.websocket_connect(f"/ws/game/{session_id}") as websocket:
        websocket.receive_json()
        websocket.send_json({"type": "bet", "amount": 50})
        data = websocket.receive_json()

    assert data["type"] == "state_update"
    assert data["state"]["bet"] == 50
    assert data["state"]["balance"] == 950


@pytest.mark.parametrize("amount", [0, -5, "100", 2.5, True])
def test_bad_bet_amount(ws_client, session_id, amount):
    with ws_client.websocket_connect(f"/ws/game/{session_id}") as websocket:
        websocket.receive_json()
        websocket.send_json({"type": "bet", "amount": amount})
        data = websocket.receive_json()

    assert data["type"] == "error"


def test_rejected_action_sends_advisory(ws_client, session_id):
    with ws_client.websocket_connect(f"/ws/game/{session_id}") as websocket:
        websocket.receive_json()
        websocket.send_json({"type": "hit"})
        data = websocket.receive_json()

    assert data == {"type": "error", "message": "You can only hit during your turn"}


def test_malformed_and_unknown_messages(ws_client, session_id):
    with ws_client.websocket_connect(f"/ws/game/{session_id}") as websocket:
        websocket.receive_json()

        websocket.send_text("not json")
        assert websocket.receive_json() == {"type": "error", "message": "Malformed message"}

        websocket.send_text("[1, 2]")
        assert websocket.receive_json() == {"type": "error", "message": "Malformed message"}

        websocket.send_json({"type": "split"})
        assert websocket.receive_json()["message"] == "Unknown message type: split"


def test_dealer_turn_is_paced(ws_client, session_id, make_deck):
    api.tables._tables[session_id].deck = make_deck("10S", "10H", "7D", "6C", "6H")

    with ws_client.websocket_connect(f"/ws/game/{session_id}") as websocket:
        websocket.receive_json()
        _play(websocket, {"type": "bet", "amount": 100}, {"type": "deal"})
        websocket.receive_json()
        dealt = websocket.receive_json()
        assert dealt["state"]["state"] == "PLAYING"

        websocket.send_json({"type": "stand"})
        frames = [websocket.receive_json() for _ in range(4)]

    assert [f["type"] for f in frames] == [
        "state_update",
        "dealer_step",
        "dealer_step",
        "state_update",
    ]
    assert frames[0]["state"]["state"] == "DEALER_TURN"
    assert len(frames[0]["state"]["dealer_hand"]["cards"]) == 2
    assert not frames[0]["state"]["dealer_hand"]["cards"][1]["hidden"]
    assert len(frames[1]["state"]["dealer_hand"]["cards"]) == 3
    assert frames[2]["state"]["outcome"] == "dealer-bust"
    assert frames[3]["state"]["state"] == "BETTING"
    assert frames[3]["state"]["balance"] == 1100


def test_bankruptcy_sends_game_over(ws_client, session_id, make_deck):
    table = api.tables._tables[session_id]
    table.deck = make_deck("10S", "10H", "7D", "9C")
    table.ledger.balance = 100

    with ws_client.websocket_connect(f"/ws/game/{session_id}") as websocket:
        websocket.receive_json()
        _play(websocket, {"type": "bet", "amount": 100}, {"type": "deal"}, {"type": "stand"})
        frames = [websocket.receive_json() for _ in range(6)]

        websocket.send_json({"type": "bet", "amount": 10})
        rejected = websocket.receive_json()

        websocket.send_json({"type": "reset_game"})
        restored = websocket.receive_json()

    final = frames[4]
    assert final["type"] == "state_update"
    assert final["state"]["state"] == "RESOLVED"
    assert final["state"]["bankrupt"]
    assert final["state"]["outcome"] == "lose"
    assert frames[5] == {"type": "message", "message": MSG_GAME_OVER, "category": "lose"}
    assert rejected == {"type": "error", "message": MSG_GAME_OVER}
    assert restored["state"]["balance"] == 1000
    assert restored["state"]["state"] == "BETTING"


@pytest.mark.asyncio
async def test_closing_replaced_socket_keeps_new_one():
    connections = ConnectionManager(dealer_delay=0, bankrupt_message_delay=0)
    old, new = AsyncMock(), AsyncMock()
    await connections.connect(old, "table")
    await connections.connect(new, "table")

    connections.disconnect("table", old)
    await connections.send_message("table", {"type": "ping"})

    new.send_json.assert_awaited_once_with({"type": "ping"})
    old.send_json.assert_not_awaited()

    connections.disconnect("table", new)
    await connections.send_message("table", {"type": "ping"})
    new.send_json.assert_awaited_once()
