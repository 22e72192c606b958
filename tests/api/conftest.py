"""Pytest fixtures for API tests."""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

import api.session
import api.tables
from api.main import app
from api.session import InMemorySessionStore


@pytest.fixture(autouse=True)
def session_store(monkeypatch):
    """Keep API tests on a fresh in-memory session store and table cache."""
    store = InMemorySessionStore()
    monkeypatch.setattr(api.session, "_session_store", store)
    monkeypatch.setattr(api.tables, "_tables", {})
    return store


@pytest_asyncio.fixture
async def client():
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def stack_deck(make_deck):
    """Replace a session's deck so it deals ``cards`` in order."""

    def _stack(session_id: str, *cards: str) -> None:
        api.tables._tables[session_id].deck = make_deck(*cards)

    return _stack
