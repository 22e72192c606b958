"""Session management with Redis backend and in-memory fallback."""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

import redis.asyncio as redis
from redis.exceptions import RedisError
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from blackjack.persistence import InMemoryBalanceStore
from config import config

logger = logging.getLogger(__name__)

# Session data keys
SESSION_KEY_LEDGER = "ledger"
SESSION_KEY_CREATED_AT = "created_at"
SESSION_KEY_LAST_ACTIVITY = "last_activity"


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._secret_key = secret_key or config.security.secret_key
        self._serializer = URLSafeTimedSerializer(self._secret_key, salt="blackjack-session")

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if valid, None otherwise
        """
        max_age = max_age or config.session_ttl
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


class SessionStore(ABC):
    """Abstract session store."""

    @abstractmethod
    async def get(self, session_id: str) -> dict[str, Any] | None:
        """Get session data."""
        ...

    @abstractmethod
    async def set(self, session_id: str, data: dict[str, Any], ttl: int | None = None) -> None:
        """Set session data."""
        ...

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Delete session."""
        ...

    async def exists(self, session_id: str) -> bool:
        """Check if session exists."""
        return await self.get(session_id) is not None

    def create_session_id(self) -> str:
        """Create a new signed session token."""
        return get_session_signer().sign(str(uuid4()))


class InMemorySessionStore(SessionStore):
    """In-memory session store for local development and tests."""

    def __init__(self) -> None:
        self._sessions: dict[str, tuple[dict[str, Any], datetime]] = {}

    async def get(self, session_id: str) -> dict[str, Any] | None:
        if session_id not in self._sessions:
            return None

        data, expiry = self._sessions[session_id]
        if expiry < datetime.now():
            await self.delete(session_id)
            return None

        return data

    async def set(
        self,
        session_id: str,
        data: dict[str, Any],
        ttl: int | None = None,
    ) -> None:
        ttl = ttl or config.session_ttl
        expiry = datetime.now() + timedelta(seconds=ttl)
        self._sessions[session_id] = (data, expiry)

    async def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)


class RedisSessionStore(SessionStore):
    """Redis-backed session store; balances survive server restarts."""

    def __init__(self, redis_client: redis.Redis) -> None:
        self._redis = redis_client
        self._prefix = "blackjack:table:"

    def _key(self, session_id: str) -> str:
        return f"{self._prefix}{session_id}"

    async def get(self, session_id: str) -> dict[str, Any] | None:
        data = await self._redis.get(self._key(session_id))
        if data is None:
            return None
        return json.loads(data)

    async def set(
        self,
        session_id: str,
        data: dict[str, Any],
        ttl: int | None = None,
    ) -> None:
        ttl = ttl or config.session_ttl
        await self._redis.setex(self._key(session_id), ttl, json.dumps(data))

    async def delete(self, session_id: str) -> None:
        await self._redis.delete(self._key(session_id))

    async def exists(self, session_id: str) -> bool:
        return await self._redis.exists(self._key(session_id)) > 0


# Global session store instance
_session_store: SessionStore | None = None


async def get_session_store() -> SessionStore:
    """Get or create the session store, preferring Redis when reachable."""
    global _session_store

    if _session_store is not None:
        return _session_store

    try:
        redis_client = redis.from_url(config.redis.url)
        await redis_client.ping()
        _session_store = RedisSessionStore(redis_client)
        logger.info("Using Redis session store at %s:%d", config.redis.host, config.redis.port)
        return _session_store
    except (RedisError, OSError) as e:
        logger.warning("Redis unavailable (%s), using in-memory sessions", e)

    _session_store = InMemorySessionStore()
    return _session_store


async def create_session(data: dict[str, Any] | None = None) -> str:
    """Create a new session."""
    store = await get_session_store()
    session_id = store.create_session_id()
    data = dict(data or {})
    data.setdefault(SESSION_KEY_CREATED_AT, int(datetime.now().timestamp()))
    await store.set(session_id, data)
    return session_id


async def get_session(session_id: str) -> dict[str, Any] | None:
    """Get session data."""
    store = await get_session_store()
    return await store.get(session_id)


async def update_session(session_id: str, data: dict[str, Any]) -> None:
    """Update session data."""
    store = await get_session_store()
    await store.set(session_id, data)


def extract_session_id(token: str) -> str | None:
    """
    Extract the raw session ID from a signed token.

    Returns:
        The raw session ID if valid, None otherwise
    """
    return get_session_signer().unsign(token)


class SessionBalanceStore(InMemoryBalanceStore):
    """
    Balance store bound to one session.

    The engine saves synchronously; the record is held here until the
    request handler awaits ``flush()`` to write it to the session store.
    """

    def __init__(self, session_id: str, record: dict[str, Any] | None = None) -> None:
        super().__init__(record)
        self.session_id = session_id
        self.dirty = False

    def save(self, record: dict[str, Any]) -> None:
        super().save(record)
        self.dirty = True

    async def flush(self) -> None:
        """Write a pending record to the session store."""
        if not self.dirty:
            return

        data = await get_session(self.session_id)
        if data is None:
            logger.warning("Session expired before its ledger was saved")
            self.dirty = False
            return

        data[SESSION_KEY_LEDGER] = self.record
        data[SESSION_KEY_LAST_ACTIVITY] = int(datetime.now().timestamp())
        await update_session(self.session_id, data)
        self.dirty = False
