"""
Server-side session cache.

The widget is the authoritative holder of a visitor's session; this store
is a best-effort fallback for requests that arrive without echoed state.
Concurrent writes for one session id are last-write-wins, no locking.

Usage:
    store = create_session_store()
    store.put("sid-1", Session(state="goal", data={}))
    store.get("sid-1")
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Optional

from sensei_bot.config import settings
from sensei_bot.schemas.session_schema import Session

logger = logging.getLogger(__name__)


class SessionStoreError(Exception):
    """Raised when a session cannot be written to or read from the backend."""


def _short(session_id: str) -> str:
    return session_id[:8] + "..."


class SessionStore(ABC):
    """Keyed storage of (state, data) pairs."""

    @abstractmethod
    def get(self, session_id: str) -> Optional[Session]:
        """Return a copy of the stored session, or None if absent or expired."""

    @abstractmethod
    def put(self, session_id: str, session: Session) -> None:
        """Store a copy of the session, replacing any previous value."""

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Remove a session. Returns True if one existed."""


class InMemorySessionStore(SessionStore):
    """Process-local store with per-entry TTL. Not shared across server instances."""

    def __init__(self, ttl_seconds: int = settings.store.ttl_seconds) -> None:
        self._ttl_seconds = ttl_seconds
        self._sessions: dict[str, tuple[Session, float]] = {}

    @staticmethod
    def _now() -> float:
        return datetime.now(timezone.utc).timestamp()

    def get(self, session_id: str) -> Optional[Session]:
        entry = self._sessions.get(session_id)
        if entry is None:
            logger.debug("Session not found (in-memory): %s", _short(session_id))
            return None

        session, expire_at = entry
        if self._now() > expire_at:
            del self._sessions[session_id]
            logger.debug("Session expired (in-memory): %s", _short(session_id))
            return None
        return session.copy()

    def put(self, session_id: str, session: Session) -> None:
        now = self._now()
        self._sweep(now)
        self._sessions[session_id] = (session.copy(), now + self._ttl_seconds)
        logger.debug("Session saved (in-memory): %s -> %s", _short(session_id), session.state)

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def _sweep(self, now: float) -> None:
        """Drop expired entries so abandoned sessions do not accumulate."""
        expired = [sid for sid, (_, expire_at) in self._sessions.items() if now > expire_at]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug("Swept %d expired sessions (in-memory)", len(expired))

    def __len__(self) -> int:
        return len(self._sessions)


class RedisSessionStore(SessionStore):
    """Redis-backed store for deployments with several stateless instances."""

    KEY_PREFIX = "sensei:session:"

    def __init__(self, redis_client: Any, ttl_seconds: int = settings.store.ttl_seconds) -> None:
        self._redis = redis_client
        self._ttl_seconds = ttl_seconds

    def _key(self, session_id: str) -> str:
        return f"{self.KEY_PREFIX}{session_id}"

    def get(self, session_id: str) -> Optional[Session]:
        try:
            payload = self._redis.get(self._key(session_id))
        except Exception as e:
            raise SessionStoreError(f"Redis get failed: {e}") from e
        if not payload:
            return None
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        raw = json.loads(payload)
        return Session(state=str(raw.get("state", "")), data=dict(raw.get("data") or {}))

    def put(self, session_id: str, session: Session) -> None:
        payload = json.dumps({"state": session.state, "data": session.data})
        try:
            self._redis.setex(self._key(session_id), self._ttl_seconds, payload)
        except Exception as e:
            raise SessionStoreError(f"Redis save failed: {e}") from e
        logger.debug("Session saved (Redis): %s -> %s", _short(session_id), session.state)

    def delete(self, session_id: str) -> bool:
        try:
            return bool(self._redis.delete(self._key(session_id)))
        except Exception as e:
            raise SessionStoreError(f"Redis delete failed: {e}") from e


def create_session_store(backend: Optional[str] = None) -> SessionStore:
    """Build the configured store backend."""
    backend = (backend or settings.store.backend).lower()
    if backend == "redis":
        import redis

        client = redis.from_url(settings.store.redis_url, decode_responses=True)
        logger.info("Using Redis session store")
        return RedisSessionStore(client)
    if backend == "memory":
        return InMemorySessionStore()
    raise ValueError(f"Unknown session store backend: {backend!r}")
