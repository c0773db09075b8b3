"""
Client/server session synchronization.

The widget echoes the ``(state, data)`` pair from its last response on each
request. When present, that pair is authoritative and replaces the server
copy for the turn (no merge). When absent, the server falls back to its own
store, creating a fresh session if none exists. The resulting pair is
written back to the store and returned verbatim for the client to persist.

The store is a best-effort cache: a backend failure is logged and the turn
proceeds as if the cached copy were absent.
"""

import logging
import uuid
from typing import Optional

from sensei_bot.conversation.engine import ConversationEngine
from sensei_bot.conversation.state_machine import INITIAL_STATE
from sensei_bot.logging_context import session_context
from sensei_bot.schemas.chat_schema import ChatRequest, ChatResponse
from sensei_bot.schemas.session_schema import Session
from sensei_bot.store.session_store import SessionStore, SessionStoreError

logger = logging.getLogger(__name__)


def _cache_get(store: SessionStore, session_id: str) -> Optional[Session]:
    try:
        return store.get(session_id)
    except SessionStoreError as e:
        logger.warning("Session cache read failed, starting fresh: %s", e)
        return None


def _cache_put(store: SessionStore, session_id: str, session: Session) -> None:
    try:
        store.put(session_id, session)
    except SessionStoreError as e:
        logger.warning("Session cache write failed: %s", e)


def resolve_session(
    store: SessionStore,
    session_id: str,
    client_state: Optional[str],
    client_data: Optional[dict[str, str]],
) -> Session:
    """Pick the session to advance: client echo first, then store, then a fresh one."""
    if client_state:
        return Session(state=client_state, data=dict(client_data or {}))

    cached = _cache_get(store, session_id)
    if cached is not None:
        logger.debug("Using server-held session")
        return cached

    fresh = Session(state=INITIAL_STATE.value, data={})
    _cache_put(store, session_id, fresh)
    logger.debug("Created server-held session")
    return fresh


class ChatService:
    """Binds the engine to a session store for one request/response cycle."""

    def __init__(self, store: SessionStore, engine: Optional[ConversationEngine] = None) -> None:
        self.store = store
        self.engine = engine or ConversationEngine()

    def handle(self, request: ChatRequest) -> ChatResponse:
        session_id = request.session_id or str(uuid.uuid4())

        with session_context(session_id):
            session = resolve_session(
                self.store, session_id, request.client_state, request.client_data
            )
            result = self.engine.advance(session, request.message)
            _cache_put(self.store, session_id, result.session)

            logger.info("Turn handled: %s -> %s", session.state, result.session.state)

        return ChatResponse(
            messages=result.messages,
            checkout_url=result.checkout_url,
            next_state=result.session.state,
            next_data=result.session.data,
            session_id=session_id,
        )
