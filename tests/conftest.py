"""Shared test fixtures and helpers."""

from typing import Optional

import httpx
import pytest

from sensei_bot.conversation.engine import INIT_SIGNAL, ConversationEngine
from sensei_bot.conversation.sync import ChatService
from sensei_bot.schemas.chat_schema import ChatRequest
from sensei_bot.schemas.session_schema import Session, TurnResult
from sensei_bot.store.session_store import InMemorySessionStore


@pytest.fixture
def engine():
    return ConversationEngine()


@pytest.fixture
def store():
    return InMemorySessionStore(ttl_seconds=3600)


@pytest.fixture
def chat_service(store, engine):
    return ChatService(store=store, engine=engine)


def make_session(state: str = "consent", **data: str) -> Session:
    """Helper to create a Session with the given state and data fields."""
    return Session(state=state, data=dict(data))


def walk(
    engine: ConversationEngine,
    inputs: list[str],
    session: Optional[Session] = None,
) -> list[TurnResult]:
    """Feed inputs one by one, threading the session through. Starts with INIT."""
    session = session or Session()
    results = [engine.advance(session, INIT_SIGNAL)]
    for text in inputs:
        results.append(engine.advance(results[-1].session, text))
    return results


def service_transport(service: ChatService, seen: Optional[list[dict]] = None) -> httpx.MockTransport:
    """An httpx transport that answers chat requests in-process via the service."""

    def handler(request: httpx.Request) -> httpx.Response:
        request_body = ChatRequest.model_validate_json(request.content)
        if seen is not None:
            seen.append(request_body.model_dump(by_alias=True))
        response = service.handle(request_body)
        return httpx.Response(
            200, json=response.model_dump(mode="json", by_alias=True, exclude_none=True)
        )

    return httpx.MockTransport(handler)


class FakeRedis:
    """Just enough of a redis client for the store. ``fail=True`` simulates an outage."""

    def __init__(self, fail: bool = False) -> None:
        self.items: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.fail = fail

    def get(self, key):
        if self.fail:
            raise ConnectionError("redis down")
        return self.items.get(key)

    def setex(self, key, ttl, value):
        if self.fail:
            raise ConnectionError("redis down")
        self.items[key] = value
        self.ttls[key] = ttl

    def delete(self, key):
        return 1 if self.items.pop(key, None) is not None else 0
