"""Tests for the server-side session stores."""

import json

import pytest

from sensei_bot.schemas.session_schema import Session
from sensei_bot.store.session_store import (
    InMemorySessionStore,
    RedisSessionStore,
    SessionStoreError,
    create_session_store,
)
from tests.conftest import FakeRedis


class TestInMemorySessionStore:
    def test_missing_returns_none(self, store):
        assert store.get("nope") is None

    def test_put_then_get(self, store):
        store.put("a", Session(state="goal", data={"x": "1"}))
        assert store.get("a") == Session(state="goal", data={"x": "1"})

    def test_stores_a_copy(self, store):
        session = Session(state="goal", data={})
        store.put("a", session)
        session.data["leak"] = "y"
        assert store.get("a").data == {}

    def test_returns_a_copy(self, store):
        store.put("a", Session(state="goal", data={}))
        store.get("a").data["leak"] = "y"
        assert store.get("a").data == {}

    def test_last_write_wins(self, store):
        store.put("a", Session(state="goal"))
        store.put("a", Session(state="pain"))
        assert store.get("a").state == "pain"

    def test_delete(self, store):
        store.put("a", Session())
        assert store.delete("a") is True
        assert store.delete("a") is False
        assert len(store) == 0

    def test_expired_entries_vanish(self, monkeypatch):
        store = InMemorySessionStore(ttl_seconds=10)
        monkeypatch.setattr(InMemorySessionStore, "_now", staticmethod(lambda: 1000.0))
        store.put("a", Session())
        monkeypatch.setattr(InMemorySessionStore, "_now", staticmethod(lambda: 1011.0))
        assert store.get("a") is None
        assert len(store) == 0

    def test_put_sweeps_abandoned_sessions(self, monkeypatch):
        store = InMemorySessionStore(ttl_seconds=1)
        monkeypatch.setattr(InMemorySessionStore, "_now", staticmethod(lambda: 0.0))
        for i in range(1000):
            store.put(f"abandoned-{i}", Session())
        monkeypatch.setattr(InMemorySessionStore, "_now", staticmethod(lambda: 10000.0))
        store.put("live", Session(state="goal"))
        assert len(store) == 1
        assert store.get("live").state == "goal"

    def test_put_keeps_unexpired_sessions(self, monkeypatch):
        store = InMemorySessionStore(ttl_seconds=100)
        monkeypatch.setattr(InMemorySessionStore, "_now", staticmethod(lambda: 0.0))
        store.put("a", Session())
        monkeypatch.setattr(InMemorySessionStore, "_now", staticmethod(lambda: 50.0))
        store.put("b", Session())
        assert len(store) == 2


class TestRedisSessionStore:
    def test_round_trip(self):
        client = FakeRedis()
        store = RedisSessionStore(client, ttl_seconds=60)
        store.put("a", Session(state="email", data={"goal": "kata"}))
        assert store.get("a") == Session(state="email", data={"goal": "kata"})
        assert client.ttls["sensei:session:a"] == 60

    def test_payload_shape(self):
        client = FakeRedis()
        RedisSessionStore(client).put("a", Session(state="goal", data={"k": "v"}))
        assert json.loads(client.items["sensei:session:a"]) == {"state": "goal", "data": {"k": "v"}}

    def test_bytes_payload(self):
        client = FakeRedis()
        client.items["sensei:session:a"] = b'{"state": "pain", "data": {}}'
        assert RedisSessionStore(client).get("a") == Session(state="pain", data={})

    def test_missing(self):
        assert RedisSessionStore(FakeRedis()).get("nope") is None

    def test_delete(self):
        store = RedisSessionStore(FakeRedis())
        store.put("a", Session())
        assert store.delete("a") is True
        assert store.delete("a") is False

    def test_backend_failure_wrapped(self):
        store = RedisSessionStore(FakeRedis(fail=True))
        with pytest.raises(SessionStoreError):
            store.put("a", Session())
        with pytest.raises(SessionStoreError):
            store.get("a")


class TestCreateSessionStore:
    def test_memory_backend(self):
        assert isinstance(create_session_store("memory"), InMemorySessionStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown session store backend"):
            create_session_store("sqlite")
