"""
Widget client: the visitor-side holder of authoritative session state.

Keeps the session id, current state and collected data under fixed storage
keys, echoes them on every request, and persists whatever the server returns.
Transport failures never touch stored state, so a retry resumes at the same
step.

Usage:
    client = WidgetClient("https://bot.example.com/api/chat")
    reply = client.open()
    reply = client.send("Yes")
"""

import json
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import httpx

from sensei_bot.conversation.engine import INIT_SIGNAL
from sensei_bot.prompts.messages import RESTART_BUTTON
from sensei_bot.schemas.chat_schema import OutgoingMessage, Sender

logger = logging.getLogger(__name__)

SESSION_ID_KEY = "skr_sid"
STATE_KEY = "skr_state"
DATA_KEY = "skr_data"

CONNECTION_ERROR_TEXT = "Connection error. Please try again."
UNEXPECTED_RESPONSE_TEXT = "Unexpected server response."


class ClientStorage(ABC):
    """Minimal string key/value storage, like a browser's localStorage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove(self, key: str) -> None: ...


class MemoryStorage(ClientStorage):
    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage(ClientStorage):
    """Storage persisted to a JSON file so state survives process restarts."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            return json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Corrupt widget storage at %s, starting empty", self._path)
            return {}

    def _write(self, items: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(items), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove(self, key: str) -> None:
        items = self._read()
        if items.pop(key, None) is not None:
            self._write(items)


@dataclass
class WidgetReply:
    """Messages to render for one send, plus a checkout link if one was issued."""
    messages: list[OutgoingMessage] = field(default_factory=list)
    checkout_url: Optional[str] = None
    failed: bool = False


class WidgetClient:
    """Drives the chat endpoint on behalf of one visitor."""

    def __init__(
        self,
        api_url: str,
        storage: Optional[ClientStorage] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ) -> None:
        self.api_url = api_url
        self.storage = storage or MemoryStorage()
        self._http = http or httpx.Client(timeout=timeout)
        self.transcript: list[OutgoingMessage] = []

    @property
    def session_id(self) -> str:
        sid = self.storage.get(SESSION_ID_KEY)
        if not sid:
            sid = str(uuid.uuid4())
            self.storage.set(SESSION_ID_KEY, sid)
        return sid

    @property
    def state(self) -> Optional[str]:
        return self.storage.get(STATE_KEY)

    @property
    def data(self) -> Optional[dict[str, str]]:
        raw = self.storage.get(DATA_KEY)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable %s value", DATA_KEY)
            return None
        return data if isinstance(data, dict) else None

    def reset(self) -> None:
        """Clear stored state and issue a fresh session id."""
        self.storage.remove(STATE_KEY)
        self.storage.remove(DATA_KEY)
        self.storage.remove(SESSION_ID_KEY)
        self.storage.set(SESSION_ID_KEY, str(uuid.uuid4()))

    def open(self) -> WidgetReply:
        """Start a fresh conversation: reset local state and request the welcome."""
        self.reset()
        self.transcript.clear()
        return self._post({"sessionId": self.session_id, "message": INIT_SIGNAL})

    def send(self, text: str) -> WidgetReply:
        """Send typed or button text, echoing the stored state.

        The restart button clears stored state and starts over with the welcome.
        """
        if text == INIT_SIGNAL:
            raise ValueError("The init signal cannot be sent as visitor text; use open()")
        self.transcript.append(OutgoingMessage(sender=Sender.USER, text=text))
        if text.lower() == RESTART_BUTTON.lower():
            self.reset()
            return self._post({"sessionId": self.session_id, "message": INIT_SIGNAL})

        body: dict[str, Any] = {
            "sessionId": self.session_id,
            "message": text,
            "clientState": self.state,
            "clientData": self.data,
        }
        return self._post(body)

    def _post(self, body: dict[str, Any]) -> WidgetReply:
        try:
            res = self._http.post(self.api_url, json=body)
        except httpx.HTTPError as e:
            logger.warning("Chat request failed: %s", e)
            return self._failure(CONNECTION_ERROR_TEXT)

        if res.is_error:
            logger.warning("Chat endpoint returned HTTP %s", res.status_code)
            return self._failure(UNEXPECTED_RESPONSE_TEXT)

        try:
            payload = res.json()
            messages = [OutgoingMessage.model_validate(m) for m in payload.get("messages") or []]
        except (ValueError, AttributeError) as e:
            logger.warning("Unreadable chat response (HTTP %s): %s", res.status_code, e)
            return self._failure(UNEXPECTED_RESPONSE_TEXT)

        if payload.get("nextState"):
            self.storage.set(STATE_KEY, payload["nextState"])
        if payload.get("nextData") is not None:
            self.storage.set(DATA_KEY, json.dumps(payload["nextData"]))

        self.transcript.extend(messages)
        return WidgetReply(messages=messages, checkout_url=payload.get("checkoutUrl"))

    def _failure(self, text: str) -> WidgetReply:
        msg = OutgoingMessage(text=text)
        self.transcript.append(msg)
        return WidgetReply(messages=[msg], failed=True)

    def close(self) -> None:
        self._http.close()
