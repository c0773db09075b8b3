"""Per-visitor session state and engine turn results."""

from dataclasses import dataclass, field
from typing import Optional

from sensei_bot.schemas.chat_schema import OutgoingMessage


@dataclass
class Session:
    """
    Per-visitor funnel position plus the facts collected so far.

    ``state`` is kept as a raw string because it may arrive echoed from the
    client; the engine clamps it to a known state before dispatch.
    ``data`` holds ``goal``, ``bucket``, ``pain``, ``years``, ``email`` and
    optionally ``first_name``.
    """
    state: str = "consent"
    data: dict[str, str] = field(default_factory=dict)

    def copy(self) -> "Session":
        return Session(state=self.state, data=dict(self.data))


@dataclass
class TurnResult:
    """Outcome of advancing a session by one visitor input."""
    session: Session
    messages: list[OutgoingMessage] = field(default_factory=list)
    checkout_url: Optional[str] = None
