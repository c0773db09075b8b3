"""Chat request/response envelopes exchanged with the widget."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Sender(str, Enum):
    BOT = "bot"
    USER = "user"


class OutgoingMessage(BaseModel):
    """A single chat bubble, optionally with quick-reply buttons."""

    model_config = ConfigDict(populate_by_name=True)

    sender: Sender = Field(default=Sender.BOT, alias="from")
    text: str
    buttons: Optional[list[str]] = None


class ChatRequest(BaseModel):
    """Inbound envelope. ``clientState``/``clientData`` echo the last response."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")
    message: Optional[str] = ""
    client_state: Optional[str] = Field(default=None, alias="clientState")
    client_data: Optional[dict[str, str]] = Field(default=None, alias="clientData")


class ChatResponse(BaseModel):
    """Outbound envelope. The widget persists ``nextState``/``nextData`` verbatim."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[OutgoingMessage] = Field(default_factory=list)
    checkout_url: Optional[str] = Field(default=None, alias="checkoutUrl")
    next_state: str = Field(alias="nextState")
    next_data: dict[str, str] = Field(default_factory=dict, alias="nextData")
    session_id: Optional[str] = Field(default=None, alias="sessionId")
