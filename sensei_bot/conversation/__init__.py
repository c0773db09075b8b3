from sensei_bot.conversation.classifier import classify_goal
from sensei_bot.conversation.engine import INIT_SIGNAL, ConversationEngine, advance
from sensei_bot.conversation.state_machine import (
    ConversationState,
    TransitionTrigger,
    parse_state,
)
from sensei_bot.conversation.sync import ChatService, resolve_session

__all__ = [
    "ConversationEngine",
    "ConversationState",
    "TransitionTrigger",
    "ChatService",
    "INIT_SIGNAL",
    "advance",
    "classify_goal",
    "parse_state",
    "resolve_session",
]
