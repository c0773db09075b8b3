"""
Finite state graph for the sales funnel.

Defines the funnel states and every allowed edge between them. The engine
never picks a next state directly: it names a trigger and the transition
table resolves where that leads, so an edge missing from the table fails
loudly instead of silently jumping.

Two rules sit outside the table because they apply from every state:
the initialization signal and recovery from an unknown state, both of
which land on ``INITIAL_STATE``.

Usage:
    state = parse_state("goal")
    nxt = resolve_transition(state, TransitionTrigger.GOAL_GIVEN)
    assert nxt == ConversationState.PAIN
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ConversationState(str, Enum):
    """All possible nodes of the funnel."""
    CONSENT = "consent"
    GOAL = "goal"
    PAIN = "pain"
    YEARS = "years"
    EMAIL = "email"
    PRESCRIBE = "prescribe"
    CHECKOUT = "checkout"
    FREEBIE = "freebie"
    FREEBIE_EMAIL = "freebie_email"
    END = "end"


class TransitionTrigger(str, Enum):
    """Classified visitor inputs that move the funnel."""
    AFFIRMED = "affirmed"
    DECLINED = "declined"
    GOAL_GIVEN = "goal_given"
    PAIN_GIVEN = "pain_given"
    YEARS_GIVEN = "years_given"
    EMAIL_VALID = "email_valid"
    EMAIL_INVALID = "email_invalid"
    CHECKOUT_ACCEPTED = "checkout_accepted"
    MORE_INFO = "more_info"
    FREEBIE_ACCEPTED = "freebie_accepted"
    FREEBIE_DECLINED = "freebie_declined"


INITIAL_STATE = ConversationState.CONSENT
TERMINAL_STATES = frozenset({ConversationState.CHECKOUT, ConversationState.END})


@dataclass(frozen=True)
class Transition:
    """A single valid state transition."""
    from_state: ConversationState
    to_state: ConversationState
    trigger: TransitionTrigger


class InvalidTransitionError(Exception):
    """Raised when a trigger has no edge from the given state."""


TRANSITIONS: list[Transition] = [
    # --- Consent gate ---
    Transition(ConversationState.CONSENT, ConversationState.GOAL,
               TransitionTrigger.AFFIRMED),
    Transition(ConversationState.CONSENT, ConversationState.FREEBIE,
               TransitionTrigger.DECLINED),

    # --- Qualification ---
    Transition(ConversationState.GOAL, ConversationState.PAIN,
               TransitionTrigger.GOAL_GIVEN),
    Transition(ConversationState.PAIN, ConversationState.YEARS,
               TransitionTrigger.PAIN_GIVEN),
    Transition(ConversationState.YEARS, ConversationState.EMAIL,
               TransitionTrigger.YEARS_GIVEN),

    # --- Email capture ---
    Transition(ConversationState.EMAIL, ConversationState.PRESCRIBE,
               TransitionTrigger.EMAIL_VALID),
    Transition(ConversationState.EMAIL, ConversationState.EMAIL,
               TransitionTrigger.EMAIL_INVALID),

    # --- Pitch loop ---
    Transition(ConversationState.PRESCRIBE, ConversationState.CHECKOUT,
               TransitionTrigger.CHECKOUT_ACCEPTED),
    Transition(ConversationState.PRESCRIBE, ConversationState.PRESCRIBE,
               TransitionTrigger.MORE_INFO),

    # --- Lead magnet ---
    Transition(ConversationState.FREEBIE, ConversationState.FREEBIE_EMAIL,
               TransitionTrigger.FREEBIE_ACCEPTED),
    Transition(ConversationState.FREEBIE, ConversationState.FREEBIE,
               TransitionTrigger.FREEBIE_DECLINED),
    Transition(ConversationState.FREEBIE_EMAIL, ConversationState.END,
               TransitionTrigger.EMAIL_VALID),
    Transition(ConversationState.FREEBIE_EMAIL, ConversationState.FREEBIE_EMAIL,
               TransitionTrigger.EMAIL_INVALID),
]


def parse_state(value: Optional[str]) -> Optional[ConversationState]:
    """Clamp a raw state string to a known state. Returns None if unrecognized."""
    if value is None:
        return None
    try:
        return ConversationState(value)
    except ValueError:
        return None


def resolve_transition(
    state: ConversationState, trigger: TransitionTrigger
) -> ConversationState:
    """
    Look up the destination of a trigger from a state.

    Raises:
        InvalidTransitionError: If no valid transition exists.
    """
    for t in TRANSITIONS:
        if t.from_state == state and t.trigger == trigger:
            logger.debug(
                "State transition: %s -> %s (trigger: %s)",
                state.value, t.to_state.value, trigger.value,
            )
            return t.to_state

    valid = [t.value for t in get_valid_triggers(state)]
    raise InvalidTransitionError(
        f"No valid transition from '{state.value}' "
        f"with trigger '{trigger.value}'. Valid triggers: {valid}"
    )


def get_valid_triggers(state: ConversationState) -> list[TransitionTrigger]:
    """Return all triggers valid from a state."""
    return [t.trigger for t in TRANSITIONS if t.from_state == state]


def is_terminal(state: ConversationState) -> bool:
    """Check if a state has no outgoing edges in the funnel graph."""
    return state in TERMINAL_STATES
