"""
Conversation engine: one visitor input in, next session and bot messages out.

``advance`` is pure and total. It never mutates the session it is given,
performs no I/O beyond logging, and every (state, input) pair produces a
result: unknown states recover to the consent step, bad emails re-prompt in
place, and unmatched text follows each step's "no match" branch.

Usage:
    engine = ConversationEngine()
    result = engine.advance(Session(), INIT_SIGNAL)
    result = engine.advance(result.session, "Yes")
    assert result.session.state == "goal"
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

from sensei_bot.conversation.classifier import DEFAULT_BUCKET, classify_goal
from sensei_bot.conversation.state_machine import (
    INITIAL_STATE,
    TERMINAL_STATES,
    ConversationState,
    TransitionTrigger,
    parse_state,
    resolve_transition,
)
from sensei_bot.prompts import messages
from sensei_bot.schemas.chat_schema import OutgoingMessage
from sensei_bot.schemas.session_schema import Session, TurnResult
from sensei_bot.tools.checkout import build_checkout_link
from sensei_bot.tools.products import DEFAULT_CHECKOUT_BUCKET, Bucket, parse_bucket
from sensei_bot.utils import is_valid_email, normalize_input

logger = logging.getLogger(__name__)

# Sent by the widget out of band; compared before trimming so typed text never matches.
INIT_SIGNAL = "__INIT__"

_AFFIRMATIVE = re.compile(r"yes", re.IGNORECASE)
_CHECKOUT_INTENT = re.compile(r"start now|^yes$", re.IGNORECASE)
_FREEBIE_INTENT = re.compile(r"yes", re.IGNORECASE)

LinkBuilder = Callable[[Bucket, Mapping[str, str]], str]


@dataclass
class _Step:
    """What a state handler decided for one input."""
    trigger: TransitionTrigger
    messages: list[OutgoingMessage] = field(default_factory=list)
    checkout_url: Optional[str] = None


class ConversationEngine:
    """
    Pure state-transition function over funnel sessions.

    Each state has exactly one handler. Handlers read and write ``data``
    (a private copy), return a trigger, and the transition table decides
    the next state.
    """

    def __init__(self, link_builder: LinkBuilder = build_checkout_link) -> None:
        self._build_link = link_builder
        self._handlers: dict[ConversationState, Callable[[dict[str, str], str], _Step]] = {
            ConversationState.CONSENT: self._on_consent,
            ConversationState.GOAL: self._on_goal,
            ConversationState.PAIN: self._on_pain,
            ConversationState.YEARS: self._on_years,
            ConversationState.EMAIL: self._on_email,
            ConversationState.PRESCRIBE: self._on_prescribe,
            ConversationState.FREEBIE: self._on_freebie,
            ConversationState.FREEBIE_EMAIL: self._on_freebie_email,
        }
        # Terminal states have no outgoing edges; input there restarts like an unknown state.
        self._terminal = set(TERMINAL_STATES)

        missing = set(ConversationState) - set(self._handlers) - self._terminal
        if missing:
            raise RuntimeError(f"No handler for states: {sorted(s.value for s in missing)}")

    def advance(self, session: Session, raw_input: Optional[str]) -> TurnResult:
        """
        Advance a session by one visitor input.

        Args:
            session: Current state and collected data. Not modified.
            raw_input: Typed or button text, or ``INIT_SIGNAL``.

        Returns:
            The next session, bot messages, and a checkout URL when the
            visitor accepts the offer.

        Raises:
            MalformedDestinationError: Only if a product's configured
                checkout URL is invalid (a deployment defect).
        """
        if raw_input == INIT_SIGNAL:
            logger.debug("Init signal from state '%s', session reset", session.state)
            return TurnResult(
                session=Session(state=INITIAL_STATE.value, data={}),
                messages=[messages.welcome()],
            )

        data = dict(session.data)
        state = parse_state(session.state)
        if state is None or state in self._terminal:
            logger.info("Recovering from state %r", session.state)
            return TurnResult(
                session=Session(state=INITIAL_STATE.value, data=data),
                messages=[messages.restart()],
            )

        text = normalize_input(raw_input)
        step = self._handlers[state](data, text)
        next_state = resolve_transition(state, step.trigger)
        return TurnResult(
            session=Session(state=next_state.value, data=data),
            messages=step.messages,
            checkout_url=step.checkout_url,
        )

    def _on_consent(self, data: dict[str, str], text: str) -> _Step:
        if _AFFIRMATIVE.fullmatch(text):
            return _Step(TransitionTrigger.AFFIRMED, [messages.goal_prompt()])
        return _Step(TransitionTrigger.DECLINED, [messages.freebie_offer()])

    def _on_goal(self, data: dict[str, str], text: str) -> _Step:
        bucket = classify_goal(text)
        data["goal"] = text
        data["bucket"] = bucket.value
        return _Step(TransitionTrigger.GOAL_GIVEN, [messages.pain_prompt(bucket)])

    def _on_pain(self, data: dict[str, str], text: str) -> _Step:
        data["pain"] = text
        return _Step(TransitionTrigger.PAIN_GIVEN, [messages.years_prompt()])

    def _on_years(self, data: dict[str, str], text: str) -> _Step:
        data["years"] = text
        summary = messages.summary_and_email_prompt(
            years=text, goal=data.get("goal", ""), pain=data.get("pain", "")
        )
        return _Step(TransitionTrigger.YEARS_GIVEN, [summary])

    def _on_email(self, data: dict[str, str], text: str) -> _Step:
        if not is_valid_email(text):
            return _Step(TransitionTrigger.EMAIL_INVALID, [messages.email_retry()])
        data["email"] = text
        bucket = parse_bucket(data.get("bucket")) or DEFAULT_BUCKET
        return _Step(TransitionTrigger.EMAIL_VALID, [messages.pitch(bucket)])

    def _on_prescribe(self, data: dict[str, str], text: str) -> _Step:
        if not _CHECKOUT_INTENT.search(text):
            return _Step(TransitionTrigger.MORE_INFO, [messages.features()])

        bucket = parse_bucket(data.get("bucket")) or DEFAULT_CHECKOUT_BUCKET
        url = self._build_link(bucket, data)
        return _Step(
            TransitionTrigger.CHECKOUT_ACCEPTED,
            [messages.opening_checkout()],
            checkout_url=url,
        )

    def _on_freebie(self, data: dict[str, str], text: str) -> _Step:
        if _FREEBIE_INTENT.search(text):
            return _Step(TransitionTrigger.FREEBIE_ACCEPTED, [messages.freebie_email_prompt()])
        return _Step(TransitionTrigger.FREEBIE_DECLINED, [messages.freebie_declined()])

    def _on_freebie_email(self, data: dict[str, str], text: str) -> _Step:
        if not is_valid_email(text):
            return _Step(TransitionTrigger.EMAIL_INVALID, [messages.freebie_email_retry()])
        data["email"] = text
        return _Step(TransitionTrigger.EMAIL_VALID, [messages.freebie_done()])


_default_engine = ConversationEngine()


def advance(session: Session, raw_input: Optional[str]) -> TurnResult:
    """Advance a session with the default engine."""
    return _default_engine.advance(session, raw_input)
