"""
Centralized bot copy for every funnel step.

Brand-specific values are injected from configuration. Each builder returns
a fresh OutgoingMessage so callers can never share mutable button lists.
"""

from typing import Optional

from sensei_bot.config import settings
from sensei_bot.schemas.chat_schema import OutgoingMessage
from sensei_bot.tools.products import Bucket

_brand = settings.brand

START_NOW = "Yes, start now"
WHATS_INSIDE = "What’s inside?"
MAYBE_LATER = "Maybe later"
RESTART_BUTTON = "Start"

WELCOME_TEXT = (
    f"👋 Welcome to {_brand.name}. I’m your digital sensei. "
    "Want help pinpointing what’s holding you back—and the fastest way to fix it?"
)
WELCOME_BUTTONS = ["Yes", "Not now"]

GOAL_TEXT = "In the next 90 days, what result do you want most?"
GOAL_BUTTONS = [
    "Win more kumite exchanges",
    "Ace my next grading (kata)",
    "Get fitter & more flexible",
    "Stay calm & confident",
]

FREEBIE_OFFER_TEXT = "No worries. Want the Kumite Cheatsheet (10 quick wins)?"
FREEBIE_OFFER_BUTTONS = ["Yes, send it", MAYBE_LATER]

PAIN_TEXT = "What’s the #1 frustration right now?"
PAIN_BUTTONS: dict[Bucket, list[str]] = {
    Bucket.KUMITE: ["Can’t close distance", "I get countered", "Freeze under pressure"],
    Bucket.KATA: ["Timing/flow", "Hip drive & stances", "Nerves on grading"],
    Bucket.CONDITIONING: ["Gas out", "Stiff hips/hamstrings", "No plan"],
    Bucket.MIND: ["Anxiety", "Motivation dips", "Focus drift"],
}

YEARS_TEXT = "How many years have you trained?"
YEARS_BUTTONS = ["<1", "1–3", "3–5", "5+"]

EMAIL_RETRY_TEXT = "Please enter a valid email (e.g. name@example.com)"
FREEBIE_EMAIL_TEXT = "Great—what’s your email?"
FREEBIE_EMAIL_RETRY_TEXT = "Please enter a valid email."
FREEBIE_DECLINED_TEXT = "All good. Come back anytime. 👊"
FREEBIE_DONE_TEXT = "Done—check your inbox in a minute. Oss!"

PITCH_TEXT: dict[Bucket, str] = {
    Bucket.KUMITE: (
        "I recommend the **Kumite Strategy Playbook** (PDF + videos):\n"
        "• 3 distance-closing patterns that avoid counter-gyaku\n"
        "• Rhythm breaks to create openings\n"
        "• Sen-no-sen / go-no-sen timing with examples\n"
        "• 10-minute footwork & reaction sessions\n"
        f"Ready to start? {_brand.price_label}. Instant access."
    ),
    Bucket.KATA: (
        "I recommend the **Kata Mastery Blueprint** (checklists, rhythm drills, visual cues). "
        f"Ready to start? {_brand.price_label}."
    ),
    Bucket.CONDITIONING: (
        "I recommend the **Dojo Conditioning 30-Day Plan** "
        f"(short sessions for gas tank & mobility). Ready to start? {_brand.price_label}."
    ),
    Bucket.MIND: (
        "I recommend the **Mental Dojo Journal System** "
        f"(focus, calm, confidence protocols). Ready to start? {_brand.price_label}."
    ),
}

FEATURES_TEXT = (
    "Here’s what you’ll get: 6 core modules, 6 short videos, drills & a printable plan. Ready?"
)
OPENING_CHECKOUT_TEXT = "Opening checkout…"
RESTART_TEXT = "Tap a button or say 'start' to begin again."


def _bot(text: str, buttons: Optional[list[str]] = None) -> OutgoingMessage:
    return OutgoingMessage(text=text, buttons=list(buttons) if buttons else None)


def welcome() -> OutgoingMessage:
    return _bot(WELCOME_TEXT, WELCOME_BUTTONS)


def goal_prompt() -> OutgoingMessage:
    return _bot(GOAL_TEXT, GOAL_BUTTONS)


def freebie_offer() -> OutgoingMessage:
    return _bot(FREEBIE_OFFER_TEXT, FREEBIE_OFFER_BUTTONS)


def pain_prompt(bucket: Bucket) -> OutgoingMessage:
    return _bot(PAIN_TEXT, PAIN_BUTTONS[bucket])


def years_prompt() -> OutgoingMessage:
    return _bot(YEARS_TEXT, YEARS_BUTTONS)


def summary_and_email_prompt(years: str, goal: str, pain: str) -> OutgoingMessage:
    """Echo the visitor's answers back verbatim and ask for an email."""
    return _bot(
        f'Got it. With {years} years aiming to "{goal}", your main blocker is "{pain}". '
        "More reps won’t fix it. You need strategy + the right drills.\n"
        "What’s your email so I can send your tailored plan?"
    )


def email_retry() -> OutgoingMessage:
    return _bot(EMAIL_RETRY_TEXT)


def pitch(bucket: Bucket) -> OutgoingMessage:
    return _bot(PITCH_TEXT[bucket], [START_NOW, WHATS_INSIDE])


def features() -> OutgoingMessage:
    return _bot(FEATURES_TEXT, [START_NOW, WHATS_INSIDE])


def opening_checkout() -> OutgoingMessage:
    return _bot(OPENING_CHECKOUT_TEXT)


def freebie_email_prompt() -> OutgoingMessage:
    return _bot(FREEBIE_EMAIL_TEXT)


def freebie_email_retry() -> OutgoingMessage:
    return _bot(FREEBIE_EMAIL_RETRY_TEXT)


def freebie_declined() -> OutgoingMessage:
    return _bot(FREEBIE_DECLINED_TEXT)


def freebie_done() -> OutgoingMessage:
    return _bot(FREEBIE_DONE_TEXT)


def restart() -> OutgoingMessage:
    return _bot(RESTART_TEXT, [RESTART_BUTTON])
