"""
Offline console demo: walks the sales funnel in the terminal.

Uses the real engine, chat service and in-memory session store. No server,
no network calls. The console plays the widget's role: it keeps the state
returned by each turn and echoes it back on the next.

Usage:
    python console_demo.py
    python console_demo.py --scenario checkout
    python console_demo.py --scenario freebie
"""

import argparse
import uuid
from typing import Optional

from sensei_bot.config import settings
from sensei_bot.conversation.engine import INIT_SIGNAL
from sensei_bot.conversation.state_machine import is_terminal, parse_state
from sensei_bot.conversation.sync import ChatService
from sensei_bot.prompts.messages import RESTART_BUTTON
from sensei_bot.schemas.chat_schema import ChatRequest, ChatResponse
from sensei_bot.store.session_store import InMemorySessionStore

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


class ConsoleSession:
    """Simulates the widget against an in-process chat service."""

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "checkout": [
            "Yes",
            "Win more kumite exchanges",
            "I get countered",
            "3–5",
            "not-an-email",
            "test@example.com",
            "What’s inside?",
            "Yes, start now",
        ],
        "freebie": [
            "Not now",
            "Yes, send it",
            "nope",
            "fan@example.com",
        ],
        "recovery": [
            "Yes",
            "Stay calm & confident",
            "Anxiety",
            "5+",
            "calm@example.com",
            "Yes",
            "hello again",
            RESTART_BUTTON,
        ],
    }

    MAX_INPUT_LENGTH = 500

    def __init__(self, service: Optional[ChatService] = None) -> None:
        self.service = service or ChatService(store=InMemorySessionStore())
        self.session_id = str(uuid.uuid4())
        self.state: Optional[str] = None
        self.data: Optional[dict[str, str]] = None
        self.trace: list[str] = []

    def bot_say(self, text: str, buttons: Optional[list[str]] = None) -> None:
        print(f"{GREEN}{BOLD}[{settings.brand.bot_name}]{RESET} {GREEN}{text}{RESET}")
        if buttons:
            print(f"{YELLOW}  [ {' | '.join(buttons)} ]{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  SENSEI-BOT - {title}{RESET}")
        print(f"{BOLD}  Brand: {settings.brand.name}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def _summary(self, title: str) -> None:
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {title}{RESET}")
        print(f"{DIM}  State trace: {' -> '.join(self.trace)}{RESET}")
        print(f"{DIM}  Collected: {self.data or {}}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    def start(self) -> ChatResponse:
        """Reset local state and request the welcome message."""
        self.session_id = str(uuid.uuid4())
        self.state = None
        self.data = None
        self.trace = []
        return self._turn(INIT_SIGNAL)

    def _turn(self, message: str) -> ChatResponse:
        if message.lower() == RESTART_BUTTON.lower():
            return self.start()

        request = ChatRequest(
            session_id=self.session_id,
            message=message,
            client_state=self.state if message != INIT_SIGNAL else None,
            client_data=self.data if message != INIT_SIGNAL else None,
        )
        response = self.service.handle(request)
        self.state = response.next_state
        self.data = response.next_data
        self.trace.append(response.next_state)

        for msg in response.messages:
            self.bot_say(msg.text, msg.buttons)
        if response.checkout_url:
            print(f"{BLUE}  👉 Checkout: {response.checkout_url}{RESET}")
        self.system_log(f"State: {response.next_state}")
        return response

    def _finished(self) -> bool:
        state = parse_state(self.state)
        return state is not None and is_terminal(state)

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        self.start()
        for step in steps:
            print(f"\n{BLUE}[Visitor] {RESET}{step}")
            self._turn(step)

        self._summary(f"Scenario '{scenario}' complete.")

    def run(self) -> None:
        self._banner("Console Demo")
        print(f"{BOLD}  Type 'quit' to exit, '{RESTART_BUTTON}' to begin again{RESET}\n")
        self.start()

        while not self._finished():
            user_input = input(f"\n{BLUE}[Visitor] {RESET}").strip()
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                return

            if len(user_input) > self.MAX_INPUT_LENGTH:
                self.bot_say("That was quite long. Could you keep it brief for me?")
                continue

            self._turn(user_input)

        self._summary("Conversation complete.")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline console demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    args = parser.parse_args()

    session = ConsoleSession()
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run()


if __name__ == "__main__":
    main()
