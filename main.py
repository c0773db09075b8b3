"""
Sensei-bot entry point.

Serves the chat endpoint over HTTP, or runs the offline console demo for
development.

Usage:
    HTTP server:  python main.py serve
    Console mode: python main.py console
"""

import logging
import sys

from sensei_bot.config import settings

logger = logging.getLogger(__name__)


def _run_server() -> None:
    """Start the chat endpoint with uvicorn."""
    import uvicorn

    from sensei_bot.api.app import create_app

    logger.info(
        "Serving %s on %s:%s", settings.server.chat_path, settings.server.host, settings.server.port
    )
    uvicorn.run(
        create_app(),
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.log_level.lower(),
    )


def _run_console_mode() -> None:
    """Start the offline console demo (no server required)."""
    from console_demo import ConsoleSession

    session = ConsoleSession()
    session.run()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "console":
        _run_console_mode()
    else:
        _run_server()
