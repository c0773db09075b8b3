"""Session-id tagging for log output.

A chat turn runs inside ``session_context(sid)``. The handler built by
``build_log_handler`` carries a ``SessionIdFilter`` that stamps the active
id on every record it emits, whichever module logged it, so the format can
use ``%(session_id)s``. Records logged outside a turn show ``NO_SESSION``.

Usage:
    with session_context("3f2a9c1e-..."):
        logger.info("Turn handled")  # ... [3f2a9c1e] Turn handled
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

NO_SESSION = "-"
SESSION_ID_LENGTH = 8

_session_id: ContextVar[str] = ContextVar("session_id", default=NO_SESSION)


@contextmanager
def session_context(session_id: str) -> Iterator[None]:
    """Tag log records with ``session_id`` for the duration of the block."""
    token = _session_id.set(session_id)
    try:
        yield
    finally:
        _session_id.reset(token)


def current_session_id() -> str:
    return _session_id.get()


class SessionIdFilter(logging.Filter):
    """Copies the active session id (shortened) onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = _session_id.get()[:SESSION_ID_LENGTH]  # type: ignore[attr-defined]
        return True


def build_log_handler(fmt: str, datefmt: str) -> logging.Handler:
    """Stream handler whose records always have ``session_id`` set."""
    handler = logging.StreamHandler()
    handler.addFilter(SessionIdFilter())
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler
