"""Shared utilities used across the funnel bot."""

import re
from typing import Optional

_EMAIL_SHAPE = re.compile(r"\S+@\S+\.\S+")


def normalize_input(value: Optional[str]) -> str:
    """Collapse a missing message to an empty string and strip surrounding whitespace.

    Examples:
        >>> normalize_input("  Yes ")
        'Yes'
        >>> normalize_input(None)
        ''
    """
    return (value or "").strip()


def is_valid_email(value: str) -> bool:
    """Permissive email shape check: something@something.something, no whitespace around the parts.

    Examples:
        >>> is_valid_email("a@b.co")
        True
        >>> is_valid_email("not-an-email")
        False
    """
    return _EMAIL_SHAPE.search(value) is not None
