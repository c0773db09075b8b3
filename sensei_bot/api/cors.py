"""
Cross-origin policy for the chat endpoint.

A fixed allow-list. Responses echo exactly one matching origin, never a
wildcard or a comma-joined list, so credentialed browser requests work.
"""

from dataclasses import dataclass
from typing import Optional

ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "content-type"


@dataclass(frozen=True)
class CorsPolicy:
    allowed_origins: tuple[str, ...]

    def is_allowed(self, origin: Optional[str]) -> bool:
        return origin is not None and origin in self.allowed_origins

    def headers_for(self, origin: Optional[str]) -> dict[str, str]:
        """Access headers for a response to a request from ``origin``."""
        headers = {
            "Vary": "Origin",
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
        }
        if self.is_allowed(origin):
            headers["Access-Control-Allow-Origin"] = origin  # type: ignore[assignment]
        return headers
