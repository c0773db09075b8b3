"""
Checkout deep-link construction.

Fills a bucket's destination URL with contact prefill, the bucket's
attribution tag and fixed campaign parameters. Deterministic, no I/O.

Usage:
    url = build_checkout_link(Bucket.KUMITE, {"email": "x@y.com"})
"""

import logging
from typing import Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sensei_bot.config import settings
from sensei_bot.tools.products import Bucket, Product, get_product

logger = logging.getLogger(__name__)


class MalformedDestinationError(ValueError):
    """Raised when a product's configured checkout URL is not an absolute http(s) URL."""


def _with_params(destination: str, params: dict[str, str]) -> str:
    """Set query params on a URL, replacing same-named ones and keeping the rest."""
    parts = urlsplit(destination)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise MalformedDestinationError(
            f"Checkout destination is not an absolute http(s) URL: {destination!r}"
        )

    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in params]
    query.extend(params.items())
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", urlencode(query), parts.fragment))


def build_checkout_link(
    bucket: Bucket,
    data: Mapping[str, str],
    product: Optional[Product] = None,
) -> str:
    """
    Build the checkout URL for a bucket.

    Args:
        bucket: The visitor's product bucket.
        data: Collected session facts. ``email`` and ``first_name`` are used
            when present; missing fields are skipped.
        product: Override for the catalog entry (defaults to the bucket's).

    Returns:
        The destination URL with ``email``, ``name``, ``tag``, ``utm_source``
        and ``utm_campaign`` query parameters.

    Raises:
        MalformedDestinationError: If the configured destination is not a valid URL.
    """
    product = product or get_product(bucket)

    params: dict[str, str] = {}
    if data.get("email"):
        params["email"] = data["email"]
    if data.get("first_name"):
        params["name"] = data["first_name"]
    params["tag"] = product.tag
    params["utm_source"] = settings.checkout.utm_source
    params["utm_campaign"] = settings.checkout.utm_campaign

    url = _with_params(product.checkout_url, params)
    logger.debug("Checkout link built for bucket '%s'", bucket.value)
    return url
