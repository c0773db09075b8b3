"""Product catalog: one offer per bucket, with checkout destination and attribution tag."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sensei_bot.config import settings

logger = logging.getLogger(__name__)


class Bucket(str, Enum):
    """Product categories a visitor's stated goal can map to."""
    KUMITE = "kumite"
    KATA = "kata"
    CONDITIONING = "cond"
    MIND = "mind"


DEFAULT_CHECKOUT_BUCKET = Bucket.KUMITE


@dataclass(frozen=True)
class Product:
    """Static metadata for a bucket's offer."""
    bucket: Bucket
    name: str
    checkout_url: str
    tag: str


PRODUCT_CATALOG: dict[Bucket, Product] = {
    Bucket.KUMITE: Product(
        bucket=Bucket.KUMITE,
        name="Kumite Strategy Playbook",
        checkout_url=settings.checkout.kumite_url,
        tag="tc_kumite_core",
    ),
    Bucket.KATA: Product(
        bucket=Bucket.KATA,
        name="Kata Mastery Blueprint",
        checkout_url=settings.checkout.kata_url,
        tag="tc_kata_core",
    ),
    Bucket.CONDITIONING: Product(
        bucket=Bucket.CONDITIONING,
        name="Dojo Conditioning 30-Day",
        checkout_url=settings.checkout.cond_url,
        tag="tc_cond_core",
    ),
    Bucket.MIND: Product(
        bucket=Bucket.MIND,
        name="Mental Dojo Journal",
        checkout_url=settings.checkout.mind_url,
        tag="tc_mind_core",
    ),
}


def parse_bucket(value: Optional[str]) -> Optional[Bucket]:
    """Map a stored bucket string back to a Bucket. Returns None if unknown."""
    if value is None:
        return None
    try:
        return Bucket(value)
    except ValueError:
        return None


def get_product(bucket: Bucket) -> Product:
    """Get the catalog entry for a bucket."""
    return PRODUCT_CATALOG[bucket]

