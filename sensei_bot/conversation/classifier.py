"""
Goal-to-bucket classification.

An ordered list of (pattern, bucket) rules evaluated top to bottom; the
first match wins and anything unmatched falls to the default bucket, so
every goal text maps to exactly one bucket.
"""

import re

from sensei_bot.tools.products import Bucket

DEFAULT_BUCKET = Bucket.MIND

BUCKET_RULES: list[tuple[re.Pattern[str], Bucket]] = [
    (re.compile(r"kumite", re.IGNORECASE), Bucket.KUMITE),
    (re.compile(r"kata", re.IGNORECASE), Bucket.KATA),
    (re.compile(r"fit|flex", re.IGNORECASE), Bucket.CONDITIONING),
]


def classify_goal(goal: str) -> Bucket:
    """Map free-text goal to a bucket. Priority: kumite > kata > fit/flex > mind."""
    for pattern, bucket in BUCKET_RULES:
        if pattern.search(goal):
            return bucket
    return DEFAULT_BUCKET
