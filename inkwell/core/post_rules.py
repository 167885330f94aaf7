"""Post Rules — derived post fields.

Invariants:
    - Excerpt is computed once, at creation, from the first EXCERPT_LENGTH chars
    - readingTime = ceil(len(content) / READING_CHARS_PER_MINUTE)
"""

import math

from inkwell.core.domain_types import EXCERPT_LENGTH, READING_CHARS_PER_MINUTE


def derive_excerpt(content: str, excerpt: str | None = None) -> str:
    """Keep a caller-supplied excerpt, otherwise truncate the content."""
    if excerpt and excerpt.strip():
        return excerpt.strip()
    return content[:EXCERPT_LENGTH]


def reading_time(content: str) -> int:
    return math.ceil(len(content) / READING_CHARS_PER_MINUTE)
