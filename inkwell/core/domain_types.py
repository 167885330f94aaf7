"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, PostId, CommentId wrap UUIDs — never use bare UUID in domain logic
    - Limits below are the single source for length rules and derived fields

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
"""

from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
PostId = NewType("PostId", UUID)
CommentId = NewType("CommentId", UUID)


# ─── Limits ──────────────────────────────────────────────────────

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_BYTES = 72      # bcrypt ignores (or rejects) anything longer
TITLE_MAX_LENGTH = 200

EXCERPT_LENGTH = 100
READING_CHARS_PER_MINUTE = 200

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
