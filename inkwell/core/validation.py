"""Input Rules — normalization and validation of user and post fields.

Invariants:
    - Every normalizer returns the value to persist or raises ValidationError
    - Usernames and text fields are stripped before length checks
    - Emails are stripped and lowercased before the pattern check
"""

import re

from inkwell.core.domain_types import (
    USERNAME_MIN_LENGTH, USERNAME_MAX_LENGTH, EMAIL_MAX_LENGTH,
    PASSWORD_MIN_LENGTH, PASSWORD_MAX_BYTES, TITLE_MAX_LENGTH,
)
from inkwell.core.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_username(value: str | None) -> str:
    username = (value or "").strip()
    if not username:
        raise ValidationError("Username is required", "username")
    if len(username) < USERNAME_MIN_LENGTH:
        raise ValidationError(
            f"Username must be at least {USERNAME_MIN_LENGTH} characters",
            "username",
        )
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"Username must be at most {USERNAME_MAX_LENGTH} characters",
            "username",
        )
    return username


def normalize_email(value: str | None) -> str:
    email = (value or "").strip().lower()
    if not email:
        raise ValidationError("Email is required", "email")
    if len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(email):
        raise ValidationError("Email is not a valid address", "email")
    return email


def check_password(value: str | None) -> str:
    """Password is stored hashed, so it is checked but never altered."""
    password = value or ""
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
            "password",
        )
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValidationError(
            f"Password must be at most {PASSWORD_MAX_BYTES} bytes", "password",
        )
    return password


def normalize_required_text(value: str | None, field: str, label: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{label} is required", field)
    return text


def normalize_title(value: str | None) -> str:
    title = normalize_required_text(value, "title", "Title")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Title must be at most {TITLE_MAX_LENGTH} characters", "title",
        )
    return title


def normalize_optional_text(value: str | None) -> str | None:
    """Profile fields: whitespace-only collapses to None."""
    if value is None:
        return None
    return value.strip() or None
