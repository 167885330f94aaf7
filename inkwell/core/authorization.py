"""Authorization — the single author-ownership decision for mutating post operations.

Invariants:
    - can_modify is the only place that decides allow/deny
    - A missing actor is a BadRequestError (the caller forgot userId), not a Forbidden
    - Authors are immutable, so the decision only ever compares two ids
"""

from uuid import UUID

from inkwell.core.errors import BadRequestError, ErrorContext, ForbiddenError


def can_modify(actor_id: UUID | None, author_id: UUID | None) -> bool:
    return actor_id is not None and actor_id == author_id


def ensure_can_modify(
    actor_id: UUID | None, author_id: UUID | None, action: str,
) -> None:
    """Raise unless actor_id owns the resource authored by author_id."""
    if actor_id is None:
        raise BadRequestError(f"userId is required to {action} a post")
    if not can_modify(actor_id, author_id):
        raise ForbiddenError(
            f"Only the author can {action} this post",
            ErrorContext(actor_id=str(actor_id)),
        )
