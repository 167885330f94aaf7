"""Follow ORM — one directed edge of the follow graph.

Invariants:
    - Primary key (follower_id, followed_id): a user follows another at most once
    - follower_id != followed_id (check constraint)
    - A.following and B.followers are both read from this table, so they cannot diverge

Design Decisions:
    - Edge row instead of two arrays on two users: follow/unfollow is a single-row
      write inside one transaction
    - ON DELETE CASCADE on both endpoints: deleting a user drops its edges
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from inkwell.db.base import Base


class Follow(Base):
    """follower_id follows followed_id."""
    __tablename__ = "follows"
    __table_args__ = (
        CheckConstraint("follower_id <> followed_id", name="ck_follows_not_self"),
    )

    follower_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    followed_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
