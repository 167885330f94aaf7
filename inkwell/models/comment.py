"""Comment ORM — append-only entry in a post's comment sequence.

Invariants:
    - position is assigned at append time as max(position) + 1 and is unique per post;
      a concurrent append that collides fails with IntegrityError (409)
    - author_id becomes NULL when the author is deleted (tombstone); the comment stays
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Text, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from inkwell.db.base import Base


class Comment(Base):
    """Comment on a post."""
    __tablename__ = "comments"
    __table_args__ = (
        UniqueConstraint("post_id", "position", name="uq_comments_post_position"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    post: Mapped["Post"] = relationship("Post", back_populates="comments")
    author: Mapped["User"] = relationship("User", lazy="selectin")
