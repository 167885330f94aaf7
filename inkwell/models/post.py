"""Post ORM — a blog post with its embedded likes and comments.

Invariants:
    - author_id is required and never reassigned after creation
    - views only grows (incremented on single-item fetch)
    - excerpt and published_at are set once at creation
    - comments ordered by position (insertion order), never reordered

Design Decisions:
    - likes/comments loaded with selectin: every read path serializes them
    - cascade delete-orphan: a post owns its likes and comments
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from inkwell.db.base import Base


class Post(Base):
    """Post aggregate root — owns likes and comments."""
    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    published_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    author: Mapped["User"] = relationship("User", lazy="selectin")
    likes: Mapped[list["PostLike"]] = relationship(
        "PostLike", cascade="all, delete-orphan",
        lazy="selectin", order_by="PostLike.created_at",
    )
    comments: Mapped[list["Comment"]] = relationship(
        "Comment", back_populates="post",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="[Comment.position, Comment.created_at]",
    )

    @property
    def liked_by(self) -> list[uuid.UUID]:
        return [like.user_id for like in self.likes]
