"""Post Schemas — request bodies and the post projection with derived counters.

Invariants:
    - PostResponse always carries likesCount == len(likes) and
      commentsCount == len(comments)
    - comments are emitted in stored order (position)
    - A comment whose author was deleted has author = null
"""

from datetime import datetime
from uuid import UUID

from inkwell.core.post_rules import reading_time
from inkwell.models.comment import Comment
from inkwell.models.post import Post
from inkwell.schemas.common import ApiModel
from inkwell.schemas.user import UserSummary


class PostCreate(ApiModel):
    title: str
    content: str
    author: UUID
    excerpt: str | None = None
    published_at: datetime | None = None


class PostUpdate(ApiModel):
    """PUT body: title and content are replaced together."""
    user_id: UUID | None = None
    title: str
    content: str
    excerpt: str | None = None


class PostPatch(ApiModel):
    user_id: UUID | None = None
    title: str | None = None
    content: str | None = None
    excerpt: str | None = None


class PostActor(ApiModel):
    """Body of DELETE /posts/{id} and POST /posts/{id}/like."""
    user_id: UUID | None = None


class CommentCreate(ApiModel):
    text: str | None = None
    author: UUID | None = None


class CommentResponse(ApiModel):
    id: UUID
    text: str
    author: UserSummary | None
    created_at: datetime

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            text=comment.text,
            author=(
                UserSummary.from_user(comment.author)
                if comment.author is not None else None
            ),
            created_at=comment.created_at,
        )


class PostResponse(ApiModel):
    id: UUID
    title: str
    content: str
    excerpt: str
    author: UserSummary
    likes: list[UUID]
    likes_count: int
    views: int
    comments: list[CommentResponse]
    comments_count: int
    reading_time: int
    published_at: datetime
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        likes = post.liked_by
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            excerpt=post.excerpt,
            author=UserSummary.from_user(post.author),
            likes=likes,
            likes_count=len(likes),
            views=post.views,
            comments=[CommentResponse.from_comment(c) for c in post.comments],
            comments_count=len(post.comments),
            reading_time=reading_time(post.content),
            published_at=post.published_at,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )
