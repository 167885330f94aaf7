"""Post Repository — posts plus their like edges and comment sequence.

Invariants:
    - Listing is most-recent-first (created_at desc, id desc as tie-breaker)
    - Search matches title OR content, case-insensitive substring
    - get() always reloads the post and its eager relationships (populate_existing)
    - increment_views is a single atomic UPDATE; it leaves updated_at untouched
    - Comment positions are max(position) + 1 within the post; (post_id, position)
      is unique, so a racing append surfaces as a 409
"""

from uuid import UUID

from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.models.comment import Comment
from inkwell.models.post import Post
from inkwell.models.post_like import PostLike


def _apply_filters(
    query: Select, search: str | None, author_id: UUID | None,
) -> Select:
    if search:
        query = query.where(or_(
            Post.title.icontains(search, autoescape=True),
            Post.content.icontains(search, autoescape=True),
        ))
    if author_id is not None:
        query = query.where(Post.author_id == author_id)
    return query


class SqlPostRepository:
    """Post persistence over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(
        self,
        search: str | None,
        author_id: UUID | None,
        offset: int,
        limit: int,
    ) -> list[Post]:
        query = _apply_filters(select(Post), search, author_id).order_by(
            Post.created_at.desc(), Post.id.desc(),
        )
        result = await self.db.execute(query.offset(offset).limit(limit))
        return list(result.scalars().all())

    async def count(self, search: str | None, author_id: UUID | None) -> int:
        query = _apply_filters(
            select(func.count()).select_from(Post), search, author_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one()

    async def get(self, post_id: UUID) -> Post | None:
        result = await self.db.execute(
            select(Post)
            .where(Post.id == post_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def add(self, post: Post) -> Post:
        self.db.add(post)
        await self.db.flush()
        return post

    async def delete(self, post: Post) -> None:
        await self.db.delete(post)
        await self.db.flush()

    async def increment_views(self, post_id: UUID) -> bool:
        result = await self.db.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(views=Post.views + 1, updated_at=Post.updated_at)
            .execution_options(synchronize_session=False),
        )
        return result.rowcount == 1

    async def find_like(self, post_id: UUID, user_id: UUID) -> PostLike | None:
        return await self.db.get(PostLike, (post_id, user_id))

    async def add_like(self, post_id: UUID, user_id: UUID) -> None:
        self.db.add(PostLike(post_id=post_id, user_id=user_id))
        await self.db.flush()

    async def remove_like(self, like: PostLike) -> None:
        await self.db.delete(like)
        await self.db.flush()

    async def append_comment(
        self, post: Post, text: str, author_id: UUID,
    ) -> Comment:
        result = await self.db.execute(
            select(func.coalesce(func.max(Comment.position), -1))
            .where(Comment.post_id == post.id),
        )
        comment = Comment(
            post_id=post.id,
            author_id=author_id,
            text=text,
            position=result.scalar_one() + 1,
        )
        self.db.add(comment)
        await self.db.flush()
        # Serializers read comment.author; load it while we're still async
        await self.db.refresh(comment, ["author"])
        return comment
