"""User Repository — user lookup, listing, and cascading deletion.

Invariants:
    - Listing is most-recent-first (created_at desc, id desc as tie-breaker)
    - Username search is a case-insensitive substring match with LIKE wildcards escaped
    - delete() removes the user's edges, likes and authored posts, and tombstones
      the user's comments on other posts (author_id -> NULL)
"""

import logging
from uuid import UUID

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.models.comment import Comment
from inkwell.models.follow import Follow
from inkwell.models.post import Post
from inkwell.models.post_like import PostLike
from inkwell.models.user import User

logger = logging.getLogger(__name__)


def _apply_search(query: Select, search: str | None) -> Select:
    if search:
        query = query.where(User.username.icontains(search, autoescape=True))
    return query


class SqlUserRepository:
    """User persistence over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(
        self, search: str | None, offset: int, limit: int,
    ) -> list[User]:
        query = _apply_search(select(User), search).order_by(
            User.created_at.desc(), User.id.desc(),
        )
        result = await self.db.execute(query.offset(offset).limit(limit))
        return list(result.scalars().all())

    async def count(self, search: str | None) -> int:
        query = _apply_search(select(func.count()).select_from(User), search)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def get(self, user_id: UUID) -> User | None:
        return await self.db.get(User, user_id)

    async def find_conflict(
        self,
        username: str | None,
        email: str | None,
        exclude_id: UUID | None = None,
    ) -> User | None:
        """First user (other than exclude_id) holding the given username or email."""
        conditions = []
        if username is not None:
            conditions.append(User.username == username)
        if email is not None:
            conditions.append(User.email == email)
        if not conditions:
            return None
        query = select(User).where(or_(*conditions))
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def add(self, user: User) -> User:
        self.db.add(user)
        await self.db.flush()
        return user

    async def delete(self, user: User) -> None:
        authored = select(Post.id).where(Post.author_id == user.id)
        statements = [
            delete(PostLike).where(
                or_(PostLike.user_id == user.id, PostLike.post_id.in_(authored)),
            ),
            delete(Comment).where(Comment.post_id.in_(authored)),
            update(Comment)
            .where(Comment.author_id == user.id)
            .values(author_id=None),
            delete(Post).where(Post.author_id == user.id),
            delete(Follow).where(
                or_(Follow.follower_id == user.id, Follow.followed_id == user.id),
            ),
        ]
        for statement in statements:
            await self.db.execute(
                statement.execution_options(synchronize_session=False),
            )
        await self.db.delete(user)
        await self.db.flush()
        logger.info(f"User {user.id} deleted with cascade", extra={"user_id": str(user.id)})
