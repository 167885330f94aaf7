"""Follow Repository — edges of the follow graph.

Invariants:
    - One row per (follower_id, followed_id); add() on an existing edge is a
      unique violation, so callers check exists() first
    - list_followers/list_following return users in the order the edges were created
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.models.follow import Follow
from inkwell.models.user import User


class SqlFollowRepository:
    """Follow-edge persistence over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def exists(self, follower_id: UUID, followed_id: UUID) -> bool:
        return await self.db.get(Follow, (follower_id, followed_id)) is not None

    async def add(self, follower_id: UUID, followed_id: UUID) -> None:
        self.db.add(Follow(follower_id=follower_id, followed_id=followed_id))
        await self.db.flush()

    async def remove(self, follower_id: UUID, followed_id: UUID) -> bool:
        edge = await self.db.get(Follow, (follower_id, followed_id))
        if edge is None:
            return False
        await self.db.delete(edge)
        await self.db.flush()
        return True

    async def list_followers(self, user_id: UUID) -> list[User]:
        result = await self.db.execute(
            select(User)
            .join(Follow, Follow.follower_id == User.id)
            .where(Follow.followed_id == user_id)
            .order_by(Follow.created_at),
        )
        return list(result.scalars().all())

    async def list_following(self, user_id: UUID) -> list[User]:
        result = await self.db.execute(
            select(User)
            .join(Follow, Follow.followed_id == User.id)
            .where(Follow.follower_id == user_id)
            .order_by(Follow.created_at),
        )
        return list(result.scalars().all())

    async def count_for(
        self, user_ids: list[UUID],
    ) -> dict[UUID, tuple[int, int]]:
        """(followers, following) per user id; users without edges map to (0, 0)."""
        counts = {user_id: (0, 0) for user_id in user_ids}
        if not user_ids:
            return counts

        followers = await self.db.execute(
            select(Follow.followed_id, func.count())
            .where(Follow.followed_id.in_(user_ids))
            .group_by(Follow.followed_id),
        )
        for user_id, total in followers.all():
            counts[user_id] = (total, counts[user_id][1])

        following = await self.db.execute(
            select(Follow.follower_id, func.count())
            .where(Follow.follower_id.in_(user_ids))
            .group_by(Follow.follower_id),
        )
        for user_id, total in following.all():
            counts[user_id] = (counts[user_id][0], total)
        return counts
