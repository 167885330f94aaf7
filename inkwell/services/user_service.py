"""User Service — user CRUD, follow graph mutations, and user listing.

Invariants:
    - Absence is returned as None; invalid input raises typed errors
    - Passwords are bcrypt-hashed before they reach the repository
    - follow/unfollow touch exactly one edge row and commit once, so A.following
      and B.followers can never disagree
    - follow is idempotent: an existing edge yields followed=False and no write
    - A user can never follow or unfollow themselves (SelfReferenceError)

Design Decisions:
    - Uniqueness checked up front for a readable 409; the unique index still
      guards against races (IntegrityError -> ConflictError)
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.config import Settings, get_settings
from inkwell.core.errors import (
    BadRequestError, ConflictError, ErrorContext, ResourceNotFoundError,
    SelfReferenceError,
)
from inkwell.core.pagination import Page, build_page_meta, resolve_page
from inkwell.core.repository_protocols import FollowRepository, UserRepository
from inkwell.core.validation import (
    check_password, normalize_email, normalize_optional_text, normalize_username,
)
from inkwell.infrastructure.security import hash_password
from inkwell.models.user import User
from inkwell.repositories.follow_repository import SqlFollowRepository
from inkwell.repositories.user_repository import SqlUserRepository
from inkwell.schemas.user import UserCreate, UserProfile, UserUpdate

logger = logging.getLogger(__name__)


@dataclass
class UserStats:
    """A user with follower/following counts (list view)."""
    user: User
    followers_count: int
    following_count: int


@dataclass
class UserDetail:
    """A user with resolved followers and following (single view)."""
    user: User
    followers: list[User]
    following: list[User]


@dataclass
class FollowOutcome:
    follower: UserDetail
    target: UserDetail
    followed: bool


class UserService:
    """User relationship service."""

    def __init__(self, db: AsyncSession, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.users: UserRepository = SqlUserRepository(db)
        self.follows: FollowRepository = SqlFollowRepository(db)

    # ─── Queries ─────────────────────────────────────────────────

    async def list_users(
        self, search: str | None = None,
        page: int | None = None, limit: int | None = None,
    ) -> Page[UserStats]:
        request = resolve_page(page, limit)
        users = await self.users.find(search, request.offset, request.limit)
        total = await self.users.count(search)
        counts = await self.follows.count_for([u.id for u in users])
        items = [
            UserStats(u, *counts[u.id])
            for u in users
        ]
        return Page(items=items, meta=build_page_meta(total, request))

    async def get_user(self, user_id: UUID) -> UserDetail | None:
        user = await self.users.get(user_id)
        if user is None:
            return None
        return await self._detail(user)

    # ─── Mutations ───────────────────────────────────────────────

    async def create_user(self, data: UserCreate) -> UserDetail:
        username = normalize_username(data.username)
        email = normalize_email(data.email)
        password = check_password(data.password)
        await self._ensure_unique(username, email)

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password, self.settings.bcrypt_rounds),
        )
        if data.profile is not None:
            self._apply_profile(user, data.profile)
        await self.users.add(user)
        await self.db.commit()
        logger.info(f"User created: {user.username}", extra={"user_id": str(user.id)})
        return UserDetail(user=user, followers=[], following=[])

    async def update_user(
        self, user_id: UUID, data: UserUpdate,
    ) -> UserDetail | None:
        """Apply the fields present in the body; absent fields are left alone."""
        user = await self.users.get(user_id)
        if user is None:
            return None

        provided = data.model_fields_set
        username = (
            normalize_username(data.username) if "username" in provided else None
        )
        email = normalize_email(data.email) if "email" in provided else None
        await self._ensure_unique(username, email, exclude_id=user.id)

        if username is not None:
            user.username = username
        if email is not None:
            user.email = email
        if "password" in provided:
            user.password_hash = hash_password(
                check_password(data.password), self.settings.bcrypt_rounds,
            )
        if "profile" in provided and data.profile is not None:
            self._apply_profile(user, data.profile)

        await self.db.commit()
        return await self._detail(user)

    async def patch_user(
        self, user_id: UUID, data: UserUpdate,
    ) -> UserDetail | None:
        if not data.model_fields_set:
            raise BadRequestError("Request body cannot be empty")
        return await self.update_user(user_id, data)

    async def delete_user(self, user_id: UUID) -> bool:
        user = await self.users.get(user_id)
        if user is None:
            return False
        await self.users.delete(user)
        await self.db.commit()
        return True

    # ─── Follow graph ────────────────────────────────────────────

    async def follow(self, follower_id: UUID, target_id: UUID) -> FollowOutcome:
        follower, target = await self._load_pair(follower_id, target_id)
        followed = False
        if not await self.follows.exists(follower.id, target.id):
            await self.follows.add(follower.id, target.id)
            await self.db.commit()
            followed = True
            logger.info(
                f"{follower.id} followed {target.id}",
                extra={"user_id": str(follower.id)},
            )
        return FollowOutcome(
            follower=await self._detail(follower),
            target=await self._detail(target),
            followed=followed,
        )

    async def unfollow(self, follower_id: UUID, target_id: UUID) -> FollowOutcome:
        follower, target = await self._load_pair(follower_id, target_id)
        if await self.follows.remove(follower.id, target.id):
            await self.db.commit()
            logger.info(
                f"{follower.id} unfollowed {target.id}",
                extra={"user_id": str(follower.id)},
            )
        return FollowOutcome(
            follower=await self._detail(follower),
            target=await self._detail(target),
            followed=False,
        )

    # ─── Helpers ─────────────────────────────────────────────────

    async def _detail(self, user: User) -> UserDetail:
        return UserDetail(
            user=user,
            followers=await self.follows.list_followers(user.id),
            following=await self.follows.list_following(user.id),
        )

    async def _load_pair(
        self, follower_id: UUID, target_id: UUID,
    ) -> tuple[User, User]:
        if follower_id == target_id:
            raise SelfReferenceError(str(follower_id))
        target = await self.users.get(target_id)
        if target is None:
            raise ResourceNotFoundError("User", str(target_id))
        follower = await self.users.get(follower_id)
        if follower is None:
            raise ResourceNotFoundError("User", str(follower_id))
        return follower, target

    async def _ensure_unique(
        self,
        username: str | None,
        email: str | None,
        exclude_id: UUID | None = None,
    ) -> None:
        existing = await self.users.find_conflict(username, email, exclude_id)
        if existing is None:
            return
        if username is not None and existing.username == username:
            raise ConflictError(
                f"Username '{username}' is already taken", "username",
                ErrorContext(resource_type="User", resource_id=str(existing.id)),
            )
        raise ConflictError(
            f"Email '{email}' is already registered", "email",
            ErrorContext(resource_type="User", resource_id=str(existing.id)),
        )

    @staticmethod
    def _apply_profile(user: User, profile: UserProfile) -> None:
        provided = profile.model_fields_set
        if "first_name" in provided:
            user.first_name = normalize_optional_text(profile.first_name)
        if "last_name" in provided:
            user.last_name = normalize_optional_text(profile.last_name)
        if "bio" in provided:
            user.bio = normalize_optional_text(profile.bio)
