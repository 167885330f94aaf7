"""User Schemas — request bodies and public projections of users.

Invariants:
    - No response schema has a password or password_hash field
    - UserSummary (id, username, profile) is the projection used for references:
      followers, following, post authors, comment authors
    - Content rules (trim, lengths, email pattern) live in core/validation.py,
      schemas only check shape

Design Decisions:
    - UserUpdate and UserPatch share fields; "empty patch" is decided from
      model_fields_set in the route
"""

from datetime import datetime
from uuid import UUID

from inkwell.models.user import User
from inkwell.schemas.common import ApiModel


class UserProfile(ApiModel):
    first_name: str | None = None
    last_name: str | None = None
    bio: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            first_name=user.first_name, last_name=user.last_name, bio=user.bio,
        )


class UserCreate(ApiModel):
    username: str
    email: str
    password: str
    profile: UserProfile | None = None


class UserUpdate(ApiModel):
    """Fields applied only when present in the request body."""
    username: str | None = None
    email: str | None = None
    password: str | None = None
    profile: UserProfile | None = None


class UserPatch(UserUpdate):
    pass


class FollowRequest(ApiModel):
    user_id: UUID | None = None


class UserSummary(ApiModel):
    id: UUID
    username: str
    profile: UserProfile

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(
            id=user.id, username=user.username,
            profile=UserProfile.from_user(user),
        )


class UserResponse(ApiModel):
    id: UUID
    username: str
    email: str
    profile: UserProfile
    followers_count: int
    following_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(
        cls, user: User, followers_count: int, following_count: int,
    ) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            profile=UserProfile.from_user(user),
            followers_count=followers_count,
            following_count=following_count,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserDetailResponse(UserResponse):
    followers: list[UserSummary]
    following: list[UserSummary]

    @classmethod
    def from_detail(
        cls, user: User, followers: list[User], following: list[User],
    ) -> "UserDetailResponse":
        base = UserResponse.from_user(user, len(followers), len(following))
        return cls(
            **base.model_dump(),
            followers=[UserSummary.from_user(u) for u in followers],
            following=[UserSummary.from_user(u) for u in following],
        )


class FollowResponse(ApiModel):
    follower: UserDetailResponse
    target: UserDetailResponse
    followed: bool
