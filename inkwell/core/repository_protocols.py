"""Boundary Protocols — the persistence adapter contract consumed by services.

Invariants:
    - Services depend on these Protocols, never on a concrete storage module
    - Absence is None (or False), never an exception
    - Every method may raise a storage error, translated by the infrastructure layer

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Repositories add/flush; the service owns the transaction and commits
"""

from typing import Any, Protocol
from uuid import UUID


class UserRepository(Protocol):
    """Contract for user persistence."""
    async def find(
        self, search: str | None, offset: int, limit: int,
    ) -> list[Any]: ...
    async def count(self, search: str | None) -> int: ...
    async def get(self, user_id: UUID) -> Any | None: ...
    async def find_conflict(
        self, username: str | None, email: str | None,
        exclude_id: UUID | None = None,
    ) -> Any | None: ...
    async def add(self, user: Any) -> Any: ...
    async def delete(self, user: Any) -> None: ...


class FollowRepository(Protocol):
    """Contract for follow-graph edges."""
    async def exists(self, follower_id: UUID, followed_id: UUID) -> bool: ...
    async def add(self, follower_id: UUID, followed_id: UUID) -> None: ...
    async def remove(self, follower_id: UUID, followed_id: UUID) -> bool: ...
    async def list_followers(self, user_id: UUID) -> list[Any]: ...
    async def list_following(self, user_id: UUID) -> list[Any]: ...
    async def count_for(
        self, user_ids: list[UUID],
    ) -> dict[UUID, tuple[int, int]]: ...


class PostRepository(Protocol):
    """Contract for posts and their embedded likes/comments."""
    async def find(
        self, search: str | None, author_id: UUID | None,
        offset: int, limit: int,
    ) -> list[Any]: ...
    async def count(self, search: str | None, author_id: UUID | None) -> int: ...
    async def get(self, post_id: UUID) -> Any | None: ...
    async def add(self, post: Any) -> Any: ...
    async def delete(self, post: Any) -> None: ...
    async def increment_views(self, post_id: UUID) -> bool: ...
    async def find_like(self, post_id: UUID, user_id: UUID) -> Any | None: ...
    async def add_like(self, post_id: UUID, user_id: UUID) -> None: ...
    async def remove_like(self, like: Any) -> None: ...
    async def append_comment(
        self, post: Any, text: str, author_id: UUID,
    ) -> Any: ...
