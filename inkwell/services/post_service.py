"""Post Service — post CRUD, comments, like toggling, and author listings.

Invariants:
    - Absence is returned as None; invalid input raises typed errors
    - Every mutating post operation runs ensure_can_modify before writing
    - get_post increments views by exactly one per successful fetch
    - toggle_like flips exactly one like per call
    - Comments are appended at the end of the sequence, never reordered
    - A failed create persists nothing (validation runs before any write)
"""

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.authorization import ensure_can_modify
from inkwell.core.errors import BadRequestError, ResourceNotFoundError
from inkwell.core.pagination import Page, build_page_meta, resolve_page
from inkwell.core.post_rules import derive_excerpt
from inkwell.core.repository_protocols import PostRepository, UserRepository
from inkwell.core.validation import normalize_required_text, normalize_title
from inkwell.models.post import Post
from inkwell.repositories.post_repository import SqlPostRepository
from inkwell.repositories.user_repository import SqlUserRepository
from inkwell.schemas.post import PostCreate

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("title", "content", "excerpt")


class PostService:
    """Post interaction service."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.posts: PostRepository = SqlPostRepository(db)
        self.users: UserRepository = SqlUserRepository(db)

    # ─── Queries ─────────────────────────────────────────────────

    async def list_posts(
        self, search: str | None = None,
        page: int | None = None, limit: int | None = None,
    ) -> Page[Post]:
        return await self._page(search, None, page, limit)

    async def list_by_author(
        self, author_id: UUID,
        page: int | None = None, limit: int | None = None,
    ) -> Page[Post] | None:
        if await self.users.get(author_id) is None:
            return None
        return await self._page(None, author_id, page, limit)

    async def get_post(self, post_id: UUID) -> Post | None:
        """Fetch one post; counts the fetch as a view."""
        if not await self.posts.increment_views(post_id):
            return None
        await self.db.commit()
        return await self.posts.get(post_id)

    # ─── Mutations ───────────────────────────────────────────────

    async def create_post(self, data: PostCreate) -> Post:
        title = normalize_title(data.title)
        content = normalize_required_text(data.content, "content", "Content")
        if await self.users.get(data.author) is None:
            raise ResourceNotFoundError("User", str(data.author))

        post = Post(
            title=title,
            content=content,
            excerpt=derive_excerpt(content, data.excerpt),
            author_id=data.author,
            views=0,
            published_at=data.published_at or datetime.now(timezone.utc),
        )
        await self.posts.add(post)
        await self.db.commit()
        logger.info(f"Post created: {post.title}", extra={"post_id": str(post.id)})
        return await self.posts.get(post.id)

    async def update_post(
        self, post_id: UUID, actor_id: UUID | None, changes: dict[str, Any],
    ) -> Post | None:
        """Apply title/content/excerpt changes on behalf of actor_id."""
        post = await self.posts.get(post_id)
        if post is None:
            return None
        ensure_can_modify(actor_id, post.author_id, "update")

        title = (
            normalize_title(changes["title"]) if "title" in changes else post.title
        )
        content = (
            normalize_required_text(changes["content"], "content", "Content")
            if "content" in changes else post.content
        )
        post.title = title
        post.content = content
        if changes.get("excerpt") is not None:
            post.excerpt = derive_excerpt(content, changes["excerpt"])

        await self.db.commit()
        return await self.posts.get(post.id)

    async def patch_post(
        self, post_id: UUID, actor_id: UUID | None, changes: dict[str, Any],
    ) -> Post | None:
        if not any(field in changes for field in _EDITABLE_FIELDS):
            raise BadRequestError("Request body cannot be empty")
        return await self.update_post(post_id, actor_id, changes)

    async def delete_post(
        self, post_id: UUID, actor_id: UUID | None,
    ) -> Post | None:
        post = await self.posts.get(post_id)
        if post is None:
            return None
        ensure_can_modify(actor_id, post.author_id, "delete")
        await self.posts.delete(post)
        await self.db.commit()
        logger.info(f"Post deleted: {post_id}", extra={"post_id": str(post_id)})
        return post

    # ─── Interactions ────────────────────────────────────────────

    async def add_comment(
        self, post_id: UUID, text: str | None, author_id: UUID | None,
    ) -> Post | None:
        if author_id is None:
            raise BadRequestError("Author ID is required to comment on a post")
        if not text or not text.strip():
            raise BadRequestError("Comment text is required")

        post = await self.posts.get(post_id)
        if post is None:
            return None
        if await self.users.get(author_id) is None:
            raise ResourceNotFoundError("User", str(author_id))

        await self.posts.append_comment(post, text.strip(), author_id)
        await self.db.commit()
        return await self.posts.get(post.id)

    async def toggle_like(
        self, post_id: UUID, user_id: UUID | None,
    ) -> Post | None:
        """Like if absent, unlike if present."""
        if user_id is None:
            raise BadRequestError("User ID is required to like a post")

        post = await self.posts.get(post_id)
        if post is None:
            return None
        if await self.users.get(user_id) is None:
            raise ResourceNotFoundError("User", str(user_id))

        existing = await self.posts.find_like(post.id, user_id)
        if existing is None:
            await self.posts.add_like(post.id, user_id)
        else:
            await self.posts.remove_like(existing)
        await self.db.commit()
        return await self.posts.get(post.id)

    # ─── Helpers ─────────────────────────────────────────────────

    async def _page(
        self, search: str | None, author_id: UUID | None,
        page: int | None, limit: int | None,
    ) -> Page[Post]:
        request = resolve_page(page, limit)
        posts = await self.posts.find(
            search, author_id, request.offset, request.limit,
        )
        total = await self.posts.count(search, author_id)
        return Page(items=posts, meta=build_page_meta(total, request))
