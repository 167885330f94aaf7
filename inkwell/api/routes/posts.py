"""Post Routes — post CRUD, comments, and like toggling.

Invariants:
    - PUT/PATCH/DELETE carry the acting userId in the body; ownership is checked
      by the service before anything is written
    - GET /posts/{id} counts as a view
    - DELETE returns 204 with an empty body
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Response, status

from inkwell.api.dependencies import get_post_service
from inkwell.core.errors import ResourceNotFoundError
from inkwell.core.domain_types import MAX_PAGE_SIZE
from inkwell.models.post import Post
from inkwell.schemas.common import Envelope, PageMetaResponse, PageResponse
from inkwell.schemas.post import (
    CommentCreate, PostActor, PostCreate, PostPatch, PostResponse, PostUpdate,
)
from inkwell.services.post_service import PostService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/posts", tags=["posts"])


def _found(post: Post | None, post_id: UUID) -> dict:
    if post is None:
        raise ResourceNotFoundError("Post", str(post_id))
    return {"success": True, "data": PostResponse.from_post(post)}


@router.get("", response_model=Envelope[PageResponse[PostResponse]])
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    search: str | None = Query(None),
    service: PostService = Depends(get_post_service),
):
    """List posts, most recent first; search matches title OR content."""
    result = await service.list_posts(search, page, limit)
    return {
        "success": True,
        "data": PageResponse[PostResponse](
            items=[PostResponse.from_post(p) for p in result.items],
            meta=PageMetaResponse.from_meta(result.meta),
        ),
    }


@router.get("/{post_id}", response_model=Envelope[PostResponse])
async def get_post(
    post_id: UUID, service: PostService = Depends(get_post_service),
):
    return _found(await service.get_post(post_id), post_id)


@router.post(
    "", response_model=Envelope[PostResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    body: PostCreate, service: PostService = Depends(get_post_service),
):
    post = await service.create_post(body)
    return {"success": True, "data": PostResponse.from_post(post)}


@router.put("/{post_id}", response_model=Envelope[PostResponse])
async def update_post(
    post_id: UUID,
    body: PostUpdate,
    service: PostService = Depends(get_post_service),
):
    changes = body.model_dump(exclude_unset=True, exclude={"user_id"})
    return _found(
        await service.update_post(post_id, body.user_id, changes), post_id,
    )


@router.patch("/{post_id}", response_model=Envelope[PostResponse])
async def patch_post(
    post_id: UUID,
    body: PostPatch,
    service: PostService = Depends(get_post_service),
):
    changes = body.model_dump(exclude_unset=True, exclude={"user_id"})
    return _found(
        await service.patch_post(post_id, body.user_id, changes), post_id,
    )


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: UUID,
    body: PostActor | None = Body(None),
    service: PostService = Depends(get_post_service),
):
    actor_id = body.user_id if body else None
    if await service.delete_post(post_id, actor_id) is None:
        raise ResourceNotFoundError("Post", str(post_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{post_id}/comments", response_model=Envelope[PostResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: UUID,
    body: CommentCreate,
    service: PostService = Depends(get_post_service),
):
    """Append a comment; the response carries the new commentsCount."""
    return _found(
        await service.add_comment(post_id, body.text, body.author), post_id,
    )


@router.post("/{post_id}/like", response_model=Envelope[PostResponse])
async def toggle_like(
    post_id: UUID,
    body: PostActor,
    service: PostService = Depends(get_post_service),
):
    """Like the post, or remove the like if userId already liked it."""
    return _found(await service.toggle_like(post_id, body.user_id), post_id)
