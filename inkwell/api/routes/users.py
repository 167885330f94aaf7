"""User Routes — user CRUD, follow/unfollow, and a user's posts.

Invariants:
    - POST /users/{id}/follow: body userId follows path id
    - DELETE returns 204 with an empty body
    - A malformed UUID in the path is a 400 (request validation)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from inkwell.api.dependencies import get_post_service, get_user_service
from inkwell.core.errors import BadRequestError, ResourceNotFoundError
from inkwell.core.domain_types import MAX_PAGE_SIZE
from inkwell.schemas.common import Envelope, PageMetaResponse, PageResponse
from inkwell.schemas.post import PostResponse
from inkwell.schemas.user import (
    FollowRequest, FollowResponse, UserCreate, UserDetailResponse, UserPatch,
    UserResponse, UserUpdate,
)
from inkwell.services.post_service import PostService
from inkwell.services.user_service import FollowOutcome, UserDetail, UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


def _detail_response(detail: UserDetail) -> UserDetailResponse:
    return UserDetailResponse.from_detail(
        detail.user, detail.followers, detail.following,
    )


def _follow_response(outcome: FollowOutcome) -> FollowResponse:
    return FollowResponse(
        follower=_detail_response(outcome.follower),
        target=_detail_response(outcome.target),
        followed=outcome.followed,
    )


def _require_actor(body: FollowRequest, action: str) -> UUID:
    if body.user_id is None:
        raise BadRequestError(f"userId is required to {action} a user")
    return body.user_id


@router.get("", response_model=Envelope[PageResponse[UserResponse]])
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    search: str | None = Query(None),
    service: UserService = Depends(get_user_service),
):
    """List users, most recent first, optionally filtered by username substring."""
    result = await service.list_users(search, page, limit)
    return {
        "success": True,
        "data": PageResponse[UserResponse](
            items=[
                UserResponse.from_user(
                    s.user, s.followers_count, s.following_count,
                )
                for s in result.items
            ],
            meta=PageMetaResponse.from_meta(result.meta),
        ),
    }


@router.get("/{user_id}", response_model=Envelope[UserDetailResponse])
async def get_user(
    user_id: UUID, service: UserService = Depends(get_user_service),
):
    detail = await service.get_user(user_id)
    if detail is None:
        raise ResourceNotFoundError("User", str(user_id))
    return {"success": True, "data": _detail_response(detail)}


@router.post(
    "", response_model=Envelope[UserDetailResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate, service: UserService = Depends(get_user_service),
):
    detail = await service.create_user(body)
    return {"success": True, "data": _detail_response(detail)}


@router.put("/{user_id}", response_model=Envelope[UserDetailResponse])
async def update_user(
    user_id: UUID,
    body: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    detail = await service.update_user(user_id, body)
    if detail is None:
        raise ResourceNotFoundError("User", str(user_id))
    return {"success": True, "data": _detail_response(detail)}


@router.patch("/{user_id}", response_model=Envelope[UserDetailResponse])
async def patch_user(
    user_id: UUID,
    body: UserPatch,
    service: UserService = Depends(get_user_service),
):
    detail = await service.patch_user(user_id, body)
    if detail is None:
        raise ResourceNotFoundError("User", str(user_id))
    return {"success": True, "data": _detail_response(detail)}


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID, service: UserService = Depends(get_user_service),
):
    if not await service.delete_user(user_id):
        raise ResourceNotFoundError("User", str(user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{user_id}/follow", response_model=Envelope[FollowResponse])
async def follow_user(
    user_id: UUID,
    body: FollowRequest,
    service: UserService = Depends(get_user_service),
):
    """The user in the body starts following the user in the path."""
    outcome = await service.follow(_require_actor(body, "follow"), user_id)
    return {"success": True, "data": _follow_response(outcome)}


@router.post("/{user_id}/unfollow", response_model=Envelope[FollowResponse])
async def unfollow_user(
    user_id: UUID,
    body: FollowRequest,
    service: UserService = Depends(get_user_service),
):
    outcome = await service.unfollow(_require_actor(body, "unfollow"), user_id)
    return {"success": True, "data": _follow_response(outcome)}


@router.get("/{user_id}/posts", response_model=Envelope[PageResponse[PostResponse]])
async def list_user_posts(
    user_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    service: PostService = Depends(get_post_service),
):
    result = await service.list_by_author(user_id, page, limit)
    if result is None:
        raise ResourceNotFoundError("User", str(user_id))
    return {
        "success": True,
        "data": PageResponse[PostResponse](
            items=[PostResponse.from_post(p) for p in result.items],
            meta=PageMetaResponse.from_meta(result.meta),
        ),
    }
