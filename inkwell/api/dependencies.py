"""Service Dependencies — FastAPI providers wiring a request session into services."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.config import get_settings
from inkwell.infrastructure.database import get_db
from inkwell.services.post_service import PostService
from inkwell.services.user_service import UserService


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db, get_settings())


def get_post_service(db: AsyncSession = Depends(get_db)) -> PostService:
    return PostService(db)
