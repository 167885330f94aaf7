"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - All SQLAlchemy exceptions mapped by translate_storage_error (core/errors.py types)
    - Connect, command and pool-checkout timeouts are always set

Design Decisions:
    - The manager is constructed in the FastAPI lifespan and stored on app.state;
      get_db reads it from the request, there is no module-level handle
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from inkwell.core.errors import (
    ConflictError, InkwellError, InternalError, ServiceUnavailableError,
)
from inkwell.db.base import Base

logger = logging.getLogger(__name__)


def translate_storage_error(exc: Exception) -> InkwellError:
    """Map a storage-layer exception onto the error hierarchy."""
    if isinstance(exc, IntegrityError):
        return ConflictError("A record with the same unique key already exists")
    if isinstance(exc, (OperationalError, TimeoutError)):
        return ServiceUnavailableError("Connection or operational error", "execute")
    if isinstance(exc, DBAPIError):
        return ServiceUnavailableError("Database driver error", "query")
    return InternalError("Database operation failed")


def _engine_options(
    database_url: str, pool_size: int, max_overflow: int, timeout_seconds: float,
) -> dict:
    if database_url.startswith("sqlite"):
        return {"connect_args": {"timeout": timeout_seconds}}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_recycle": 3600,
        "pool_timeout": timeout_seconds,
        "connect_args": {
            "timeout": timeout_seconds,
            "command_timeout": timeout_seconds,
        },
    }


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        timeout_seconds: float = 5.0,
    ):
        self.timeout_seconds = timeout_seconds
        self.engine = create_async_engine(
            database_url,
            pool_pre_ping=True,
            **_engine_options(
                database_url, pool_size, max_overflow, timeout_seconds,
            ),
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except (SQLAlchemyError, TimeoutError) as e:
            await session.rollback()
            logger.error(f"DB error ({type(e).__name__}): {e}")
            raise translate_storage_error(e) from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_schema(self) -> None:
        """Create all tables (local development and tests; production uses alembic)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with asyncio.timeout(self.timeout_seconds):
                async with self.session() as db:
                    await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    manager: DatabaseSessionManager | None = getattr(
        request.app.state, "db_manager", None,
    )
    if manager is None:
        raise RuntimeError("Database not initialized")
    async with manager.session() as session:
        yield session
