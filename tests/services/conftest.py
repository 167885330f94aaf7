"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test session factory
    - app.state.db_manager points at the test engine (health probes use it)

Design Decisions:
    - SQLite in-memory with StaticPool: one shared connection, so sessions opened by
      fixtures and by requests see the same data
    - Service tests talk to services through test_db; route tests only through client
"""

import itertools

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from inkwell.db.base import Base
from inkwell.infrastructure.database import get_db, DatabaseSessionManager
from inkwell.main import app
from inkwell.schemas.post import PostCreate
from inkwell.schemas.user import UserCreate
from inkwell.services.post_service import PostService
from inkwell.services.user_service import UserService
import inkwell.models  # noqa: F401


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    fake_manager.timeout_seconds = 5.0
    app.state.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    app.state.db_manager = None


# ─── Service-level seeding ───────────────────────────────────────

@pytest.fixture
def user_service(test_db):
    return UserService(test_db)


@pytest.fixture
def post_service(test_db):
    return PostService(test_db)


@pytest.fixture
def make_user(user_service):
    """Create a user through the service; returns the User row."""
    counter = itertools.count(1)

    async def _make(username: str | None = None, **fields):
        n = next(counter)
        detail = await user_service.create_user(UserCreate(
            username=username or f"writer{n}",
            email=fields.pop("email", f"writer{n}@example.com"),
            password=fields.pop("password", "secret123"),
            **fields,
        ))
        return detail.user

    return _make


@pytest.fixture
def make_post(post_service):
    """Create a post through the service; returns the Post row."""
    counter = itertools.count(1)

    async def _make(author, title: str | None = None, content: str = "Body text"):
        n = next(counter)
        return await post_service.create_post(PostCreate(
            title=title or f"Post {n}", content=content, author=author.id,
        ))

    return _make


# ─── Route-level seeding ─────────────────────────────────────────

@pytest.fixture
def api_user(client):
    """Create a user over HTTP; returns the response `data` dict."""
    counter = itertools.count(1)

    async def _make(username: str | None = None) -> dict:
        n = next(counter)
        name = username or f"reader{n}"
        res = await client.post("/api/users", json={
            "username": name,
            "email": f"{name}@example.com",
            "password": "secret123",
        })
        assert res.status_code == 201, res.text
        return res.json()["data"]

    return _make


@pytest.fixture
def api_post(client):
    """Create a post over HTTP; returns the response `data` dict."""
    async def _make(author: dict, title: str = "Hello", content: str = "World") -> dict:
        res = await client.post("/api/posts", json={
            "title": title, "content": content, "author": author["id"],
        })
        assert res.status_code == 201, res.text
        return res.json()["data"]

    return _make
