"""
PodReview Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Settings are pointed at SQLite before any podreview import. Tests that
       exercise uniqueness or ownership run against a real throwaway SQLite
       file per test, so the storage-layer constraints are the real ones.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session:  Mock async session (no database at all)
    ├── db_engine:        Async engine on a temp SQLite file, tables created
    ├── session_factory:  async_sessionmaker bound to db_engine
    ├── db_session:       One session from session_factory
    ├── create_user:      Inserts a User and returns its Principal
    ├── create_podcast:   Inserts a Podcast and returns its id
    ├── auth_headers:     Bearer header for a Principal
    └── test_client:      HTTPX AsyncClient with get_db_session overridden
"""

import os
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# Must run before podreview.config builds its settings singleton
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./podreview_test.db"
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["PASSWORD_HASH_ROUNDS"] = "1000"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from podreview.auth import create_access_token, hash_password
from podreview.database import Base, get_db_session
from podreview.models.podcast import Podcast
from podreview.models.review import Review  # noqa: F401
from podreview.models.user import User
from podreview.schemas.user import Principal

TEST_PASSWORD = "Secret@Pass1"


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_fetch_missing(mock_db_session):
            mock_db_session.get.return_value = None
            ...
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'podreview.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def create_user(session_factory):
    """
    Factory that inserts a committed User and returns the matching Principal.

    Usage:
        alice = await create_user("Alice")
    """
    async def _create(name: str = "Alice", email: str = None) -> Principal:
        async with session_factory() as session:
            user = User(
                name=name,
                email=email or f"{uuid4().hex[:10]}@example.com",
                password_hash=hash_password(TEST_PASSWORD),
            )
            session.add(user)
            await session.commit()
            return Principal(id=user.id, name=user.name, role=user.role)

    return _create


@pytest.fixture
def create_podcast(session_factory):
    """Factory that inserts a committed Podcast and returns its id."""
    async def _create(name: str = None, description: str = "A podcast"):
        async with session_factory() as session:
            podcast = Podcast(name=name or f"Podcast {uuid4().hex[:8]}", description=description)
            session.add(podcast)
            await session.commit()
            return podcast.id

    return _create


@pytest.fixture
def auth_headers():
    """Builds an Authorization header carrying a valid token for a Principal."""
    def _headers(principal: Principal) -> dict:
        return {"Authorization": f"Bearer {create_access_token(principal.id, principal.role)}"}

    return _headers


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    Provides an async HTTP test client for endpoint testing.

    The app's session dependency is replaced by one bound to the per-test
    SQLite database, with the same commit/rollback behaviour.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from podreview.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
