"""
Top-level pytest configuration.

Provides:
  - A test SQLite database (aiosqlite) with all tables created fresh per session.
  - A db_session fixture that rolls back each test in a transaction.
  - An async_client fixture wired to the FastAPI app.
  - Seeded member / owner users, an active and an inactive project, and
    bearer-token headers for each user.
"""

from __future__ import annotations

import os
import uuid
from typing import AsyncGenerator

# ---------------------------------------------------------------------------
# Environment must be set BEFORE any app module is imported so that
# pydantic-settings picks up the test values.
# ---------------------------------------------------------------------------
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_USER", "test")
os.environ.setdefault("POSTGRES_PASSWORD", "test")
os.environ.setdefault("POSTGRES_DB", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-32c")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from tests.factories import ProjectFactory, UserFactory

# ---------------------------------------------------------------------------
# SQLite in-memory URL for testing.
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)


# ---------------------------------------------------------------------------
# Session-scoped test engine (SQLite in-memory, shared via StaticPool so all
# connections see the same data within a test process).
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture(scope="session")
async def engine():
    """Create the SQLite test engine and all tables once per test session."""
    # Import Base here (after env vars are set) to ensure models register.
    from app.core.database import Base

    # Force all model modules to load so their tables register on Base.metadata
    import app.models.user          # noqa: F401
    import app.models.project       # noqa: F401
    import app.models.application   # noqa: F401
    import app.models.swipe         # noqa: F401

    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


# ---------------------------------------------------------------------------
# Per-test DB session that rolls back after each test for isolation.
#
# Each test runs inside one outer transaction that is rolled back at
# teardown. Endpoint handlers call ``await db.commit()``; the session below
# turns that into a flush so writes stay inside the outer transaction.
# SQLite does not nest SAVEPOINTs reliably under aiosqlite, so a
# savepoint-based session would escalate to a real commit.
# ---------------------------------------------------------------------------
class _NonCommittingSession(AsyncSession):
    """AsyncSession subclass where commit() becomes flush()."""

    async def commit(self) -> None:  # type: ignore[override]
        await self.flush()


@pytest_asyncio.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a per-test database session that is fully rolled back on teardown."""
    async with engine.connect() as conn:
        await conn.begin()  # outer real transaction

        session = _NonCommittingSession(
            bind=conn,
            expire_on_commit=False,
        )

        try:
            yield session
        finally:
            await session.close()
            await conn.rollback()


# ---------------------------------------------------------------------------
# Override FastAPI database dependency to use the test session.
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide an httpx AsyncClient backed by the FastAPI app.

    The app's get_db dependency is overridden to yield the test session so all
    requests in a test share the same transactional session and thus see any
    data seeded in that test.
    """
    from app.core.database import get_db
    from app.main import app

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Seeded fixtures
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def member(db_session: AsyncSession):
    """Persisted user who swipes on projects."""
    return await UserFactory.create_async(
        db_session,
        email="member@example.com",
        username="member",
        role="Backend developer",
        tech_tags=["python", "postgres"],
    )


@pytest_asyncio.fixture
async def owner(db_session: AsyncSession):
    """Persisted user who owns the test projects."""
    return await UserFactory.create_async(
        db_session,
        email="owner@example.com",
        username="owner",
        role="Product designer",
    )


@pytest_asyncio.fixture
async def project(db_session: AsyncSession, owner):
    """Persisted active project owned by ``owner``."""
    return await ProjectFactory.create_async(
        db_session,
        owner_id=owner.id,
        owner=owner,
        title="Open-source budget tracker",
    )


@pytest_asyncio.fixture
async def inactive_project(db_session: AsyncSession, owner):
    """Persisted project that no longer accepts swipes."""
    return await ProjectFactory.create_async(
        db_session,
        owner_id=owner.id,
        owner=owner,
        title="Archived game jam entry",
        is_active=False,
    )


def _bearer(user_id: uuid.UUID) -> dict[str, str]:
    from app.core.security import create_access_token
    token = create_access_token(user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def member_headers(member) -> dict[str, str]:
    """Authorization headers for the member test user."""
    return _bearer(member.id)


@pytest.fixture
def owner_headers(owner) -> dict[str, str]:
    """Authorization headers for the project owner test user."""
    return _bearer(owner.id)
