"""Shared test fixtures — async DB, client, factories.

Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import os

# Pin settings before anything imports pydantic-settings
os.environ.setdefault("LOCAL_TIMEZONE", "Asia/Jakarta")
os.environ.setdefault("WRITE_RATE_LIMIT", "1000/minute")
os.environ.setdefault("ENVIRONMENT", "test")

import uuid
from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from attendance_ledger.config import settings
from attendance_ledger.database import Base, get_db
from attendance_ledger.main import create_app

# Import ALL model modules so metadata holds every table
import attendance_ledger.declarations.models  # noqa: F401
import attendance_ledger.sessions.models  # noqa: F401
import attendance_ledger.staff.models  # noqa: F401

# ── SQLite compat: compile PG-specific types ────────────────────────

from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.ext.compiler import compiles


@compiles(PG_UUID, "sqlite")
def _uuid_sqlite(element, compiler, **kw):
    return "CHAR(36)"


# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)

LOCAL_TZ = settings.local_tz
OFFICE = {"latitude": settings.OFFICE_LATITUDE, "longitude": settings.OFFICE_LONGITUDE}


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from attendance_ledger.common.rate_limit import limiter

    limiter.reset()
    yield


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance with DB dependency overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Model factories ─────────────────────────────────────────────────

def _make_staff(*, name: str = "Siti Rahma") -> dict:
    return dict(
        id=uuid.uuid4(),
        name=name,
        created_at=datetime.now(timezone.utc),
    )


def local_dt(*args: int) -> datetime:
    """Aware datetime in the configured local timezone."""
    return datetime(*args, tzinfo=LOCAL_TZ)


@pytest.fixture
async def test_staff(db) -> dict:
    """Insert a staff member and return its data dict."""
    from attendance_ledger.staff.models import Staff

    data = _make_staff()
    db.add(Staff(**data))
    await db.flush()
    return data


@pytest.fixture
async def other_staff(db) -> dict:
    from attendance_ledger.staff.models import Staff

    data = _make_staff(name="Budi Santoso")
    db.add(Staff(**data))
    await db.flush()
    return data
