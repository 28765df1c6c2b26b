"""
DeviceLab Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied before any `app` import so the
       settings singleton and module-level engine point at SQLite.

Fixtures (function-scoped, fresh for each test):
    ├── db_engine:        Async SQLite engine on a temp file, tables created
    ├── db_session:       AsyncSession bound to db_engine
    ├── mock_db_session:  AsyncMock session for failure injection
    └── test_client:      HTTPX AsyncClient with get_db_session overridden
"""

import os
import tempfile

# Must run before `app.config` is imported anywhere
_TEST_DIR = tempfile.mkdtemp(prefix="devicelab_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DIR, 'app.db')}"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CORS_ORIGINS"] = "*"

from datetime import datetime, timezone  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.database import Base, get_db_session, new_object_id  # noqa: E402
from app.models import device, scene, test  # noqa: E402,F401


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """A throwaway SQLite store with every table created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'devicelab.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async session.

    `add` stamps an id and timestamps onto the object, standing in for the
    values the store would assign on flush.

    Usage:
        mock_db_session.commit = AsyncMock(side_effect=[None, SQLAlchemyError("boom")])
    """
    def _stamp(obj):
        now = datetime.now(timezone.utc)
        obj.id = new_object_id()
        obj.created_at = now
        obj.updated_at = now

    session = AsyncMock()
    session.get = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock(side_effect=_stamp)
    return session


@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from app.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def _session_override():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _session_override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
