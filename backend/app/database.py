"""
DeviceLab Backend — Store Session Management
==============================================

What:  Async SQLAlchemy engine, session factory, identifier helpers and the
       FastAPI session dependency.
Why:   Centralizes all store connection logic in one place.
How:   Creates an async engine, provides a session dependency that commits
       on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Identifiers:
    Every record is keyed by a 24-character hexadecimal string. The first
    four bytes are the creation time in seconds (big-endian), the remaining
    eight are random, so ids sort roughly by age and never collide in practice.
    Callers treat them as opaque.

Consistency:
    Services commit after each store step, so a multi-step operation
    (cascade delete, bulk insert) that fails halfway keeps the steps that
    already finished. The final commit in get_db_session() is then a no-op.
"""

import os
import re
import time
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import settings

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def new_object_id() -> str:
    """Generate a fresh 24-character hex identifier."""
    timestamp = int(time.time()).to_bytes(4, "big")
    return (timestamp + os.urandom(8)).hex()


def is_object_id(value: Any) -> bool:
    """True if `value` has the shape of a record identifier."""
    return isinstance(value, str) and OBJECT_ID_PATTERN.match(value) is not None


def _engine_options() -> Dict[str, Any]:
    # SQLite (tests, local runs) does not take queue pool arguments
    if settings.is_sqlite:
        return {}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": settings.db_pool_pre_ping,
        "pool_recycle": 3600,
    }


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(
    settings.database_dsn,
    echo=settings.log_level == "DEBUG",
    **_engine_options(),
)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: services read attributes after committing
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a store session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits whatever is still pending
        4. On error: rolls back the pending work
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/devices")
        async def list_devices(db: AsyncSession = Depends(get_db_session)):
            return await device_service.list_devices(db)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_tables() -> None:
    """Create any missing tables from the ORM metadata."""
    # Import models so they register with Base.metadata
    from app.models import device, scene, test  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Gracefully close all connections in the pool (application shutdown)."""
    await engine.dispose()
