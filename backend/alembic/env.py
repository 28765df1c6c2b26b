"""
Alembic Migration Environment
===============================

What:  Runs DeviceLab migrations through the async engine.
How:   The store URL comes from app.config (DATABASE_URL + DATABASE_NAME),
       not from alembic.ini, so the app and its migrations never disagree.
Who:   The `alembic` CLI (upgrade, downgrade, revision --autogenerate).
When:  Before first start against an empty PostgreSQL database, and after
       any change to app/models.

Usage:
    cd backend
    alembic upgrade head            # apply 001_create_device_tables
    alembic upgrade head --sql      # print the DDL instead (offline mode)
    alembic revision --autogenerate -m "..."

Tables covered: devices, scenes, tests. Scene and test parent references
are plain columns without foreign keys; the services check them on write.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from app.config import settings
from app.database import Base

# Registers every table on Base.metadata for --autogenerate
from app.models.device import Device  # noqa: F401
from app.models.scene import Scene  # noqa: F401
from app.models.test import Test  # noqa: F401

config = context.config

# [loggers] / [handlers] sections of alembic.ini
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# ConfigParser treats % as interpolation; escape it for passwords
config.set_main_option(
    "sqlalchemy.url",
    settings.database_dsn.render_as_string(hide_password=False).replace("%", "%%"),
)


def run_migrations_offline() -> None:
    """
    Emit SQL to stdout without connecting (alembic upgrade --sql).

    Useful for handing the DDL for devices/scenes/tests to whoever owns the
    production database.
    """
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    """Apply pending revisions on an already-open sync connection."""
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """
    Connect with a throwaway async engine and apply pending revisions.

    Alembic's migration API is synchronous, so the work runs inside
    connection.run_sync(). The engine is separate from app.database.engine
    and uses no pool; it lives only for this command.
    """
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
