# alembic/env.py

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

import fanbase.models  # noqa: F401 - Import all models so Alembic can detect schema changes
from alembic import context
from fanbase.db.base import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def get_url() -> str:
    """
    Return the async database URL from the environment.
    DATABASE_URL_LOCAL wins so migrations can target a host-side port.
    """
    url = os.environ.get("DATABASE_URL_LOCAL") or os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError(
            "Neither DATABASE_URL_LOCAL nor DATABASE_URL is set. "
            "Please export one before running Alembic."
        )
    return url


def run_migrations_offline() -> None:
    """
    Emit SQL to stdout without connecting to the database.
    """
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """
    Run migrations over an async engine, driving Alembic through run_sync.
    """
    connectable = create_async_engine(get_url(), poolclass=pool.NullPool)
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
