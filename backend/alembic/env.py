"""Alembic environment — async migration runner for the ledger schema.

Imports every model so Base.metadata is complete for autogenerate.

Design Decisions:
    - URL resolved through teampool.config.Settings: migrations and the app read the same
      DATABASE_URL, with the same postgresql:// → postgresql+asyncpg:// normalization
    - `alembic -x url=...` overrides it for one-off runs against another database
    - SQLite targets render ALTERs as batch operations (local and test databases)
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

from teampool.config import get_settings
from teampool.db.base import Base
import teampool.models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _get_database_url() -> str:
    override = context.get_x_argument(as_dictionary=True).get("url")
    return override or get_settings().database_url


def _configure(url: str, **kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        render_as_batch=make_url(url).get_backend_name() == "sqlite",
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of executing it."""
    url = _get_database_url()
    _configure(url, url=url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection, url: str) -> None:
    _configure(url, connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    url = _get_database_url()
    connectable = create_async_engine(url, poolclass=pool.NullPool)
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations, url)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
