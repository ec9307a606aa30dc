"""
Alembic Migration Environment
===============================

What:  Runs Alembic migrations through the application's async engine settings.
How:   The URL comes from bookshelf.config (DATABASE_URL), not alembic.ini, so
       the app and its migrations always point at the same database.
Who:   Called by `alembic` CLI commands (upgrade, downgrade, revision),
       run from the backend/ directory.

SQLite note:
    SQLite cannot ALTER most column properties in place; render_as_batch
    makes autogenerated migrations use Alembic's copy-and-move batch mode
    there. It is a no-op for PostgreSQL.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from bookshelf.config import settings
from bookshelf.database import Base

# Alembic only sees models that are imported and registered with Base
from bookshelf.models.book import Book  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

config.set_main_option("sqlalchemy.url", settings.database_url)


def run_migrations_offline() -> None:
    """Emit migration SQL to stdout without connecting (alembic upgrade --sql)."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=settings.is_sqlite,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    """Execute migrations on a sync connection handed over by run_sync()."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=settings.is_sqlite,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Connect with a throwaway async engine and apply pending migrations."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,  # Don't use pooling for migrations
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
