"""
Bookshelf Backend — Database Session Management
=================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine (pooled for server databases), provides a
       session dependency that commits on success and rolls back on error.
Who:   Used by the repository dependency via FastAPI's dependency injection.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling Strategy:
    PostgreSQL (asyncpg):
        pool_size=20, max_overflow=10, pool_pre_ping, pool_recycle=3600
    SQLite (aiosqlite):
        Dialect default pool. SQLite has no server-side connection limit and
        the in-memory variant uses a static pool that rejects sizing arguments.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from bookshelf.config import settings


def _engine_options() -> Dict[str, Any]:
    """Build create_async_engine keyword arguments for the configured URL."""
    options: Dict[str, Any] = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: repositories commit inside save()/delete(), and the
# formatter reads attributes afterwards; expiring them would force a reload
# outside the session's lifetime.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers models with a shared metadata object, which Alembic reads for
    migrations and create_tables() uses for local bootstrapping.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the repository built for this request
        3. On success: commits anything still pending
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    Repositories commit their own writes, so step 3 is normally a no-op;
    it stays as a safety net for writes that bypass the repository.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise  # Re-raise so the global error handler can respond appropriately
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_tables(bind: AsyncEngine = engine) -> None:
    """
    What:  Creates every table registered on Base.metadata if missing.
    When:  App startup with DB_CREATE_ALL=true, and the test suite.
    Note:  Production schemas are managed by Alembic (alembic upgrade head).
    """
    # Import models so they register with Base.metadata
    from bookshelf.models import book  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
