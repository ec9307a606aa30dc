"""
Bookshelf Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_repository: AsyncMock standing in for a BookRepository
    ├── mock_db_session: AsyncMock standing in for an AsyncSession
    ├── memory_repository: Fresh InMemoryBookRepository
    ├── db_engine: Async engine on a temporary SQLite file, tables created
    ├── db_session: AsyncSession bound to db_engine
    ├── sql_client: HTTPX AsyncClient; app uses the SQL repository on db_engine
    ├── memory_client: HTTPX AsyncClient; app uses memory_repository
    └── failing_client: HTTPX AsyncClient; every repository call raises
"""

import os
import tempfile
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any bookshelf imports
# Why: Settings and the module-level engine are built at import time
os.environ["DATABASE_URL"] = (
    "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(prefix="bookshelf_test_"), "app.db")
)
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["USE_IN_MEMORY_STORE"] = "false"
os.environ["LEGACY_ERROR_STATUS"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from bookshelf.database import create_tables, get_db_session
from bookshelf.dependencies import get_book_repository
from bookshelf.main import create_app
from bookshelf.models.book import Book
from bookshelf.repositories import BookRepository, InMemoryBookRepository


class BrokenBookRepository(BookRepository):
    """Repository whose every operation fails like an unreachable database."""

    def _fail(self):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    async def get(self, book_id: int) -> Optional[Book]:
        self._fail()

    async def list_all(self) -> List[Book]:
        self._fail()

    async def save(self, book: Book) -> Book:
        self._fail()

    async def delete(self, book_id: int) -> bool:
        self._fail()


@pytest.fixture
def sample_book_data():
    """Request body for the book used throughout the API tests."""
    return {
        "title": "Solid Book",
        "author": "Robert Martin",
        "publicationYear": 2023,
    }


@pytest.fixture
def mock_repository():
    """
    Provides a mock BookRepository.

    Usage:
        async def test_get(mock_repository):
            mock_repository.get.return_value = book
            result = await BookService(mock_repository).get_book(1)
    """
    repository = MagicMock(spec=BookRepository)
    repository.get = AsyncMock(return_value=None)
    repository.list_all = AsyncMock(return_value=[])
    repository.save = AsyncMock(side_effect=lambda book: book)
    repository.delete = AsyncMock(return_value=False)
    return repository


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Used where a real database cannot produce the failure under test
    (e.g. a commit that raises).
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def memory_repository():
    return InMemoryBookRepository()


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """
    Async engine on a throwaway SQLite file with the schema created.

    A file (not :memory:) so that separate sessions see each other's commits.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'books.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


def _client_for(app) -> AsyncClient:
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def sql_client(session_factory):
    """
    HTTPX AsyncClient talking to an app whose sessions come from db_engine.

    Usage:
        async def test_list(sql_client):
            response = await sql_client.get("/api/books")
            assert response.status_code == 200
    """
    app = create_app()

    async def override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_session
    async with _client_for(app) as client:
        yield client


@pytest_asyncio.fixture
async def memory_client(memory_repository):
    """HTTPX AsyncClient talking to an app backed by memory_repository."""
    app = create_app()
    app.dependency_overrides[get_book_repository] = lambda: memory_repository
    async with _client_for(app) as client:
        yield client


@pytest_asyncio.fixture
async def failing_client():
    """HTTPX AsyncClient talking to an app whose store always fails."""
    app = create_app()
    app.dependency_overrides[get_book_repository] = lambda: BrokenBookRepository()
    async with _client_for(app) as client:
        yield client
