"""
Bookshelf Backend — Dependency Wiring
=======================================

What:  FastAPI dependencies that build the repository and service for a request.
Why:   Routes ask for a BookService; which store backs it is decided here
       (and overridden in tests via app.dependency_overrides).

Store selection:
    USE_IN_MEMORY_STORE=false (default) → SqlAlchemyBookRepository(session)
    USE_IN_MEMORY_STORE=true            → process-wide InMemoryBookRepository
"""

from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.config import settings
from bookshelf.database import get_db_session
from bookshelf.repositories import (
    BookRepository,
    InMemoryBookRepository,
    SqlAlchemyBookRepository,
)
from bookshelf.services.book_service import BookService

_in_memory_repository: Optional[InMemoryBookRepository] = None


def get_in_memory_repository() -> InMemoryBookRepository:
    """Return a singleton in-memory repository so books persist across requests."""
    global _in_memory_repository
    if _in_memory_repository is None:
        _in_memory_repository = InMemoryBookRepository()
    return _in_memory_repository


def get_book_repository(
    db: AsyncSession = Depends(get_db_session),
) -> BookRepository:
    if settings.use_in_memory_store:
        return get_in_memory_repository()
    return SqlAlchemyBookRepository(db)


def get_book_service(
    repository: BookRepository = Depends(get_book_repository),
) -> BookService:
    return BookService(repository)
