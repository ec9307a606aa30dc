"""
Bookshelf Backend — SQLAlchemy Book Repository
================================================

What:  BookRepository backed by an async SQLAlchemy session.
How:   Each write flushes and commits immediately, so the store assigns the
       id and the row is durable before the response is built. A failed
       commit rolls the session back and re-raises.
Who:   Built per request by bookshelf.dependencies.get_book_repository.

Query plans:
    get:      SELECT ... FROM book WHERE id = :id   (primary key lookup)
    list_all: SELECT ... FROM book ORDER BY id
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.models.book import Book
from bookshelf.repositories.base import BookRepository

logger = logging.getLogger(__name__)


class SqlAlchemyBookRepository(BookRepository):
    """Book store on top of one AsyncSession (one per request)."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, book_id: int) -> Optional[Book]:
        return await self._session.get(Book, book_id)

    async def list_all(self) -> List[Book]:
        result = await self._session.execute(select(Book).order_by(Book.id))
        return list(result.scalars().all())

    async def save(self, book: Book) -> Book:
        self._session.add(book)
        try:
            await self._session.flush()  # Assigns id for new rows
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        logger.debug("Saved book %s", book.id)
        return book

    async def delete(self, book_id: int) -> bool:
        book = await self.get(book_id)
        if book is None:
            return False
        try:
            await self._session.delete(book)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        logger.debug("Deleted book %s", book_id)
        return True

    async def count(self) -> int:
        result = await self._session.execute(select(func.count(Book.id)))
        return result.scalar() or 0
