"""
In-memory BookRepository.

Used by the test suite and by deployments with USE_IN_MEMORY_STORE=true.
Ids are assigned from a counter that never goes backwards, matching the
AUTOINCREMENT behaviour of the SQL table.
"""

from typing import Dict, List, Optional

from bookshelf.models.book import Book
from bookshelf.repositories.base import BookRepository


class InMemoryBookRepository(BookRepository):
    """Dict-backed book store. Not shared across processes."""

    def __init__(self) -> None:
        self._books: Dict[int, Book] = {}
        self._next_id = 1

    async def get(self, book_id: int) -> Optional[Book]:
        return self._books.get(book_id)

    async def list_all(self) -> List[Book]:
        return [self._books[book_id] for book_id in sorted(self._books)]

    async def save(self, book: Book) -> Book:
        if book.id is None:
            book.id = self._next_id
            self._next_id += 1
        self._books[book.id] = book
        return book

    async def delete(self, book_id: int) -> bool:
        return self._books.pop(book_id, None) is not None
