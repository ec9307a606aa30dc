"""
Bookshelf Backend — Abstract Book Repository
==============================================

What:  Abstract base class defining the persistence contract for books.
Why:   The services never see a session. Swapping the SQL store for the
       in-memory one (tests, demos) changes only the dependency wiring.
How:   Concrete implementations inherit from BookRepository and implement
       the four async operations below.
Who:   Called by BookCreator and BookService.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from bookshelf.models.book import Book


class BookRepository(ABC):
    """
    Abstract interface over the book record store.

    Contract:
        - get() returns None for a missing id; it never raises for "not found"
        - save() assigns `id` on first save and commits before returning
        - delete() reports whether a row existed
        - Infrastructure failures propagate as the store's own exceptions;
          BookService wraps them in DatabaseError
    """

    @abstractmethod
    async def get(self, book_id: int) -> Optional[Book]:
        """Return the book with the given id, or None."""
        ...

    @abstractmethod
    async def list_all(self) -> List[Book]:
        """Return every stored book, ordered by id ascending."""
        ...

    @abstractmethod
    async def save(self, book: Book) -> Book:
        """
        Insert a new book or persist changes to an existing one.

        Returns:
            The same Book instance, with `id` populated.
        """
        ...

    @abstractmethod
    async def delete(self, book_id: int) -> bool:
        """
        Remove the book with the given id.

        Returns:
            True if a book was removed, False if none existed.
        """
        ...

    async def count(self) -> int:
        """Number of stored books."""
        return len(await self.list_all())
