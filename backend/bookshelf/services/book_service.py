"""
Bookshelf Backend — Book Service (Business Logic Orchestrator)
================================================================

What:  The five book operations the API exposes: list, get, create, update, delete.
Why:   Keeps routes thin and keeps error translation in one place.
How:   Composes a BookRepository, BookCreator, and the formatter. Returns
       wire-format mappings; raises typed errors from bookshelf.exceptions.
Who:   Built per request by bookshelf.dependencies.get_book_service.

Error Translation:
    repository returns None / False  → NotFoundError   ("Book not found.")
    creator / update coercion fails  → ValidationError (propagated as-is)
    any other exception              → DatabaseError   (per-operation message)

    Per-operation DatabaseError messages:
        list    "Failed to retrieve books."
        get     "Failed to retrieve book."
        create  "Failed to create book."
        update  "Failed to update book."
        delete  "Failed to delete book."
"""

import logging
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError as PydanticValidationError

from bookshelf.exceptions import BookshelfError, DatabaseError, NotFoundError, ValidationError
from bookshelf.models.book import Book
from bookshelf.repositories.base import BookRepository
from bookshelf.schemas.book import BookUpdate
from bookshelf.services.book_creator import BookCreator
from bookshelf.services.book_formatter import book_formatter

logger = logging.getLogger(__name__)


class BookService:
    """
    Business logic layer for book operations.

    Stateless apart from the injected repository; one instance per request.
    No locking: concurrent updates to the same book are last-write-wins at
    the store's transaction granularity.
    """

    def __init__(self, repository: BookRepository):
        self._repository = repository
        self._creator = BookCreator(repository)

    async def list_books(self) -> List[Dict[str, Any]]:
        """
        Return every book in id order, formatted for the wire.

        Raises:
            DatabaseError: The store could not be read (→ 500)
        """
        try:
            books = await self._repository.list_all()
        except Exception as e:
            logger.error("Database error listing books: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to retrieve books.",
                context={"error_type": type(e).__name__},
            )
        return book_formatter.format_books(books)

    async def get_book(self, book_id: int) -> Dict[str, Any]:
        """
        Return a single book, formatted for the wire.

        Raises:
            NotFoundError: No book with this id (→ 404)
            DatabaseError: The store could not be read (→ 500)
        """
        book = await self._find(book_id, failure_message="Failed to retrieve book.")
        return book_formatter.format_book(book)

    async def create_book(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validate and persist a new book.

        Raises:
            ValidationError: A required field is missing or malformed (→ 400)
            DatabaseError: The insert failed (→ 500)
        """
        try:
            book = await self._creator.create_book(data)
        except BookshelfError:
            raise  # Already our exception — propagate as-is
        except Exception as e:
            logger.error("Database error creating book: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create book.",
                context={"error_type": type(e).__name__},
            )
        return book_formatter.format_book(book)

    async def update_book(self, book_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial update: only title/author/publicationYear keys present
        with a non-null value are written; everything else is left untouched.

        Raises:
            NotFoundError: No book with this id (→ 404)
            ValidationError: A supplied value cannot be coerced (→ 400)
            DatabaseError: The read or the write failed (→ 500)
        """
        book = await self._find(book_id, failure_message="Failed to update book.")

        try:
            changes = BookUpdate.model_validate(dict(data)).model_dump(
                exclude_unset=True, exclude_none=True
            )
        except PydanticValidationError as e:
            invalid = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
            raise ValidationError(
                message="Invalid book data: invalid value for " + ", ".join(invalid),
                fields=invalid,
            )

        for field, value in changes.items():
            setattr(book, field, value)

        try:
            book = await self._repository.save(book)
        except Exception as e:
            logger.error("Database error updating book %s: %s", book_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update book.",
                context={"book_id": book_id, "error_type": type(e).__name__},
            )
        logger.info("Updated book %s (%s)", book_id, ", ".join(sorted(changes)) or "no changes")
        return book_formatter.format_book(book)

    async def delete_book(self, book_id: int) -> None:
        """
        Remove a book.

        Raises:
            NotFoundError: No book with this id (→ 404)
            DatabaseError: The delete failed (→ 500)
        """
        try:
            deleted = await self._repository.delete(book_id)
        except Exception as e:
            logger.error("Database error deleting book %s: %s", book_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to delete book.",
                context={"book_id": book_id, "error_type": type(e).__name__},
            )
        if not deleted:
            raise NotFoundError(resource="Book", resource_id=book_id)
        logger.info("Deleted book %s", book_id)

    async def _find(self, book_id: int, failure_message: str) -> Book:
        """Fetch a book or raise NotFoundError; wrap store failures in DatabaseError."""
        try:
            book = await self._repository.get(book_id)
        except Exception as e:
            logger.error("Database error fetching book %s: %s", book_id, str(e))
            raise DatabaseError(
                message=failure_message,
                context={"book_id": book_id, "error_type": type(e).__name__},
            )
        if book is None:
            raise NotFoundError(resource="Book", resource_id=book_id)
        return book
