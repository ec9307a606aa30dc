"""
Bookshelf Backend — Book Creator
==================================

What:  Validates a create request and persists the new book.
Why:   Create is the only operation with presence rules; keeping them here
       leaves BookService free of field-level checks.
How:   1. Presence check of title, author, publicationYear (null = absent)
       2. Type coercion through BookCreate ("2023" → 2023)
       3. Build a Book and hand it to the repository, which assigns the id
Who:   Called by BookService.create_book().

Presence semantics:
    A key counts as present when it exists with a non-null value. An empty
    string or 0 is present; only the key's absence or an explicit null is
    rejected.
"""

import logging
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from bookshelf.exceptions import ValidationError
from bookshelf.models.book import Book
from bookshelf.repositories.base import BookRepository
from bookshelf.schemas.book import BookCreate

logger = logging.getLogger(__name__)

# (request key, message) in reporting order
REQUIRED_FIELDS = (
    ("title", "Title is required"),
    ("author", "Author is required"),
    ("publicationYear", "Publication year is required"),
)


class BookCreator:
    """Creates books through the given repository."""

    def __init__(self, repository: BookRepository):
        self._repository = repository

    async def create_book(self, data: Mapping[str, Any]) -> Book:
        """
        Validate `data` and persist a new Book.

        Args:
            data: Request mapping with keys title, author, publicationYear.

        Returns:
            The persisted Book with its store-assigned id.

        Raises:
            ValidationError: A required key is missing, or a value cannot be
                coerced to its column type. Nothing is written in either case.
        """
        missing = [key for key, _ in REQUIRED_FIELDS if data.get(key) is None]
        if missing:
            errors = [message for key, message in REQUIRED_FIELDS if key in missing]
            raise ValidationError(
                message="Invalid book data: " + ", ".join(errors),
                fields=missing,
            )

        try:
            fields = BookCreate.model_validate(
                {key: data[key] for key, _ in REQUIRED_FIELDS}
            )
        except PydanticValidationError as e:
            invalid = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
            raise ValidationError(
                message="Invalid book data: invalid value for " + ", ".join(invalid),
                fields=invalid,
            )

        book = Book(
            title=fields.title,
            author=fields.author,
            publication_year=fields.publication_year,
        )
        book = await self._repository.save(book)
        logger.info("Created book %s", book.id)
        return book
