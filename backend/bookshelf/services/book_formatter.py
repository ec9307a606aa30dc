"""
Bookshelf Backend — Book Formatter
====================================

What:  Converts Book records into the mappings the API returns.
Why:   One place decides the wire shape ({id, title, author, publicationYear}),
       so every endpoint emits identical objects.
Who:   Called by BookService after reads and writes.
"""

from typing import Any, Dict, Iterable, List

from bookshelf.models.book import Book
from bookshelf.schemas.book import BookResponse


class BookFormatter:
    """Stateless Book → dict conversion."""

    def format_book(self, book: Book) -> Dict[str, Any]:
        """Return `{id, title, author, publicationYear}` for the book's current values."""
        return BookResponse(
            id=book.id,
            title=book.title,
            author=book.author,
            publication_year=book.publication_year,
        ).model_dump(by_alias=True)

    def format_books(self, books: Iterable[Book]) -> List[Dict[str, Any]]:
        """Format each book, preserving input order."""
        return [self.format_book(book) for book in books]


book_formatter = BookFormatter()
