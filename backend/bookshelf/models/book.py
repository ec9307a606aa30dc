"""
Bookshelf Backend — Book SQLAlchemy Model
===========================================

What:  ORM model representing the `book` table.
Why:   Maps Python objects to database rows for type-safe database operations.
How:   Inherits from SQLAlchemy's DeclarativeBase; Alembic reads this for migrations.
Who:   Used by the repositories and by Alembic for schema management.

Table Design:
    - id: auto-incrementing integer; on SQLite the AUTOINCREMENT keyword is
      emitted so ids of deleted rows are never handed out again
    - title / author: VARCHAR(255) NOT NULL
    - publication_year: INTEGER NOT NULL, no range check (negative and future
      years are accepted)
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from bookshelf.database import Base


class Book(Base):
    """
    A book record.

    Lifecycle:
        1. Created by BookCreator; the store assigns `id` on first save
        2. Updated in place by partial updates (any subset of the three fields)
        3. Deleted by id; no soft delete, no history
    """

    __tablename__ = "book"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    author: Mapped[str] = mapped_column(String(255), nullable=False)

    publication_year: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self) -> str:
        """Developer-friendly string representation for debugging."""
        return (
            f"<Book(id={self.id}, title='{self.title}', "
            f"publication_year={self.publication_year})>"
        )
