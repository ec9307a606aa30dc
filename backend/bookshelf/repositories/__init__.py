# Repositories package init
"""
Bookshelf Backend — Repository Layer
======================================

What:  Explicit persistence interface for Book records.
Why:   Services depend on four operations (get, list_all, save, delete)
       instead of on the ORM's implicit identity map and auto-flush.

Repository Inventory:
    - BookRepository (abstract): The contract services are written against
    - SqlAlchemyBookRepository: Async SQLAlchemy implementation (production)
    - InMemoryBookRepository: Dict-backed implementation (tests, demos)
"""

from bookshelf.repositories.base import BookRepository
from bookshelf.repositories.memory import InMemoryBookRepository
from bookshelf.repositories.sql import SqlAlchemyBookRepository

__all__ = ["BookRepository", "InMemoryBookRepository", "SqlAlchemyBookRepository"]
