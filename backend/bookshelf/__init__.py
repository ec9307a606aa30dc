"""
Bookshelf Backend — Application Package Initializer
====================================================

What: Marks the `bookshelf` directory as a Python package.
Why:  Enables module imports like `from bookshelf.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is a small layered CRUD service:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Creator, Formatter,     │  ← Validation, orchestration
    │             BookService)            │
    ├─────────────────────────────────────┤
    │     Repositories (BookRepository)   │  ← Explicit persistence interface
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch the ORM session directly; they receive a
    BookService wired to whichever repository the dependency layer
    provides (SQL in production, in-memory in tests).
"""

__version__ = "1.0.0"
