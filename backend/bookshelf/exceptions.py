"""
Bookshelf Backend — Custom Exception Hierarchy
================================================

What:  Defines application-specific exceptions for the failure kinds a book
       operation can end in.
Why:   Each kind maps to its own HTTP status at the application edge, instead
       of every failure surfacing as a generic server error.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and repositories; caught by global handlers.

Exception Hierarchy:
    BookshelfError (base)        → 500 Internal Server Error
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    └── DatabaseError            → 500 Internal Server Error (store unavailable)

    With settings.legacy_error_status enabled, ValidationError and
    NotFoundError are reported as 500 as well (bodies are unchanged).
"""

from typing import Any, Dict, List, Optional


class BookshelfError(Exception):
    """
    Base exception for all Bookshelf application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
        code:     Machine-readable error code included in the response body
    """

    code = "server_error"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BookshelfError):
    """
    Raised when client input fails validation.

    When:    Missing required fields on create, values that cannot be coerced
             to their column types, malformed request bodies.
    HTTP:    400 Bad Request

    Unlike the other errors, the context of a ValidationError is returned
    to the client as `details`, since it names the offending fields.

    Example response:
        {
            "error": "Invalid book data: Title is required, Author is required",
            "code": "validation_error",
            "details": {"fields": ["title", "author"]},
            "request_id": "a1b2c3d4"
        }
    """

    code = "validation_error"
    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        fields: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = fields
        super().__init__(message=message, context=ctx)
        self.fields = fields or []


class NotFoundError(BookshelfError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /api/books/{id} with an id that has no row.
    HTTP:    404 Not Found

    Repositories return None (or False) for missing rows; the service layer
    converts that into this exception so routes stay free of branching.
    """

    code = "not_found"
    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found."
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class DatabaseError(BookshelfError):
    """
    Raised when the record store fails unexpectedly.

    When:    Connection lost mid-query, constraint violation, lock timeout, etc.
    HTTP:    500 Internal Server Error

    The message is a fixed per-operation sentence ("Failed to create book.").
    The original exception type goes into context and is logged server-side
    only; SQL text and driver messages never reach the client.
    """

    code = "storage_error"
    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
