"""
Bookshelf Backend — Pydantic Request/Response Schemas
======================================================

What:  Pydantic models defining the API contract.
Why:   Type coercion of request values, consistent serialization, and
       OpenAPI doc generation.
How:   The formatter builds BookResponse objects; the creator and the update
       path coerce raw request mappings through BookCreate / BookUpdate.

Wire naming:
    The database column is `publication_year`; the JSON key is
    `publicationYear`. Models accept either name on input and always emit
    `publicationYear` on output.
"""

from typing import Annotated, Any, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, Field


_PUBLICATION_YEAR_ALIASES = AliasChoices("publicationYear", "publication_year")

# Column limits: VARCHAR(255) and a signed 32-bit INTEGER
TEXT_MAX_LENGTH = 255
INT_COLUMN_MIN = -(2 ** 31)
INT_COLUMN_MAX = 2 ** 31 - 1


def _reject_bool(value: Any) -> Any:
    """JSON true/false would otherwise be coerced to 1/0."""
    if isinstance(value, bool):
        raise ValueError("a boolean is not a publication year")
    return value


PublicationYear = Annotated[
    int,
    BeforeValidator(_reject_bool),
    Field(ge=INT_COLUMN_MIN, le=INT_COLUMN_MAX),
]


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class BookResponse(BaseModel):
    """
    What:  Wire representation of a book.
    Who:   Returned by every /api/books endpoint that yields a book.
    """
    id: int = Field(description="Store-assigned book identifier")
    title: str = Field(description="Book title")
    author: str = Field(description="Book author")
    publication_year: int = Field(
        validation_alias=_PUBLICATION_YEAR_ALIASES,
        serialization_alias="publicationYear",
        description="Year of publication",
    )

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Request Models — Coercion of client-supplied values
# ══════════════════════════════════════════════════════════════════════════


class BookCreate(BaseModel):
    """
    What:  Values for a new book, after the creator's presence check.
    Why:   `publicationYear` is "integer-like" on the wire ("2023" is
           accepted); this model turns it into an int for the INTEGER column.
           Values the columns cannot hold are rejected here, not by the store.
    """
    title: str = Field(max_length=TEXT_MAX_LENGTH)
    author: str = Field(max_length=TEXT_MAX_LENGTH)
    publication_year: PublicationYear = Field(validation_alias=_PUBLICATION_YEAR_ALIASES)


class BookUpdate(BaseModel):
    """
    What:  Partial update of a book.
    How:   Only keys present (and non-null) in the request are applied;
           callers use model_dump(exclude_unset=True, exclude_none=True).
    Note:  No presence rules here; an empty title is a valid update.
    """
    title: Optional[str] = Field(default=None, max_length=TEXT_MAX_LENGTH)
    author: Optional[str] = Field(default=None, max_length=TEXT_MAX_LENGTH)
    publication_year: Optional[PublicationYear] = Field(
        default=None,
        validation_alias=_PUBLICATION_YEAR_ALIASES,
    )


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Error body returned by every failing endpoint.

    Fields:
        error: Human-readable description (the field older clients read)
        code: Machine-readable error code (validation_error, not_found, ...)
        details: Validation context, e.g. which fields were missing
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {"error": "Book not found.", "code": "not_found", "request_id": "1f0c9a2e"}
    """
    error: str = Field(description="Human-readable error description")
    code: str = Field(description="Machine-readable error code")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for monitoring and load balancer checks.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
