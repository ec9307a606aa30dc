"""
Bookshelf Backend — Book Route Handlers
=========================================

What:  CRUD endpoints for book records under /api/books.
How:   Extracts path/body values, delegates to BookService, returns JSON.

Status codes:
    200  list, get, update
    201  create
    204  delete (empty body)
    400  missing/malformed fields, malformed JSON, non-integer id
    404  unknown id
    500  store failure
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Response

from bookshelf.dependencies import get_book_service
from bookshelf.schemas.book import BookResponse, ErrorResponse
from bookshelf.services.book_service import BookService

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Books"])

# Request body: a JSON object; keys are checked by the service layer so the
# create endpoint can report every missing field in one message.
BookPayload = Dict[str, Any]

_NOT_FOUND = {404: {"description": "Book not found", "model": ErrorResponse}}
_SERVER_ERROR = {500: {"description": "Store failure", "model": ErrorResponse}}
_BAD_REQUEST = {400: {"description": "Invalid book data", "model": ErrorResponse}}


@router.get(
    "/books",
    response_model=List[BookResponse],
    responses={**_SERVER_ERROR},
    summary="List all books",
)
async def list_books(
    response: Response,
    service: BookService = Depends(get_book_service),
) -> List[Dict[str, Any]]:
    """
    Return every book in id order; an empty array when there are none.

    The X-Total-Count header carries the number of books returned.
    """
    books = await service.list_books()
    response.headers["X-Total-Count"] = str(len(books))
    return books


@router.post(
    "/books",
    status_code=201,
    response_model=BookResponse,
    responses={**_BAD_REQUEST, **_SERVER_ERROR},
    summary="Create a book",
    description=(
        "Creates a book from `title`, `author` and `publicationYear`. All three "
        "keys are required; the response carries the store-assigned `id`."
    ),
)
async def create_book(
    payload: BookPayload = Body(..., examples=[
        {"title": "Solid Book", "author": "Robert Martin", "publicationYear": 2023},
    ]),
    service: BookService = Depends(get_book_service),
) -> Dict[str, Any]:
    return await service.create_book(payload)


@router.get(
    "/books/{book_id}",
    response_model=BookResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Get a book by ID",
)
async def get_book(
    book_id: int,
    service: BookService = Depends(get_book_service),
) -> Dict[str, Any]:
    return await service.get_book(book_id)


@router.put(
    "/books/{book_id}",
    response_model=BookResponse,
    responses={**_BAD_REQUEST, **_NOT_FOUND, **_SERVER_ERROR},
    summary="Update a book",
    description=(
        "Partial update: only `title`, `author` and `publicationYear` keys present "
        "in the body are applied; other fields keep their current values."
    ),
)
async def update_book(
    book_id: int,
    payload: BookPayload = Body(..., examples=[{"title": "Updated Title Book"}]),
    service: BookService = Depends(get_book_service),
) -> Dict[str, Any]:
    return await service.update_book(book_id, payload)


@router.delete(
    "/books/{book_id}",
    status_code=204,
    response_class=Response,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Delete a book",
)
async def delete_book(
    book_id: int,
    service: BookService = Depends(get_book_service),
) -> Response:
    """Delete a book. 204 responses carry no body."""
    await service.delete_book(book_id)
    return Response(status_code=204)
