"""
Library Catalog — Book Route Handlers
======================================

What:  The /api/books HTTP surface.
How:   Converts request bodies to Book records, delegates to BookService and
       wraps results in BookResponse. LibraryError subclasses raised by the
       service are turned into JSON error bodies by the handler in main.py.

Endpoints:
    GET    /api/books                 → 200 list (X-Total-Count header)
    GET    /api/books/search?author=  → 200 list | 400
    GET    /api/books/available       → 200 list
    GET    /api/books/{id}            → 200 book | 404
    POST   /api/books                 → 201 book | 400
    PUT    /api/books/{id}            → 200 book | 404 | 400
    DELETE /api/books/{id}            → 204 | 404
    PUT    /api/books/{id}/borrow     → 200 book | 404 | 409
    PUT    /api/books/{id}/return     → 200 book | 404 | 409

The literal paths (/search, /available) are declared before /{book_id}.

Why plain `def` handlers: BookService only takes a threading lock and never
awaits. FastAPI runs sync handlers in its threadpool, so a request blocked on
the store lock does not stall the event loop.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from library_catalog.config import Settings
from library_catalog.dependencies import get_book_service, get_settings
from library_catalog.exceptions import NotFoundError, ValidationError
from library_catalog.schemas.book import BookRequest, BookResponse, ErrorResponse
from library_catalog.services.book_service import BookService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/books", tags=["Books"])

NOT_FOUND = {404: {"description": "Book not found", "model": ErrorResponse}}
BAD_REQUEST = {400: {"description": "Missing or blank required field", "model": ErrorResponse}}
CONFLICT = {409: {"description": "Invalid availability transition", "model": ErrorResponse}}


def _to_responses(books) -> List[BookResponse]:
    return [BookResponse.from_domain(book) for book in books]


@router.get(
    "",
    response_model=List[BookResponse],
    summary="List all books",
)
def list_books(
    response: Response,
    service: BookService = Depends(get_book_service),
) -> List[BookResponse]:
    books = service.get_all_books()
    response.headers["X-Total-Count"] = str(len(books))
    return _to_responses(books)


@router.get(
    "/search",
    response_model=List[BookResponse],
    responses=BAD_REQUEST,
    summary="Search books by author",
    description="Case-insensitive substring match against the author name.",
)
def search_books(
    # Why optional: a missing author must reach BookService and become the
    # business 400, not FastAPI's 422 for a missing required query param.
    author: Optional[str] = Query(default=None, description="Part of the author's name"),
    service: BookService = Depends(get_book_service),
) -> List[BookResponse]:
    return _to_responses(service.search_books_by_author(author))


@router.get(
    "/available",
    response_model=List[BookResponse],
    summary="List books that can be borrowed",
)
def list_available_books(
    service: BookService = Depends(get_book_service),
) -> List[BookResponse]:
    return _to_responses(service.get_available_books())


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    responses=NOT_FOUND,
    summary="Get a single book by ID",
)
def get_book(
    book_id: int,
    service: BookService = Depends(get_book_service),
) -> BookResponse:
    book = service.get_book_by_id(book_id)
    if book is None:
        raise NotFoundError(resource="book", resource_id=book_id)
    return BookResponse.from_domain(book)


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST,
    summary="Add a book to the catalog",
)
def create_book(
    payload: BookRequest,
    service: BookService = Depends(get_book_service),
) -> BookResponse:
    return BookResponse.from_domain(service.create_book(payload.to_domain()))


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    responses={**NOT_FOUND, **BAD_REQUEST},
    summary="Replace a book's fields",
)
def update_book(
    book_id: int,
    payload: BookRequest,
    service: BookService = Depends(get_book_service),
    settings: Settings = Depends(get_settings),
) -> BookResponse:
    try:
        book = service.update_book(book_id, payload.to_domain())
    except ValidationError as exc:
        if not settings.legacy_update_error_mapping:
            raise
        logger.info(
            "Reporting update validation failure for book %d as 404 (legacy mapping): %s",
            book_id,
            exc.message,
        )
        raise NotFoundError(
            resource="book",
            resource_id=book_id,
            context={"reason": exc.message},
        ) from exc
    return BookResponse.from_domain(book)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND,
    summary="Remove a book from the catalog",
)
def delete_book(
    book_id: int,
    service: BookService = Depends(get_book_service),
) -> Response:
    service.delete_book(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/{book_id}/borrow",
    response_model=BookResponse,
    responses={**NOT_FOUND, **CONFLICT},
    summary="Borrow an available book",
)
def borrow_book(
    book_id: int,
    service: BookService = Depends(get_book_service),
) -> BookResponse:
    return BookResponse.from_domain(service.borrow_book(book_id))


@router.put(
    "/{book_id}/return",
    response_model=BookResponse,
    responses={**NOT_FOUND, **CONFLICT},
    summary="Return a borrowed book",
)
def return_book(
    book_id: int,
    service: BookService = Depends(get_book_service),
) -> BookResponse:
    return BookResponse.from_domain(service.return_book(book_id))
