"""
Library Catalog — Pydantic Request/Response Schemas
====================================================

What:  The JSON contract of the /api/books endpoints.
How:   FastAPI validates request bodies against BookRequest and serializes
       BookResponse by alias, so the wire field is `publicationYear` while
       Python code uses `publication_year`.

Book JSON shape:
    {"id": 4, "title": "...", "author": "...", "isbn": "...",
     "publicationYear": 1960, "available": true}

`title` and `author` are optional in BookRequest on purpose: a missing or
blank value is a business validation error (400) raised by BookService, not
a schema error (422).
"""

from typing import Optional

from pydantic import BaseModel, Field

from library_catalog.models.book import Book


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class BookRequest(BaseModel):
    """
    Body of POST /api/books and PUT /api/books/{id}.

    `id` is accepted for compatibility but ignored: POST assigns a new id and
    PUT uses the path id.
    """
    id: Optional[int] = Field(default=None, description="Ignored; ids are assigned by the server")
    title: Optional[str] = Field(default=None, description="Book title (required, non-blank)")
    author: Optional[str] = Field(default=None, description="Author name (required, non-blank)")
    isbn: Optional[str] = Field(default=None, description="ISBN, format not validated")
    publication_year: Optional[int] = Field(
        default=None,
        alias="publicationYear",
        description="Year of publication",
    )
    available: Optional[bool] = Field(
        default=None,
        description="Availability; defaults to true on create, unchanged on update",
    )

    model_config = {"populate_by_name": True}

    def to_domain(self) -> Book:
        return Book(
            id=self.id,
            title=self.title,
            author=self.author,
            isbn=self.isbn,
            publication_year=self.publication_year,
            available=self.available,
        )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class BookResponse(BaseModel):
    """A stored book as returned by every /api/books endpoint."""
    id: int = Field(description="Unique book identifier")
    title: str = Field(description="Book title")
    author: str = Field(description="Author name")
    isbn: Optional[str] = Field(default=None, description="ISBN")
    publication_year: Optional[int] = Field(
        default=None,
        alias="publicationYear",
        description="Year of publication",
    )
    available: bool = Field(description="True when the book can be borrowed")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_domain(cls, book: Book) -> "BookResponse":
        return cls(
            id=book.id,
            title=book.title,
            author=book.author,
            isbn=book.isbn,
            publication_year=book.publication_year,
            available=book.available,
        )


class ErrorResponse(BaseModel):
    """
    Error body returned for every 4xx/5xx response.

    Example:
        {
            "error": "conflict",
            "message": "Book is already borrowed",
            "details": {"book_id": 3, "available": false},
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Liveness information returned by GET /health."""
    status: str = Field(description="Overall service status")
    version: str = Field(description="Application version")
    book_count: int = Field(description="Number of books currently in the catalog")
    uptime_seconds: float = Field(description="Seconds since service started")
