"""
Library Catalog — Business Error Hierarchy
===========================================

What:  Application-specific exceptions raised by the catalog service.
How:   Every exception carries an explicit `ErrorKind`, a user-safe message and
       an optional context dict. The single `LibraryError` handler registered
       in main.py looks the kind up in `HTTP_STATUS_BY_KIND`, so the boundary
       matches on the kind, not on the exception class.
Who:   Raised by BookService; translated to JSON responses in main.py.

Exception Hierarchy:
    LibraryError (base)  → ErrorKind.INTERNAL   → 500 Internal Server Error
    ├── ValidationError  → ErrorKind.VALIDATION → 400 Bad Request
    ├── NotFoundError    → ErrorKind.NOT_FOUND  → 404 Not Found
    └── ConflictError    → ErrorKind.CONFLICT   → 409 Conflict
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Category of a business failure; the value doubles as the wire error code."""

    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal_error"


HTTP_STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


class LibraryError(Exception):
    """
    Base exception for all catalog business errors.

    Attributes:
        kind:     Error category, mapped to an HTTP status at the boundary
        message:  User-facing error description (safe to return in API response)
        context:  Structured details (returned as `details` and logged)
    """

    # Why INTERNAL: a bare LibraryError names no client mistake, so it must not
    # look like one. Only the subclasses below carry a 4xx kind.
    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str = "The request could not be completed",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]


class ValidationError(LibraryError):
    """
    Raised when a required field is missing or blank.

    When:    create/update with blank title or author; search with blank author.
    HTTP:    400 Bad Request
    """

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(LibraryError):
    """
    Raised when a referenced book id has no record.

    The store signals absence with ``None``; the service converts that into
    this exception for update, delete, borrow and return.
    HTTP:    404 Not Found
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource: str = "book",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource.capitalize()} with ID {resource_id} does not exist"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(LibraryError):
    """
    Raised when an availability transition is not allowed from the current state.

    When:    borrow on a borrowed book, return on an available book.
    HTTP:    409 Conflict
    """

    kind = ErrorKind.CONFLICT

    def __init__(
        self,
        message: str = "The book is not in a state that allows this operation",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
