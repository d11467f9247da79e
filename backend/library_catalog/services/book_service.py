"""
Library Catalog — Book Service (Business Rules)
================================================

What:  Validation, existence checks and availability transitions for books.
How:   Every method goes through BookStore. Failures raise the LibraryError
       subclasses from exceptions.py; main.py maps their `kind` to a status.
Who:   Called by the /api/books route handlers.

Availability State Machine:

    ┌───────────┐   borrow    ┌──────────┐
    │ Available │ ──────────▶ │ Borrowed │
    │           │ ◀────────── │          │
    └───────────┘   return    └──────────┘

    borrow while Borrowed  → ConflictError ("Book is already borrowed")
    return while Available → ConflictError ("Book is already available")

    No self-loops and no terminal state; the machine lives until deletion.

Atomicity:
    Update, delete, borrow and return check the current record and then
    write it. Both steps run inside one `store.locked()` block so two
    concurrent borrows cannot both observe Available.
"""

import logging
from typing import List, Optional

from library_catalog.exceptions import ConflictError, NotFoundError, ValidationError
from library_catalog.models.book import Book
from library_catalog.store import BookStore

logger = logging.getLogger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class BookService:
    """
    Business logic layer for catalog operations.

    Args:
        store: The BookStore holding the catalog. BookService is the only
               component that writes to it.
    """

    def __init__(self, store: BookStore):
        self.store = store

    # ── Queries ───────────────────────────────────────────────────────────

    def get_all_books(self) -> List[Book]:
        return self.store.find_all()

    def get_book_by_id(self, book_id: int) -> Optional[Book]:
        """Return the book, or None when absent (not an error at this layer)."""
        return self.store.find_by_id(book_id)

    def get_available_books(self) -> List[Book]:
        return self.store.find_available_books()

    def count_books(self) -> int:
        return self.store.count()

    def search_books_by_author(self, author: Optional[str]) -> List[Book]:
        """
        Find books whose author contains `author`, ignoring case.

        Raises:
            ValidationError: `author` is missing or blank
        """
        if _is_blank(author):
            logger.warning("Rejected author search with blank query")
            raise ValidationError(message="Author name cannot be empty", field="author")
        return self.store.find_by_author(author)

    # ── Mutations ─────────────────────────────────────────────────────────

    def create_book(self, book: Book) -> Book:
        """
        Validate and persist a new book.

        `available` defaults to True when unset. A client-supplied id is
        discarded; the store assigns the next identifier.

        Raises:
            ValidationError: title or author missing or blank
        """
        self._validate_fields(book)
        new_book = book.copy(
            id=None,
            available=True if book.available is None else book.available,
        )
        created = self.store.save(new_book)
        logger.info("Created book %d: '%s' by %s", created.id, created.title, created.author)
        return created

    def update_book(self, book_id: int, book: Book) -> Book:
        """
        Replace an existing book's fields.

        Existence is checked before the payload is validated. When the payload
        leaves `available` unset, the stored availability is kept.

        Raises:
            NotFoundError:   no book with `book_id`
            ValidationError: title or author missing or blank
        """
        with self.store.locked():
            current = self.store.find_by_id(book_id)
            if current is None:
                logger.warning("Update rejected: book %d does not exist", book_id)
                raise NotFoundError(resource="book", resource_id=book_id)

            self._validate_fields(book)

            replacement = book.copy(
                id=book_id,
                available=current.available if book.available is None else book.available,
            )
            updated = self.store.update(book_id, replacement)

        logger.info("Updated book %d", book_id)
        return updated

    def delete_book(self, book_id: int) -> bool:
        """
        Remove a book from the catalog.

        Raises:
            NotFoundError: no book with `book_id`
        """
        with self.store.locked():
            if not self.store.exists_by_id(book_id):
                logger.warning("Delete rejected: book %d does not exist", book_id)
                raise NotFoundError(resource="book", resource_id=book_id)
            deleted = self.store.delete_by_id(book_id)

        logger.info("Deleted book %d", book_id)
        return deleted

    def borrow_book(self, book_id: int) -> Book:
        """
        Move a book from Available to Borrowed.

        Raises:
            NotFoundError: no book with `book_id`
            ConflictError: the book is already borrowed
        """
        return self._transition(book_id, borrow=True)

    def return_book(self, book_id: int) -> Book:
        """
        Move a book from Borrowed to Available.

        Raises:
            NotFoundError: no book with `book_id`
            ConflictError: the book is already available
        """
        return self._transition(book_id, borrow=False)

    # ── Internal Helpers ──────────────────────────────────────────────────

    def _transition(self, book_id: int, borrow: bool) -> Book:
        action = "borrow" if borrow else "return"
        with self.store.locked():
            book = self.store.find_by_id(book_id)
            if book is None:
                logger.warning("%s rejected: book %d does not exist", action.capitalize(), book_id)
                raise NotFoundError(resource="book", resource_id=book_id)

            if borrow and not book.available:
                logger.warning("Borrow rejected: book %d is already borrowed", book_id)
                raise ConflictError(
                    message="Book is already borrowed",
                    context={"book_id": book_id, "available": False},
                )
            if not borrow and book.available:
                logger.warning("Return rejected: book %d is already available", book_id)
                raise ConflictError(
                    message="Book is already available",
                    context={"book_id": book_id, "available": True},
                )

            book.available = not borrow
            updated = self.store.update(book_id, book)

        logger.info("Book %d %s", book_id, "borrowed" if borrow else "returned")
        return updated

    @staticmethod
    def _validate_fields(book: Book) -> None:
        if _is_blank(book.title):
            raise ValidationError(message="Book title cannot be empty", field="title")
        if _is_blank(book.author):
            raise ValidationError(message="Book author cannot be empty", field="author")
