"""
Library Catalog — In-Memory Book Store
=======================================

What:  Keyed storage of Book records plus identifier generation.
How:   A dict mapping id → Book, guarded by one re-entrant lock. Every public
       method takes the lock, and `locked()` lets the service hold it across a
       read-then-write sequence (borrow/return, update, delete).
Who:   Owned by BookService; one instance per application (see main.create_app).

Copy Semantics:
    Stored records never leave this module. Reads return copies, writes store
    copies, so mutating a returned Book (or the list holding it) cannot change
    the store.

Identifier Generation:
    A single counter per store, starting above the seed ids (4 when seeded,
    1 otherwise). Ids are never reused, even after deletion. Saving a record
    with an explicit id at or above the counter moves the counter past it.

The store applies no business rules: it does not validate fields, default
`available`, or raise for missing ids. Absence is signalled with None/False.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from library_catalog.models.book import Book

logger = logging.getLogger(__name__)


SEED_BOOKS: List[Book] = [
    Book(
        id=1,
        title="The Great Gatsby",
        author="F. Scott Fitzgerald",
        isbn="978-0-7432-7356-5",
        publication_year=1925,
        available=True,
    ),
    Book(
        id=2,
        title="To Kill a Mockingbird",
        author="Harper Lee",
        isbn="978-0-06-112008-4",
        publication_year=1960,
        available=True,
    ),
    Book(
        id=3,
        title="1984",
        author="George Orwell",
        isbn="978-0-452-28423-4",
        publication_year=1949,
        available=False,
    ),
]


class BookStore:
    """
    Thread-safe in-memory collection of books.

    Args:
        seed: Load SEED_BOOKS (ids 1..3) on construction.
    """

    def __init__(self, seed: bool = True):
        self._books: Dict[int, Book] = {}
        self._next_id = 1
        # Why RLock: BookService holds the lock through `locked()` and then calls
        # find_by_id/update, which take it again on the same thread.
        self._lock = threading.RLock()
        if seed:
            for book in SEED_BOOKS:
                self.save(book)
            logger.debug("Seeded store with %d books", len(SEED_BOOKS))

    @contextmanager
    def locked(self) -> Iterator["BookStore"]:
        """Hold the store lock for a multi-step operation."""
        with self._lock:
            yield self

    # ── Reads ─────────────────────────────────────────────────────────────

    def find_all(self) -> List[Book]:
        with self._lock:
            return [book.copy() for book in self._books.values()]

    def find_by_id(self, book_id: int) -> Optional[Book]:
        with self._lock:
            book = self._books.get(book_id)
            return book.copy() if book is not None else None

    def exists_by_id(self, book_id: int) -> bool:
        with self._lock:
            return book_id in self._books

    def find_by_author(self, author: str) -> List[Book]:
        """Case-insensitive substring match against each book's author."""
        needle = author.lower()
        with self._lock:
            return [
                book.copy()
                for book in self._books.values()
                if needle in (book.author or "").lower()
            ]

    def find_available_books(self) -> List[Book]:
        with self._lock:
            return [book.copy() for book in self._books.values() if book.available is True]

    def count(self) -> int:
        with self._lock:
            return len(self._books)

    # ── Writes ────────────────────────────────────────────────────────────

    def save(self, book: Book) -> Book:
        """
        Insert or overwrite a book.

        A book without an id gets the next identifier from the counter.
        A book with an id overwrites any existing entry with that id.
        The caller's object is left untouched; the stored copy is returned.
        """
        with self._lock:
            stored = book.copy()
            if stored.id is None:
                stored.id = self._next_id
                self._next_id += 1
            elif stored.id >= self._next_id:
                self._next_id = stored.id + 1
            self._books[stored.id] = stored
            return stored.copy()

    def update(self, book_id: int, book: Book) -> Optional[Book]:
        """Overwrite an existing entry, forcing its id; None if the id is unknown."""
        with self._lock:
            if book_id not in self._books:
                return None
            stored = book.copy(id=book_id)
            self._books[book_id] = stored
            return stored.copy()

    def delete_by_id(self, book_id: int) -> bool:
        with self._lock:
            if book_id not in self._books:
                return False
            del self._books[book_id]
            return True
