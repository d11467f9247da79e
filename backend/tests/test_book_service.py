"""
Library Catalog — Book Service Unit Tests
==========================================

What:  Tests for BookService validation, existence checks and the
       availability state machine.
How:   Real BookStore underneath; a MagicMock store where we need to prove
       the store was never reached.

What we test:
    ✅ Blank title/author rejected before the store is touched
    ✅ available defaults to True on create, is kept on update when unset
    ✅ Existence is checked before validation on update
    ✅ borrow/return transitions and conflicts
    ✅ Concurrent borrows: exactly one winner
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from library_catalog.exceptions import (
    ConflictError,
    ErrorKind,
    LibraryError,
    NotFoundError,
    ValidationError,
)
from library_catalog.models.book import Book
from library_catalog.services.book_service import BookService
from library_catalog.store import BookStore


class TestCreateBook:
    """Tests for create_book."""

    def test_create_assigns_id_and_defaults_available(self, service):
        created = service.create_book(Book(title="X", author="Y"))
        assert created.id == 4
        assert created.available is True

    def test_create_keeps_explicit_availability(self, service):
        created = service.create_book(Book(title="X", author="Y", available=False))
        assert created.available is False

    def test_create_ignores_client_id(self, service):
        created = service.create_book(Book(id=1, title="X", author="Y"))
        assert created.id == 4
        assert service.get_book_by_id(1).title == "The Great Gatsby"

    def test_created_book_is_retrievable(self, service, new_book):
        created = service.create_book(new_book)
        found = service.get_book_by_id(created.id)
        assert (found.title, found.author, found.isbn, found.publication_year) == (
            "Dune",
            "Frank Herbert",
            "978-0-441-17271-9",
            1965,
        )

    @pytest.mark.parametrize(
        "title,author,field",
        [
            (None, "Y", "title"),
            ("", "Y", "title"),
            ("   ", "Y", "title"),
            ("X", None, "author"),
            ("X", "\t ", "author"),
        ],
    )
    def test_blank_fields_never_reach_store(self, title, author, field):
        store = MagicMock(spec=BookStore)
        service = BookService(store)
        with pytest.raises(ValidationError) as exc_info:
            service.create_book(Book(title=title, author=author))
        assert exc_info.value.field == field
        assert exc_info.value.kind is ErrorKind.VALIDATION
        store.save.assert_not_called()


class TestUpdateBook:
    """Tests for update_book."""

    def test_update_replaces_fields(self, service):
        updated = service.update_book(
            1,
            Book(title="Gatsby", author="Fitzgerald", isbn=None, publication_year=1926),
        )
        assert updated.id == 1
        assert updated.title == "Gatsby"
        assert updated.publication_year == 1926
        assert service.get_book_by_id(1).author == "Fitzgerald"

    def test_update_keeps_availability_when_unset(self, service):
        updated = service.update_book(3, Book(title="Nineteen Eighty-Four", author="George Orwell"))
        assert updated.available is False

    def test_update_can_set_availability(self, service):
        updated = service.update_book(3, Book(title="1984", author="George Orwell", available=True))
        assert updated.available is True

    def test_update_missing_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.update_book(99, Book(title="X", author="Y"))

    def test_update_checks_existence_before_validation(self, service):
        """An unknown id with a blank payload is reported as not found."""
        with pytest.raises(NotFoundError):
            service.update_book(99, Book(title="", author=""))

    def test_update_blank_title_raises_validation(self, service):
        with pytest.raises(ValidationError):
            service.update_book(1, Book(title=" ", author="Someone"))
        assert service.get_book_by_id(1).title == "The Great Gatsby"


class TestDeleteAndQueries:
    """Tests for delete_book, search and listings."""

    def test_delete_existing(self, service):
        assert service.delete_book(2) is True
        assert service.get_book_by_id(2) is None

    def test_delete_twice_reports_not_found(self, service):
        service.delete_book(2)
        with pytest.raises(NotFoundError) as exc_info:
            service.delete_book(2)
        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert exc_info.value.context["resource_id"] == 2

    def test_get_book_by_id_missing_is_none(self, service):
        assert service.get_book_by_id(404) is None

    def test_search_by_author(self, service):
        assert [b.author for b in service.search_books_by_author("lee")] == ["Harper Lee"]

    @pytest.mark.parametrize("author", [None, "", "   "])
    def test_search_blank_author_rejected(self, service, author):
        with pytest.raises(ValidationError, match="Author name cannot be empty"):
            service.search_books_by_author(author)

    def test_available_books(self, service):
        assert sorted(b.id for b in service.get_available_books()) == [1, 2]

    def test_get_all_books(self, service):
        assert len(service.get_all_books()) == 3
        assert service.count_books() == 3


class TestAvailabilityStateMachine:
    """borrow/return transitions."""

    def test_borrow_available_book(self, service):
        borrowed = service.borrow_book(1)
        assert borrowed.available is False
        assert service.get_book_by_id(1).available is False

    def test_borrow_twice_conflicts(self, service):
        service.borrow_book(1)
        with pytest.raises(ConflictError, match="already borrowed") as exc_info:
            service.borrow_book(1)
        assert exc_info.value.kind is ErrorKind.CONFLICT

    def test_return_borrowed_book(self, service):
        returned = service.return_book(3)
        assert returned.available is True

    def test_return_twice_conflicts(self, service):
        service.return_book(3)
        with pytest.raises(ConflictError, match="already available"):
            service.return_book(3)

    def test_borrow_then_return_restores_state(self, service):
        service.borrow_book(2)
        service.return_book(2)
        assert service.get_book_by_id(2).available is True

    def test_transitions_preserve_other_fields(self, service):
        borrowed = service.borrow_book(2)
        assert borrowed.title == "To Kill a Mockingbird"
        assert borrowed.isbn == "978-0-06-112008-4"

    @pytest.mark.parametrize("action", ["borrow_book", "return_book"])
    def test_missing_book_not_found(self, service, action):
        with pytest.raises(NotFoundError):
            getattr(service, action)(99)


class TestConcurrency:
    """Check-then-act sequences run under one lock acquisition."""

    def test_concurrent_borrows_have_one_winner(self, service):
        workers = 16
        barrier = threading.Barrier(workers)

        def attempt():
            barrier.wait()
            try:
                service.borrow_book(1)
                return "ok"
            except ConflictError:
                return "conflict"

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda _: attempt(), range(workers)))

        assert results.count("ok") == 1
        assert results.count("conflict") == workers - 1
        assert service.get_book_by_id(1).available is False

    def test_concurrent_creates_get_unique_ids(self, service):
        workers = 32
        with ThreadPoolExecutor(max_workers=8) as pool:
            created = list(
                pool.map(
                    lambda i: service.create_book(Book(title=f"T{i}", author="A")),
                    range(workers),
                )
            )
        ids = [book.id for book in created]
        assert len(set(ids)) == workers
        assert sorted(ids) == list(range(4, 4 + workers))


class TestErrorKinds:
    """Each error class maps to one kind and one HTTP status."""

    @pytest.mark.parametrize(
        "error,kind,status",
        [
            (LibraryError(), ErrorKind.INTERNAL, 500),
            (ValidationError(field="title"), ErrorKind.VALIDATION, 400),
            (NotFoundError(resource_id=7), ErrorKind.NOT_FOUND, 404),
            (ConflictError(), ErrorKind.CONFLICT, 409),
        ],
    )
    def test_kind_and_status(self, error, kind, status):
        assert error.kind is kind
        assert error.status_code == status

    def test_bare_error_is_not_a_client_error(self):
        """The base class must not surface as a 4xx."""
        assert LibraryError("boom").status_code >= 500
