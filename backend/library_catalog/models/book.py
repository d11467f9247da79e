"""
Library Catalog — Book Domain Record
=====================================

What:  The single catalog entity, held by the in-memory store.
How:   A plain dataclass. The store copies records on the way in and out, so
       a Book handed to a caller is never the stored instance.
Who:   Created from request schemas by the routes, validated by BookService,
       kept by BookStore.

Lifecycle:
    1. Built without an id from a POST body
    2. Assigned an id by BookStore.save (ids are never reused)
    3. Replaced wholesale by PUT, or has `available` flipped by borrow/return
    4. Removed by DELETE (no soft-delete)
"""

import dataclasses
from dataclasses import dataclass
from typing import Optional


@dataclass
class Book:
    """
    A catalog record.

    `title` and `author` are optional here because incoming payloads may omit
    them; BookService rejects such payloads before they reach the store.
    `available` is None only on payloads that did not set it.
    """

    title: Optional[str] = None
    author: Optional[str] = None
    isbn: Optional[str] = None
    publication_year: Optional[int] = None
    available: Optional[bool] = None
    id: Optional[int] = None

    def copy(self, **changes) -> "Book":
        """Return a detached copy, optionally with some fields replaced."""
        return dataclasses.replace(self, **changes)

    def __repr__(self) -> str:
        return (
            f"<Book(id={self.id}, title='{self.title}', "
            f"available={self.available})>"
        )
