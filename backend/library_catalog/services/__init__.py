"""
Library Catalog — Services Layer
=================================

What:  Business logic between the routes (HTTP) and the store (memory).

Service Inventory:
    - BookService: validation, existence checks, borrow/return transitions
"""

from library_catalog.services.book_service import BookService

__all__ = ["BookService"]
