"""
Library Catalog — FastAPI Dependencies
=======================================

What:  Resolves per-application objects for route handlers.
How:   create_app() puts the settings and the BookService on `app.state`;
       these functions read them back through `Depends(...)`. Each app
       instance (and so each test client) therefore has its own store.
"""

from fastapi import Request

from library_catalog.config import Settings
from library_catalog.services.book_service import BookService


def get_book_service(request: Request) -> BookService:
    return request.app.state.book_service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
