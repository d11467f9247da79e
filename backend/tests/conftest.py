"""
Library Catalog — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.

Fixtures (all function-scoped, fresh for each test):
    ├── store:          Seeded BookStore (ids 1..3, next id 4)
    ├── empty_store:    BookStore without seed data
    ├── service:        BookService over `store`
    ├── new_book:       Unsaved Book payload
    ├── test_client:    HTTPX AsyncClient over a freshly created app
    └── legacy_client:  Same, with legacy_update_error_mapping enabled
"""

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Applied before any library_catalog import reads Settings
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SEED_CATALOG"] = "true"
os.environ["LEGACY_UPDATE_ERROR_MAPPING"] = "false"

from library_catalog.config import Settings  # noqa: E402
from library_catalog.main import create_app  # noqa: E402
from library_catalog.models.book import Book  # noqa: E402
from library_catalog.services.book_service import BookService  # noqa: E402
from library_catalog.store import BookStore  # noqa: E402


@pytest.fixture
def store():
    return BookStore(seed=True)


@pytest.fixture
def empty_store():
    return BookStore(seed=False)


@pytest.fixture
def service(store):
    return BookService(store)


@pytest.fixture
def new_book():
    """A valid book that has not been saved yet."""
    return Book(
        title="Dune",
        author="Frank Herbert",
        isbn="978-0-441-17271-9",
        publication_year=1965,
    )


def _client_for(settings: Settings) -> AsyncClient:
    transport = ASGITransport(app=create_app(settings))
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient bound to a brand-new app (and so a brand-new store).

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/books")
            assert response.status_code == 200
    """
    async with _client_for(Settings()) as client:
        yield client


@pytest_asyncio.fixture
async def legacy_client():
    """Client for an app that reports update validation failures as 404."""
    async with _client_for(Settings(legacy_update_error_mapping=True)) as client:
        yield client
