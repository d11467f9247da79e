"""
Library Catalog — Application Package
======================================

What: In-memory library catalog API (books, search, borrow/return).
How:  `uvicorn library_catalog.main:app` or the `library-catalog` console script.

Architecture Note:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Catalog Business)     │  ← validation, availability rules
    ├─────────────────────────────────────┤
    │      Models & Schemas (Data)        │  ← dataclass record + Pydantic
    ├─────────────────────────────────────┤
    │          Store (In-Memory)          │  ← dict + id counter under one lock
    └─────────────────────────────────────┘

    Routes never apply business rules, and the store never validates.
"""

__version__ = "1.0.0"
