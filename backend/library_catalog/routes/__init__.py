"""
Library Catalog — API Routes Package
=====================================

Route Inventory:
    - books.py:   /api/books CRUD, search, availability, borrow/return
    - health.py:  GET /health

Routes stay thin: they parse the request, call BookService and shape the
response. Business errors propagate to the handlers registered in main.py.
"""
