# Routes package init
"""
Bookshelf Backend — API Routes Package
========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - books.py:   GET    /api/books          (list all books)
                  POST   /api/books          (create a book)
                  GET    /api/books/{id}     (get one book)
                  PUT    /api/books/{id}     (partial update)
                  DELETE /api/books/{id}     (delete)
    - health.py:  GET    /health             (service health check)

Design Principle:
    Routes are THIN: they extract path/body values, call BookService, and
    set the status code. Errors are raised as typed exceptions and turned
    into responses by the handlers registered in main.py.
"""
