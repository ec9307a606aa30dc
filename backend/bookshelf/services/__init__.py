# Services package init
"""
Bookshelf Backend — Services Layer
====================================

What:  Business logic layer sitting between routes (HTTP) and repositories.
Why:   Separation of concerns — routes handle HTTP, services handle rules.
How:   Services receive a BookRepository and return Book objects or
       wire-format mappings; they raise the typed errors in
       bookshelf.exceptions.

Service Inventory:
    - book_formatter: Book → {id, title, author, publicationYear}
    - BookCreator: Required-field validation and construction of new books
    - BookService: List/get/create/update/delete orchestration used by routes
"""
