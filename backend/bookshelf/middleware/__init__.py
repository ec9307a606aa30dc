# Middleware package init
"""
Bookshelf Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and error bodies
    2. Logging: Log method, path, status and duration with that ID
    3. GZip / CORS: Provided by FastAPI

    Responses travel the chain in reverse, so the access log sees the final
    status code and the X-Request-ID header is set on every response.
"""
