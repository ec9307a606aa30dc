"""
Bookshelf Backend — Request ID Middleware
===========================================

What:  Assigns a short correlation ID to each request and returns it in X-Request-ID.
Why:   Every log line and error body from one request carries the same ID.
How:   Reuses the client's X-Request-ID when sent, otherwise generates one;
       stores it in a ContextVar and in request.state.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local storage for the current request ID; read by the access
# logger and the exception handlers.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a unique ID to each request for tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 hex chars are enough to correlate lines within one service's logs
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid

        return response
