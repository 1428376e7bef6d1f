"""
CityInfo API: Request ID Middleware
===================================

What:  Assigns an ID to each incoming request and returns it in X-Request-ID.
How:   Reuses the client's X-Request-ID when it is a usable token, otherwise
       generates a short UUID; stores it in a ContextVar and in request.state.
Who:   Applied to every request via Starlette middleware. The exception
       handlers, the request logger and the CRITICAL log of the
       points-of-interest listing read the ContextVar.

A client-supplied ID is echoed into log lines and error bodies, so it is
accepted only when it is at most 64 characters of letters, digits, "-", "_"
or ".". Anything else is replaced by a generated ID.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def resolve_request_id(header_value: str | None) -> str:
    """The client's ID when it is a usable token, else the first 8 characters of a UUID4."""
    if header_value and _CLIENT_ID_PATTERN.match(header_value):
        return header_value
    return str(uuid.uuid4())[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns a unique ID to each request for tracing.

    Behavior:
        1. Resolve the ID from X-Request-ID (see resolve_request_id)
        2. Store in ContextVar (loggers, exception handlers) and request.state (handlers)
        3. Echo it back in the X-Request-ID response header
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get("X-Request-ID"))

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid

        return response
