"""
Request ID middleware.

Binds the incoming X-Request-ID (or a fresh one) to the logging context
for the lifetime of the request and echoes it on the response.
"""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from scholarfi.infrastructure.monitoring import (
    bind_request_id,
    get_request_id,
    reset_request_id,
)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Propagate a per-request correlation id."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        token = bind_request_id(request.headers.get(REQUEST_ID_HEADER))
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = get_request_id()
            return response
        finally:
            reset_request_id(token)
