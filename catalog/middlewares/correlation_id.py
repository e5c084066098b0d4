"""
Middleware for request correlation ID tracking.

The correlation ID ties together all log records written while handling
one request, including the search index updates it triggers.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

CORRELATION_ID_HEADER = "X-Correlation-ID"

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Reads the correlation ID from the X-Correlation-ID header or generates
    an 8-character one, stores it for logging and echoes it in the response.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        cid = request.headers.get(CORRELATION_ID_HEADER, str(uuid.uuid4())[:8])
        cid = cid[:8]

        request.state.request_id = cid
        correlation_id.set(cid)

        response = await call_next(request)
        response.headers[CORRELATION_ID_HEADER] = cid

        return response


def get_correlation_id() -> str:
    """
    Get the correlation ID for the current request context.

    Returns:
        The correlation ID string, or empty string outside a request.
    """
    return correlation_id.get()
