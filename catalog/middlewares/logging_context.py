"""
Middleware for injecting contextual fields into structured logs.

Every log record written while a request is handled carries the
request's endpoint and method.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from catalog.logging import clear_log_context, set_log_context


class LoggingContextMiddleware(BaseHTTPMiddleware):  # type: ignore[misc]
    async def dispatch(self, request: Request, call_next: ASGIApp) -> Response:
        """
        Process request and inject logging context.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or endpoint handler.

        Returns:
            Response from the endpoint.
        """
        set_log_context(
            endpoint=request.url.path,
            method=request.method,
        )
        try:
            response = await call_next(request)
            set_log_context(status_code=response.status_code)
        finally:
            clear_log_context()

        return response
