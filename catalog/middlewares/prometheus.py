"""
Prometheus metrics middleware for HTTP requests.

Tracks request counts, durations and in-progress requests per endpoint.
"""

import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from catalog.utils.metrics import (
    http_request_duration_seconds,
    http_requests_in_progress,
    http_requests_total,
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Middleware to track Prometheus metrics for HTTP requests.

    Tracks the following metrics:
    - http_requests_total: Counter of requests by method, endpoint and status
    - http_request_duration_seconds: Histogram of request durations
    - http_requests_in_progress: Gauge of in-progress requests
    """

    async def dispatch(self, request: Request, call_next: ASGIApp) -> Response:
        method = request.method
        path = request.url.path

        http_requests_in_progress.labels(method=method, endpoint=path).inc()
        start_time = time.time()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            http_request_duration_seconds.labels(
                method=method, endpoint=path
            ).observe(time.time() - start_time)
            http_requests_total.labels(
                method=method, endpoint=path, status_code=status_code
            ).inc()
            http_requests_in_progress.labels(
                method=method, endpoint=path
            ).dec()
