"""
Prometheus metrics definitions and utilities.

All metrics are re-exported here:

    from catalog.utils.metrics import http_requests_total

New code should use the MetricsCollector facade:

    from catalog.utils.metrics import MetricsCollector
    MetricsCollector.record_index_sync("author", applied=True)
"""

from catalog.utils.metrics.collector import MetricsCollector
from catalog.utils.metrics.http import (
    http_request_duration_seconds,
    http_requests_in_progress,
    http_requests_total,
)
from catalog.utils.metrics.search import (
    search_index_pending_tasks,
    search_index_sync_total,
)

__all__ = [
    "MetricsCollector",
    "http_request_duration_seconds",
    "http_requests_in_progress",
    "http_requests_total",
    "search_index_pending_tasks",
    "search_index_sync_total",
]
