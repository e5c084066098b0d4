"""Prometheus metrics for search index synchronisation."""

from catalog.utils.metrics._helpers import (
    _get_or_create_counter,
    _get_or_create_gauge,
)

search_index_sync_total = _get_or_create_counter(
    "search_index_sync_total",
    "Search index tasks applied, by entity and result",
    ["entity", "result"],
)

search_index_pending_tasks = _get_or_create_gauge(
    "search_index_pending_tasks",
    "Search index tasks found pending by the last worker run",
    ["entity"],
)

__all__ = [
    "search_index_sync_total",
    "search_index_pending_tasks",
]
