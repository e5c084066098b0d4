"""
Facade for centralized metrics emission.

Provides high-level methods for recording metrics without exposing
Prometheus implementation details to the rest of the codebase.
"""


class MetricsCollector:
    """
    Centralized facade for Prometheus metrics.

    All methods are static for easy use without instantiation.
    """

    @staticmethod
    def record_index_sync(entity: str, applied: bool) -> None:
        """
        Record the outcome of applying one search index task.

        Args:
            entity: Name of the indexed entity.
            applied: Whether the index now reflects the mutation.
        """
        from catalog.utils.metrics import search_index_sync_total

        search_index_sync_total.labels(
            entity=entity, result="applied" if applied else "failed"
        ).inc()

    @staticmethod
    def record_pending_index_tasks(entity: str, count: int) -> None:
        from catalog.utils.metrics import search_index_pending_tasks

        search_index_pending_tasks.labels(entity=entity).set(count)
