"""
Helper functions for Prometheus metric registration.

Metrics are module-level singletons; re-importing a metrics module (for
example under `uvicorn --reload` or in tests) must return the collector
that is already registered instead of failing with a duplicate name.
"""

from typing import TypeVar

from prometheus_client import REGISTRY, Counter, Gauge, Histogram

M = TypeVar("M", Counter, Gauge, Histogram)


def _get_or_create(metric_cls: type[M], name: str, *args, **kwargs) -> M:
    try:
        return metric_cls(name, *args, **kwargs)
    except ValueError:
        # Metric already exists, retrieve it from registry
        return REGISTRY._names_to_collectors[name]


def _get_or_create_counter(
    name: str, doc: str, labels: list[str] | None = None
) -> Counter:
    """Get existing counter or create new one."""
    return _get_or_create(Counter, name, doc, labels or [])


def _get_or_create_gauge(
    name: str, doc: str, labels: list[str] | None = None
) -> Gauge:
    """Get existing gauge or create new one."""
    return _get_or_create(Gauge, name, doc, labels or [])


def _get_or_create_histogram(
    name: str,
    doc: str,
    labels: list[str] | None = None,
    buckets: tuple[float, ...] | None = None,
) -> Histogram:
    """Get existing histogram or create new one."""
    if buckets:
        return _get_or_create(Histogram, name, doc, labels or [], buckets=buckets)
    return _get_or_create(Histogram, name, doc, labels or [])
