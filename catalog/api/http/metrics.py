"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get(
    "/metrics",
    response_class=Response,
    summary="Prometheus metrics endpoint",
    tags=["metrics"],
)
async def metrics() -> Response:
    """
    Expose HTTP and search index metrics in the Prometheus text format.

    Example:
        ```
        # HELP search_index_sync_total Search index task applications
        # TYPE search_index_sync_total counter
        search_index_sync_total{entity="author",result="applied"} 3.0
        ```
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
