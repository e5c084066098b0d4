"""Health check endpoint for the entity store and the search store."""

from fastapi import APIRouter, Response, status
from pydantic import BaseModel
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from catalog.logging import logger
from catalog.storage.db import engine
from catalog.storage.redis import get_search_redis_connection

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    database: str
    search: str


async def check_database() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.error(f"Database health check failed: {e}")
        return False
    return True


async def check_search_store() -> bool:
    try:
        r = await get_search_redis_connection()
        await r.ping()
    except (RedisError, OSError, TimeoutError) as e:
        logger.error(f"Search store health check failed: {e}")
        return False
    return True


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check endpoint",
    tags=["health"],
)
async def health_check(response: Response) -> HealthResponse:
    """
    Check connectivity to PostgreSQL (entities) and Redis (search index).

    Returns:
        HealthResponse: Status of the service and both stores.
        Returns 503 Service Unavailable if any store is unreachable.
    """
    db_status = "healthy" if await check_database() else "unhealthy"
    search_status = "healthy" if await check_search_store() else "unhealthy"

    overall_status = (
        "healthy"
        if db_status == "healthy" and search_status == "healthy"
        else "unhealthy"
    )
    if overall_status == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=overall_status, database=db_status, search=search_status
    )
