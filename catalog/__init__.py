# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
from asyncio import create_task, gather
from contextlib import asynccontextmanager

from fastapi import FastAPI

from catalog.logging import logger
from catalog.middlewares.correlation_id import CorrelationIDMiddleware
from catalog.middlewares.logging_context import LoggingContextMiddleware
from catalog.middlewares.prometheus import PrometheusMiddleware
from catalog.routing import collect_subrouters
from catalog.settings import app_settings
from catalog.storage.db import wait_and_init_db
from catalog.storage.redis import RedisPool
from catalog.tasks.search_index import search_index_task

background_tasks = []


async def startup():
    """
    Wait for the database and start the search index task.
    """
    await wait_and_init_db()
    logger.info("Application startup initiated")

    if app_settings.SEARCH_INDEX_WORKER_ENABLED:
        background_tasks.append(create_task(search_index_task()))
        logger.info("Created task for search index synchronisation")


async def shutdown():
    """
    Cancel background tasks, then close the Redis connection pools.

    Uses gather() with return_exceptions=True so that CancelledError
    from the cancelled tasks does not abort the shutdown.
    """
    logger.info("Application shutdown initiated")

    if background_tasks:
        logger.info(f"Cancelling {len(background_tasks)} background tasks")
        for task in background_tasks:
            task.cancel()
        await gather(*background_tasks, return_exceptions=True)
        background_tasks.clear()
        logger.info("All background tasks completed")

    await RedisPool.close_all()

    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    yield
    await shutdown()


def application() -> FastAPI:
    """
    Initializes and configures the FastAPI application.

    Routers are collected from `catalog/api/http`. Middlewares execute in
    reverse order of registration: CorrelationIDMiddleware, then
    LoggingContextMiddleware, then PrometheusMiddleware.
    """
    app = FastAPI(
        title="Catalog service",
        description="Author management with full-text search",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(collect_subrouters())

    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(CorrelationIDMiddleware)

    return app


app = application()  # Need for fastapi cli
