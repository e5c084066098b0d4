"""
Background task applying pending search index tasks.

Index tasks whose first application failed (because the search store was
unreachable) stay in the database; this task retries them until the
search index has caught up with the entity store.
"""

import asyncio

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from catalog.constants import TASK_ERROR_BACKOFF_SECONDS
from catalog.logging import logger
from catalog.search.indexer import author_indexer
from catalog.settings import app_settings
from catalog.storage.db import async_session
from catalog.storage.redis import get_search_redis_connection


async def drain_search_index_tasks() -> int:
    """
    Apply one batch of pending author index tasks.

    Returns:
        Number of applied tasks.
    """
    redis = await get_search_redis_connection()
    async with async_session() as session:
        indexer = author_indexer(session, redis)
        return await indexer.drain(
            app_settings.SEARCH_INDEX_BATCH_SIZE,
            app_settings.SEARCH_INDEX_MAX_ATTEMPTS,
        )


async def search_index_task() -> None:
    """
    Periodically drain pending search index tasks.

    Runs until cancelled on application shutdown.
    """
    logger.info("Starting search index task")

    while True:
        try:
            applied = await drain_search_index_tasks()
            # A full batch means there may be more tasks waiting
            if applied < app_settings.SEARCH_INDEX_BATCH_SIZE:
                await asyncio.sleep(app_settings.SEARCH_INDEX_WORKER_INTERVAL)
        except asyncio.CancelledError:
            logger.info("Search index task cancelled")
            break
        except (SQLAlchemyError, RedisError, OSError) as ex:
            logger.error(f"Error in search_index_task: {ex}", exc_info=True)
            await asyncio.sleep(TASK_ERROR_BACKOFF_SECONDS)
