from redis.asyncio import ConnectionPool, Redis

from catalog.logging import logger
from catalog.settings import app_settings


class RedisPool:
    """
    Redis connection pool manager.

    Manages Redis connection instances per database index with connection
    pooling. Each database gets its own connection pool with configurable
    settings.
    """

    __instances: dict[int, Redis] = {}
    __pools: dict[int, ConnectionPool] = {}

    @classmethod
    async def get_instance(cls, db: int = app_settings.SEARCH_REDIS_DB) -> Redis:
        """
        Get or create a Redis instance for the specified database.

        Args:
            db: Redis database index (default: SEARCH_REDIS_DB)

        Returns:
            Redis: Redis instance connected to the specified database
        """
        if db not in cls.__instances:
            cls.__instances[db] = cls._create_instance(db)
        return cls.__instances[db]

    @classmethod
    def _create_instance(cls, db: int) -> Redis:
        pool = ConnectionPool.from_url(
            f"redis://{app_settings.REDIS_IP}:{app_settings.REDIS_PORT}",
            db=db,
            encoding="utf-8",
            decode_responses=True,
            max_connections=app_settings.REDIS_MAX_CONNECTIONS,
            socket_timeout=app_settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=app_settings.REDIS_CONNECT_TIMEOUT,
            health_check_interval=app_settings.REDIS_HEALTH_CHECK_INTERVAL,
            retry_on_timeout=app_settings.REDIS_RETRY_ON_TIMEOUT,
        )

        # Store pool for shutdown
        cls.__pools[db] = pool

        return Redis(connection_pool=pool)

    @classmethod
    async def close_all(cls) -> None:
        """
        Close all Redis connection pools gracefully.

        This should be called during application shutdown to ensure
        all connections are properly closed.
        """
        logger.info("Closing all Redis connection pools...")
        for db, pool in cls.__pools.items():
            try:
                await pool.disconnect()
                logger.info(f"Closed Redis pool for database {db}")
            except (ConnectionError, OSError) as ex:
                logger.error(f"Error closing Redis pool for database {db}: {ex}")

        cls.__pools.clear()
        cls.__instances.clear()
        logger.info("All Redis connection pools closed")


async def get_search_redis_connection() -> Redis:
    """Redis connection of the database holding the search index."""
    return await RedisPool.get_instance(app_settings.SEARCH_REDIS_DB)
