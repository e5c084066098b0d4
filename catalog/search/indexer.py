"""
Keeps a search index in line with its entity store.

Mutations are not written to both stores one after the other. Instead a
command saves the entity change and a SearchIndexTask in one transaction,
commits, and then asks the indexer to apply the task. Applying a task
re-reads the entity and indexes its current state (or removes it from the
index if it no longer exists), so applying a task twice or out of order
is harmless. The entity is read again after each index write, so an apply
that raced with a newer one does not leave its older state in the index. Tasks that cannot be applied stay in the database and are
retried by the background worker (catalog/tasks/search_index.py).
"""

from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from catalog.constants import SEARCH_INDEX_MAX_APPLY_PASSES
from catalog.logging import logger
from catalog.models.search_index_task import IndexOperation, SearchIndexTask
from catalog.protocols import EntityRepository, IndexTaskQueue, SearchIndex
from catalog.repositories.author_repository import AuthorRepository
from catalog.repositories.search_index_task_repository import (
    SearchIndexTaskRepository,
)
from catalog.search.repository import AuthorSearchRepository
from catalog.utils.metrics import MetricsCollector


class SearchIndexer:
    """
    Applies pending index tasks of one entity type.

    Attributes:
        entity_repository: Canonical store of the entity.
        search_repository: Full-text index of the entity.
        task_repository: Pending index tasks, sharing the entity
            repository's transaction.
    """

    def __init__(
        self,
        entity_repository: EntityRepository,
        search_repository: SearchIndex,
        task_repository: IndexTaskQueue,
    ):
        self.entity_repository = entity_repository
        self.search_repository = search_repository
        self.task_repository = task_repository

    @property
    def entity_name(self) -> str:
        return self.search_repository.index_name

    async def schedule(
        self, entity_id: int, operation: IndexOperation
    ) -> SearchIndexTask:
        """
        Record an entity mutation in the current, uncommitted transaction.

        Args:
            entity_id: Primary key of the mutated entity.
            operation: Kind of mutation.

        Returns:
            The task to pass to `apply` once the transaction is committed.
        """
        return await self.task_repository.enqueue(
            self.entity_name, entity_id, operation
        )

    async def apply(self, task: SearchIndexTask) -> bool:
        """
        Bring the index entry of the task's entity up to date.

        A search store failure does not propagate: it is logged and stored
        on the task, which stays pending. The task also stays pending when
        the entity keeps changing while it is being indexed.

        Args:
            task: Committed task.

        Returns:
            True if the index was updated and the task removed.

        Raises:
            SQLAlchemyError: If the entity store cannot be read or the task
                cannot be updated.
        """
        try:
            synced = await self._sync_entity(task.entity_id)
        except RedisError as ex:
            logger.warning(
                f"Could not apply search index task {task.id} "
                f"({task.operation.value} {self.entity_name} {task.entity_id}): {ex}"
            )
            await self.task_repository.mark_failed(task, str(ex))
            await self.task_repository.commit()
            MetricsCollector.record_index_sync(self.entity_name, applied=False)
            return False

        if not synced:
            logger.warning(
                f"{self.entity_name} {task.entity_id} kept changing while "
                f"applying search index task {task.id}, leaving it pending"
            )
            return False

        await self.task_repository.remove(task)
        await self.task_repository.commit()
        MetricsCollector.record_index_sync(self.entity_name, applied=True)
        return True

    async def _sync_entity(self, entity_id: int) -> bool:
        """
        Write the stored state of an entity to the index until it holds.

        Another apply for the same entity may run at the same time and
        its index write, based on an older read, may land after ours. The
        entity is therefore read again after every write, and written again
        if it differs from what was written, so the last write to the index
        is always followed by a read that matches it.

        Returns:
            False if the entity still changed after the last pass.
        """
        entity = await self.entity_repository.find_one(entity_id)
        written = _snapshot(entity)
        for _ in range(SEARCH_INDEX_MAX_APPLY_PASSES):
            if entity is None:
                await self.search_repository.delete(entity_id)
            else:
                await self.search_repository.save(entity)

            entity = await self.entity_repository.find_one(entity_id)
            current = _snapshot(entity)
            if current == written:
                return True
            written = current
        return False

    async def drain(
        self, batch_size: int, max_attempts: int | None = None
    ) -> int:
        """
        Apply up to `batch_size` pending tasks, oldest first.

        Args:
            batch_size: Maximum number of tasks to apply.
            max_attempts: Skip tasks that already failed this many times;
                None applies every pending task.

        Returns:
            Number of tasks applied successfully.
        """
        tasks = await self.task_repository.find_pending(
            self.entity_name, batch_size, max_attempts
        )
        MetricsCollector.record_pending_index_tasks(self.entity_name, len(tasks))

        applied = 0
        for task in tasks:
            if await self.apply(task):
                applied += 1
            else:
                # Search store failing or entity still changing, retry on
                # the next run
                break

        if tasks:
            logger.info(
                f"Applied {applied}/{len(tasks)} pending {self.entity_name} index tasks"
            )
        return applied


def _snapshot(entity: SQLModel | None) -> dict | None:
    return None if entity is None else entity.model_dump()


def author_indexer(session: AsyncSession, redis: Redis) -> SearchIndexer:
    """Indexer for authors whose repositories share `session`."""
    return SearchIndexer(
        AuthorRepository(session),
        AuthorSearchRepository(redis),
        SearchIndexTaskRepository(session),
    )


async def rebuild_author_index(
    session: AsyncSession, redis: Redis, batch_size: int
) -> int:
    """
    Drop the author index and index every stored author again.

    Args:
        session: Session to read authors with.
        redis: Connection to the search Redis database.
        batch_size: Number of authors read per query.

    Returns:
        Number of indexed authors.
    """
    entity_repository = AuthorRepository(session)
    search_repository = AuthorSearchRepository(redis)

    await search_repository.delete_all()

    indexed = 0
    async for batch in entity_repository.iter_batches(batch_size):
        for author in batch:
            await search_repository.save(author)
        indexed += len(batch)
        logger.info(f"Indexed {indexed} authors")

    return indexed
