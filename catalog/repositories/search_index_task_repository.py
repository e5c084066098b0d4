"""
Repository for pending search index tasks.

Tasks are added in the same session (and therefore the same transaction)
as the entity mutation they describe.
"""

from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from catalog.models.search_index_task import IndexOperation, SearchIndexTask
from catalog.repositories.base import BaseRepository


class SearchIndexTaskRepository(BaseRepository[SearchIndexTask]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, SearchIndexTask)

    async def enqueue(
        self, entity_name: str, entity_id: int, operation: IndexOperation
    ) -> SearchIndexTask:
        """
        Record that an entity mutation still has to reach the search index.

        Args:
            entity_name: Name of the mutated entity.
            entity_id: Primary key of the mutated entity.
            operation: Kind of mutation.

        Returns:
            The flushed (not yet committed) task.
        """
        task = SearchIndexTask(
            entity_name=entity_name,
            entity_id=entity_id,
            operation=operation,
        )
        return await self.save(task)

    async def find_pending(
        self, entity_name: str, limit: int, max_attempts: int | None = None
    ) -> list[SearchIndexTask]:
        """
        Get the oldest pending tasks of one entity type.

        Args:
            entity_name: Name of the indexed entity.
            limit: Maximum number of tasks to return.
            max_attempts: Skip tasks that already failed this many times.

        Returns:
            Tasks ordered by creation.
        """
        stmt = select(SearchIndexTask).where(
            SearchIndexTask.entity_name == entity_name
        )
        if max_attempts is not None:
            stmt = stmt.where(SearchIndexTask.attempts < max_attempts)
        stmt = stmt.order_by(SearchIndexTask.id).limit(limit)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count_exhausted(self, max_attempts: int) -> int:
        """Number of tasks that will no longer be retried automatically."""
        stmt = select(func.count()).where(
            SearchIndexTask.attempts >= max_attempts
        )
        result = await self.session.exec(stmt)
        return result.one()

    async def remove(self, task: SearchIndexTask) -> None:
        await self.delete(task.id)

    async def mark_failed(self, task: SearchIndexTask, error: str) -> None:
        task.attempts += 1
        task.last_error = error[:1000]
        await self.save(task)
