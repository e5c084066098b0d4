"""
Protocol classes for structural subtyping (duck typing with type safety).

Commands and the search indexer depend on these protocols rather than on
the concrete SQLModel and Redis repositories, so any implementation with
the same methods can be injected.

Example:
    ```python
    from catalog.protocols import EntityRepository
    from catalog.models.author import Author


    async def rename(repo: EntityRepository[Author], id: int, name: str):
        author = await repo.find_one(id)
        author.name = name
        await repo.save(author)
    ```
"""

from typing import Protocol, TypeVar, runtime_checkable

from catalog.models.search_index_task import IndexOperation, SearchIndexTask
from catalog.schemas.pagination import Page, PageRequest
from catalog.search.query import QueryExpression

T = TypeVar("T")


@runtime_checkable
class EntityRepository(Protocol[T]):
    """
    Canonical store of one entity type.

    Type Parameters:
        T: The entity type this repository manages.
    """

    async def save(self, entity: T) -> T:
        """Insert or update (by ID) an entity and return the stored one."""
        ...

    async def find_all(self, page_request: PageRequest) -> Page:
        """Get one page of entities."""
        ...

    async def find_one(self, id: int) -> T | None:
        """Get entity by ID, None if absent."""
        ...

    async def delete(self, id: int) -> bool:
        """Delete entity by ID, return whether it existed."""
        ...

    async def commit(self) -> None:
        """Commit pending changes."""
        ...


@runtime_checkable
class SearchIndex(Protocol[T]):
    """
    Secondary full-text index of one entity type.

    Type Parameters:
        T: The entity type this index holds.
    """

    index_name: str

    async def save(self, entity: T) -> None:
        """Index an entity, replacing any previous version."""
        ...

    async def delete(self, id: int) -> None:
        """Remove an entity from the index."""
        ...

    async def search(
        self, expression: QueryExpression, page_request: PageRequest
    ) -> Page:
        """Get one page of entities matching an expression."""
        ...


@runtime_checkable
class IndexTaskQueue(Protocol):
    """Durable queue of pending search index updates."""

    async def enqueue(
        self, entity_name: str, entity_id: int, operation: IndexOperation
    ) -> SearchIndexTask: ...

    async def find_pending(
        self, entity_name: str, limit: int, max_attempts: int | None = None
    ) -> list[SearchIndexTask]: ...

    async def remove(self, task: SearchIndexTask) -> None: ...

    async def mark_failed(self, task: SearchIndexTask, error: str) -> None: ...

    async def commit(self) -> None: ...
