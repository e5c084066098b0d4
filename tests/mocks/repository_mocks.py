"""
In-memory repositories for testing.

They implement the same methods as the SQLModel and Redis repositories,
so commands, the search indexer and the HTTP endpoints can be exercised
without PostgreSQL or Redis.
"""

from itertools import count
from unittest.mock import AsyncMock

from redis.exceptions import ConnectionError as RedisConnectionError

from catalog.exceptions import BadRequestAlertException
from catalog.models.author import Author
from catalog.models.search_index_task import IndexOperation, SearchIndexTask
from catalog.repositories.author_repository import AuthorRepository
from catalog.schemas.pagination import Page, PageRequest
from catalog.search.query import ALL_FIELDS, TermQuery, index_terms
from catalog.search.repository import AuthorSearchRepository


class InMemoryAuthorRepository:
    """Entity store keeping authors in a dict."""

    entity_name = "author"

    def __init__(self):
        self.authors: dict[int, Author] = {}
        self.commits = 0
        self.last_id = 0

    async def save(self, entity: Author) -> Author:
        if entity.id is None:
            self.last_id += 1
            entity = Author(id=self.last_id, name=entity.name)
        else:
            self.last_id = max(self.last_id, entity.id)
            entity = Author(id=entity.id, name=entity.name)
        self.authors[entity.id] = entity
        return Author(id=entity.id, name=entity.name)

    async def find_one(self, id: int) -> Author | None:
        author = self.authors.get(id)
        return Author(id=author.id, name=author.name) if author else None

    async def find_all(self, page_request: PageRequest) -> Page:
        authors = sorted(self.authors.values(), key=lambda a: a.id)
        for order in reversed(page_request.sort):
            if order.property not in Author.model_fields:
                raise BadRequestAlertException(
                    f"Invalid sort property '{order.property}'",
                    self.entity_name,
                    "sortinvalid",
                )
            authors.sort(
                key=lambda a: getattr(a, order.property),
                reverse=order.descending,
            )
        start = page_request.offset
        return Page(
            content=authors[start : start + page_request.size],
            page=page_request.page,
            size=page_request.size,
            total=len(authors),
        )

    async def delete(self, id: int) -> bool:
        return self.authors.pop(id, None) is not None

    async def commit(self) -> None:
        self.commits += 1


class InMemorySearchIndexTaskRepository:
    """Index task queue keeping tasks in a dict."""

    def __init__(self):
        self.tasks: dict[int, SearchIndexTask] = {}
        self._ids = count(1)

    async def enqueue(
        self, entity_name: str, entity_id: int, operation: IndexOperation
    ) -> SearchIndexTask:
        task = SearchIndexTask(
            id=next(self._ids),
            entity_name=entity_name,
            entity_id=entity_id,
            operation=operation,
        )
        self.tasks[task.id] = task
        return task

    async def find_pending(
        self, entity_name: str, limit: int, max_attempts: int | None = None
    ) -> list[SearchIndexTask]:
        tasks = [
            task
            for task in sorted(self.tasks.values(), key=lambda t: t.id)
            if task.entity_name == entity_name
            and (max_attempts is None or task.attempts < max_attempts)
        ]
        return tasks[:limit]

    async def count_exhausted(self, max_attempts: int) -> int:
        return sum(1 for t in self.tasks.values() if t.attempts >= max_attempts)

    async def remove(self, task: SearchIndexTask) -> None:
        self.tasks.pop(task.id, None)

    async def mark_failed(self, task: SearchIndexTask, error: str) -> None:
        task.attempts += 1
        task.last_error = error

    async def commit(self) -> None:
        pass


class InMemoryAuthorSearchRepository(AuthorSearchRepository):
    """
    Author search index keeping documents in a dict.

    Only the storage primitives are replaced; query evaluation, ranking,
    sorting and paging are those of AuthorSearchRepository.

    Set `available` to False to make every call fail like an unreachable
    Redis server.
    """

    def __init__(self):
        super().__init__(redis=None)
        self.documents: dict[int, dict] = {}
        self.available = True

    def _check_available(self) -> None:
        if not self.available:
            raise RedisConnectionError("Connection refused")

    async def save(self, entity: Author) -> None:
        self._check_available()
        doc = entity.model_dump(mode="json")
        self.documents[doc["id"]] = doc

    async def delete(self, id: int) -> None:
        self._check_available()
        self.documents.pop(id, None)

    async def delete_all(self) -> int:
        self._check_available()
        deleted = len(self.documents)
        self.documents.clear()
        return deleted

    async def count(self) -> int:
        self._check_available()
        return len(self.documents)

    async def ids_for(self, query: TermQuery) -> set[int]:
        self._check_available()
        if query.match_all:
            return await self.all_ids()

        ids = set()
        for doc_id, doc in self.documents.items():
            tokens = index_terms(doc).get(query.field or ALL_FIELDS, set())
            *exact, last = query.tokens
            if not all(token in tokens for token in exact):
                continue
            if query.prefix:
                matched = any(token.startswith(last) for token in tokens)
            else:
                matched = last in tokens
            if matched:
                ids.add(doc_id)
        return ids

    async def all_ids(self) -> set[int]:
        self._check_available()
        return set(self.documents)

    async def _load(self, ids: list[int]) -> list[dict]:
        self._check_available()
        return [dict(self.documents[i]) for i in ids if i in self.documents]


def create_mock_author_repository():
    """
    Creates a mock AuthorRepository with common methods.

    Returns:
        AsyncMock: Mocked AuthorRepository instance
    """
    repo_mock = AsyncMock(spec=AuthorRepository)
    repo_mock.find_one = AsyncMock(return_value=None)
    repo_mock.find_all = AsyncMock()
    repo_mock.save = AsyncMock()
    repo_mock.delete = AsyncMock(return_value=True)
    repo_mock.commit = AsyncMock()
    return repo_mock
