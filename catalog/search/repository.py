"""
Search index repositories kept in Redis.

Each indexed entity type owns a key namespace
``<SEARCH_KEY_PREFIX>:<index>:*`` holding:

- ``doc:<id>``: the indexed document as JSON
- ``ids``: set of all indexed document IDs
- ``term:<field>:<token>``: set of IDs of documents containing the token
- ``terms:<field>``: sorted set (all scores 0) of the field's tokens, read
  by lexical range for prefix queries. Tokens are never removed from it,
  a stale token only leads to an empty term set; reindexing rebuilds it.
- ``doc_terms:<id>``: set of term keys a document was added to, so it can
  be removed from them on update and delete

Example:
    ```python
    repo = AuthorSearchRepository(await get_search_redis_connection())
    await repo.save(author)
    page = await repo.search(parse_query("orwell"), PageRequest())
    ```
"""

import json
from typing import Any, Generic, Type, TypeVar

from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlmodel import SQLModel

from catalog.exceptions import BadRequestAlertException
from catalog.logging import logger
from catalog.models.author import Author
from catalog.schemas.pagination import Page, PageRequest, SortOrder
from catalog.search.query import (
    QueryExpression,
    TermQuery,
    evaluate,
    index_terms,
)
from catalog.settings import app_settings

T = TypeVar("T", bound=SQLModel)


class SearchRepository(Generic[T]):
    """
    Full-text index for one entity type.

    Attributes:
        redis: Connection to the search Redis database.
        model: The SQLModel class whose instances are indexed.
        index_name: Namespace of this index.
    """

    def __init__(
        self,
        redis: Redis,
        model: Type[T],
        index_name: str,
        key_prefix: str = app_settings.SEARCH_KEY_PREFIX,
    ):
        self.redis = redis
        self.model = model
        self.index_name = index_name
        self._ns = f"{key_prefix}:{index_name}"

    def _doc_key(self, id: int | str) -> str:
        return f"{self._ns}:doc:{id}"

    def _doc_terms_key(self, id: int | str) -> str:
        return f"{self._ns}:doc_terms:{id}"

    def _ids_key(self) -> str:
        return f"{self._ns}:ids"

    def _term_key(self, field: str, token: str) -> str:
        return f"{self._ns}:term:{field}:{token}"

    def _terms_key(self, field: str) -> str:
        return f"{self._ns}:terms:{field}"

    async def save(self, entity: T) -> None:
        """
        Index an entity, replacing any previously indexed version.

        Args:
            entity: Persisted entity (must have an ID).

        Raises:
            RedisError: If the index cannot be updated.
        """
        doc = entity.model_dump(mode="json")
        doc_id = doc["id"]
        terms = index_terms(doc)
        new_keys = {
            self._term_key(field, token)
            for field, tokens in terms.items()
            for token in tokens
        }
        try:
            old_keys = await self.redis.smembers(self._doc_terms_key(doc_id))

            pipe = self.redis.pipeline(transaction=True)
            for key in set(old_keys) - new_keys:
                pipe.srem(key, doc_id)
            for key in new_keys:
                pipe.sadd(key, doc_id)
            for field, tokens in terms.items():
                if tokens:
                    pipe.zadd(
                        self._terms_key(field), dict.fromkeys(tokens, 0)
                    )
            pipe.delete(self._doc_terms_key(doc_id))
            if new_keys:
                pipe.sadd(self._doc_terms_key(doc_id), *new_keys)
            pipe.set(self._doc_key(doc_id), json.dumps(doc))
            pipe.sadd(self._ids_key(), doc_id)
            await pipe.execute()
        except RedisError as e:
            logger.error(f"Error indexing {self.model.__name__} {doc_id}: {e}")
            raise

    async def delete(self, id: int) -> None:
        """
        Remove a document from the index. Unknown IDs are ignored.

        Raises:
            RedisError: If the index cannot be updated.
        """
        try:
            old_keys = await self.redis.smembers(self._doc_terms_key(id))

            pipe = self.redis.pipeline(transaction=True)
            for key in old_keys:
                pipe.srem(key, id)
            pipe.delete(self._doc_terms_key(id), self._doc_key(id))
            pipe.srem(self._ids_key(), id)
            await pipe.execute()
        except RedisError as e:
            logger.error(f"Error removing {self.model.__name__} {id} from index: {e}")
            raise

    async def delete_all(self) -> int:
        """
        Drop the whole index.

        Returns:
            Number of deleted keys.
        """
        deleted = 0
        batch: list[str] = []
        async for key in self.redis.scan_iter(match=f"{self._ns}:*", count=500):
            batch.append(key)
            if len(batch) >= 500:
                deleted += await self.redis.delete(*batch)
                batch = []
        if batch:
            deleted += await self.redis.delete(*batch)
        logger.info(f"Dropped search index '{self.index_name}' ({deleted} keys)")
        return deleted

    async def count(self) -> int:
        return await self.redis.scard(self._ids_key())

    async def ids_for(self, query: TermQuery) -> set[int]:
        """IDs of the documents matched by a single term query."""
        if query.match_all:
            return await self.all_ids()

        keys = [self._term_key(query.field, token) for token in query.tokens]
        if query.prefix:
            *exact, _ = keys
            prefix = query.tokens[-1]
            # 0xff never occurs in UTF-8, so it bounds every token
            # starting with the prefix
            tokens = await self.redis.zrangebylex(
                self._terms_key(query.field),
                f"[{prefix}",
                b"[" + prefix.encode() + b"\xff",
            )
            if not tokens:
                return set()
            prefixed = [self._term_key(query.field, token) for token in tokens]
            members = set(await self.redis.sunion(prefixed))
            if exact:
                members &= set(await self.redis.sinter(exact))
        else:
            members = set(await self.redis.sinter(keys))
        return {int(member) for member in members}

    async def all_ids(self) -> set[int]:
        return {int(member) for member in await self.redis.smembers(self._ids_key())}

    async def search(
        self, expression: QueryExpression, page_request: PageRequest
    ) -> Page:
        """
        Find one page of entities matching a query expression.

        Without sort orders, results are ranked by score (descending) and
        then by ID. With sort orders, results are ordered by the indexed
        field values.

        Args:
            expression: Parsed full-text query.
            page_request: Page index, page size and sort orders.

        Returns:
            The requested page; empty when nothing matches.

        Raises:
            BadRequestAlertException: If a sort property is not indexed.
            RedisError: If the index cannot be read.
        """
        self._check_sort(page_request.sort)

        scores = await evaluate(expression, self)
        if not scores:
            return Page.empty(page_request)

        start, end = page_request.offset, page_request.offset + page_request.size
        if page_request.sort:
            docs = await self._load(sorted(scores))
            docs = _sort_documents(docs, page_request.sort)[start:end]
        else:
            ranked = sorted(scores, key=lambda doc_id: (-scores[doc_id], doc_id))
            docs = await self._load(ranked[start:end])

        return Page(
            content=[self.model.model_validate(doc) for doc in docs],
            page=page_request.page,
            size=page_request.size,
            total=len(scores),
        )

    async def _load(self, ids: list[int]) -> list[dict[str, Any]]:
        if not ids:
            return []
        raw_docs = await self.redis.mget([self._doc_key(doc_id) for doc_id in ids])
        docs = []
        for doc_id, raw in zip(ids, raw_docs):
            if raw is None:
                logger.warning(
                    f"{self.model.__name__} {doc_id} is in index '{self.index_name}' without a document"
                )
                continue
            docs.append(json.loads(raw))
        return docs

    def _check_sort(self, sort: list[SortOrder]) -> None:
        fields = self.model.model_fields
        for order in sort:
            if order.property not in fields:
                raise BadRequestAlertException(
                    f"Invalid sort property '{order.property}'",
                    self.index_name,
                    "sortinvalid",
                )


def _sort_documents(
    docs: list[dict[str, Any]], sort: list[SortOrder]
) -> list[dict[str, Any]]:
    # Stable sorts applied from the least to the most significant order
    docs = sorted(docs, key=lambda doc: doc["id"])
    for order in reversed(sort):
        docs.sort(
            key=lambda doc: _sort_key(doc.get(order.property)),
            reverse=order.descending,
        )
    return docs


def _sort_key(value: Any) -> tuple[bool, Any]:
    if isinstance(value, str):
        value = value.lower()
    return (value is None, value)


class AuthorSearchRepository(SearchRepository[Author]):
    """Full-text index of authors."""

    def __init__(self, redis: Redis, **kwargs: Any):
        super().__init__(redis, Author, "author", **kwargs)
