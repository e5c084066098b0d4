"""
Repository for the Author entity (the canonical entity store).

Example:
    ```python
    from catalog.repositories.author_repository import AuthorRepository
    from catalog.storage.db import async_session

    async with async_session() as session:
        repo = AuthorRepository(session)
        page = await repo.find_all(PageRequest(page=0, size=20))
        author = await repo.find_one(1)
    ```
"""

from collections.abc import AsyncIterator

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from catalog.models.author import Author
from catalog.repositories.base import BaseRepository


class AuthorRepository(BaseRepository[Author]):
    """
    Repository for Author entity operations.

    Provides CRUD operations inherited from BaseRepository plus batched
    iteration used to rebuild the search index.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, Author)

    async def iter_batches(self, batch_size: int) -> AsyncIterator[list[Author]]:
        """
        Iterate over all authors in primary key order, batch by batch.

        Uses keyset pagination, so authors created while iterating are
        picked up and none is returned twice.

        Args:
            batch_size: Maximum number of authors per batch.

        Yields:
            Non-empty lists of authors.
        """
        last_id = 0
        while True:
            stmt = (
                select(Author)
                .where(Author.id > last_id)
                .order_by(Author.id)
                .limit(batch_size)
            )
            result = await self.session.exec(stmt)
            batch = list(result.all())
            if not batch:
                return
            yield batch
            last_id = batch[-1].id
