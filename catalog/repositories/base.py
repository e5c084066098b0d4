"""
Base repository with common CRUD operations.

The Repository pattern separates data access logic from business logic,
making it easier to test and maintain. Repositories encapsulate all
database operations for a specific entity and never commit on their own
except through `commit()`, so a command decides the transaction boundary.

Example:
    ```python
    from catalog.repositories.base import BaseRepository
    from catalog.models.author import Author


    class AuthorRepository(BaseRepository[Author]):
        def __init__(self, session: AsyncSession):
            super().__init__(session, Author)
    ```
"""

from typing import Any, Generic, Type, TypeVar

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from catalog.exceptions import BadRequestAlertException
from catalog.logging import logger
from catalog.schemas.pagination import Page, PageRequest, SortOrder

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.

    Type Parameters:
        T: The SQLModel type this repository manages.

    Attributes:
        session: The database session for executing queries.
        model: The SQLModel class this repository manages.
    """

    def __init__(self, session: AsyncSession, model: Type[T]):
        """
        Initialize repository with session and model.

        Args:
            session: Database session for executing queries.
            model: The SQLModel class to manage.
        """
        self.session = session
        self.model = model

    @property
    def entity_name(self) -> str:
        return self.model.__tablename__

    async def find_one(self, id: int) -> T | None:
        """
        Get entity by primary key ID.

        Always reads the stored row, also when the session already holds
        the entity, so repeated calls observe concurrent commits.

        Args:
            id: Primary key value.

        Returns:
            Entity if found, None otherwise.
        """
        return await self.session.get(self.model, id, populate_existing=True)

    async def find_all(self, page_request: PageRequest) -> Page:
        """
        Get one page of entities.

        Entities are ordered by the requested sort orders and then by
        primary key, so consecutive pages never overlap.

        Args:
            page_request: Page index, page size and sort orders.

        Returns:
            The requested page with the total number of entities.

        Raises:
            BadRequestAlertException: If a sort property is not a column.
            SQLAlchemyError: If database query fails.
        """
        order_by = self._order_by(page_request.sort)
        try:
            count_result = await self.session.exec(
                select(func.count()).select_from(self.model)
            )
            total = count_result.one()

            stmt = (
                select(self.model)
                .order_by(*order_by)
                .offset(page_request.offset)
                .limit(page_request.size)
            )
            result = await self.session.exec(stmt)
            return Page(
                content=list(result.all()),
                page=page_request.page,
                size=page_request.size,
                total=total,
            )
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving {self.model.__name__}: {e}")
            raise

    async def save(self, entity: T) -> T:
        """
        Insert or update an entity.

        Entities without an ID are inserted and get a generated ID.
        Entities with an ID overwrite the stored row with that ID, or are
        inserted with that ID when no such row exists. In that case the
        ID sequence is moved past the inserted ID, so later generated IDs
        do not collide with it.

        Args:
            entity: The entity instance to save.

        Returns:
            The persisted entity with generated fields populated.

        Raises:
            SQLAlchemyError: If database operation fails.
        """
        try:
            inserted_with_id = False
            if getattr(entity, "id", None) is not None:
                stored = await self.session.get(self.model, entity.id)
                inserted_with_id = stored is None
                entity = await self.session.merge(entity)
            else:
                self.session.add(entity)
            await self.session.flush()
            if inserted_with_id:
                await self._sync_id_sequence()
            await self.session.refresh(entity)
            return entity
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error saving {self.model.__name__}: {e}")
            raise

    async def delete(self, id: int) -> bool:
        """
        Delete entity by primary key ID.

        Args:
            id: Primary key value.

        Returns:
            True if an entity was deleted, False if none existed.

        Raises:
            SQLAlchemyError: If database operation fails.
        """
        try:
            entity = await self.session.get(self.model, id)
            if entity is None:
                return False
            await self.session.delete(entity)
            await self.session.flush()
            return True
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error deleting {self.model.__name__}: {e}")
            raise

    async def commit(self) -> None:
        """
        Commit the session's current transaction.

        Raises:
            SQLAlchemyError: If the commit fails (the session is rolled back).
        """
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error committing {self.model.__name__}: {e}")
            raise

    async def _sync_id_sequence(self) -> None:
        table = self.model.__tablename__
        await self.session.execute(
            text(
                f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                f"(SELECT max(id) FROM {table}))"
            )
        )

    def _order_by(self, sort: list[SortOrder]) -> list[Any]:
        columns = self.model.__table__.columns
        order_by = []
        for order in sort:
            if order.property not in columns:
                raise BadRequestAlertException(
                    f"Invalid sort property '{order.property}'",
                    self.entity_name,
                    "sortinvalid",
                )
            column = getattr(self.model, order.property)
            order_by.append(column.desc() if order.descending else column.asc())
        order_by.append(self.model.id.asc())
        return order_by
