"""
Base model for all database tables with async relationship support.

All table models inherit from BaseModel, which combines SQLModel with
SQLAlchemy's AsyncAttrs mixin so lazy-loaded attributes can be awaited
through `awaitable_attrs` instead of raising MissingGreenlet.
"""

from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlmodel import SQLModel


class BaseModel(SQLModel, AsyncAttrs):  # type: ignore[misc]
    """
    Base model for all database tables with async relationship support.

    Example:
        class Author(BaseModel, table=True):
            id: int | None = Field(default=None, primary_key=True)
            name: str
    """

    pass
