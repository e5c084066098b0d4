from sqlmodel import Field

from catalog.constants import AUTHOR_NAME_MAX_LENGTH
from catalog.models.base import BaseModel


class Author(BaseModel, table=True):
    """
    SQLModel representing an author entity in the database.

    This is a clean data model without Active Record methods.
    Use AuthorRepository for database operations and
    AuthorSearchRepository for the full-text index.

    Attributes:
        id: Primary key identifier for the author
        name: Name of the author
    """

    __table_args__ = {"extend_existing": True}  # for pydoc

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=AUTHOR_NAME_MAX_LENGTH)
