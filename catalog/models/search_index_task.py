from datetime import datetime, timezone
from enum import Enum

from sqlmodel import Field

from catalog.models.base import BaseModel


class IndexOperation(str, Enum):
    """Kind of entity mutation that still has to reach the search index."""

    SAVE = "save"
    DELETE = "delete"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SearchIndexTask(BaseModel, table=True):
    """
    Pending search index update for one entity mutation.

    A task row is written in the same transaction as the entity change and
    removed once the search index reflects that change. Rows that survive
    are retried by the background index worker.

    Attributes:
        id: Primary key identifier for the task
        entity_name: Name of the indexed entity (e.g. "author")
        entity_id: Primary key of the mutated entity
        operation: Mutation that triggered the task
        attempts: Number of failed attempts to apply the task
        last_error: Error message of the most recent failed attempt
        created_at: When the mutation was committed (UTC)
    """

    __tablename__ = "search_index_task"
    __table_args__ = {"extend_existing": True}

    id: int | None = Field(default=None, primary_key=True)
    entity_name: str = Field(max_length=64, index=True)
    entity_id: int = Field(index=True)
    operation: IndexOperation
    attempts: int = Field(default=0)
    last_error: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=_utcnow)
