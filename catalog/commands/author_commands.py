"""
Commands for Author business operations.

Commands encapsulate business logic and are reused by the HTTP router
and the maintenance CLI.

Example:
    ```python
    from catalog.commands.author_commands import CreateAuthorCommand

    command = CreateAuthorCommand(repo, indexer)
    author = await command.execute(AuthorPayload(name="George Orwell"))
    ```
"""

from pydantic import BaseModel, Field

from catalog.commands.base import BaseCommand
from catalog.constants import AUTHOR_NAME_MAX_LENGTH
from catalog.exceptions import BadRequestAlertException
from catalog.logging import logger
from catalog.models.author import Author
from catalog.models.search_index_task import IndexOperation
from catalog.protocols import EntityRepository, SearchIndex
from catalog.schemas.author import AuthorPayload
from catalog.schemas.pagination import Page, PageRequest
from catalog.search.indexer import SearchIndexer
from catalog.search.query import parse_query

ENTITY_NAME = "author"


class SearchAuthorsInput(BaseModel):  # type: ignore[misc]
    """Input model for searching authors."""

    query: str = Field(..., description="Full-text query string")
    page_request: PageRequest = Field(default_factory=PageRequest)


class _AuthorWriteCommand:
    def __init__(
        self, repository: EntityRepository[Author], indexer: SearchIndexer
    ):
        """
        Initialize command with the entity store and its search indexer.

        Args:
            repository: Author repository for data access.
            indexer: Search indexer sharing the repository's transaction.
        """
        self.repository = repository
        self.indexer = indexer

    def _check_name(self, input_data: AuthorPayload) -> None:
        if not input_data.name or len(input_data.name) > AUTHOR_NAME_MAX_LENGTH:
            raise BadRequestAlertException(
                "An author must have a name of 1 to "
                f"{AUTHOR_NAME_MAX_LENGTH} characters",
                ENTITY_NAME,
                "nameinvalid",
            )

    async def _save_and_index(self, author: Author) -> Author:
        result = await self.repository.save(author)
        task = await self.indexer.schedule(result.id, IndexOperation.SAVE)
        await self.repository.commit()
        await self.indexer.apply(task)
        return result


class CreateAuthorCommand(
    _AuthorWriteCommand, BaseCommand[AuthorPayload, Author]
):
    """
    Command to create a new author.

    A new author must not carry an ID; the entity store generates it.
    """

    async def execute(self, input_data: AuthorPayload) -> Author:
        """
        Execute command to create author.

        Args:
            input_data: Author data to create (without ID).

        Returns:
            Created author with generated ID.

        Raises:
            BadRequestAlertException: If the payload already has an ID, or
                (checked second) no valid name.
        """
        if input_data.id is not None:
            raise BadRequestAlertException(
                "A new author cannot already have an ID",
                ENTITY_NAME,
                "idexists",
            )
        self._check_name(input_data)
        return await self._save_and_index(input_data.to_entity())


class UpdateAuthorCommand(
    _AuthorWriteCommand, BaseCommand[AuthorPayload, Author]
):
    """
    Command to update an author.

    The payload overwrites the stored author with the same ID. An ID
    that is not stored yet is inserted with that ID.
    """

    async def execute(self, input_data: AuthorPayload) -> Author:
        """
        Execute command to update author.

        Args:
            input_data: Author ID and new data.

        Returns:
            Updated author.

        Raises:
            ValueError: If the payload has no ID.
            BadRequestAlertException: If the payload has no valid name.
        """
        if input_data.id is None:
            raise ValueError("An updated author must have an ID")
        self._check_name(input_data)
        return await self._save_and_index(input_data.to_entity())


class DeleteAuthorCommand(_AuthorWriteCommand, BaseCommand[int, None]):
    """
    Command to delete an author from the entity store and the index.

    Deleting an author that does not exist is not an error.
    """

    async def execute(self, author_id: int) -> None:
        existed = await self.repository.delete(author_id)
        if not existed:
            logger.debug(f"Author {author_id} did not exist, removing from index only")
        task = await self.indexer.schedule(author_id, IndexOperation.DELETE)
        await self.repository.commit()
        await self.indexer.apply(task)


class GetAuthorCommand(BaseCommand[int, Author | None]):
    def __init__(self, repository: EntityRepository[Author]):
        self.repository = repository

    async def execute(self, author_id: int) -> Author | None:
        return await self.repository.find_one(author_id)


class ListAuthorsCommand(BaseCommand[PageRequest, Page]):
    """Command to get one page of authors from the entity store."""

    def __init__(self, repository: EntityRepository[Author]):
        self.repository = repository

    async def execute(self, input_data: PageRequest) -> Page:
        return await self.repository.find_all(input_data)


class SearchAuthorsCommand(BaseCommand[SearchAuthorsInput, Page]):
    """
    Command to search authors in the full-text index.

    The query string is parsed as a query expression (see
    catalog/search/query.py); it is never matched against the entity store.
    """

    def __init__(self, search_repository: SearchIndex[Author]):
        """
        Initialize command with the search index.

        Args:
            search_repository: Author search index.
        """
        self.search_repository = search_repository

    async def execute(self, input_data: SearchAuthorsInput) -> Page:
        """
        Execute command to search authors.

        Args:
            input_data: Query string and page request.

        Returns:
            Page of matching authors, empty if nothing matches.

        Example:
            ```python
            page = await command.execute(SearchAuthorsInput(query="name:orw*"))
            ```
        """
        expression = parse_query(input_data.query)
        return await self.search_repository.search(
            expression, input_data.page_request
        )
