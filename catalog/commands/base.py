"""
Base command for encapsulating business operations.

The Command pattern encapsulates business logic as objects, making it
reusable across the HTTP router and the CLI, and easy to test in
isolation with repository doubles.

Example:
    ```python
    class GetAuthorCommand(BaseCommand[int, Author | None]):
        def __init__(self, repository: AuthorRepository):
            self.repository = repository

        async def execute(self, author_id: int) -> Author | None:
            return await self.repository.find_one(author_id)


    @router.get("/authors/{id}")
    async def get_author(id: int, repo: AuthorRepoDep) -> Author:
        return await GetAuthorCommand(repo).execute(id)
    ```
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

TInput = TypeVar("TInput")
TOutput = TypeVar("TOutput")


class BaseCommand(ABC, Generic[TInput, TOutput]):
    """
    Base command for business operations.

    Commands depend on repositories for data access and never on the
    transport that invoked them.

    Type Parameters:
        TInput: Input data type (usually a Pydantic model).
        TOutput: Output data type.
    """

    @abstractmethod
    async def execute(self, input_data: TInput) -> TOutput:
        """
        Execute the command.

        Args:
            input_data: Input data for the command.

        Returns:
            Result of the command execution.

        Raises:
            AppException: For business rule violations.
        """
        pass
