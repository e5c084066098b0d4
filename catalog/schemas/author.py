from pydantic import BaseModel, Field

from catalog.constants import AUTHOR_NAME_MAX_LENGTH
from catalog.models.author import Author


class AuthorPayload(BaseModel):  # type: ignore[misc]
    """
    Request body of the create and update endpoints.

    Both fields are optional on purpose: create rejects a payload that
    carries an ID, update redirects a payload without one to create, and
    the write commands check the name only after the ID so that both
    answer with an alert rather than a validation error.
    """

    id: int | None = Field(default=None, description="Author ID")
    name: str | None = Field(
        default=None,
        description=f"Author name, 1 to {AUTHOR_NAME_MAX_LENGTH} characters",
    )

    def to_entity(self) -> Author:
        """Build the table model holding this payload's values."""
        return Author(id=self.id, name=self.name)
