"""
Page request and page result models shared by both stores.

Pages are 0-indexed: `page=0` is the first page. A `PageRequest` is
built from the `page`, `size` and `sort` query parameters of the list
and search endpoints.
"""

import math
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field
from typing_extensions import Annotated

from catalog.constants import MAX_PAGE_SIZE

T = TypeVar("T")


class SortOrder(BaseModel):  # type: ignore[misc]
    property: str
    direction: Literal["asc", "desc"] = "asc"

    @classmethod
    def parse(cls, value: str) -> "SortOrder":
        """
        Parse a `property[,direction]` sort parameter.

        Example:
            >>> SortOrder.parse("name,desc")
            SortOrder(property='name', direction='desc')
        """
        prop, _, direction = value.partition(",")
        direction = direction.strip().lower() or "asc"
        if direction not in ("asc", "desc"):
            raise ValueError(f"Invalid sort direction '{direction}'")
        return cls(property=prop.strip(), direction=direction)

    @property
    def descending(self) -> bool:
        return self.direction == "desc"


class PageRequest(BaseModel):  # type: ignore[misc]
    page: Annotated[int, Field(ge=0)] = 0
    size: Annotated[int, Field(ge=1, le=MAX_PAGE_SIZE)] = 20
    sort: list[SortOrder] = Field(default_factory=list)

    @property
    def offset(self) -> int:
        return self.page * self.size


class Page(BaseModel, Generic[T]):  # type: ignore[misc]
    content: list[T]
    page: Annotated[int, Field(ge=0)]
    size: Annotated[int, Field(ge=1)]
    total: Annotated[int, Field(ge=0)]

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.total > 0 else 0

    @classmethod
    def empty(cls, page_request: PageRequest) -> "Page[T]":
        return cls(
            content=[],
            page=page_request.page,
            size=page_request.size,
            total=0,
        )
