"""
FastAPI dependencies for the application.

Repositories are built per request. The entity repository and the
search index task repository share the request's database session, so
an entity change and its index task are committed together.
"""

from typing import Annotated

from fastapi import Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from catalog.constants import MAX_PAGE_SIZE
from catalog.exceptions import BadRequestAlertException
from catalog.repositories.author_repository import AuthorRepository
from catalog.repositories.search_index_task_repository import (
    SearchIndexTaskRepository,
)
from catalog.schemas.pagination import PageRequest, SortOrder
from catalog.search.indexer import SearchIndexer
from catalog.search.repository import AuthorSearchRepository
from catalog.settings import app_settings
from catalog.storage.db import get_session
from catalog.storage.redis import get_search_redis_connection
from catalog.utils.error_handler import alert_http_exception

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_author_repository(session: SessionDep) -> AuthorRepository:
    return AuthorRepository(session)


def get_search_index_task_repository(
    session: SessionDep,
) -> SearchIndexTaskRepository:
    return SearchIndexTaskRepository(session)


async def get_author_search_repository() -> AuthorSearchRepository:
    return AuthorSearchRepository(await get_search_redis_connection())


AuthorRepoDep = Annotated[AuthorRepository, Depends(get_author_repository)]
AuthorSearchRepoDep = Annotated[
    AuthorSearchRepository, Depends(get_author_search_repository)
]
SearchIndexTaskRepoDep = Annotated[
    SearchIndexTaskRepository, Depends(get_search_index_task_repository)
]


def get_author_indexer(
    repo: AuthorRepoDep,
    search_repo: AuthorSearchRepoDep,
    task_repo: SearchIndexTaskRepoDep,
) -> SearchIndexer:
    return SearchIndexer(repo, search_repo, task_repo)


AuthorIndexerDep = Annotated[SearchIndexer, Depends(get_author_indexer)]


def get_page_request(
    page: Annotated[int, Query(ge=0, description="Page index, starting at 0")] = 0,
    size: Annotated[
        int | None, Query(ge=1, le=MAX_PAGE_SIZE, description="Page size")
    ] = None,
    sort: Annotated[
        list[str] | None,
        Query(description="Sort order as property[,asc|desc], repeatable"),
    ] = None,
) -> PageRequest:
    """
    Build a PageRequest from the `page`, `size` and `sort` query parameters.

    Example:
        GET /api/authors?page=1&size=10&sort=name,desc&sort=id

    Raises:
        BadRequestAlertException: If a sort direction is not asc or desc.
    """
    try:
        orders = [SortOrder.parse(value) for value in sort or [] if value]
    except ValueError as ex:
        raise alert_http_exception(
            BadRequestAlertException(str(ex), "pagination", "sortinvalid")
        )

    return PageRequest(
        page=page,
        size=size if size is not None else app_settings.DEFAULT_PAGE_SIZE,
        sort=orders,
    )


PageRequestDep = Annotated[PageRequest, Depends(get_page_request)]

__all__ = [
    "AuthorIndexerDep",
    "AuthorRepoDep",
    "AuthorSearchRepoDep",
    "PageRequestDep",
    "SessionDep",
    "get_author_indexer",
    "get_author_repository",
    "get_author_search_repository",
    "get_page_request",
    "get_search_index_task_repository",
]
