"""
REST resource for managing authors.

Writes go to the entity store and are then mirrored to the search index
through the search indexer; reads go to exactly one of the two stores.

Example:
    POST /api/authors {"name": "George Orwell"}
    GET /api/authors?page=0&size=20&sort=name,asc
    GET /api/_search/authors?query=orwell
"""

from fastapi import APIRouter, Query, Response, status

from catalog.commands.author_commands import (
    ENTITY_NAME,
    CreateAuthorCommand,
    DeleteAuthorCommand,
    GetAuthorCommand,
    ListAuthorsCommand,
    SearchAuthorsCommand,
    SearchAuthorsInput,
    UpdateAuthorCommand,
)
from catalog.constants import API_PREFIX
from catalog.dependencies import (
    AuthorIndexerDep,
    AuthorRepoDep,
    AuthorSearchRepoDep,
    PageRequestDep,
)
from catalog.logging import logger
from catalog.models.author import Author
from catalog.schemas.author import AuthorPayload
from catalog.utils.error_handler import handle_http_errors
from catalog.utils.headers import (
    create_entity_creation_alert,
    create_entity_deletion_alert,
    create_entity_update_alert,
    generate_pagination_headers,
    generate_search_pagination_headers,
)

router = APIRouter(prefix=API_PREFIX, tags=["authors"])


async def _create(
    payload: AuthorPayload,
    response: Response,
    repo: AuthorRepoDep,
    indexer: AuthorIndexerDep,
) -> Author:
    result = await CreateAuthorCommand(repo, indexer).execute(payload)
    response.status_code = status.HTTP_201_CREATED
    response.headers["Location"] = f"{API_PREFIX}/authors/{result.id}"
    response.headers.update(
        create_entity_creation_alert(ENTITY_NAME, str(result.id))
    )
    return result


@router.post(
    "/authors",
    response_model=Author,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new author",
)
@handle_http_errors
async def create_author(
    payload: AuthorPayload,
    response: Response,
    repo: AuthorRepoDep,
    indexer: AuthorIndexerDep,
) -> Author:
    """
    Create a new author.

    Returns:
        201 with a Location header and the new author, or 400 if the
        author already has an ID.
    """
    logger.debug(f"REST request to save Author : {payload}")
    return await _create(payload, response, repo, indexer)


@router.put(
    "/authors",
    response_model=Author,
    summary="Update an existing author",
)
@handle_http_errors
async def update_author(
    payload: AuthorPayload,
    response: Response,
    repo: AuthorRepoDep,
    indexer: AuthorIndexerDep,
) -> Author:
    """
    Update an existing author.

    An author without an ID is created instead (201, as for POST).

    Returns:
        200 with the updated author.
    """
    logger.debug(f"REST request to update Author : {payload}")
    if payload.id is None:
        return await _create(payload, response, repo, indexer)

    result = await UpdateAuthorCommand(repo, indexer).execute(payload)
    response.headers.update(
        create_entity_update_alert(ENTITY_NAME, str(payload.id))
    )
    return result


@router.get(
    "/authors",
    response_model=list[Author],
    summary="Get a page of authors",
)
@handle_http_errors
async def get_all_authors(
    response: Response,
    repo: AuthorRepoDep,
    page_request: PageRequestDep,
) -> list[Author]:
    """
    Get a page of authors.

    Returns:
        200 with the authors of the page; X-Total-Count and Link headers.
    """
    logger.debug("REST request to get a page of Authors")
    page = await ListAuthorsCommand(repo).execute(page_request)
    response.headers.update(
        generate_pagination_headers(page, f"{API_PREFIX}/authors")
    )
    return page.content


@router.get(
    "/authors/{id}",
    response_model=Author,
    summary="Get an author",
    responses={404: {"description": "Author not found"}},
)
@handle_http_errors
async def get_author(id: int, repo: AuthorRepoDep) -> Author | Response:
    """
    Get the author with the given ID.

    Returns:
        200 with the author, or 404 with an empty body.
    """
    logger.debug(f"REST request to get Author : {id}")
    author = await GetAuthorCommand(repo).execute(id)
    if author is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return author


@router.delete(
    "/authors/{id}",
    status_code=status.HTTP_200_OK,
    response_class=Response,
    summary="Delete an author",
)
@handle_http_errors
async def delete_author(
    id: int,
    repo: AuthorRepoDep,
    indexer: AuthorIndexerDep,
) -> Response:
    """
    Delete the author with the given ID from both stores.

    Returns:
        200 with an empty body.
    """
    logger.debug(f"REST request to delete Author : {id}")
    await DeleteAuthorCommand(repo, indexer).execute(id)
    return Response(
        status_code=status.HTTP_200_OK,
        headers=create_entity_deletion_alert(ENTITY_NAME, str(id)),
    )


@router.get(
    "/_search/authors",
    response_model=list[Author],
    summary="Search authors",
)
@handle_http_errors
async def search_authors(
    response: Response,
    search_repo: AuthorSearchRepoDep,
    page_request: PageRequestDep,
    query: str = Query(..., description="Full-text query"),
) -> list[Author]:
    """
    Search for the authors matching a full-text query.

    Returns:
        200 with the matching authors of the page; pagination headers
        whose links keep the query.
    """
    logger.debug(f"REST request to search for a page of Authors for query {query}")
    page = await SearchAuthorsCommand(search_repo).execute(
        SearchAuthorsInput(query=query, page_request=page_request)
    )
    response.headers.update(
        generate_search_pagination_headers(
            query, page, f"{API_PREFIX}/_search/authors"
        )
    )
    return page.content
