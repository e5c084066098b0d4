"""
Response headers for alerts and pagination.

Alert headers tell a client UI which notification to show after a
request; the message is an i18n key of the form
``<APP_NAME>.<entity>.<created|updated|deleted>`` and the params header
carries the entity ID (or the entity name for failures).

Pagination headers follow RFC 5988: ``Link`` holds next/prev/last/first
URLs and ``X-Total-Count`` the total number of elements.
"""

from urllib.parse import quote, urlencode

from catalog.constants import LINK_HEADER, TOTAL_COUNT_HEADER
from catalog.schemas.pagination import Page
from catalog.settings import app_settings


def _header_name(kind: str) -> str:
    return f"X-{app_settings.APP_NAME}-{kind}"


def create_alert(message: str, param: str) -> dict[str, str]:
    return {
        _header_name("alert"): message,
        _header_name("params"): quote(param),
    }


def create_entity_creation_alert(entity_name: str, param: str) -> dict[str, str]:
    return create_alert(f"{app_settings.APP_NAME}.{entity_name}.created", param)


def create_entity_update_alert(entity_name: str, param: str) -> dict[str, str]:
    return create_alert(f"{app_settings.APP_NAME}.{entity_name}.updated", param)


def create_entity_deletion_alert(entity_name: str, param: str) -> dict[str, str]:
    return create_alert(f"{app_settings.APP_NAME}.{entity_name}.deleted", param)


def create_failure_alert(entity_name: str, error_key: str) -> dict[str, str]:
    return {
        _header_name("error"): f"error.{error_key}",
        _header_name("params"): quote(entity_name),
    }


def _page_uri(base_url: str, page: int, size: int, query: str | None) -> str:
    params: dict[str, str | int] = {"page": page, "size": size}
    if query is not None:
        params["query"] = query
    return f"{base_url}?{urlencode(params)}"


def _pagination_headers(
    page: Page, base_url: str, query: str | None = None
) -> dict[str, str]:
    links = []
    if page.page + 1 < page.total_pages:
        links.append(
            f'<{_page_uri(base_url, page.page + 1, page.size, query)}>; rel="next"'
        )
    if page.page > 0:
        links.append(
            f'<{_page_uri(base_url, page.page - 1, page.size, query)}>; rel="prev"'
        )
    last_page = max(page.total_pages - 1, 0)
    links.append(f'<{_page_uri(base_url, last_page, page.size, query)}>; rel="last"')
    links.append(f'<{_page_uri(base_url, 0, page.size, query)}>; rel="first"')

    return {
        TOTAL_COUNT_HEADER: str(page.total),
        LINK_HEADER: ",".join(links),
    }


def generate_pagination_headers(page: Page, base_url: str) -> dict[str, str]:
    """
    Pagination headers for a page of a plain collection.

    Example:
        >>> generate_pagination_headers(page, "/api/authors")["Link"]
        '</api/authors?page=1&size=20>; rel="next",...'
    """
    return _pagination_headers(page, base_url)


def generate_search_pagination_headers(
    query: str, page: Page, base_url: str
) -> dict[str, str]:
    """Pagination headers for a page of search results; links keep `query`."""
    return _pagination_headers(page, base_url, query)
