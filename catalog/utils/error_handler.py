"""
Error handler decorator for HTTP endpoints.

Converts application and store exceptions into HTTP errors so endpoints
do not repeat try/except blocks. Failure alert headers are attached to
the response for BadRequestAlertException.
"""

from functools import wraps
from typing import Any, Callable

from fastapi import HTTPException
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from catalog.exceptions import AppException, BadRequestAlertException
from catalog.logging import logger
from catalog.schemas.errors import AlertErrorResponse
from catalog.utils.headers import create_failure_alert


def alert_http_exception(ex: BadRequestAlertException) -> HTTPException:
    """
    HTTP error for a BadRequestAlertException.

    Usable where the decorator does not apply, e.g. in dependencies.
    """
    return HTTPException(
        status_code=ex.http_status,
        detail=AlertErrorResponse.from_exception(ex).model_dump(by_alias=True),
        headers=create_failure_alert(ex.entity_name, ex.error_key),
    )


def handle_http_errors(func: Callable) -> Callable:
    """
    Decorator for HTTP endpoints to convert exceptions to HTTPException.

    - BadRequestAlertException: 400 with failure alert headers and an
      AlertErrorResponse body
    - other AppException: its http_status with the message as detail
    - SQLAlchemyError: 500 "Database error occurred"
    - RedisError: 500 "Search index error occurred"

    Args:
        func: The HTTP endpoint function to wrap.

    Returns:
        Wrapped function that handles exceptions.

    Example:
        ```python
        @router.post("/authors")
        @handle_http_errors
        async def create_author(payload: AuthorPayload, ...) -> Author:
            return await CreateAuthorCommand(repo, indexer).execute(payload)
        ```
    """

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except BadRequestAlertException as ex:
            logger.warning(
                f"Bad request in {func.__name__}: {ex.message}",
                extra={"entity_name": ex.entity_name, "error_key": ex.error_key},
            )
            raise alert_http_exception(ex)
        except AppException as ex:
            logger.warning(
                f"AppException in {func.__name__}: {ex.message}",
                extra={"exception_type": type(ex).__name__},
            )
            raise HTTPException(
                status_code=ex.http_status,
                detail=ex.message,
            )
        except SQLAlchemyError as ex:
            logger.error(
                f"Database error in {func.__name__}: {ex}",
                exc_info=True,
            )
            raise HTTPException(
                status_code=500,
                detail="Database error occurred",
            )
        except RedisError as ex:
            logger.error(
                f"Search index error in {func.__name__}: {ex}",
                exc_info=True,
            )
            raise HTTPException(
                status_code=500,
                detail="Search index error occurred",
            )

    return wrapper
