"""Tests for the HTTP error handler decorator."""

import pytest
from fastapi import HTTPException
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.exc import SQLAlchemyError

from catalog.exceptions import AppException, BadRequestAlertException
from catalog.utils.error_handler import handle_http_errors


def raising(ex):
    @handle_http_errors
    async def endpoint():
        raise ex

    return endpoint


class TestHandleHttpErrors:
    @pytest.mark.asyncio
    async def test_passes_result_through(self):
        @handle_http_errors
        async def endpoint(value):
            return value * 2

        assert await endpoint(21) == 42

    @pytest.mark.asyncio
    async def test_bad_request_alert(self):
        endpoint = raising(
            BadRequestAlertException(
                "A new author cannot already have an ID", "author", "idexists"
            )
        )

        with pytest.raises(HTTPException) as exc_info:
            await endpoint()

        ex = exc_info.value
        assert ex.status_code == 400
        assert ex.headers == {
            "X-catalogApp-error": "error.idexists",
            "X-catalogApp-params": "author",
        }
        assert ex.detail == {
            "title": "A new author cannot already have an ID",
            "status": 400,
            "entityName": "author",
            "errorKey": "idexists",
            "message": "error.idexists",
            "params": "author",
        }

    @pytest.mark.asyncio
    async def test_app_exception(self):
        with pytest.raises(HTTPException) as exc_info:
            await raising(AppException("Something failed"))()

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Something failed"

    @pytest.mark.asyncio
    async def test_database_error(self):
        with pytest.raises(HTTPException) as exc_info:
            await raising(SQLAlchemyError("connection lost"))()

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Database error occurred"

    @pytest.mark.asyncio
    async def test_search_store_error(self):
        with pytest.raises(HTTPException) as exc_info:
            await raising(RedisConnectionError("Connection refused"))()

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Search index error occurred"

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self):
        with pytest.raises(KeyError):
            await raising(KeyError("id"))()
