"""
Tests for Author commands.

These tests verify that commands correctly encapsulate business logic
and can be tested independently of the HTTP layer.
"""

from unittest.mock import AsyncMock

import pytest

from catalog.commands.author_commands import (
    CreateAuthorCommand,
    DeleteAuthorCommand,
    GetAuthorCommand,
    ListAuthorsCommand,
    SearchAuthorsCommand,
    SearchAuthorsInput,
    UpdateAuthorCommand,
)
from catalog.exceptions import BadRequestAlertException
from catalog.models.author import Author
from catalog.models.search_index_task import IndexOperation
from catalog.schemas.author import AuthorPayload
from catalog.schemas.pagination import Page, PageRequest
from catalog.search.query import Occur
from tests.mocks.repository_mocks import create_mock_author_repository


@pytest.fixture
def mock_indexer():
    indexer = AsyncMock()
    indexer.schedule.return_value = "task"
    indexer.apply.return_value = True
    return indexer


class TestCreateAuthorCommand:
    """Tests for CreateAuthorCommand."""

    @pytest.mark.asyncio
    async def test_create_author_success(self, mock_indexer):
        """Test that the author is saved, committed, then indexed."""
        mock_repo = create_mock_author_repository()
        mock_repo.save.return_value = Author(id=1, name="George Orwell")

        command = CreateAuthorCommand(mock_repo, mock_indexer)
        result = await command.execute(AuthorPayload(name="George Orwell"))

        assert result.id == 1
        mock_repo.save.assert_awaited_once()
        mock_indexer.schedule.assert_awaited_once_with(1, IndexOperation.SAVE)
        mock_repo.commit.assert_awaited_once()
        mock_indexer.apply.assert_awaited_once_with("task")

    @pytest.mark.asyncio
    async def test_create_author_with_id(self, mock_indexer):
        """Test creating an author that already has an ID raises error."""
        mock_repo = create_mock_author_repository()

        command = CreateAuthorCommand(mock_repo, mock_indexer)

        with pytest.raises(BadRequestAlertException) as exc_info:
            await command.execute(AuthorPayload(id=1, name="George Orwell"))

        assert exc_info.value.error_key == "idexists"
        assert exc_info.value.entity_name == "author"
        mock_repo.save.assert_not_awaited()
        mock_indexer.schedule.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", [None, ""])
    async def test_create_author_with_id_and_no_name(self, mock_indexer, name):
        """Test that the ID is rejected before the name is looked at."""
        mock_repo = create_mock_author_repository()
        command = CreateAuthorCommand(mock_repo, mock_indexer)

        with pytest.raises(BadRequestAlertException) as exc_info:
            await command.execute(AuthorPayload(id=1, name=name))

        assert exc_info.value.error_key == "idexists"
        mock_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", [None, "", "x" * 256])
    async def test_create_author_invalid_name(self, mock_indexer, name):
        mock_repo = create_mock_author_repository()
        command = CreateAuthorCommand(mock_repo, mock_indexer)

        with pytest.raises(BadRequestAlertException) as exc_info:
            await command.execute(AuthorPayload(name=name))

        assert exc_info.value.error_key == "nameinvalid"
        assert exc_info.value.entity_name == "author"
        mock_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_author_commit_fails(self, mock_indexer):
        """Test that the index is not touched when the commit fails."""
        mock_repo = create_mock_author_repository()
        mock_repo.save.return_value = Author(id=1, name="George Orwell")
        mock_repo.commit.side_effect = RuntimeError("commit failed")

        command = CreateAuthorCommand(mock_repo, mock_indexer)

        with pytest.raises(RuntimeError):
            await command.execute(AuthorPayload(name="George Orwell"))

        mock_indexer.apply.assert_not_awaited()


class TestUpdateAuthorCommand:
    """Tests for UpdateAuthorCommand."""

    @pytest.mark.asyncio
    async def test_update_author_success(self, mock_indexer):
        mock_repo = create_mock_author_repository()
        mock_repo.save.return_value = Author(id=1, name="George Orwell")

        command = UpdateAuthorCommand(mock_repo, mock_indexer)
        result = await command.execute(AuthorPayload(id=1, name="George Orwell"))

        assert result.name == "George Orwell"
        saved = mock_repo.save.call_args.args[0]
        assert saved.id == 1
        mock_indexer.schedule.assert_awaited_once_with(1, IndexOperation.SAVE)

    @pytest.mark.asyncio
    async def test_update_author_without_id(self, mock_indexer):
        command = UpdateAuthorCommand(
            create_mock_author_repository(), mock_indexer
        )

        with pytest.raises(ValueError):
            await command.execute(AuthorPayload(name="George Orwell"))

    @pytest.mark.asyncio
    async def test_update_author_without_name(self, mock_indexer):
        mock_repo = create_mock_author_repository()
        command = UpdateAuthorCommand(mock_repo, mock_indexer)

        with pytest.raises(BadRequestAlertException) as exc_info:
            await command.execute(AuthorPayload(id=1))

        assert exc_info.value.error_key == "nameinvalid"
        mock_repo.save.assert_not_awaited()


class TestDeleteAuthorCommand:
    """Tests for DeleteAuthorCommand."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("existed", [True, False])
    async def test_delete_author(self, mock_indexer, existed):
        mock_repo = create_mock_author_repository()
        mock_repo.delete.return_value = existed

        command = DeleteAuthorCommand(mock_repo, mock_indexer)
        await command.execute(7)

        mock_repo.delete.assert_awaited_once_with(7)
        mock_indexer.schedule.assert_awaited_once_with(7, IndexOperation.DELETE)
        mock_repo.commit.assert_awaited_once()
        mock_indexer.apply.assert_awaited_once_with("task")


class TestReadCommands:
    """Tests for commands that only read."""

    @pytest.mark.asyncio
    async def test_get_author(self):
        mock_repo = create_mock_author_repository()
        mock_repo.find_one.return_value = Author(id=1, name="George Orwell")

        result = await GetAuthorCommand(mock_repo).execute(1)

        assert result.name == "George Orwell"
        mock_repo.find_one.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_list_authors(self):
        mock_repo = create_mock_author_repository()
        page_request = PageRequest(page=1, size=10)
        mock_repo.find_all.return_value = Page.empty(page_request)

        result = await ListAuthorsCommand(mock_repo).execute(page_request)

        assert result.total == 0
        mock_repo.find_all.assert_awaited_once_with(page_request)

    @pytest.mark.asyncio
    async def test_search_authors(self):
        search_repo = AsyncMock()
        search_repo.search.return_value = Page.empty(PageRequest())

        command = SearchAuthorsCommand(search_repo)
        await command.execute(SearchAuthorsInput(query="+orwell"))

        expression, page_request = search_repo.search.call_args.args
        assert expression.raw == "+orwell"
        assert expression.clauses[0].occur == Occur.MUST
        assert page_request == PageRequest()
