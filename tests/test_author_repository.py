"""
Tests for AuthorRepository and SearchIndexTaskRepository.

These tests verify that the repositories correctly interact with the
database session using mocks.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from catalog.exceptions import BadRequestAlertException
from catalog.models.author import Author
from catalog.models.search_index_task import IndexOperation, SearchIndexTask
from catalog.repositories.author_repository import AuthorRepository
from catalog.repositories.search_index_task_repository import (
    SearchIndexTaskRepository,
)
from catalog.schemas.pagination import PageRequest, SortOrder


@pytest.fixture
def mock_session():
    """
    Provides a mock AsyncSession for testing.

    Returns:
        AsyncMock: Mocked database session
    """
    session = AsyncMock(spec=AsyncSession)
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.rollback = AsyncMock()
    session.commit = AsyncMock()
    session.exec = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.merge = AsyncMock()
    session.delete = AsyncMock()
    return session


def exec_result(*, one=None, rows=None):
    result = MagicMock()
    result.one.return_value = one
    result.all.return_value = rows or []
    return result


class TestAuthorRepositorySave:
    """Tests for repository save operations."""

    @pytest.mark.asyncio
    async def test_save_new_author(self, mock_session):
        """Test that an author without ID is added."""
        repo = AuthorRepository(mock_session)
        author = Author(name="George Orwell")

        saved = await repo.save(author)

        assert saved == author
        mock_session.add.assert_called_once_with(author)
        mock_session.merge.assert_not_awaited()
        mock_session.flush.assert_awaited_once()
        mock_session.refresh.assert_awaited_once_with(author)
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_save_author_with_id_merges(self, mock_session):
        """Test that an author with a stored ID is merged into the session."""
        repo = AuthorRepository(mock_session)
        author = Author(id=5, name="George Orwell")
        merged = Author(id=5, name="George Orwell")
        mock_session.get.return_value = Author(id=5, name="Eric Blair")
        mock_session.merge.return_value = merged

        saved = await repo.save(author)

        assert saved is merged
        mock_session.merge.assert_awaited_once_with(author)
        mock_session.add.assert_not_called()
        mock_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_save_author_with_unknown_id_moves_sequence(self, mock_session):
        """Test that inserting an explicit ID keeps generated IDs unique."""
        repo = AuthorRepository(mock_session)
        author = Author(id=5, name="Zadie Smith")
        mock_session.get.return_value = None
        mock_session.merge.return_value = author

        await repo.save(author)

        mock_session.merge.assert_awaited_once_with(author)
        mock_session.execute.assert_awaited_once()
        statement = str(mock_session.execute.await_args.args[0])
        assert "setval(pg_get_serial_sequence('author', 'id')" in statement
        assert "SELECT max(id) FROM author" in statement

    @pytest.mark.asyncio
    async def test_save_rolls_back_on_error(self, mock_session):
        repo = AuthorRepository(mock_session)
        mock_session.flush.side_effect = SQLAlchemyError("Database error")

        with pytest.raises(SQLAlchemyError):
            await repo.save(Author(name="George Orwell"))

        mock_session.rollback.assert_awaited_once()


class TestAuthorRepositoryRead:
    """Tests for repository read operations."""

    @pytest.mark.asyncio
    async def test_find_one(self, mock_session):
        repo = AuthorRepository(mock_session)
        expected = Author(id=1, name="George Orwell")
        mock_session.get.return_value = expected

        assert await repo.find_one(1) == expected
        mock_session.get.assert_awaited_once_with(
            Author, 1, populate_existing=True
        )

    @pytest.mark.asyncio
    async def test_find_one_not_found(self, mock_session):
        repo = AuthorRepository(mock_session)
        mock_session.get.return_value = None

        assert await repo.find_one(99999) is None

    @pytest.mark.asyncio
    async def test_find_all(self, mock_session):
        repo = AuthorRepository(mock_session)
        authors = [Author(id=3, name="Aldous Huxley")]
        mock_session.exec.side_effect = [
            exec_result(one=3),
            exec_result(rows=authors),
        ]

        page = await repo.find_all(PageRequest(page=1, size=2))

        assert page.content == authors
        assert page.total == 3
        assert page.total_pages == 2
        assert mock_session.exec.await_count == 2

    @pytest.mark.asyncio
    async def test_find_all_invalid_sort(self, mock_session):
        repo = AuthorRepository(mock_session)
        page_request = PageRequest(sort=[SortOrder(property="birthday")])

        with pytest.raises(BadRequestAlertException) as exc_info:
            await repo.find_all(page_request)

        assert exc_info.value.error_key == "sortinvalid"
        assert exc_info.value.entity_name == "author"
        mock_session.exec.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_iter_batches(self, mock_session):
        repo = AuthorRepository(mock_session)
        first = [Author(id=1, name="A"), Author(id=2, name="B")]
        second = [Author(id=5, name="C")]
        mock_session.exec.side_effect = [
            exec_result(rows=first),
            exec_result(rows=second),
            exec_result(rows=[]),
        ]

        batches = [batch async for batch in repo.iter_batches(2)]

        assert batches == [first, second]


class TestAuthorRepositoryDelete:
    """Tests for repository delete operations."""

    @pytest.mark.asyncio
    async def test_delete_existing(self, mock_session):
        repo = AuthorRepository(mock_session)
        author = Author(id=1, name="George Orwell")
        mock_session.get.return_value = author

        assert await repo.delete(1) is True
        mock_session.delete.assert_awaited_once_with(author)
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_absent(self, mock_session):
        repo = AuthorRepository(mock_session)
        mock_session.get.return_value = None

        assert await repo.delete(1) is False
        mock_session.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_commit_rolls_back_on_error(self, mock_session):
        repo = AuthorRepository(mock_session)
        mock_session.commit.side_effect = SQLAlchemyError("Database error")

        with pytest.raises(SQLAlchemyError):
            await repo.commit()

        mock_session.rollback.assert_awaited_once()


class TestSearchIndexTaskRepository:
    """Tests for the index task queue."""

    @pytest.mark.asyncio
    async def test_enqueue(self, mock_session):
        repo = SearchIndexTaskRepository(mock_session)

        task = await repo.enqueue("author", 7, IndexOperation.DELETE)

        assert task.entity_name == "author"
        assert task.entity_id == 7
        assert task.operation == IndexOperation.DELETE
        assert task.attempts == 0
        mock_session.add.assert_called_once_with(task)
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mark_failed(self, mock_session):
        repo = SearchIndexTaskRepository(mock_session)
        task = SearchIndexTask(
            id=1,
            entity_name="author",
            entity_id=7,
            operation=IndexOperation.SAVE,
        )
        mock_session.merge.return_value = task

        await repo.mark_failed(task, "x" * 2000)

        assert task.attempts == 1
        assert len(task.last_error) == 1000

    @pytest.mark.asyncio
    async def test_find_pending(self, mock_session):
        repo = SearchIndexTaskRepository(mock_session)
        tasks = [
            SearchIndexTask(
                id=1, entity_name="author", entity_id=7, operation=IndexOperation.SAVE
            )
        ]
        mock_session.exec.return_value = exec_result(rows=tasks)

        assert await repo.find_pending("author", 10, max_attempts=3) == tasks

    @pytest.mark.asyncio
    async def test_remove(self, mock_session):
        repo = SearchIndexTaskRepository(mock_session)
        task = SearchIndexTask(
            id=1, entity_name="author", entity_id=7, operation=IndexOperation.SAVE
        )
        mock_session.get.return_value = task

        await repo.remove(task)

        mock_session.get.assert_awaited_once_with(SearchIndexTask, 1)
        mock_session.delete.assert_awaited_once_with(task)
