"""
Pytest configuration and fixtures for testing.

Provides in-memory stores wired into the FastAPI application through
dependency overrides, so HTTP tests run without PostgreSQL or Redis.
"""

import os

import pytest

# Set required environment variables for testing before importing catalog modules
os.environ.setdefault("DB_USER", "test-user")
os.environ.setdefault("DB_PASSWORD", "test-password")
os.environ.setdefault("SEARCH_INDEX_WORKER_ENABLED", "false")

from fastapi.testclient import TestClient  # noqa: E402

from catalog.search.indexer import SearchIndexer  # noqa: E402
from tests.mocks.repository_mocks import (  # noqa: E402
    InMemoryAuthorRepository,
    InMemoryAuthorSearchRepository,
    InMemorySearchIndexTaskRepository,
)


@pytest.fixture
def author_repo():
    return InMemoryAuthorRepository()


@pytest.fixture
def task_repo():
    return InMemorySearchIndexTaskRepository()


@pytest.fixture
def search_repo():
    return InMemoryAuthorSearchRepository()


@pytest.fixture
def indexer(author_repo, search_repo, task_repo):
    """
    Provides a search indexer over the in-memory stores.

    Returns:
        SearchIndexer: Indexer for authors
    """
    return SearchIndexer(author_repo, search_repo, task_repo)


@pytest.fixture
def app(author_repo, search_repo, task_repo):
    """
    Provides the catalog application backed by the in-memory stores.

    Returns:
        FastAPI: Application with repository dependencies overridden
    """
    from catalog import application
    from catalog.dependencies import (
        get_author_repository,
        get_author_search_repository,
        get_search_index_task_repository,
    )

    test_app = application()
    test_app.dependency_overrides[get_author_repository] = lambda: author_repo
    test_app.dependency_overrides[get_author_search_repository] = (
        lambda: search_repo
    )
    test_app.dependency_overrides[get_search_index_task_repository] = (
        lambda: task_repo
    )
    return test_app


@pytest.fixture
def client(app):
    """
    Create a test client for the FastAPI application.

    Startup handlers are not run, so no database or Redis is contacted.

    Returns:
        TestClient: FastAPI test client instance.
    """
    return TestClient(app)
