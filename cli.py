"""
CLI tool for search index maintenance.

Rebuilds the author index from the entity store, shows index tasks that
have not reached the search store yet and applies them on demand.
"""

import asyncio

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from catalog.repositories.search_index_task_repository import (
    SearchIndexTaskRepository,
)
from catalog.search.indexer import author_indexer, rebuild_author_index
from catalog.search.repository import AuthorSearchRepository
from catalog.settings import app_settings
from catalog.storage.db import async_session
from catalog.storage.redis import RedisPool, get_search_redis_connection

typer_app = typer.Typer(
    name="catalog-cli",
    help="Catalog maintenance CLI - Manage the author search index",
    add_completion=False,
)
console = Console()


async def _reindex(batch_size: int) -> int:
    redis = await get_search_redis_connection()
    try:
        async with async_session() as session:
            return await rebuild_author_index(session, redis, batch_size)
    finally:
        await RedisPool.close_all()


async def _index_status(limit: int) -> tuple[int, list, int]:
    redis = await get_search_redis_connection()
    try:
        indexed = await AuthorSearchRepository(redis).count()
        async with async_session() as session:
            repository = SearchIndexTaskRepository(session)
            pending = await repository.find_pending("author", limit)
            exhausted = await repository.count_exhausted(
                app_settings.SEARCH_INDEX_MAX_ATTEMPTS
            )
        return indexed, pending, exhausted
    finally:
        await RedisPool.close_all()


async def _drain(batch_size: int) -> int:
    redis = await get_search_redis_connection()
    try:
        async with async_session() as session:
            # Exhausted tasks are retried too
            return await author_indexer(session, redis).drain(
                batch_size, max_attempts=None
            )
    finally:
        await RedisPool.close_all()


@typer_app.command(name="reindex")
def reindex(
    batch_size: int = typer.Option(
        app_settings.SEARCH_INDEX_BATCH_SIZE,
        "--batch-size",
        help="Number of authors read from the database per query",
    ),
):
    """
    Drop the author search index and rebuild it from the database.

    Example:
        python cli.py reindex --batch-size 500
    """
    indexed = asyncio.run(_reindex(batch_size))
    console.print(
        Panel.fit(
            f"[green]✓ Reindexed authors[/green]\n\nTotal: {indexed}",
            border_style="green",
            title="Success",
        )
    )


@typer_app.command(name="index-status")
def index_status(
    limit: int = typer.Option(
        20, "--limit", help="Maximum number of pending tasks to show"
    ),
):
    """
    Display indexed documents and pending search index tasks.

    Example:
        python cli.py index-status
    """
    indexed, pending, exhausted = asyncio.run(_index_status(limit))

    console.print()
    console.print(f"[bold]Indexed authors:[/bold] {indexed}")
    console.print()

    table = Table(
        "Task",
        "Author",
        "Operation",
        "Attempts",
        "Last error",
        title="Pending search index tasks",
        show_lines=True,
    )
    for task in pending:
        attempts_style = (
            "red"
            if task.attempts >= app_settings.SEARCH_INDEX_MAX_ATTEMPTS
            else "yellow"
        )
        table.add_row(
            str(task.id),
            str(task.entity_id),
            task.operation.value,
            f"[{attempts_style}]{task.attempts}[/{attempts_style}]",
            task.last_error or "",
        )
    console.print(table)
    console.print()

    if exhausted:
        console.print(
            f"[red]✗[/red] {exhausted} tasks are no longer retried "
            f"automatically, run [cyan]drain-index[/cyan]"
        )
        console.print()
        raise typer.Exit(code=1)


@typer_app.command(name="drain-index")
def drain_index(
    batch_size: int = typer.Option(
        app_settings.SEARCH_INDEX_BATCH_SIZE,
        "--batch-size",
        help="Maximum number of tasks to apply",
    ),
):
    """
    Apply pending search index tasks, including exhausted ones.

    Example:
        python cli.py drain-index
    """
    applied = asyncio.run(_drain(batch_size))
    console.print(f"[bold]Applied:[/bold] {applied} index tasks")


if __name__ == "__main__":
    typer_app()
