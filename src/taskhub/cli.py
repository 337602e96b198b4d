"""taskhub CLI entry point."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

console = Console()

T = TypeVar("T")


def run_async(coro: Callable[[], Awaitable[T]]) -> T:
    """Run an async function and close the database afterwards.

    aiosqlite keeps a background thread per connection; closing it keeps
    CLI commands from hanging on exit.
    """
    from taskhub.db import close_database

    async def wrapped() -> T:
        try:
            return await coro()
        finally:
            await close_database()

    return asyncio.run(wrapped())


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rich handler."""
    from taskhub.config import get_settings

    level = logging.DEBUG if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=console)],
    )


def _db_path(db_path: str | None) -> Path:
    from taskhub.config import get_settings

    return Path(db_path) if db_path else get_settings().database_path


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """taskhub - tasks, notes and users REST API."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the taskhub API server."""
    import uvicorn

    from taskhub.config import get_settings

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print(f"[bold green]Starting taskhub API server on {host}:{port}[/bold green]")

    uvicorn.run(
        "taskhub.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@cli.command()
@click.option("--db-path", type=click.Path(), help="Database path")
def init(db_path: str | None) -> None:
    """Create the database and its tables."""
    from taskhub.db import get_database

    async def do_init() -> None:
        db = await get_database(_db_path(db_path))
        console.print(f"[green]Database initialized at {db.db_path}[/green]")

    run_async(do_init)


@cli.command()
@click.option("--db-path", type=click.Path(), help="Database path")
def status(db_path: str | None) -> None:
    """Show record counts."""
    from taskhub.db import NoteRepository, TaskRepository, UserRepository, get_database

    async def show_status() -> None:
        db = await get_database(_db_path(db_path))

        table = Table(title="taskhub Status")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Users", str(await UserRepository(db).count()))
        table.add_row("Tasks", str(await TaskRepository(db).count()))
        table.add_row("Notes", str(await NoteRepository(db).count()))

        console.print(table)

    run_async(show_status)


@cli.group()
def task() -> None:
    """Inspect tasks."""
    pass


@task.command("list")
@click.argument("user_id", type=int)
@click.option("--page", "-p", default=1, type=click.IntRange(min=1), help="Page number")
@click.option("--per-page", default=10, type=click.IntRange(min=1), help="Tasks per page")
@click.option("--name", "-n", default="", help="Filter by name")
@click.option("--status", "-s", default="", help="Filter by status (0 or 1)")
@click.option("--db-path", type=click.Path(), help="Database path")
def task_list(
    user_id: int, page: int, per_page: int, name: str, status: str, db_path: str | None
) -> None:
    """List one page of a user's tasks."""
    from taskhub.db import TaskRepository, get_database
    from taskhub.domain import PageRequest, TaskFilters, TaskStatus

    async def do_list() -> None:
        db = await get_database(_db_path(db_path))
        result = await TaskRepository(db).get_by_page(
            user_id,
            PageRequest(page=page, per_page=per_page),
            TaskFilters(name=name, status=status),
        )

        if not result.items:
            console.print(f"[yellow]No tasks found ({result.total} in total)[/yellow]")
            return

        table = Table(title=f"Tasks of user {user_id} (page {result.page}/{result.total_pages})")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Status")
        table.add_column("Created")

        for t in result.items:
            status_color = "green" if t.status == TaskStatus.DONE else "yellow"
            table.add_row(
                str(t.id),
                t.name[:40],
                f"[{status_color}]{t.status.name.lower()}[/{status_color}]",
                t.created_at or "-",
            )

        console.print(table)

    run_async(do_list)


@cli.group()
def note() -> None:
    """Inspect notes."""
    pass


@note.command("search")
@click.argument("query")
@click.option("--db-path", type=click.Path(), help="Database path")
def note_search(query: str, db_path: str | None) -> None:
    """Search notes by name or description."""
    from taskhub.db import NoteRepository, get_database
    from taskhub.errors import EmptySearchResultError

    async def do_search() -> None:
        db = await get_database(_db_path(db_path))
        try:
            notes = await NoteRepository(db).search(query)
        except EmptySearchResultError as e:
            console.print(f"[yellow]{e.message}[/yellow]")
            return

        table = Table(title=f"Notes matching '{query}'")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Description")

        for n in notes:
            table.add_row(str(n.id), n.name[:40], (n.description or "-")[:60])

        console.print(table)

    run_async(do_search)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
