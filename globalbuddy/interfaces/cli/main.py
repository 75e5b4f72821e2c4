"""
CLI Main - Typer-based command-line interface.

Usage:
    globalbuddy init
    globalbuddy seed
    globalbuddy search "租房"
    globalbuddy ask "曼谷怎么租房"
    globalbuddy serve
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from globalbuddy.config import GlobalBuddyError

app = typer.Typer(
    name="globalbuddy",
    help="GlobalBuddy - Community platform for students abroad",
    add_completion=False,
)
console = Console()

_DB_OPTION = typer.Option(None, "--db", help="SQLite database path")


def _open_repository(db_path: Path | None):
    from globalbuddy.adapters import SQLiteRepository
    from globalbuddy.config import get_settings

    return SQLiteRepository(db_path or get_settings().db_path)


def _build_ranker():
    from globalbuddy.config import get_settings
    from globalbuddy.domains.matching import Ranker, SynonymRegistry

    return Ranker.from_registry(SynonymRegistry.from_settings(get_settings()))


def _results_table(title: str, rows: list[tuple[str, str, float]]) -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("ID", style="dim")
    table.add_column("Score", style="green", justify="right")
    for i, (doc_title, doc_id, value) in enumerate(rows, 1):
        table.add_row(str(i), doc_title, doc_id, f"{value:.3f}")
    return table


@app.command()
def init(db: Path | None = _DB_OPTION) -> None:
    """Create the database schema."""
    asyncio.run(_init_async(db))


async def _init_async(db: Path | None) -> None:
    """Async initialization."""
    repo = _open_repository(db)
    try:
        await repo.initialize()
    except GlobalBuddyError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
    finally:
        await repo.close()

    console.print("\n[green]Initialization complete![/green]")
    console.print(f"[dim]Database: {repo.db_path}[/dim]")


@app.command()
def seed(
    db: Path | None = _DB_OPTION,
    keep: bool = typer.Option(False, "--keep", help="Keep existing rows"),
) -> None:
    """Load the demo communities and posts."""
    asyncio.run(_seed_async(db, keep))


async def _seed_async(db: Path | None, keep: bool) -> None:
    """Async seeding."""
    from globalbuddy.adapters import seed_database

    repo = _open_repository(db)
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task("Seeding...", total=None)
        try:
            await repo.initialize()
            communities, posts = await seed_database(repo, reset=not keep)
        except GlobalBuddyError as e:
            console.print(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(1)
        finally:
            await repo.close()

    console.print(f"\n[green]Seeded[/green] {communities} communities, {posts} posts")


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    limit: int | None = typer.Option(
        None, "--limit", "-n", help="Results per kind (defaults to SEARCH_RESULT_LIMIT)"
    ),
    db: Path | None = _DB_OPTION,
) -> None:
    """Search posts and communities."""
    if not query.strip():
        console.print("[red]Error:[/red] Empty query")
        raise typer.Exit(1)
    asyncio.run(_search_async(query, limit, db))


async def _search_async(query: str, limit: int | None, db: Path | None) -> None:
    """Async search implementation."""
    from globalbuddy.config import get_settings
    from globalbuddy.domains.matching import community_text, post_text

    if limit is None:
        limit = get_settings().search_result_limit

    repo = _open_repository(db)
    try:
        await repo.initialize()
        post_rows = await repo.list_posts()
        community_rows = await repo.list_communities()
    except GlobalBuddyError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
    finally:
        await repo.close()

    ranker = _build_ranker()
    post_results = ranker.rank(query, post_rows, post_text, limit)
    community_results = ranker.rank(query, community_rows, community_text, limit)

    console.print(f"\n[yellow]Searching for:[/yellow] {query}\n")
    console.print(
        _results_table(
            "Posts",
            [(r.document["title"], r.document["id"], r.score) for r in post_results],
        )
    )
    console.print(
        _results_table(
            "Communities",
            [(r.document["title"], r.document["id"], r.score) for r in community_results],
        )
    )


@app.command()
def posts(
    query: str | None = typer.Option(None, "--query", "-q", help="Rank by relevance"),
    db: Path | None = _DB_OPTION,
) -> None:
    """List posts, newest first or ranked by a query."""
    asyncio.run(_posts_async(query, db))


async def _posts_async(query: str | None, db: Path | None) -> None:
    """Async post listing."""
    from globalbuddy.domains.matching import post_text

    repo = _open_repository(db)
    try:
        await repo.initialize()
        rows: list[dict[str, Any]] = await repo.list_posts()
    except GlobalBuddyError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
    finally:
        await repo.close()

    if not query:
        table = Table(title="Posts")
        table.add_column("Title", style="cyan")
        table.add_column("ID", style="dim")
        table.add_column("Created", style="dim")
        for row in rows:
            table.add_row(row["title"], row["id"], str(row.get("created_at", "")))
        console.print(table)
        return

    results = _build_ranker().rank(query, rows, post_text)
    console.print(
        _results_table(
            f"Posts matching '{query}'",
            [(r.document["title"], r.document["id"], r.score) for r in results],
        )
    )


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question to answer"),
    db: Path | None = _DB_OPTION,
) -> None:
    """Answer a question from recent community posts."""
    if not question.strip():
        console.print("[red]Error:[/red] Empty question")
        raise typer.Exit(1)
    asyncio.run(_ask_async(question, db))


async def _ask_async(question: str, db: Path | None) -> None:
    """Async question answering."""
    from globalbuddy.config import get_settings
    from globalbuddy.domains.matching import Document
    from globalbuddy.domains.qa import AnswerComposer

    settings = get_settings()
    repo = _open_repository(db)
    try:
        await repo.initialize()
        rows = await repo.list_recent_posts(settings.qa_window_size)
    except GlobalBuddyError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
    finally:
        await repo.close()

    composer = AnswerComposer(
        _build_ranker(),
        result_limit=settings.qa_result_limit,
        window_size=settings.qa_window_size,
        snippet_length=settings.qa_snippet_length,
        empty_answer=settings.qa_empty_answer,
    )
    result = composer.answer(question, [Document.model_validate(row) for row in rows])

    console.print(Panel(result.answer, title=question))
    for ref in result.references:
        console.print(f"  [dim]{ref.id}[/dim] {ref.title} [green]{ref.score:.3f}[/green]")


@app.command()
def serve(
    host: str | None = typer.Option(
        None, "--host", "-h", help="Host to bind (defaults to API_HOST)"
    ),
    port: int | None = typer.Option(
        None, "--port", "-p", help="Port to bind (defaults to API_PORT)"
    ),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    from globalbuddy.config import get_settings

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print("\n[green]Starting GlobalBuddy API server[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "globalbuddy.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from globalbuddy import __version__

    console.print(f"GlobalBuddy v{__version__}")


def main() -> None:
    """CLI entry point."""
    from globalbuddy.config import configure_logging, get_settings

    configure_logging(get_settings().log_level)
    app()


if __name__ == "__main__":
    main()
