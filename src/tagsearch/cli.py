"""Command line interface for TagSearch."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from tagsearch.config import AppConfig
from tagsearch.errors import ConfigurationError
from tagsearch.index.client import IndexClientFactory
from tagsearch.index.search import SearchController
from tagsearch.models import ALL, FacetSelection, MediaType, SearchResult
from tagsearch.web.app import app as web_app, build_embedder
from tagsearch.web.schema import build_rows, columns_for_policy


console = Console()
app = typer.Typer(help="TagSearch - vector search over tagged media")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_config() -> AppConfig:
    try:
        return AppConfig.from_env()
    except ConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc


async def _run_search(
    config: AppConfig, query: str, db: Optional[str], facets: FacetSelection
) -> tuple[List[SearchResult], Optional[str]]:
    embedder = build_embedder(config)
    factory = IndexClientFactory(timeout=config.timeout_seconds)
    controller = SearchController(config, embedder, factory)
    try:
        results = await controller.search(query, db, facets)
    finally:
        await embedder.close()
        await factory.close()
    return results, controller.error


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    db: Optional[str] = typer.Option(None, "--db", help="Database name (defaults to the first configured)"),
    media_type: MediaType = typer.Option(MediaType.ALL, "--media-type", help="Restrict to a media type"),
    source: str = typer.Option(ALL, "--source", help="Restrict to a configured source"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Execute a single search and print the results table."""
    _setup_logging(verbose)
    config = _load_config()
    if not config.targets:
        raise typer.BadParameter("No databases configured. Set TAGSEARCH_DB_1_URL and TAGSEARCH_DB_1_TOKEN.")
    if source != ALL and source not in config.sources:
        raise typer.BadParameter(f"Unknown source: {source}")

    facets = FacetSelection(media_type=media_type.value, source=source)
    results, error = asyncio.run(_run_search(config, query, db, facets))
    if error:
        console.print(f"[red]{error}[/red]")
        raise typer.Exit(code=1)
    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    columns = columns_for_policy(config.column_policy, results)
    table = Table(show_header=True, header_style="bold magenta")
    for column in columns:
        table.add_column(column.header)
    for row in build_rows(columns, results):
        table.add_row(*(cell.to_text() for cell in row))

    console.print(table)


@app.command()
def targets() -> None:
    """List configured databases."""
    config = _load_config()
    if not config.targets:
        console.print("[yellow]No databases configured.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name")
    table.add_column("URL")
    for target in config.targets:
        table.add_row(target.name, target.url)
    console.print(table)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
) -> None:
    """Start the web interface."""
    import uvicorn

    config = _load_config()
    if not config.targets:
        console.print("[yellow]Warning: no databases configured, searches will fail.[/yellow]")
    if not config.openai_api_key:
        console.print("[yellow]Warning: OPENAI_API_KEY is not set.[/yellow]")

    console.print(f"Starting web interface on http://{host}:{port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    app()
