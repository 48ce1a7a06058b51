"""CLI command for site ingestion."""

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from config.settings import get_settings
from src.errors import PortfolioRAGError
from src.ingestion.pipeline import build_ingestion_pipeline
from src.models.enums import SourceStatus

console = Console()

STATUS_STYLES = {
    SourceStatus.SUCCESS: "green",
    SourceStatus.SKIPPED: "yellow",
    SourceStatus.FAILED: "red",
}


def ingest(
    paths: Annotated[
        list[str] | None,
        typer.Option("--path", "-p", help="Site-relative path to ingest (repeatable; default: configured list)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Scrape the portfolio site and rebuild the vector index."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()
    try:
        pipeline = build_ingestion_pipeline(settings)
    except PortfolioRAGError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(1)

    targets = paths or pipeline.source_paths
    console.print("[bold]Portfolio RAG Ingestion[/bold]")
    console.print(f"Site: {settings.portfolio_site_url}")
    console.print(f"Paths: {targets}")
    console.print(
        f"Chunk size: {pipeline.config.chunk_size} chars, overlap: {pipeline.config.chunk_overlap} chars"
    )
    console.print()

    try:
        with console.status("[bold green]Ingesting pages..."):
            report = pipeline.run(targets)
    except PortfolioRAGError as e:
        console.print(f"[bold red]Ingestion aborted:[/bold red] {e}")
        raise typer.Exit(1)

    table = Table(title="Sources")
    table.add_column("Path")
    table.add_column("Status")
    table.add_column("Chunks", justify="right")
    table.add_column("Message")
    for outcome in report.outcomes:
        style = STATUS_STYLES[outcome.status]
        table.add_row(
            outcome.path,
            f"[{style}]{outcome.status.value}[/{style}]",
            str(outcome.chunk_count),
            outcome.message or "",
        )
    console.print(table)
    console.print()
    console.print(f"  Chunks indexed: {report.total_chunks}")
    console.print(f"  Succeeded: {len(report.succeeded)}, skipped: {len(report.skipped)}, failed: {len(report.failed)}")

    if report.outcomes and len(report.failed) == len(report.outcomes):
        console.print("[bold red]Every source failed.[/bold red]")
        raise typer.Exit(1)
    console.print("[bold green]Ingestion complete![/bold green]")
