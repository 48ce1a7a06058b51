"""CLI commands for querying the indexed site content."""

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel

from config.settings import get_settings
from src.errors import PortfolioRAGError
from src.retrieval.retriever import build_retrieval_service

console = Console()

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)


def context(
    query: Annotated[
        str,
        typer.Argument(help="Query to retrieve site context for"),
    ],
    top_k: Annotated[
        int | None,
        typer.Option("--top-k", "-k", help="Number of chunks to retrieve"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Print the context block retrieved for a query."""
    _configure_logging(verbose)

    try:
        retriever = build_retrieval_service(get_settings())
    except PortfolioRAGError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(1)

    block = retriever.retrieve(query, top_k=top_k)
    if not block:
        console.print("[yellow]No context found.[/yellow]")
        return
    console.print(Panel(block, title="Context", border_style="cyan", padding=(1, 2)))


def ask(
    question: Annotated[
        str,
        typer.Argument(help="Your question about the portfolio"),
    ],
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Ask the portfolio assistant a question."""
    _configure_logging(verbose)

    from src.llm.chat import ChatMessage, ChatResponder
    from src.llm.config import get_llm

    settings = get_settings()
    try:
        retriever = build_retrieval_service(settings)
        responder = ChatResponder(retriever, get_llm(settings))
    except PortfolioRAGError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(1)

    with console.status("[bold green]Thinking..."):
        result = responder.respond([ChatMessage(role="user", content=question)])

    subtitle = "grounded in site content" if result.context_used else "no site context found"
    console.print()
    console.print(Panel(result.reply, title="Portfolio Assistant", subtitle=subtitle, border_style="green", padding=(1, 2)))
