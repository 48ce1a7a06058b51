"""Portfolio RAG CLI entry point."""

import typer

from src.cli.ask import ask, context
from src.cli.ingest import ingest

app = typer.Typer(
    name="portfolio-rag",
    help="Portfolio site chat assistant - index the site and ask questions about it.",
)

app.command(name="ingest")(ingest)
app.command(name="context")(context)
app.command(name="ask")(ask)


if __name__ == "__main__":
    app()
