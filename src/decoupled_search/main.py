from typing import Annotated

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from typer import Argument, Exit, Option, Typer

from .config import Settings, load_env_files
from .content import ContentSourceClient
from .demo import get_demo_articles
from .embeddings import EmbeddingProvider
from .errors import ConfigurationError, NotConfiguredError, UpstreamError
from .indexing import IndexingError, IndexingPipeline
from .logging_setup import configure_logging
from .models import Article
from .search import build_relevance_engine
from .server import run_server
from .storage import PineconeVectorStore

app = Typer(help="Semantic search over CMS articles.")
console = Console()


def _load_settings() -> Settings:
    load_env_files()
    return Settings.from_env()


def _fail(message: str) -> Exit:
    console.print(f"[bold red]✗[/] {message}")
    return Exit(code=1)


@app.callback()
def main(
    verbose: Annotated[
        bool, Option("--verbose", "-v", help="Enable debug logging.")
    ] = False,
) -> None:
    configure_logging(verbose)


@app.command()
def index(
    reset: Annotated[
        bool,
        Option("--reset", help="Clear all existing vectors before indexing."),
    ] = False,
    demo: Annotated[
        bool,
        Option("--demo", help="Index the bundled demo articles instead of the CMS."),
    ] = False,
) -> None:
    """Embed every article and upsert it into the vector index."""
    settings = _load_settings()
    if not settings.vector_configured:
        raise _fail("PINECONE_API_KEY not configured")

    try:
        if demo:
            articles: list[Article] = list(get_demo_articles())
        else:
            with console.status("Fetching articles from the content source..."):
                articles = ContentSourceClient.from_settings(settings).fetch_articles()
    except ConfigurationError as exc:
        raise _fail(str(exc))
    except UpstreamError as exc:
        raise _fail(f"Could not fetch articles: {exc}")

    console.print(f"[green]✓[/] Found {len(articles)} articles")
    if not articles:
        console.print("[yellow]No articles to index. Make sure content is imported.[/]")
        return

    store = PineconeVectorStore(
        settings.index_name,
        api_key=settings.pinecone_api_key,
        cloud=settings.cloud,
        region=settings.region,
    )
    provider = EmbeddingProvider(
        api_key=settings.pinecone_api_key,
        model=settings.embedding_model,
        dim=settings.embedding_dim,
    )
    pipeline = IndexingPipeline.from_settings(settings, store, provider)

    try:
        with console.status("Preparing index...") as status:

            def report(position: int, total: int, article: Article) -> None:
                status.update(f"[{position}/{total}] Processing: {article.title[:50]}")

            result = pipeline.index_all(articles, reset_first=reset, progress=report)
    except IndexingError as exc:
        raise _fail(f"Indexing failed: {exc}")

    summary = (
        f"Index name: {settings.index_name}\n"
        f"Articles indexed: {result.count}\n"
        f"Embedding model: {settings.embedding_model}"
    )
    if result.cleared:
        summary += "\nExisting vectors cleared"
    if result.created_index:
        summary += "\nIndex created"
    console.print(
        Panel(summary, title="Index Complete", title_align="left", border_style="bold green")
    )


@app.command()
def search(
    query: Annotated[str, Argument(help="Free-text search query.")],
    limit: Annotated[int, Option("--limit", "-l", help="Maximum results.")] = 10,
) -> None:
    """Run a search from the terminal with the configured engine."""
    settings = _load_settings()
    try:
        engine = build_relevance_engine(settings)
    except NotConfiguredError as exc:
        raise _fail(str(exc))

    try:
        results = engine.search(query, max(limit, 1))
    except UpstreamError as exc:
        raise _fail(f"Search failed: {exc}")

    if not results:
        console.print(f"No results for [bold]{query}[/]")
        return

    table = Table(title=f"Results for “{query}” ({engine.name})")
    table.add_column("#", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Title")
    table.add_column("Category")
    table.add_column("Slug", style="dim")
    for rank, result in enumerate(results, start=1):
        table.add_row(
            str(rank),
            f"{result.score:.3f}",
            result.article.title,
            result.article.category,
            result.article.slug,
        )
    console.print(table)


@app.command()
def serve(
    host: Annotated[str, Option("--host", help="Bind address.")] = "127.0.0.1",
    port: Annotated[int, Option("--port", help="Bind port.")] = 8000,
) -> None:
    """Start the HTTP API."""
    run_server(host=host, port=port)
