"""Command-line interface for the Punto Pe news feed."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from newsfeed.cache.store import FileStore, build_store
from newsfeed.comments import CommentStore
from newsfeed.config import get_settings
from newsfeed.feed.orchestrator import build_orchestrator
from newsfeed.feed.sections import featured_article, front_page_sections, paginate
from newsfeed.feed.session import FeedSession
from newsfeed.generation.article import ArticleBodyGenerator
from newsfeed.models.schemas import Feed, NewsCategory

# Configure logging with Rich handler for better formatting
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
)
logger = logging.getLogger(__name__)

app = typer.Typer(
    name="newsfeed",
    help="Punto Pe news feed - cached Gemini news summaries with offline fallback",
)
console = Console()


def _store(cache_dir: Optional[Path]):
    settings = get_settings()
    if cache_dir:
        return FileStore(cache_dir, quota_bytes=settings.storage_quota_bytes)
    return build_store(settings)


def _set_verbosity(verbose: bool) -> None:
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")


@app.command()
def feed(
    category: str = typer.Argument(NewsCategory.PORTADA.value, help="Category label"),
    query: Optional[str] = typer.Option(None, "--query", "-q", help="Free-text search"),
    force: bool = typer.Option(False, "--force", "-f", help="Bypass the fresh cache"),
    page: int = typer.Option(1, "--page", "-p", help="Page for single-category listings"),
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir", help="Persistent cache directory"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON only"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable DEBUG logging"),
):
    """Fetch and display the feed for a category or query."""
    _set_verbosity(verbose)
    orchestrator = build_orchestrator(store=_store(cache_dir))
    result = asyncio.run(orchestrator.fetch_feed(category, query, force_refresh=force))

    if json_output:
        print(result.model_dump_json(by_alias=True, indent=2))
        return

    if category == NewsCategory.PORTADA.value and not query:
        _display_front_page(result)
    else:
        _display_articles(result, title=query or category, page=page)
    _display_hashtags(result)


@app.command()
def article(
    index: int = typer.Argument(..., help="Position of the article in the feed (1-based)"),
    category: str = typer.Option(NewsCategory.PORTADA.value, "--category", "-c"),
    query: Optional[str] = typer.Option(None, "--query", "-q"),
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir"),
):
    """Generate and display the full body of an article from a feed."""
    orchestrator = build_orchestrator(store=_store(cache_dir))
    generator = ArticleBodyGenerator(orchestrator.client)

    async def run():
        result = await orchestrator.fetch_feed(category, query)
        if not 1 <= index <= len(result.articles):
            return None, None
        item = result.articles[index - 1]
        return item, await generator.generate_body(item)

    item, body = asyncio.run(run())
    if item is None:
        console.print(f"[red]Error:[/red] no article at position {index}")
        raise typer.Exit(1)

    console.print(Panel(item.title, title=f"[bold blue]{item.category}[/bold blue]"))
    console.print(f"[dim]{item.source} • {item.published_time}[/dim]\n")
    console.print(Markdown(body))


@app.command()
def refresh(
    category: str = typer.Argument(..., help="Category block to refresh"),
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir"),
):
    """Load the front page, then refresh one category block in place."""
    orchestrator = build_orchestrator(store=_store(cache_dir))
    session = FeedSession(orchestrator)

    async def run():
        await session.load(NewsCategory.PORTADA)
        return await session.refresh_category(category)

    merged = asyncio.run(run())
    if merged is None:
        console.print("[yellow]Refresh skipped[/yellow]")
        raise typer.Exit(1)
    _display_front_page(merged)


@app.command()
def watch(
    category: str = typer.Argument(NewsCategory.PORTADA.value, help="Category label"),
    interval: Optional[float] = typer.Option(None, "--interval", "-i", help="Seconds between refreshes"),
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir"),
):
    """Show a feed and keep it updated until interrupted."""
    settings = get_settings()
    orchestrator = build_orchestrator(settings, store=_store(cache_dir))
    session = FeedSession(
        orchestrator,
        category=category,
        auto_refresh_interval=interval or settings.auto_refresh_interval,
    )

    async def run():
        await session.load(category)
        _show_session(session)
        async with session:
            last = session.feed
            while True:
                await asyncio.sleep(1)
                if session.feed is not last:
                    last = session.feed
                    _show_session(session)

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")


@app.command()
def comment(
    article_id: str = typer.Argument(..., help="Article id"),
    user_name: Optional[str] = typer.Option(None, "--name", "-n", help="Add a comment as this user"),
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Comment text"),
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir"),
):
    """List an article's comments, or add one with --name and --text."""
    settings = get_settings()
    store = CommentStore(_store(cache_dir), prefix=settings.comments_prefix)

    if user_name or text:
        try:
            store.add(article_id, user_name or "", text or "")
        except ValueError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

    items = store.list(article_id)
    console.print(f"[bold]Comentarios de lectores[/bold] ({len(items)})")
    for item in items:
        console.print(f"  [cyan]{item.user_name}[/cyan] [dim]{item.timestamp}[/dim]: {item.text}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind to"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
):
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    console.print(f"Starting API server at http://{host}:{port}")
    uvicorn.run("newsfeed.api.main:app", host=host, port=port, reload=reload)


@app.command()
def check_config():
    """Check configuration and API keys."""
    settings = get_settings()

    table = Table(title="Configuration Status")
    table.add_column("Setting", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Value")

    gemini_status = "✅" if settings.has_credentials else "⚠️"
    gemini_value = "Configured" if settings.has_credentials else "Missing (mock feeds only)"
    table.add_row("Gemini API Key", gemini_status, gemini_value)
    table.add_row("Gemini Model", "ℹ️", settings.gemini_model)
    table.add_row("Search Tool", "ℹ️", settings.search_tool)
    table.add_row(
        "Cache Store", "ℹ️",
        str(settings.cache_dir) if settings.cache_dir else "In-memory",
    )
    table.add_row("Cache TTL", "ℹ️", f"{settings.cache_ttl_seconds}s")
    table.add_row("Auto-refresh", "ℹ️", f"{settings.auto_refresh_interval:g}s")

    console.print(table)

    if not settings.has_credentials:
        console.print("\n[yellow]Warning:[/yellow] no Gemini API key, feeds fall back to mock data")
        console.print("Set GEMINI_API_KEY in your .env file")


def _display_front_page(result: Feed) -> None:
    lead = featured_article(result)
    if lead is None:
        console.print("[dim]Cargando noticias en tiempo real...[/dim]")
        return

    console.print(Panel(
        f"[bold]{lead.title}[/bold]\n\n{lead.summary}",
        title=f"[bold red]Noticia Principal[/bold red] • {lead.category}",
        subtitle=lead.source,
    ))
    for category, items in front_page_sections(result):
        if items:
            _display_table(category.value, items)


def _display_articles(result: Feed, title: str, page: int) -> None:
    items = paginate(result.articles, page)
    if not items:
        console.print("[dim]No hay noticias en esta página.[/dim]")
        return
    _display_table(title, items)


def _display_table(title: str, items) -> None:
    table = Table(title=title, show_lines=False)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Titular", style="bold")
    table.add_column("Fuente", style="cyan")
    table.add_column("Publicado", style="dim")
    for item in items:
        table.add_row(item.id, item.title, item.source, item.published_time)
    console.print(table)


def _display_hashtags(result: Feed) -> None:
    if result.hashtags:
        console.print("\n[bold]Tendencias:[/bold] " + " ".join(result.hashtags))


def _show_session(session: FeedSession) -> None:
    console.clear()
    if session.error:
        console.print(f"[red]{session.error}[/red]")
        return
    if session.feed is None:
        return
    if session.current_category == NewsCategory.PORTADA.value:
        _display_front_page(session.feed)
    else:
        _display_articles(session.feed, title=session.current_category, page=1)
    console.print("\n[bold]Tendencias:[/bold] " + " ".join(session.trending_tags))


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
