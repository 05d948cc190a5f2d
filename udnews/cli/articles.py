"""Article listing command."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..errors import StoreUnavailableError
from .common import CONFIG_OPTION, load_config_or_exit, open_store_or_exit

console = Console()
articles_app = typer.Typer(help="Browse stored articles")


@articles_app.command("list")
def articles_list(
    limit: int = typer.Option(50, "--limit", "-l", help="Maximum articles to show", min=1),
    offset: int = typer.Option(0, "--offset", help="Articles to skip", min=0),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Only this source"),
    config_path: Optional[Path] = CONFIG_OPTION,
) -> None:
    """List stored articles, newest first."""
    config = load_config_or_exit(config_path)
    if config.config.store.backend == "memory":
        console.print("[yellow]The memory store keeps no articles between runs.[/yellow]")
        return

    store = open_store_or_exit(config)
    try:
        articles = store.list_articles(
            limit=limit,
            offset=offset,
            source=source.lower() if source else None,
        )
    except StoreUnavailableError as e:
        console.print(f"[red]❌ Store unavailable: {e}[/red]")
        raise typer.Exit(1)
    finally:
        store.close()

    if not articles:
        console.print("[yellow]No articles stored.[/yellow]")
        return

    table = Table(title="Articles")
    table.add_column("Published", style="yellow")
    table.add_column("Source", style="magenta")
    table.add_column("Title", style="cyan")
    table.add_column("Link", style="blue")

    for article in articles:
        table.add_row(
            f"{article.published_at:%Y-%m-%d %H:%M}",
            article.source,
            article.title,
            article.link,
        )

    console.print(table)
