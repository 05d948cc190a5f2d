"""Sources management commands."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import SourceConfig, load_sources, save_sources
from ..errors import FetchError
from ..ingestion import FeedFetcher, parse_feed
from .common import CONFIG_OPTION, load_config_or_exit, load_sources_or_exit, open_store_or_exit

console = Console()
sources_app = typer.Typer(help="Manage RSS sources")


@sources_app.command("list")
def sources_list(
    config_path: Optional[Path] = CONFIG_OPTION,
    status: bool = typer.Option(
        False,
        "--status",
        "-s",
        help="Show health recorded in the store instead of the sources file",
    ),
) -> None:
    """List all configured sources."""
    config = load_config_or_exit(config_path)

    if status:
        if config.config.store.backend == "memory":
            console.print("[yellow]The memory store keeps no source health between runs.[/yellow]")
            return

        store = open_store_or_exit(config)
        try:
            stored = store.list_sources()
        finally:
            store.close()

        table = Table(title="Source Health")
        table.add_column("Name", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Last fetched", style="yellow")
        table.add_column("URL", style="blue")
        colors = {"online": "green", "error": "red", "unknown": "dim"}
        for source in stored:
            color = colors[source.status.value]
            table.add_row(
                source.name,
                f"[{color}]{source.status.value}[/{color}]",
                f"{source.last_fetched:%Y-%m-%d %H:%M}" if source.last_fetched else "-",
                source.url,
            )
        console.print(table)
        return

    sources = load_sources_or_exit(config)
    if not sources:
        console.print("[yellow]No sources configured.[/yellow]")
        return

    table = Table(title="Configured Sources")
    table.add_column("Name", style="cyan")
    table.add_column("Active", style="yellow")
    table.add_column("URL", style="blue")

    for source in sources:
        table.add_row(source.name, "✓" if source.is_active else "✗", source.url)

    console.print(table)


@sources_app.command("add")
def sources_add(
    name: str = typer.Option(..., "--name", "-n", help="Source name"),
    url: str = typer.Option(..., "--url", "-u", help="RSS feed URL"),
    inactive: bool = typer.Option(False, "--inactive", help="Add the source disabled"),
    config_path: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Add a new RSS source."""
    config = load_config_or_exit(config_path)

    try:
        sources = load_sources(config.sources_path)
    except FileNotFoundError:
        sources = []

    if any(s.url == url for s in sources):
        console.print(f"[red]A source with URL {url} already exists.[/red]")
        raise typer.Exit(1)

    sources.append(SourceConfig(name=name, url=url, is_active=not inactive))
    save_sources(sources, config.sources_path)

    console.print(f"[green]✅ Added source: {name}[/green]")


@sources_app.command("remove")
def sources_remove(
    name: str = typer.Argument(..., help="Source name to remove"),
    config_path: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Remove a source from the sources file."""
    config = load_config_or_exit(config_path)
    sources = load_sources_or_exit(config)

    original_count = len(sources)
    sources = [s for s in sources if s.name != name]

    if len(sources) == original_count:
        console.print(f"[red]Source '{name}' not found.[/red]")
        raise typer.Exit(1)

    save_sources(sources, config.sources_path)
    console.print(f"[green]✅ Removed source: {name}[/green]")


@sources_app.command("test")
def sources_test(
    name: Optional[str] = typer.Argument(None, help="Source name to test (or test all)"),
    config_path: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Fetch and parse feeds without storing anything."""
    config = load_config_or_exit(config_path)
    sources = load_sources_or_exit(config)

    if name:
        sources = [s for s in sources if s.name == name]
        if not sources:
            console.print(f"[red]Source '{name}' not found.[/red]")
            raise typer.Exit(1)

    settings = config.config.ingestion
    fetcher = FeedFetcher(timeout=settings.fetch_timeout, user_agent=settings.user_agent)

    for source in sources:
        if not source.is_active:
            console.print(f"[yellow]⚠️  {source.name}: Disabled[/yellow]")
            continue

        try:
            text = asyncio.run(fetcher.fetch(source.url))
        except FetchError as e:
            console.print(f"[red]❌ {source.name}: Failed - {e.reason}[/red]")
            continue

        count = sum(1 for _ in parse_feed(text))
        console.print(f"[green]✅ {source.name}: OK ({count} items)[/green]")
