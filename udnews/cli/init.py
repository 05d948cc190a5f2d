"""Init command implementation."""

from pathlib import Path
from typing import Any, Dict, List

import typer
from psycopg.errors import DatabaseError
from rich.console import Console
from rich.panel import Panel

from ..config import Config, ConfigModel, SourceConfig, save_config, save_sources
from ..db import init_database, validate_connection

console = Console()

PASSWORD_ENV = "UDNEWS_DB_PASSWORD"


def create_default_sources() -> List[SourceConfig]:
    """Create default Thai news sources."""
    return [
        SourceConfig(name="Matichon", url="https://www.matichon.co.th/rss/news", is_active=True),
        SourceConfig(name="TNN", url="https://www.tnnthailand.com/rss.xml", is_active=True),
        SourceConfig(name="Honekrasae", url="https://www.honekrasae.com/rss", is_active=True),
    ]


def _prepare_postgres(db_config: Dict[str, Any]) -> None:
    """Check connectivity, then create tables, indexes and triggers."""
    console.print("\n[bold]Checking Postgres...[/bold]")
    if not validate_connection(db_config):
        console.print(
            f"[red]❌ Cannot reach {db_config['database']} on {db_config['host']}:{db_config['port']}[/red]\n"
            f"Export the password first: [bold]export {PASSWORD_ENV}=...[/bold]"
        )
        raise typer.Exit(1)

    try:
        init_database(db_config)
    except DatabaseError as e:
        console.print(f"[red]❌ Schema setup failed: {e}[/red]")
        raise typer.Exit(1)

    console.print("✅ Schema ready (sources, articles)")


def init_command(
    config_dir: Path = typer.Option(
        Path.home() / ".config" / "udnews",
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    backend: str = typer.Option(
        "memory",
        "--backend",
        "-b",
        help="Store backend (memory, postgres)",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("udnews", "--db-name", help="Database name"),
    db_user: str = typer.Option("udnews_user", "--db-user", help="Database user"),
    seed_sources: bool = typer.Option(
        True,
        "--seed-sources/--no-seed-sources",
        help="Seed default news sources",
    ),
) -> None:
    """Initialize configuration and, for Postgres, the database schema."""
    console.print(Panel.fit("📰 UD News - Initialization", style="bold blue"))

    if backend not in ("memory", "postgres"):
        console.print(f"[red]Unknown backend '{backend}'. Use 'memory' or 'postgres'.[/red]")
        raise typer.Exit(1)

    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"
    sources_path = config_dir / "sources.yaml"

    config = ConfigModel(
        store={"backend": backend},
        postgres={
            "host": db_host,
            "port": db_port,
            "database": db_name,
            "user": db_user,
            "password_env": PASSWORD_ENV,
        },
    )

    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    if seed_sources:
        sources = create_default_sources()
        save_sources(sources, sources_path)
        console.print(f"✅ Created sources: {sources_path} (seeded with {len(sources)} sources)")
    else:
        save_sources([], sources_path)
        console.print(f"✅ Created empty sources file: {sources_path}")

    if backend == "postgres":
        _prepare_postgres(Config.from_model(config, config_path).get_db_config())

    console.print(
        Panel(
            f"[green]✅ UD News initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Sources: {sources_path}\n"
            f"Store: {backend}\n\n"
            f"Next steps:\n"
            f"1. Review sources: [bold]udnews sources list -c {config_path}[/bold]\n"
            f"2. Refresh once: [bold]udnews run -c {config_path}[/bold]\n"
            f"3. Keep refreshing: [bold]udnews serve -c {config_path}[/bold]",
            style="green",
        )
    )
