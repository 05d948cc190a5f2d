"""Helpers shared by CLI commands."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from ..config import Config, SourceConfig, load_sources
from ..db import EntityStore, create_store, validate_connection
from ..logging_utils import setup_logging

console = Console()

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to config.yaml (default: ~/.config/udnews/config.yaml)",
)


def load_config_or_exit(config_path: Optional[Path]) -> Config:
    """Load configuration and logging, exiting with a message on failure."""
    config = Config(config_path)
    try:
        setup_logging(config.config.logging)
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {config.config_path}. Run 'udnews init' first.[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    return config


def load_sources_or_exit(config: Config) -> List[SourceConfig]:
    """Load sources.yaml next to the config file."""
    try:
        return load_sources(config.sources_path)
    except FileNotFoundError:
        console.print("[red]Sources file not found. Run 'udnews init' first.[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def open_store_or_exit(config: Config) -> EntityStore:
    """Create the configured store, checking connectivity for Postgres."""
    if config.config.store.backend == "postgres":
        console.print("[dim]Checking database connection...[/dim]")
        if not validate_connection(config.get_db_config()):
            console.print("[red]❌ Database connection failed![/red]")
            console.print("Please check your database configuration and ensure Postgres is running.")
            raise typer.Exit(1)
    return create_store(config)
