"""Run and serve command implementations."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..errors import StoreUnavailableError
from ..pipeline import print_run_summary
from ..service import build_service
from .common import CONFIG_OPTION, load_config_or_exit, load_sources_or_exit, open_store_or_exit

console = Console()


def run_command(
    config_path: Optional[Path] = CONFIG_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print the run report as JSON"),
) -> None:
    """Run one ingestion pass over all active sources."""
    config = load_config_or_exit(config_path)
    sources = load_sources_or_exit(config)
    store = open_store_or_exit(config)

    try:
        store.sync_sources(sources)
        service = build_service(config, store)
        report = asyncio.run(service.run_ingestion())
    except StoreUnavailableError as e:
        console.print(f"[red]❌ Store unavailable: {e}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Ingestion interrupted by user[/yellow]")
        raise typer.Exit(1)
    finally:
        store.close()

    if as_json:
        console.print_json(json.dumps(report.to_dict()))
    else:
        print_run_summary(report)


def serve_command(
    config_path: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Refresh feeds on a fixed schedule until interrupted."""
    config = load_config_or_exit(config_path)
    sources = load_sources_or_exit(config)
    store = open_store_or_exit(config)

    try:
        store.sync_sources(sources)
        service = build_service(config, store)
        settings = config.config.ingestion
        console.print(
            f"[bold]Refreshing {len(sources)} source(s) every "
            f"{settings.interval_minutes} min[/bold] (Ctrl+C to stop)"
        )
        asyncio.run(service.scheduler.run_forever())
    except StoreUnavailableError as e:
        console.print(f"[red]❌ Store unavailable: {e}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped[/yellow]")
    finally:
        store.close()
