"""Run report models and console summary."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from rich.console import Console
from rich.table import Table

console = Console()


class SourceResult(BaseModel):
    """Outcome of one source within a run."""

    source_name: str = Field(..., description="Source display name")
    status: Literal["success", "error"] = Field(..., description="Outcome of the attempt")
    articles_count: Optional[int] = Field(None, description="New articles stored on success")
    error: Optional[str] = Field(None, description="Failure reason on error")

    class Config:
        """Pydantic config."""

        populate_by_name = True
        alias_generator = to_camel


class RunReport(BaseModel):
    """Aggregate report of one coordinator pass."""

    results: List[SourceResult] = Field(
        default_factory=list,
        alias="perSourceResults",
        description="Per-source outcomes in source order",
    )
    run_at: datetime = Field(..., alias="runAt", description="When the run started")

    class Config:
        """Pydantic config."""

        populate_by_name = True

    @property
    def succeeded(self) -> List[SourceResult]:
        return [r for r in self.results if r.status == "success"]

    @property
    def failed(self) -> List[SourceResult]:
        return [r for r in self.results if r.status == "error"]

    @property
    def total_new(self) -> int:
        return sum(r.articles_count or 0 for r in self.succeeded)

    def to_dict(self) -> dict:
        """Serialize with camelCase keys, omitting empty optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def print_run_summary(report: RunReport) -> None:
    """Print summary of an ingestion run."""
    table = Table(title=f"Ingestion Run {report.run_at:%Y-%m-%d %H:%M:%S %Z}")
    table.add_column("Source", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("New", style="green", justify="right")
    table.add_column("Details", style="dim")

    for result in report.results:
        if result.status == "success":
            table.add_row(result.source_name, "[green]✓[/green]", str(result.articles_count or 0), "")
        else:
            table.add_row(result.source_name, "[red]✗[/red]", "-", result.error or "Unknown error")

    console.print(table)
    console.print(
        f"  Sources: {len(report.results)}  "
        f"Successful: [green]{len(report.succeeded)}[/green]  "
        f"Failed: [red]{len(report.failed)}[/red]  "
        f"New articles: {report.total_new}"
    )
