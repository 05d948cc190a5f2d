"""Ingestion coordination and scheduling."""

from .coordinator import IngestionCoordinator
from .report import RunReport, SourceResult, print_run_summary
from .scheduler import IngestionScheduler, SchedulerState

__all__ = [
    "IngestionCoordinator",
    "IngestionScheduler",
    "RunReport",
    "SchedulerState",
    "SourceResult",
    "print_run_summary",
]
