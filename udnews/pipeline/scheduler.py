"""Periodic and on-demand ingestion with a single-flight gate."""

import asyncio
import contextlib
import logging
from enum import Enum
from typing import Optional

from .coordinator import IngestionCoordinator
from .report import RunReport

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    """Whether a coordinator pass is in flight."""

    IDLE = "idle"
    RUNNING = "running"


class IngestionScheduler:
    """Trigger coordinator runs on a timer and on demand.

    At most one coordinator pass executes at a time. A manual trigger
    while a pass is in flight joins that pass; a timer tick while a pass
    is in flight is dropped.
    """

    def __init__(
        self,
        coordinator: IngestionCoordinator,
        interval: float = 30 * 60,
        initial_delay: float = 5.0,
    ) -> None:
        """
        Initialize scheduler.

        Args:
            coordinator: Coordinator executed for each run
            interval: Seconds between scheduled runs
            initial_delay: Seconds before the first scheduled run
        """
        self.coordinator = coordinator
        self.interval = interval
        self.initial_delay = initial_delay
        self.state = SchedulerState.IDLE
        self.last_report: Optional[RunReport] = None
        self.runs_completed = 0
        self._current: Optional["asyncio.Task[RunReport]"] = None
        self._loop_task: Optional["asyncio.Task[None]"] = None

    @property
    def is_running(self) -> bool:
        return self.state is SchedulerState.RUNNING

    async def trigger(self) -> RunReport:
        """
        Run the coordinator, or join the run already in flight.

        Returns:
            Report of the run that executed
        """
        if self.is_running and self._current is not None:
            logger.info("Ingestion already running; joining in-flight run")
            task = self._current
        else:
            # No await between the check and the state change
            self.state = SchedulerState.RUNNING
            task = asyncio.create_task(self._run_once())
            self._current = task

        # A cancelled caller must not cancel the run itself
        return await asyncio.shield(task)

    async def _run_once(self) -> RunReport:
        try:
            report = await self.coordinator.run()
            self.last_report = report
            return report
        finally:
            self.runs_completed += 1
            self.state = SchedulerState.IDLE
            self._current = None

    async def tick(self) -> None:
        """Scheduled run; skipped if a run is already in flight."""
        if self.is_running:
            logger.info("Skipping scheduled ingestion; a run is in progress")
            return

        try:
            await self.trigger()
        except Exception:
            logger.exception("Scheduled ingestion run failed")

    async def _loop(self) -> None:
        loop = asyncio.get_running_loop()
        await asyncio.sleep(self.initial_delay)

        while True:
            next_run = loop.time() + self.interval
            await self.tick()
            await asyncio.sleep(max(0.0, next_run - loop.time()))

    def start(self) -> "asyncio.Task[None]":
        """Start the periodic loop on the running event loop."""
        if self._loop_task is None or self._loop_task.done():
            logger.info(
                "Scheduling ingestion every %.0fs (first run in %.0fs)",
                self.interval,
                self.initial_delay,
            )
            self._loop_task = asyncio.create_task(self._loop())
        return self._loop_task

    async def stop(self) -> None:
        """Stop the periodic loop and wait for an in-flight run to finish."""
        if self._loop_task is not None:
            self._loop_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._loop_task
            self._loop_task = None

        current = self._current
        if current is not None:
            try:
                await current
            except Exception as e:
                logger.warning("In-flight ingestion run ended with error: %s", e)

    async def run_forever(self) -> None:
        """Run the periodic loop until cancelled."""
        task = self.start()
        try:
            await task
        finally:
            await self.stop()
