"""Tests for the ingestion scheduler."""

import asyncio
from datetime import datetime, timezone

import pytest

from udnews.pipeline import IngestionScheduler, RunReport, SchedulerState, SourceResult


class GatedCoordinator:
    """Coordinator whose runs block until released."""

    def __init__(self, fail: bool = False) -> None:
        self.calls = 0
        self.fail = fail
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def run(self) -> RunReport:
        self.calls += 1
        self.started.set()
        await self.release.wait()
        if self.fail:
            raise RuntimeError("store went away")
        result = SourceResult(source_name="A", status="success", articles_count=self.calls)
        return RunReport(results=[result], run_at=datetime.now(timezone.utc))


class InstantCoordinator:
    def __init__(self) -> None:
        self.calls = 0

    async def run(self) -> RunReport:
        self.calls += 1
        return RunReport(results=[], run_at=datetime.now(timezone.utc))


def test_concurrent_triggers_share_one_run() -> None:
    async def scenario():
        coordinator = GatedCoordinator()
        scheduler = IngestionScheduler(coordinator)

        first = asyncio.create_task(scheduler.trigger())
        await coordinator.started.wait()
        second = asyncio.create_task(scheduler.trigger())
        await asyncio.sleep(0)
        coordinator.release.set()

        return coordinator, scheduler, await asyncio.gather(first, second)

    coordinator, scheduler, (a, b) = asyncio.run(scenario())

    assert coordinator.calls == 1
    assert a is b
    assert scheduler.runs_completed == 1
    assert scheduler.last_report is a


def test_state_follows_the_run() -> None:
    async def scenario():
        coordinator = GatedCoordinator()
        scheduler = IngestionScheduler(coordinator)
        assert scheduler.state is SchedulerState.IDLE

        task = asyncio.create_task(scheduler.trigger())
        await coordinator.started.wait()
        during = scheduler.state

        coordinator.release.set()
        await task
        return during, scheduler.state

    during, after = asyncio.run(scenario())

    assert during is SchedulerState.RUNNING
    assert after is SchedulerState.IDLE


def test_tick_while_running_is_dropped() -> None:
    async def scenario():
        coordinator = GatedCoordinator()
        scheduler = IngestionScheduler(coordinator)

        task = asyncio.create_task(scheduler.trigger())
        await coordinator.started.wait()
        await scheduler.tick()
        coordinator.release.set()
        await task
        return coordinator

    assert asyncio.run(scenario()).calls == 1


def test_sequential_triggers_run_again() -> None:
    async def scenario():
        coordinator = InstantCoordinator()
        scheduler = IngestionScheduler(coordinator)
        await scheduler.trigger()
        await scheduler.trigger()
        return coordinator, scheduler

    coordinator, scheduler = asyncio.run(scenario())

    assert coordinator.calls == 2
    assert scheduler.runs_completed == 2


def test_failed_run_returns_to_idle() -> None:
    async def scenario():
        coordinator = GatedCoordinator(fail=True)
        coordinator.release.set()
        scheduler = IngestionScheduler(coordinator)

        with pytest.raises(RuntimeError):
            await scheduler.trigger()

        # A scheduled tick logs the failure instead of raising
        await scheduler.tick()
        return coordinator, scheduler

    coordinator, scheduler = asyncio.run(scenario())

    assert scheduler.state is SchedulerState.IDLE
    assert scheduler.last_report is None
    assert coordinator.calls == 2


def test_cancelled_caller_does_not_cancel_run() -> None:
    async def scenario():
        coordinator = GatedCoordinator()
        scheduler = IngestionScheduler(coordinator)

        waiter = asyncio.create_task(scheduler.trigger())
        await coordinator.started.wait()
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        assert scheduler.is_running
        coordinator.release.set()
        await scheduler.stop()
        return scheduler

    scheduler = asyncio.run(scenario())

    assert scheduler.runs_completed == 1
    assert scheduler.last_report is not None


def test_loop_runs_on_interval_and_stops() -> None:
    async def scenario():
        coordinator = InstantCoordinator()
        scheduler = IngestionScheduler(coordinator, interval=0.01, initial_delay=0)

        scheduler.start()
        while coordinator.calls < 3:
            await asyncio.sleep(0.005)
        await scheduler.stop()

        calls = coordinator.calls
        await asyncio.sleep(0.05)
        return calls, coordinator.calls

    stopped_at, later = asyncio.run(scenario())

    assert stopped_at >= 3
    assert later == stopped_at
