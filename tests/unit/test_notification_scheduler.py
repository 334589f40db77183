"""Unit tests for the watch scheduler."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from ghwatch.notifications import CycleState, NotificationConfig, WatchScheduler
from tests.helpers.activity_builders import watch_record
from tests.unit.notification_test_helpers import (
    FailingSink,
    FakeActivitySource,
    make_orchestrator,
)


class _FakeSleep:
    """Records requested delays without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.mark.asyncio
async def test_run_once_is_a_listing_cycle() -> None:
    """run_once shows everything and never sleeps."""
    sleep = _FakeSleep()
    orchestrator, sink, _ = make_orchestrator(
        FakeActivitySource([watch_record("2024-05-01T12:00:00Z")])
    )
    scheduler = WatchScheduler(orchestrator, sleep=sleep)

    result = await scheduler.run_once()

    assert result.emitted == 1
    assert sink.batches[0][1].latest
    assert sleep.delays == []
    assert scheduler.cycles_run == 1


@pytest.mark.asyncio
async def test_run_forever_sleeps_between_cycles() -> None:
    """Each watch cycle is followed by one period of sleep, except the last."""
    sleep = _FakeSleep()
    orchestrator, _, _ = make_orchestrator(FakeActivitySource([]))
    scheduler = WatchScheduler(
        orchestrator,
        config=NotificationConfig(poll_interval_s=60),
        sleep=sleep,
    )

    await scheduler.run_forever(max_cycles=3)

    assert scheduler.cycles_run == 3
    assert sleep.delays == [60, 60]


@pytest.mark.asyncio
async def test_default_period_is_three_minutes() -> None:
    """Without configuration the watch period is 180 seconds."""
    sleep = _FakeSleep()
    orchestrator, _, _ = make_orchestrator(FakeActivitySource([]))
    scheduler = WatchScheduler(orchestrator, sleep=sleep)

    await scheduler.run_forever(max_cycles=2)

    assert sleep.delays == [180]


@pytest.mark.asyncio
async def test_watch_loop_survives_fetch_failures() -> None:
    """A failed cycle is followed by the next scheduled one."""
    orchestrator, sink, _ = make_orchestrator(
        FakeActivitySource(
            httpx.ConnectError("refused"),
            [watch_record("2024-05-01T12:00:00Z")],
        )
    )
    scheduler = WatchScheduler(orchestrator, sleep=_FakeSleep())

    await scheduler.run(continuous=True, max_cycles=2)

    assert scheduler.cycles_run == 2
    assert scheduler.last_result is not None
    assert scheduler.last_result.state is CycleState.SUCCESS
    assert sink.batches[0][1].watch


@pytest.mark.asyncio
async def test_watch_loop_survives_sink_failures() -> None:
    """A sink that raises does not end the watch loop."""
    orchestrator, sink, _ = make_orchestrator(
        FakeActivitySource([watch_record("2024-05-01T12:00:00Z")]),
        sink=FailingSink(),
    )
    scheduler = WatchScheduler(orchestrator, sleep=_FakeSleep())

    await scheduler.run(continuous=True, max_cycles=2)

    assert scheduler.cycles_run == 2
    assert len(sink.batches) == 1
    assert scheduler.last_result is not None
    assert scheduler.last_result.state is CycleState.SUCCESS


@pytest.mark.asyncio
async def test_run_without_continuous_runs_one_cycle() -> None:
    """run(continuous=False) is the one-shot listing."""
    orchestrator, _, _ = make_orchestrator(FakeActivitySource([]))
    scheduler = WatchScheduler(orchestrator, sleep=_FakeSleep())

    await scheduler.run(continuous=False)

    assert scheduler.cycles_run == 1


@pytest.mark.asyncio
async def test_unbounded_loop_stops_on_cancellation() -> None:
    """Cancelling the task is how an unbounded watch ends."""
    orchestrator, _, _ = make_orchestrator(FakeActivitySource([]))
    scheduler = WatchScheduler(
        orchestrator, config=NotificationConfig(poll_interval_s=1)
    )

    task = asyncio.create_task(scheduler.run_forever())
    while scheduler.cycles_run == 0:  # noqa: ASYNC110
        await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert scheduler.cycles_run == 1
