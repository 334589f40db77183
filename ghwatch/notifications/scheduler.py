"""One-shot and continuous execution of poll cycles."""

from __future__ import annotations

import asyncio
import typing as typ

from .config import NotificationConfig

if typ.TYPE_CHECKING:
    from .models import CycleResult
    from .orchestrator import PollCycleOrchestrator

Sleeper: typ.TypeAlias = typ.Callable[[float], typ.Awaitable[object]]


class WatchScheduler:
    """Drive a :class:`PollCycleOrchestrator` once or on a fixed period.

    The next cycle is scheduled only after the previous one has finished, so
    a slow fetch delays polling rather than overlapping it.
    """

    def __init__(
        self,
        orchestrator: PollCycleOrchestrator,
        *,
        config: NotificationConfig | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        """Bind the scheduler to an orchestrator and polling period."""
        self._orchestrator = orchestrator
        self._interval_s = (config or NotificationConfig()).poll_interval_s
        self._sleep = sleep
        self.cycles_run = 0
        self.last_result: CycleResult | None = None

    async def run_once(self) -> CycleResult:
        """Run a single listing cycle that shows everything fetched."""
        return await self._run_cycle(watch_mode=False)

    async def run_forever(self, *, max_cycles: int | None = None) -> None:
        """Run watch cycles: one now, then one per period after each finishes.

        Fetch and presentation failures do not stop the loop. ``max_cycles`` bounds the number
        of cycles; ``None`` loops until the task is cancelled.
        """
        completed = 0
        while True:
            await self._run_cycle(watch_mode=True)
            completed += 1
            if max_cycles is not None and completed >= max_cycles:
                return
            await self._sleep(self._interval_s)

    async def run(self, *, continuous: bool, max_cycles: int | None = None) -> None:
        """Run one listing cycle, or the continuous watch loop."""
        if continuous:
            await self.run_forever(max_cycles=max_cycles)
        else:
            await self.run_once()

    async def _run_cycle(self, *, watch_mode: bool) -> CycleResult:
        result = await self._orchestrator.run_cycle(watch_mode=watch_mode)
        self.cycles_run += 1
        self.last_result = result
        return result
