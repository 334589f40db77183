"""One poll cycle: fetch, classify, filter, resolve, emit, advance.

A :class:`PollCycleOrchestrator` is built once per watched repository and
owns the process-lifetime state for it: the seen-set of the
:class:`~ghwatch.notifications.dedup.DeduplicationFilter` and the in-memory
watermark of the :class:`~ghwatch.notifications.watermark.WatermarkTracker`.
Cycles must not run concurrently on the same instance; the watch scheduler
serialises them.
"""

from __future__ import annotations

import dataclasses
import typing as typ

from ghwatch.common.slug import repo_slug
from ghwatch.common.time import utcnow

from .classifier import classify, format_message
from .config import NotificationConfig
from .dedup import DeduplicationFilter
from .errors import WatermarkStoreError
from .links import resolve_link
from .models import CycleResult, CycleState, Notification, PresentationContext
from .observability import CycleContext, NotificationEventLogger
from .watermark import WatermarkTracker

if typ.TYPE_CHECKING:
    from ghwatch.github.client import ActivitySource
    from ghwatch.github.models import ActivityRecord

    from .hooks import HookSink
    from .sink import NotificationSink
    from .store import WatermarkStore


@dataclasses.dataclass(frozen=True, slots=True)
class WatchTarget:
    """Repository whose activity is polled."""

    user: str
    repo: str

    @property
    def slug(self) -> str:
        """Return ``user/repo``."""
        return repo_slug(self.user, self.repo)


class PollCycleOrchestrator:
    """Run poll cycles for one repository."""

    def __init__(  # noqa: PLR0913
        self,
        source: ActivitySource,
        sink: NotificationSink,
        store: WatermarkStore,
        target: WatchTarget,
        *,
        config: NotificationConfig | None = None,
        hooks: HookSink | None = None,
        event_logger: NotificationEventLogger | None = None,
    ) -> None:
        """Wire the collaborators; the watermark is seeded on the first cycle."""
        self._source = source
        self._sink = sink
        self._target = target
        self._config = config or NotificationConfig()
        self._hooks = hooks
        self._event_logger = event_logger or NotificationEventLogger()
        self._filter = DeduplicationFilter()
        self._tracker = WatermarkTracker(
            store,
            target.user,
            target.repo,
            default=self._config.default_watermark,
        )
        self._seeded = False

    @property
    def target(self) -> WatchTarget:
        """Return the polled repository."""
        return self._target

    @property
    def watermark(self) -> str:
        """Return the in-memory watermark."""
        return self._tracker.current

    @property
    def seen(self) -> DeduplicationFilter:
        """Return the deduplication filter owning the seen-set."""
        return self._filter

    async def seed(self) -> str:
        """Load the persisted watermark once; later calls are no-ops."""
        if not self._seeded:
            await self._tracker.seed()
            self._seeded = True
        return self._tracker.current

    async def run_cycle(self, *, watch_mode: bool) -> CycleResult:
        """Run one cycle and return its outcome.

        A failed fetch is logged and reported as
        :attr:`CycleState.FETCH_FAILED`; nothing else happens in that cycle.
        A sink that fails to present the batch is logged and reported as
        :attr:`CycleState.PRESENT_FAILED`; hooks still run and the batch still
        counts as shown. Listings never touch the watermark store; only
        watch-mode cycles seed and move the watermark.
        """
        if watch_mode:
            await self.seed()
        started_at = utcnow()
        context = CycleContext(
            user=self._target.user,
            repo=self._target.repo,
            watch_mode=watch_mode,
            started_at=started_at,
        )
        self._event_logger.log_cycle_started(context)

        try:
            records = await self._source.list_repository_events(
                self._target.user, self._target.repo
            )
        except Exception as exc:  # noqa: BLE001 - any fetch failure ends the cycle
            self._event_logger.log_cycle_failed(context, exc, utcnow() - started_at)
            return CycleResult(
                state=CycleState.FETCH_FAILED, watermark=self._tracker.current
            )

        batch = self._select(records, watch_mode=watch_mode)
        # The feed is newest first; display oldest first.
        batch.reverse()

        state = CycleState.SUCCESS
        if batch:
            if not await self._present(context, batch, watch_mode=watch_mode):
                state = CycleState.PRESENT_FAILED
            await self._dispatch_hooks(context, batch)
            if watch_mode:
                await self._advance(context, max(item.occurred_at for item in batch))

        result = CycleResult(
            state=state,
            fetched=len(records),
            emitted=len(batch),
            watermark=self._tracker.current,
            notifications=tuple(batch),
        )
        self._event_logger.log_cycle_completed(context, result, utcnow() - started_at)
        return result

    def _select(
        self, records: typ.Sequence[ActivityRecord], *, watch_mode: bool
    ) -> list[Notification]:
        watermark = self._tracker.current
        selected: list[Notification] = []
        for record in records:
            classification = classify(record)
            if not classification.ok:
                continue
            if not self._filter.should_emit(
                record, watermark=watermark, watch_mode=watch_mode
            ):
                continue
            selected.append(
                Notification(
                    message=format_message(record, classification.fragment),
                    link=resolve_link(record, fallback=self._config.fallback_url),
                    occurred_at=record.occurred_at,
                    record=record,
                )
            )
        return selected

    async def _present(
        self,
        context: CycleContext,
        batch: typ.Sequence[Notification],
        *,
        watch_mode: bool,
    ) -> bool:
        try:
            await self._sink.present(
                batch,
                PresentationContext(
                    user=self._target.user,
                    repo=self._target.repo,
                    latest=not watch_mode,
                    watch=watch_mode,
                ),
            )
        except Exception as exc:  # noqa: BLE001 - reported as PRESENT_FAILED
            self._event_logger.log_present_failed(context, len(batch), exc)
            return False
        return True

    async def _dispatch_hooks(
        self, context: CycleContext, batch: typ.Sequence[Notification]
    ) -> None:
        if self._hooks is None:
            return
        for notification in batch:
            try:
                await self._hooks.notify(
                    notification, user=self._target.user, repo=self._target.repo
                )
            except Exception as exc:  # noqa: BLE001 - hooks never abort a cycle
                self._event_logger.log_hook_failed(context, notification, exc)

    async def _advance(self, context: CycleContext, candidate: str) -> None:
        try:
            advanced = await self._tracker.advance(candidate)
        except WatermarkStoreError as exc:
            self._event_logger.log_watermark_persist_failed(context, candidate, exc)
            return
        if advanced:
            self._event_logger.log_watermark_advanced(context, candidate)
