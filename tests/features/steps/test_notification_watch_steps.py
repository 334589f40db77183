"""Behavioural tests for listing and watching repository activity."""

from __future__ import annotations

import asyncio
import io
import typing as typ

import pytest
from pytest_bdd import given, parsers, scenario, then, when

from ghwatch.notifications import (
    ConsoleNotificationSink,
    PollCycleOrchestrator,
    WatchScheduler,
    WatchTarget,
    YamlWatermarkStore,
)
from tests.helpers.activity_builders import make_record, push_record, watch_record

if typ.TYPE_CHECKING:
    from pathlib import Path

    from ghwatch.github.models import ActivityRecord
    from ghwatch.notifications import Notification, PresentationContext

_TARGET = WatchTarget(user="acme", repo="widgets")


T = typ.TypeVar("T")


def run_async(coro: typ.Coroutine[typ.Any, typ.Any, T]) -> T:
    """Run async coroutines in sync BDD step functions."""
    return asyncio.run(coro)


class _LiveFeed:
    """ActivitySource serving whatever the scenario has put in the feed."""

    def __init__(self) -> None:
        self.records: list[ActivityRecord] = []

    async def list_repository_events(
        self, user: str, repo: str
    ) -> list[ActivityRecord]:
        del user, repo
        return sorted(self.records, key=lambda r: r.occurred_at, reverse=True)


class _TeeSink:
    """Writes to the console sink and remembers each batch."""

    def __init__(self, stream: io.StringIO) -> None:
        self._console = ConsoleNotificationSink(stream)
        self.batches: list[list[str]] = []

    async def present(
        self, batch: typ.Sequence[Notification], context: PresentationContext
    ) -> None:
        self.batches.append([item.occurred_at for item in batch])
        await self._console.present(batch, context)


async def _no_sleep(delay: float) -> None:
    del delay


class WatchContext(typ.TypedDict):
    """Shared state used by BDD steps."""

    feed: _LiveFeed
    stream: io.StringIO
    sink: _TeeSink
    store: YamlWatermarkStore
    orchestrator: PollCycleOrchestrator | None


@scenario(
    "../notification_watch.feature",
    "Listing shows every recognised event oldest first",
)
def test_listing_scenario() -> None:
    """Behavioural test wrapper for pytest-bdd."""


@scenario(
    "../notification_watch.feature",
    "Watching only shows activity newer than the last cycle",
)
def test_watching_scenario() -> None:
    """Behavioural test wrapper for pytest-bdd."""


@scenario(
    "../notification_watch.feature",
    "A restarted watcher resumes from the stored watermark",
)
def test_restart_scenario() -> None:
    """Behavioural test wrapper for pytest-bdd."""


@pytest.fixture
def watch_context(tmp_path: Path) -> WatchContext:
    """Provision an empty feed, console and state file per scenario."""
    stream = io.StringIO()
    return {
        "feed": _LiveFeed(),
        "stream": stream,
        "sink": _TeeSink(stream),
        "store": YamlWatermarkStore(tmp_path / "state.yaml"),
        "orchestrator": None,
    }


def _orchestrator(watch_context: WatchContext) -> PollCycleOrchestrator:
    orchestrator = watch_context["orchestrator"]
    if orchestrator is None:
        orchestrator = PollCycleOrchestrator(
            watch_context["feed"],
            watch_context["sink"],
            watch_context["store"],
            _TARGET,
        )
        watch_context["orchestrator"] = orchestrator
    return orchestrator


@given(parsers.parse('the stored watermark for acme/widgets is "{watermark}"'))
def given_stored_watermark(watch_context: WatchContext, watermark: str) -> None:
    """Persist a watermark from an earlier run."""
    run_async(watch_context["store"].save_watermark("acme", "widgets", watermark))


@given(parsers.parse('the acme/widgets feed contains a star at "{occurred_at}"'))
def given_star(watch_context: WatchContext, occurred_at: str) -> None:
    """Add a star event to the feed."""
    watch_context["feed"].records.append(watch_record(occurred_at))


@given(
    parsers.parse('the feed contains a push of commit "{sha}" at "{occurred_at}"')
)
@when(parsers.parse('the feed gains a push of commit "{sha}" at "{occurred_at}"'))
def given_push(watch_context: WatchContext, sha: str, occurred_at: str) -> None:
    """Add a single-commit push to the feed."""
    watch_context["feed"].records.append(push_record(occurred_at, shas=(sha,)))


@given(parsers.parse('the feed contains a "{kind}" at "{occurred_at}"'))
def given_other_kind(watch_context: WatchContext, kind: str, occurred_at: str) -> None:
    """Add an event of an arbitrary kind to the feed."""
    watch_context["feed"].records.append(make_record(kind, occurred_at))


@when("I list the latest activity")
def when_list(watch_context: WatchContext) -> None:
    """Run a one-shot listing."""
    scheduler = WatchScheduler(_orchestrator(watch_context), sleep=_no_sleep)
    run_async(scheduler.run_once())


@when(parsers.parse("I watch for {count:d} cycle"))
@when(parsers.parse("I watch for {count:d} cycles"))
def when_watch(watch_context: WatchContext, count: int) -> None:
    """Run ``count`` watch cycles without waiting between them."""
    scheduler = WatchScheduler(_orchestrator(watch_context), sleep=_no_sleep)
    run_async(scheduler.run_forever(max_cycles=count))


@then("the console shows:")
def then_console_shows(watch_context: WatchContext, docstring: str) -> None:
    """Compare the console output with the expected text."""
    assert watch_context["stream"].getvalue().strip() == docstring.strip()


@then(parsers.parse("{count:d} batches were shown"))
def then_batch_count(watch_context: WatchContext, count: int) -> None:
    """Count presented batches."""
    assert len(watch_context["sink"].batches) == count


@then(parsers.parse('the last batch contains only "{occurred_at}"'))
def then_last_batch(watch_context: WatchContext, occurred_at: str) -> None:
    """Check the newest batch."""
    assert watch_context["sink"].batches[-1] == [occurred_at]


@then(parsers.parse('the stored watermark is "{watermark}"'))
def then_stored_watermark(watch_context: WatchContext, watermark: str) -> None:
    """Read the persisted watermark back from the state file."""
    stored = run_async(watch_context["store"].load_watermark("acme", "widgets"))
    assert stored == watermark


@then("the stored watermark is unset")
def then_no_watermark(watch_context: WatchContext) -> None:
    """Listings never persist a watermark."""
    stored = run_async(watch_context["store"].load_watermark("acme", "widgets"))
    assert stored is None
