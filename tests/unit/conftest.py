"""Unit-test fixtures for the notification pipeline."""

from __future__ import annotations

import typing as typ

import pytest

from ghwatch.notifications import InMemoryWatermarkStore
from tests.unit.notification_test_helpers import (
    FakeActivitySource,
    RecordingSink,
    make_orchestrator,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

    from ghwatch.notifications import PollCycleOrchestrator


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    """Return a state file location inside the test's temporary directory."""
    return tmp_path / "config" / "state.yaml"


@pytest.fixture
def memory_store() -> InMemoryWatermarkStore:
    """Return an empty in-memory watermark store."""
    return InMemoryWatermarkStore()


@pytest.fixture
def empty_orchestrator() -> tuple[PollCycleOrchestrator, RecordingSink]:
    """Return an orchestrator whose feed is always empty."""
    orchestrator, sink, _ = make_orchestrator(FakeActivitySource([]))
    return orchestrator, sink
