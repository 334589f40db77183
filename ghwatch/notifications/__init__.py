"""Notification pipeline: classify, deduplicate, link, emit, and track progress.

* **Classification** - :func:`classify` turns a feed record into a fragment.
* **Links** - :func:`resolve_link` derives the web page for a record.
* **Deduplication** - :class:`DeduplicationFilter` keeps the seen-set.
* **Watermarks** - :class:`WatermarkTracker` over a :class:`WatermarkStore`.
* **Cycles** - :class:`PollCycleOrchestrator` and :class:`WatchScheduler`.
"""

from __future__ import annotations

from .classifier import Classification, ClassificationOutcome, classify, format_message
from .config import NotificationConfig, default_state_path
from .dedup import DeduplicationFilter
from .errors import NotificationConfigError, WatermarkStoreError
from .hooks import DramatiqHookSink, HookSink, hook_worker, run_notification_hook
from .links import DEFAULT_FALLBACK_URL, api_to_web_url, resolve_link
from .models import (
    DEFAULT_WATERMARK,
    CycleResult,
    CycleState,
    Notification,
    PresentationContext,
)
from .observability import (
    CycleContext,
    ErrorCategory,
    NotificationEventLogger,
    NotificationEventType,
    categorize_error,
)
from .orchestrator import PollCycleOrchestrator, WatchTarget
from .scheduler import WatchScheduler
from .sink import ConsoleNotificationSink, NotificationSink, render_notification
from .store import (
    InMemoryWatermarkStore,
    WatermarkConfig,
    WatermarkStore,
    YamlWatermarkStore,
)
from .watermark import WatermarkTracker

__all__ = [
    "DEFAULT_FALLBACK_URL",
    "DEFAULT_WATERMARK",
    "Classification",
    "ClassificationOutcome",
    "ConsoleNotificationSink",
    "CycleContext",
    "CycleResult",
    "CycleState",
    "DeduplicationFilter",
    "DramatiqHookSink",
    "ErrorCategory",
    "HookSink",
    "InMemoryWatermarkStore",
    "Notification",
    "NotificationConfig",
    "NotificationConfigError",
    "NotificationEventLogger",
    "NotificationEventType",
    "NotificationSink",
    "PollCycleOrchestrator",
    "PresentationContext",
    "WatchScheduler",
    "WatchTarget",
    "WatermarkConfig",
    "WatermarkStore",
    "WatermarkStoreError",
    "WatermarkTracker",
    "YamlWatermarkStore",
    "api_to_web_url",
    "categorize_error",
    "classify",
    "default_state_path",
    "format_message",
    "hook_worker",
    "render_notification",
    "resolve_link",
    "run_notification_hook",
]
