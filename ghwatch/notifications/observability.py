"""Structured log events for poll cycles.

Every event is a single line of the form ``[event.type] key=value ...`` so
it can be picked apart by a log aggregator. Successful cycles log at INFO,
sink and storage problems at WARNING/ERROR, and fetch failures at ERROR
with an :class:`ErrorCategory` to separate outages from misconfiguration.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

import httpx

from ghwatch.common.slug import repo_slug
from ghwatch.github.errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
)
from ghwatch.logging import get_logger, log_error, log_info, log_warning

from .errors import NotificationConfigError, WatermarkStoreError

if typ.TYPE_CHECKING:
    import datetime as dt

    from .models import CycleResult, Notification

logger = get_logger(__name__)

_HTTP_SERVER_ERROR_THRESHOLD = 500


class NotificationEventType(enum.StrEnum):
    """Structured log event types for the notifier."""

    CYCLE_STARTED = "notification.cycle.started"
    CYCLE_COMPLETED = "notification.cycle.completed"
    CYCLE_FAILED = "notification.cycle.failed"
    HOOK_FAILED = "notification.hook.failed"
    PRESENT_FAILED = "notification.present.failed"
    WATERMARK_ADVANCED = "notification.watermark.advanced"
    WATERMARK_PERSIST_FAILED = "notification.watermark.persist_failed"


class ErrorCategory(enum.StrEnum):
    """Categories used to tell transient outages from persistent faults."""

    TRANSIENT = "transient"
    NETWORK = "network"
    CLIENT_ERROR = "client_error"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    STORAGE = "storage"
    UNKNOWN = "unknown"


@dataclasses.dataclass(frozen=True, slots=True)
class CycleContext:
    """Identifies one poll cycle in log output."""

    user: str
    repo: str
    watch_mode: bool
    started_at: dt.datetime

    @property
    def slug(self) -> str:
        """Return ``user/repo``."""
        return repo_slug(self.user, self.repo)


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (GitHubResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (GitHubConfigError, ErrorCategory.CONFIGURATION),
    (NotificationConfigError, ErrorCategory.CONFIGURATION),
    (WatermarkStoreError, ErrorCategory.STORAGE),
    (httpx.TimeoutException, ErrorCategory.TRANSIENT),
    (httpx.TransportError, ErrorCategory.NETWORK),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Return the alerting category for ``exc``."""
    if isinstance(exc, GitHubAPIError):
        if (
            exc.status_code is not None
            and exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD
        ):
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    return ErrorCategory.UNKNOWN


class NotificationEventLogger:
    """Emit structured poll-cycle events through femtologging."""

    def log_cycle_started(self, context: CycleContext) -> None:
        """Log the start of a cycle."""
        log_info(
            logger,
            "[%s] repo_slug=%s watch_mode=%s started_at=%s",
            NotificationEventType.CYCLE_STARTED,
            context.slug,
            context.watch_mode,
            context.started_at.isoformat(),
        )

    def log_cycle_completed(
        self,
        context: CycleContext,
        result: CycleResult,
        duration: dt.timedelta,
    ) -> None:
        """Log a finished cycle with its counts."""
        log_info(
            logger,
            "[%s] repo_slug=%s duration_seconds=%.3f fetched=%d emitted=%d "
            "watermark=%s",
            NotificationEventType.CYCLE_COMPLETED,
            context.slug,
            duration.total_seconds(),
            result.fetched,
            result.emitted,
            result.watermark,
        )

    def log_cycle_failed(
        self,
        context: CycleContext,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a cycle whose fetch failed."""
        log_error(
            logger,
            "[%s] repo_slug=%s duration_seconds=%.3f error_type=%s "
            "error_category=%s error_message=%s",
            NotificationEventType.CYCLE_FAILED,
            context.slug,
            duration.total_seconds(),
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )

    def log_hook_failed(
        self,
        context: CycleContext,
        notification: Notification,
        error: BaseException,
    ) -> None:
        """Log a hook that could not be dispatched."""
        log_warning(
            logger,
            "[%s] repo_slug=%s occurred_at=%s error_type=%s error_message=%s",
            NotificationEventType.HOOK_FAILED,
            context.slug,
            notification.occurred_at,
            type(error).__name__,
            str(error),
        )

    def log_present_failed(
        self,
        context: CycleContext,
        batch_size: int,
        error: BaseException,
    ) -> None:
        """Log a batch the notification sink failed to show."""
        log_error(
            logger,
            "[%s] repo_slug=%s batch_size=%d error_type=%s error_message=%s",
            NotificationEventType.PRESENT_FAILED,
            context.slug,
            batch_size,
            type(error).__name__,
            str(error),
            exc_info=error,
        )

    def log_watermark_advanced(self, context: CycleContext, watermark: str) -> None:
        """Log a watermark that moved forward."""
        log_info(
            logger,
            "[%s] repo_slug=%s watermark=%s",
            NotificationEventType.WATERMARK_ADVANCED,
            context.slug,
            watermark,
        )

    def log_watermark_persist_failed(
        self,
        context: CycleContext,
        watermark: str,
        error: BaseException,
    ) -> None:
        """Log a watermark that advanced in memory but was not persisted."""
        log_error(
            logger,
            "[%s] repo_slug=%s watermark=%s error_type=%s error_message=%s",
            NotificationEventType.WATERMARK_PERSIST_FAILED,
            context.slug,
            watermark,
            type(error).__name__,
            str(error),
            exc_info=error,
        )
