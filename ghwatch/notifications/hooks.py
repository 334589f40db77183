"""Per-notification hooks dispatched through Dramatiq.

Each emitted notification can trigger an operator-supplied command. The poll
cycle only enqueues a message; the command runs on a Dramatiq worker and its
outcome never feeds back into the cycle. The CLI runs an in-process worker
via :func:`hook_worker`; deployments with a real broker can run
``dramatiq ghwatch.notifications.hooks`` instead.
"""

from __future__ import annotations

import contextlib
import shlex
import subprocess
import typing as typ

import dramatiq
import msgspec
from dramatiq.brokers.stub import StubBroker
from dramatiq.errors import QueueJoinTimeout

from ghwatch.logging import get_logger, log_exception, log_info, log_warning

if typ.TYPE_CHECKING:
    from .models import Notification

logger = get_logger(__name__)

HOOK_QUEUE = "ghwatch.hooks"
_HOOK_TIMEOUT_S = 60
_DRAIN_TIMEOUT_MS = 30_000


class HookSink(typ.Protocol):
    """Port notified once per emitted notification."""

    async def notify(self, notification: Notification, *, user: str, repo: str) -> None:
        """Hand ``notification`` to the hook machinery without waiting on it."""
        ...


def hook_document(notification: Notification, *, user: str, repo: str) -> str:
    """Serialise the (event, repo, user) triple handed to hook commands.

    The event is the raw feed record extended with ``text`` (the rendered
    message) and ``open`` (the resolved link).
    """
    event = msgspec.to_builtins(notification.record)
    event["text"] = notification.message
    event["open"] = notification.link
    return msgspec.json.encode({"event": event, "repo": repo, "user": user}).decode(
        "utf-8"
    )


try:  # pragma: no cover - depends on installed broker extras
    _current_broker = dramatiq.get_broker()
except ImportError:
    _current_broker = None

if _current_broker is None:
    dramatiq.set_broker(StubBroker())


@dramatiq.actor(queue_name=HOOK_QUEUE, max_retries=0)
def run_notification_hook(argv: list[str], document: str) -> None:
    """Run a hook command with the notification document on stdin."""
    try:
        result = subprocess.run(  # noqa: S603  # argv comes from operator config
            argv,
            input=document,
            text=True,
            capture_output=True,
            timeout=_HOOK_TIMEOUT_S,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        log_exception(logger, f"notification hook {argv[0]} failed to run", exc)
        return

    if result.returncode != 0:
        log_warning(
            logger,
            "notification hook %s exited with status %d: %s",
            argv[0],
            result.returncode,
            result.stderr.strip(),
        )


class DramatiqHookSink:
    """:class:`HookSink` that enqueues :func:`run_notification_hook`."""

    def __init__(
        self,
        command: str | typ.Sequence[str],
        *,
        actor: dramatiq.Actor | None = None,
    ) -> None:
        """Parse ``command`` into argv and bind the actor used to enqueue."""
        argv = shlex.split(command) if isinstance(command, str) else list(command)
        if not argv:
            msg = "hook command must not be empty"
            raise ValueError(msg)
        self._argv = argv
        self._actor = actor or run_notification_hook

    @property
    def argv(self) -> list[str]:
        """Return the parsed hook command."""
        return list(self._argv)

    async def notify(self, notification: Notification, *, user: str, repo: str) -> None:
        """Enqueue the hook for ``notification``."""
        self._actor.send(
            self._argv, hook_document(notification, user=user, repo=repo)
        )


@contextlib.contextmanager
def hook_worker(
    broker: dramatiq.Broker | None = None,
    *,
    worker_threads: int = 1,
    drain_timeout_ms: int = _DRAIN_TIMEOUT_MS,
) -> typ.Iterator[dramatiq.Worker]:
    """Run an in-process Dramatiq worker for the hook queue.

    On exit, messages already queued on a stub broker are given up to
    ``drain_timeout_ms`` to finish before the worker stops.
    """
    resolved = broker or dramatiq.get_broker()
    worker = dramatiq.Worker(
        resolved, queues={HOOK_QUEUE}, worker_threads=worker_threads
    )
    worker.start()
    try:
        yield worker
    finally:
        if isinstance(resolved, StubBroker):
            try:
                resolved.join(
                    HOOK_QUEUE, fail_fast=False, timeout=drain_timeout_ms
                )
            except QueueJoinTimeout:
                log_warning(logger, "gave up waiting for queued notification hooks")
        worker.join()
        worker.stop()
        log_info(logger, "notification hook worker stopped")
