"""Presentation port for notification batches.

Adapters receive a whole batch (oldest first) plus the target context and
decide how to render it. :class:`ConsoleNotificationSink` writes plain text
lines to a stream, which is what the command-line tool uses.
"""

from __future__ import annotations

import sys
import typing as typ

if typ.TYPE_CHECKING:
    from .models import Notification, PresentationContext


@typ.runtime_checkable
class NotificationSink(typ.Protocol):
    """Port receiving each non-empty batch of notifications."""

    async def present(
        self,
        batch: typ.Sequence[Notification],
        context: PresentationContext,
    ) -> None:
        """Render ``batch`` for the target described by ``context``."""
        ...


def render_notification(notification: Notification) -> str:
    """Render one notification as ``<occurred_at> <message>`` plus its link."""
    return f"{notification.occurred_at} {notification.message}\n    {notification.link}"


class ConsoleNotificationSink:
    """Write notifications to a text stream, one block per notification."""

    def __init__(self, stream: typ.TextIO | None = None) -> None:
        """Write to ``stream``, defaulting to standard output at call time."""
        self._stream = stream

    async def present(
        self,
        batch: typ.Sequence[Notification],
        context: PresentationContext,
    ) -> None:
        """Write a header line followed by each rendered notification."""
        stream = self._stream or sys.stdout
        heading = "New activity" if context.watch else "Latest activity"
        lines = [f"{heading} on {context.slug}:"]
        lines.extend(render_notification(item) for item in batch)
        stream.write("\n".join(lines) + "\n")
        stream.flush()
