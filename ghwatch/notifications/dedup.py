"""Process-lifetime duplicate suppression."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from ghwatch.github.models import ActivityRecord


class DeduplicationFilter:
    """Decide whether a classified record is new for this process.

    Records are keyed by ``occurred_at``. The seen-set is never pruned; it
    lives as long as the single listing or watch session that owns it.
    """

    def __init__(self) -> None:
        """Start with an empty seen-set."""
        self._seen: set[str] = set()

    def __contains__(self, occurred_at: object) -> bool:
        """Return True when a timestamp has already been evaluated."""
        return occurred_at in self._seen

    def __len__(self) -> int:
        """Return the number of timestamps evaluated so far."""
        return len(self._seen)

    def should_emit(
        self,
        record: ActivityRecord,
        *,
        watermark: str,
        watch_mode: bool,
    ) -> bool:
        """Return whether ``record`` should be shown.

        In a one-shot listing every record is shown. In watch mode a record
        must be strictly newer than ``watermark`` and not seen before. Either
        way the timestamp is remembered afterwards.
        """
        occurred_at = record.occurred_at
        if watch_mode:
            emit = occurred_at > watermark and occurred_at not in self._seen
        else:
            emit = True
        self._seen.add(occurred_at)
        return emit
