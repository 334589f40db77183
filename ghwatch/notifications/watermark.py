"""Monotonic watermark for one (user, repository) pair."""

from __future__ import annotations

import typing as typ

from .models import DEFAULT_WATERMARK

if typ.TYPE_CHECKING:
    from .store import WatermarkStore


class WatermarkTracker:
    """Track the newest ``occurred_at`` already shown for a repository.

    The in-memory value is seeded from the store and only ever moves
    forward. Timestamps are ISO-8601 UTC strings, so plain string comparison
    orders them.
    """

    def __init__(
        self,
        store: WatermarkStore,
        user: str,
        repo: str,
        *,
        default: str = DEFAULT_WATERMARK,
    ) -> None:
        """Bind the tracker to a store and target; call :meth:`seed` before use."""
        self._store = store
        self._user = user
        self._repo = repo
        self._current = default

    @property
    def current(self) -> str:
        """Return the in-memory watermark."""
        return self._current

    async def seed(self) -> str:
        """Load the persisted watermark, keeping the default when none exists."""
        persisted = await self._store.load_watermark(self._user, self._repo)
        if persisted is not None:
            self._current = persisted
        return self._current

    async def advance(self, candidate: str) -> bool:
        """Move the watermark to ``candidate`` if it is newer, and persist it.

        The in-memory value is updated before the store is called, so a
        failing write still stops this process from showing the same events
        again. Store errors propagate to the caller.
        """
        if candidate <= self._current:
            return False
        self._current = candidate
        await self._store.save_watermark(self._user, self._repo, candidate)
        return True
