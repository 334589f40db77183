"""Value objects passed between the poll cycle and its sinks."""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

from ghwatch.common.slug import repo_slug

if typ.TYPE_CHECKING:
    from ghwatch.github.models import ActivityRecord

DEFAULT_WATERMARK = "2008-04-01T00:00:00Z"


@dataclasses.dataclass(frozen=True, slots=True)
class Notification:
    """A described, linkable activity record ready for display."""

    message: str
    link: str
    occurred_at: str
    record: ActivityRecord


@dataclasses.dataclass(frozen=True, slots=True)
class PresentationContext:
    """What the presentation sink needs to know about the current target."""

    user: str
    repo: str
    latest: bool
    watch: bool

    @property
    def slug(self) -> str:
        """Return ``user/repo``."""
        return repo_slug(self.user, self.repo)


class CycleState(enum.StrEnum):
    """Terminal state of a poll cycle."""

    SUCCESS = "success"
    FETCH_FAILED = "fetch_failed"
    PRESENT_FAILED = "present_failed"


@dataclasses.dataclass(frozen=True, slots=True)
class CycleResult:
    """Summary of one poll cycle."""

    state: CycleState
    fetched: int = 0
    emitted: int = 0
    watermark: str = DEFAULT_WATERMARK
    notifications: tuple[Notification, ...] = ()
