"""Typed records for the GitHub repository events feed."""

from __future__ import annotations

import enum
import typing as typ

import msgspec


class EventKind(enum.StrEnum):
    """Closed set of event types the notifier knows about.

    Values are the ``type`` strings of the GitHub events API.
    """

    COMMIT_COMMENT = "CommitCommentEvent"
    CREATE = "CreateEvent"
    DELETE = "DeleteEvent"
    DEPLOYMENT = "DeploymentEvent"
    DEPLOYMENT_STATUS = "DeploymentStatusEvent"
    DOWNLOAD = "DownloadEvent"
    FOLLOW = "FollowEvent"
    FORK = "ForkEvent"
    FORK_APPLY = "ForkApplyEvent"
    GIST = "GistEvent"
    GOLLUM = "GollumEvent"
    ISSUE_COMMENT = "IssueCommentEvent"
    ISSUES = "IssuesEvent"
    MEMBER = "MemberEvent"
    PUBLIC = "PublicEvent"
    PULL_REQUEST = "PullRequestEvent"
    PULL_REQUEST_REVIEW_COMMENT = "PullRequestReviewCommentEvent"
    PUSH = "PushEvent"
    RELEASE = "ReleaseEvent"
    STATUS = "StatusEvent"
    TEAM_ADD = "TeamAddEvent"
    WATCH = "WatchEvent"

    @classmethod
    def parse(cls, raw: str) -> EventKind | None:
        """Return the kind for a raw ``type`` string, or ``None`` if unknown."""
        alias = _KIND_ALIASES.get(raw)
        if alias is not None:
            return alias
        try:
            return cls(raw)
        except ValueError:
            return None

    @property
    def is_ignored(self) -> bool:
        """Whether events of this kind are deliberately never shown."""
        return self in IGNORED_KINDS


# Older feeds spelled the gist event with a space.
_KIND_ALIASES: dict[str, EventKind] = {"Gist Event": EventKind.GIST}

IGNORED_KINDS: frozenset[EventKind] = frozenset(
    {
        EventKind.DOWNLOAD,
        EventKind.FOLLOW,
        EventKind.FORK_APPLY,
        EventKind.GIST,
    }
)


class Actor(msgspec.Struct, kw_only=True, frozen=True):
    """User that triggered an event.

    Attributes
    ----------
    login : str
        GitHub login.
    url : str
        API URL of the user profile.

    """

    login: str
    url: str = ""


class RepositoryRef(msgspec.Struct, kw_only=True, frozen=True):
    """Repository an event belongs to.

    Attributes
    ----------
    name : str
        ``owner/name`` slug as reported by the feed.
    url : str
        Canonical API URL, e.g. ``https://api.github.com/repos/owner/name``.

    """

    name: str
    url: str = ""


class ActivityRecord(msgspec.Struct, kw_only=True, frozen=True):
    """One entry of a repository's events feed.

    ``occurred_at`` doubles as the record identity within a (user, repository)
    scope. It is an ISO-8601 UTC string and is compared lexically.
    """

    kind: str = msgspec.field(name="type")
    occurred_at: str = msgspec.field(name="created_at")
    actor: Actor
    repo: RepositoryRef
    payload: dict[str, typ.Any] = msgspec.field(default_factory=dict)
    id: str | None = None

    @property
    def event_kind(self) -> EventKind | None:
        """Parsed :class:`EventKind`, or ``None`` when the type is unknown."""
        return EventKind.parse(self.kind)


def decode_activity_records(data: bytes | str) -> list[ActivityRecord]:
    """Decode a JSON events array into records."""
    return msgspec.json.decode(data, type=list[ActivityRecord])
