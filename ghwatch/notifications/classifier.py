"""Describe activity records as short English fragments.

The fragment sits between the actor and the repository name in the final
line, e.g. ``@octocat pushed 2 commits to acme/widgets``.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

from ghwatch.github.models import EventKind
from ghwatch.logging import get_logger, log_debug, log_warning

if typ.TYPE_CHECKING:
    from ghwatch.github.models import ActivityRecord

logger = get_logger(__name__)

_MISSING = "unknown"


class ClassificationOutcome(enum.StrEnum):
    """How the classifier treated a record."""

    DESCRIBED = "described"
    IGNORED = "ignored"
    UNRECOGNISED = "unrecognised"


@dataclasses.dataclass(frozen=True, slots=True)
class Classification:
    """Fragment produced for a record, empty unless it was described."""

    fragment: str
    outcome: ClassificationOutcome

    @property
    def ok(self) -> bool:
        """Whether the record should be shown."""
        return self.outcome is ClassificationOutcome.DESCRIBED


_IGNORED = Classification("", ClassificationOutcome.IGNORED)
_UNRECOGNISED = Classification("", ClassificationOutcome.UNRECOGNISED)


def _lookup(payload: typ.Mapping[str, typ.Any], *path: str) -> object:
    node: object = payload
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _text(payload: typ.Mapping[str, typ.Any], *path: str) -> str:
    """Render a payload field, falling back to a placeholder when absent."""
    value = _lookup(payload, *path)
    if isinstance(value, dict):
        value = value.get("login")
    if value is None or value == "":
        return _MISSING
    return str(value)


def _commit_count(payload: typ.Mapping[str, typ.Any]) -> int:
    commits = payload.get("commits")
    if isinstance(commits, list):
        return len(commits)
    size = payload.get("size")
    return size if isinstance(size, int) else 0


def _pushed(count: int) -> str:
    noun = "commit" if count == 1 else "commits"
    return f"pushed {count} {noun} to"


def _ref_phrase(payload: typ.Mapping[str, typ.Any]) -> str:
    # Repository creation carries a null ref.
    ref = payload.get("ref")
    ref_type = _text(payload, "ref_type")
    if ref is None:
        return ref_type
    return f"{ref} {ref_type}"


def _describe(  # noqa: C901, PLR0911, PLR0912
    kind: EventKind, payload: typ.Mapping[str, typ.Any]
) -> str:
    """Return the fragment for a kind that is shown."""
    match kind:
        case EventKind.COMMIT_COMMENT:
            return "commented on a commit at"
        case EventKind.CREATE:
            return f"created the {_ref_phrase(payload)} at"
        case EventKind.DELETE:
            return f"removed the {_ref_phrase(payload)} at"
        case EventKind.DEPLOYMENT:
            name = payload.get("name") or _lookup(payload, "deployment", "environment")
            return f"deployed {name or _MISSING} at"
        case EventKind.DEPLOYMENT_STATUS:
            state = payload.get("state") or _lookup(
                payload, "deployment_status", "state"
            )
            return f"{state or _MISSING} status for deployment at"
        case EventKind.FORK:
            return "forked"
        case EventKind.GOLLUM:
            return "updated the wiki for"
        case EventKind.ISSUE_COMMENT:
            return f"commented on issue #{_text(payload, 'issue', 'number')} at"
        case EventKind.ISSUES:
            action = _text(payload, "action")
            return f"{action} issue #{_text(payload, 'issue', 'number')} at"
        case EventKind.MEMBER:
            return f"added {_text(payload, 'member')} as a collaborator to"
        case EventKind.PUBLIC:
            return "open sourced"
        case EventKind.PULL_REQUEST:
            action = _text(payload, "action")
            return f"{action} pull request #{_text(payload, 'number')} at"
        case EventKind.PULL_REQUEST_REVIEW_COMMENT:
            return "commented on a pull request at"
        case EventKind.PUSH:
            return _pushed(_commit_count(payload))
        case EventKind.RELEASE:
            return "published release for"
        case EventKind.STATUS:
            return f"{_text(payload, 'state')} status of commit at"
        case EventKind.TEAM_ADD:
            return f"adds team member {_text(payload, 'user')}"
        case EventKind.WATCH:
            return "is now watching"
        case (
            EventKind.DOWNLOAD
            | EventKind.FOLLOW
            | EventKind.FORK_APPLY
            | EventKind.GIST
        ):
            # Filtered out by classify.
            return ""
        case _:
            typ.assert_never(kind)


def classify(record: ActivityRecord) -> Classification:
    """Classify ``record`` into a display fragment.

    Ignored kinds (downloads, follows, fork-applies, gists) come back with an
    empty fragment and ``ok`` false. Types outside :class:`EventKind` are
    reported as a warning and treated the same way.
    """
    kind = record.event_kind
    if kind is None:
        log_warning(logger, "event type not found: %s", record.kind)
        return _UNRECOGNISED

    if kind.is_ignored:
        log_debug(logger, "ignoring %s", kind)
        return _IGNORED
    fragment = _describe(kind, record.payload)
    return Classification(fragment, ClassificationOutcome.DESCRIBED)


def format_message(record: ActivityRecord, fragment: str) -> str:
    """Join actor, fragment and repository into the notification text."""
    return f"@{record.actor.login} {fragment} {record.repo.name}"
