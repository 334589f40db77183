"""Derive a browsable web link for an activity record.

Most links are built from the repository's API URL. The API form
``https://api.<host>/repos/<owner>/<repo>`` maps onto the public page
``https://<host>/<owner>/<repo>``; user URLs (``/users/<login>``) map the
same way onto profile pages.
"""

from __future__ import annotations

import typing as typ

from ghwatch.github.models import EventKind

if typ.TYPE_CHECKING:
    from ghwatch.github.models import ActivityRecord

DEFAULT_FALLBACK_URL = "https://github.com"

_API_PREFIX = "https://api."


def api_to_web_url(url: str, suffix: str = "") -> str | None:
    """Translate an API URL into its public web equivalent.

    The first path segment (``repos``, ``users``) is dropped and ``suffix`` is
    appended. ``None`` is returned when the URL does not start with the API
    host prefix or lacks a resource path after that segment.

    Examples
    --------
    >>> api_to_web_url("https://api.github.com/repos/acme/widgets", "/wiki")
    'https://github.com/acme/widgets/wiki'
    >>> api_to_web_url("https://example.com/acme") is None
    True

    """
    if not url.startswith(_API_PREFIX):
        return None

    host, sep, path = url.removeprefix(_API_PREFIX).partition("/")
    if not host or not sep:
        return None

    segment, sep, rest = path.partition("/")
    if not segment or not sep or not rest:
        return None

    return f"https://{host}/{rest}{suffix}"


def _string_at(payload: typ.Mapping[str, typ.Any], *path: str) -> str | None:
    node: object = payload
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node if isinstance(node, str) and node else None


def _first_commit_sha(payload: typ.Mapping[str, typ.Any]) -> str | None:
    commits = payload.get("commits")
    if not isinstance(commits, list) or not commits:
        return None
    first = commits[0]
    if not isinstance(first, dict):
        return None
    sha = first.get("sha")
    return sha if isinstance(sha, str) and sha else None


def _repo_link(record: ActivityRecord, suffix: str = "") -> str | None:
    return api_to_web_url(record.repo.url, suffix)


def _derive(record: ActivityRecord) -> str | None:  # noqa: PLR0911
    payload = record.payload
    match record.event_kind:
        case EventKind.CREATE:
            ref = _string_at(payload, "ref")
            return _repo_link(record, f"/tree/{ref}") if ref else None
        case (
            EventKind.COMMIT_COMMENT
            | EventKind.ISSUE_COMMENT
            | EventKind.PULL_REQUEST_REVIEW_COMMENT
        ):
            return _string_at(payload, "comment", "html_url")
        case EventKind.DELETE | EventKind.MEMBER | EventKind.PUBLIC | EventKind.WATCH:
            return _repo_link(record)
        case EventKind.FORK:
            return api_to_web_url(record.actor.url)
        case EventKind.GOLLUM:
            return _repo_link(record, "/wiki")
        case EventKind.ISSUES:
            if payload.get("action") != "opened":
                return None
            return _string_at(payload, "issue", "html_url")
        case EventKind.PULL_REQUEST:
            return _string_at(payload, "pull_request", "html_url")
        case EventKind.PUSH:
            sha = _first_commit_sha(payload)
            return _repo_link(record, f"/commit/{sha}") if sha else None
        case EventKind.RELEASE:
            return _string_at(payload, "release", "html_url")
        case _:
            return None


def resolve_link(
    record: ActivityRecord, *, fallback: str = DEFAULT_FALLBACK_URL
) -> str:
    """Return the web URL for ``record``, or ``fallback`` when none applies."""
    return _derive(record) or fallback
