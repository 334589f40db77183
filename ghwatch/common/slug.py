"""Repository slug parsing.

A slug is the ``owner/name`` pair GitHub uses to address a repository. Slugs
also hide inside git remote URLs (``git@github.com:owner/name.git``,
``https://github.com/owner/name``), so this module extracts them from there
too.
"""

from __future__ import annotations

import re

_SCP_REMOTE = re.compile(r"^[\w.\-]+@[\w.\-]+:(?P<path>.+)$")
_URL_REMOTE = re.compile(r"^[a-z][a-z0-9+.\-]*://[^/]+/(?P<path>.+)$", re.IGNORECASE)


def repo_slug(owner: str, name: str) -> str:
    """Join an owner and repository name into a slug.

    Examples
    --------
    >>> repo_slug("acme", "widgets")
    'acme/widgets'

    """
    return f"{owner}/{name}"


def parse_repo_slug(slug: str) -> tuple[str, str]:
    """Split an ``owner/name`` slug.

    Raises
    ------
    ValueError
        If the slug does not have exactly one non-empty owner and name.

    Examples
    --------
    >>> parse_repo_slug("acme/widgets")
    ('acme', 'widgets')

    """
    owner, sep, name = slug.partition("/")
    if not sep or not owner or not name or "/" in name:
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)
    return owner, name


def slug_from_remote_url(url: str) -> tuple[str, str] | None:
    """Return ``(owner, name)`` parsed from a git remote URL.

    Both scp-like (``git@host:owner/name.git``) and URL forms are accepted.
    ``None`` is returned for anything that does not end in ``owner/name``.

    Examples
    --------
    >>> slug_from_remote_url("git@github.com:acme/widgets.git")
    ('acme', 'widgets')
    >>> slug_from_remote_url("https://github.com/acme/widgets")
    ('acme', 'widgets')

    """
    text = url.strip()
    match = _SCP_REMOTE.match(text) or _URL_REMOTE.match(text)
    if match is None:
        return None

    path = match.group("path").rstrip("/")
    path = path.removesuffix(".git")
    try:
        return parse_repo_slug(path)
    except ValueError:
        return None
