"""Thin wrappers around the local ``git`` executable."""

from __future__ import annotations

import pathlib
import shutil
import subprocess

from .slug import slug_from_remote_url


def remote_url(remote: str, *, cwd: pathlib.Path | None = None) -> str | None:
    """Return the fetch URL of ``remote`` or ``None`` when it cannot be read.

    A missing ``git`` binary, a directory that is not a work tree, and an
    unknown remote all yield ``None``.
    """
    git_executable = shutil.which("git")
    if git_executable is None:
        return None

    try:
        result = subprocess.run(  # noqa: S603  # fixed argv against a local repo
            [git_executable, "remote", "get-url", remote],
            check=True,
            capture_output=True,
            text=True,
            timeout=5,
            cwd=cwd,
        )
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError):
        return None
    return result.stdout.strip() or None


def repository_from_remote(
    remote: str, *, cwd: pathlib.Path | None = None
) -> tuple[str, str] | None:
    """Resolve ``(owner, name)`` from the URL configured for ``remote``."""
    url = remote_url(remote, cwd=cwd)
    if url is None:
        return None
    return slug_from_remote_url(url)
