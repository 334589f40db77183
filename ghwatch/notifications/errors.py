"""Errors raised by the notification pipeline and its collaborators."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


class NotificationConfigError(RuntimeError):
    """Raised when the notifier cannot work out what to watch."""

    @classmethod
    def missing_repository(cls) -> NotificationConfigError:
        """Return an error when no target repository was supplied."""
        return cls("You must specify a Git repository to run this command")

    @classmethod
    def missing_user(cls) -> NotificationConfigError:
        """Return an error when no repository owner was supplied."""
        return cls("You must specify the repository owner with --user")


class WatermarkStoreError(RuntimeError):
    """Raised when persisted watermarks cannot be read or written."""

    @classmethod
    def unreadable(cls, path: Path, detail: object) -> WatermarkStoreError:
        """Return an error for a state file that fails to parse."""
        return cls(f"failed to read watermark state from {path}: {detail}")

    @classmethod
    def unwritable(cls, path: Path, detail: object) -> WatermarkStoreError:
        """Return an error for a state file that cannot be written."""
        return cls(f"failed to write watermark state to {path}: {detail}")
