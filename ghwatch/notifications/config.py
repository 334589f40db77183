"""Runtime configuration for the notifier.

Usage
-----
Defaults:

>>> config = NotificationConfig()
>>> config.poll_interval_s
180

Or from the environment:

>>> import os
>>> os.environ["GHWATCH_POLL_INTERVAL_SECONDS"] = "60"
>>> NotificationConfig.from_env().poll_interval_s
60

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

from .links import DEFAULT_FALLBACK_URL
from .models import DEFAULT_WATERMARK

_DEFAULT_POLL_INTERVAL_S = 3 * 60


def default_state_path() -> Path:
    """Return ``$XDG_CONFIG_HOME/ghwatch/state.yaml`` (``~/.config`` by default)."""
    base = os.environ.get("XDG_CONFIG_HOME", "").strip()
    root = Path(base) if base else Path.home() / ".config"
    return root / "ghwatch" / "state.yaml"


@dc.dataclass(frozen=True, slots=True)
class NotificationConfig:
    """Settings shared by the poll cycle and the watch loop.

    Attributes
    ----------
    poll_interval_s
        Seconds to wait after one watch cycle finishes before the next one
        starts. Default is three minutes.
    state_path
        YAML file holding persisted watermarks. ``None`` selects
        :func:`default_state_path`.
    fallback_url
        Link used when no event-specific link can be derived.
    hook_command
        Optional command run once per emitted notification.
    default_watermark
        Watermark assumed for repositories that were never watched.

    """

    poll_interval_s: int = _DEFAULT_POLL_INTERVAL_S
    state_path: Path | None = None
    fallback_url: str = DEFAULT_FALLBACK_URL
    hook_command: str | None = None
    default_watermark: str = DEFAULT_WATERMARK

    @property
    def resolved_state_path(self) -> Path:
        """Return ``state_path`` or the default location."""
        return self.state_path or default_state_path()

    @staticmethod
    def _parse_positive_int(env_var: str, default: int) -> int:
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            msg = f"{env_var} must be an integer, got: {raw!r}"
            raise ValueError(msg) from exc
        if value < 1:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @classmethod
    def from_env(cls) -> NotificationConfig:
        """Create configuration from environment variables.

        - ``GHWATCH_POLL_INTERVAL_SECONDS``: positive integer.
        - ``GHWATCH_CONFIG_PATH``: watermark state file.
        - ``GHWATCH_FALLBACK_URL``: link used when none can be derived.
        - ``GHWATCH_HOOK_COMMAND``: command run per notification.

        Raises
        ------
        ValueError
            If ``GHWATCH_POLL_INTERVAL_SECONDS`` is not a positive integer.

        """
        poll_interval_s = cls._parse_positive_int(
            "GHWATCH_POLL_INTERVAL_SECONDS", _DEFAULT_POLL_INTERVAL_S
        )

        raw_state_path = os.environ.get("GHWATCH_CONFIG_PATH", "").strip()
        state_path = Path(raw_state_path) if raw_state_path else None

        fallback_url = (
            os.environ.get("GHWATCH_FALLBACK_URL", "").strip() or DEFAULT_FALLBACK_URL
        )
        hook_command = os.environ.get("GHWATCH_HOOK_COMMAND", "").strip() or None

        return cls(
            poll_interval_s=poll_interval_s,
            state_path=state_path,
            fallback_url=fallback_url,
            hook_command=hook_command,
        )
