"""Unit tests for notifier configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from ghwatch.notifications import (
    DEFAULT_FALLBACK_URL,
    DEFAULT_WATERMARK,
    NotificationConfig,
    default_state_path,
)


def test_defaults() -> None:
    """The defaults poll every three minutes from the early-2008 epoch."""
    config = NotificationConfig()

    assert config.poll_interval_s == 180
    assert config.fallback_url == DEFAULT_FALLBACK_URL
    assert config.default_watermark == DEFAULT_WATERMARK
    assert config.hook_command is None


def test_default_state_path_honours_xdg(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """XDG_CONFIG_HOME relocates the state file."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert default_state_path() == tmp_path / "ghwatch" / "state.yaml"
    assert NotificationConfig().resolved_state_path == default_state_path()


def test_from_env_reads_all_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Every setting can come from the environment."""
    monkeypatch.setenv("GHWATCH_POLL_INTERVAL_SECONDS", "60")
    monkeypatch.setenv("GHWATCH_CONFIG_PATH", "/tmp/ghwatch-state.yaml")  # noqa: S108
    monkeypatch.setenv("GHWATCH_FALLBACK_URL", "https://ghe.example.com")
    monkeypatch.setenv("GHWATCH_HOOK_COMMAND", "notify-send")

    config = NotificationConfig.from_env()

    assert config.poll_interval_s == 60
    assert config.resolved_state_path == Path("/tmp/ghwatch-state.yaml")  # noqa: S108
    assert config.fallback_url == "https://ghe.example.com"
    assert config.hook_command == "notify-send"


def test_from_env_ignores_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    """Blank variables fall back to the defaults."""
    monkeypatch.setenv("GHWATCH_POLL_INTERVAL_SECONDS", " ")
    monkeypatch.setenv("GHWATCH_HOOK_COMMAND", "")

    config = NotificationConfig.from_env()

    assert config.poll_interval_s == 180
    assert config.hook_command is None


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ("soon", "must be an integer"),
        ("0", "must be positive"),
        ("-5", "must be positive"),
    ],
)
def test_from_env_rejects_bad_interval(
    monkeypatch: pytest.MonkeyPatch, raw: str, message: str
) -> None:
    """The poll interval must be a positive integer."""
    monkeypatch.setenv("GHWATCH_POLL_INTERVAL_SECONDS", raw)

    with pytest.raises(ValueError, match=message):
        NotificationConfig.from_env()
