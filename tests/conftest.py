"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import os

import pytest

_GHWATCH_ENV_PREFIX = "GHWATCH_"


@pytest.fixture(autouse=True)
def _isolate_ghwatch_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop ambient GHWATCH_* settings so every test starts from defaults."""
    for name in list(os.environ):
        if name.startswith(_GHWATCH_ENV_PREFIX):
            monkeypatch.delenv(name)
