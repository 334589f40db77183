"""Durable storage for per-repository watermarks.

Watermarks live in a YAML state file under the ``notification`` key::

    notification:
      users:
        acme:
          repos:
            widgets:
              watched: "2024-05-01T12:00:00Z"

Other top-level keys in the file are left untouched when a watermark is
written, so the file can be shared with unrelated settings.
"""

from __future__ import annotations

import asyncio
import datetime as dt
import io
import typing as typ
from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import WatermarkStoreError

YAML_VERSION = (1, 2)
_SECTION = "notification"


class RepositoryWatermark(msgspec.Struct, kw_only=True):
    """Watermark for one repository."""

    watched: str | None = None


class UserWatermarks(msgspec.Struct, kw_only=True):
    """Watermarks for every repository of one owner."""

    repos: dict[str, RepositoryWatermark] = msgspec.field(default_factory=dict)


class WatermarkConfig(msgspec.Struct, kw_only=True):
    """Typed view of the ``notification`` section of the state file."""

    users: dict[str, UserWatermarks] = msgspec.field(default_factory=dict)

    def get(self, user: str, repo: str) -> str | None:
        """Return the stored watermark for ``user/repo``, if any."""
        owner = self.users.get(user)
        if owner is None:
            return None
        entry = owner.repos.get(repo)
        return entry.watched if entry is not None else None

    def set(self, user: str, repo: str, watermark: str) -> None:
        """Record ``watermark`` for ``user/repo``, creating entries as needed."""
        owner = self.users.setdefault(user, UserWatermarks())
        owner.repos.setdefault(repo, RepositoryWatermark()).watched = watermark


@typ.runtime_checkable
class WatermarkStore(typ.Protocol):
    """Port for reading and persisting watermarks."""

    async def load_watermark(self, user: str, repo: str) -> str | None:
        """Return the persisted watermark for ``user/repo``."""
        ...

    async def save_watermark(self, user: str, repo: str, watermark: str) -> None:
        """Persist ``watermark`` for ``user/repo`` (last write wins)."""
        ...


class InMemoryWatermarkStore:
    """Watermark store that forgets everything when the process exits."""

    def __init__(self, config: WatermarkConfig | None = None) -> None:
        """Start from ``config`` or an empty configuration."""
        self.config = config or WatermarkConfig()

    async def load_watermark(self, user: str, repo: str) -> str | None:
        """Return the watermark held in memory."""
        return self.config.get(user, repo)

    async def save_watermark(self, user: str, repo: str, watermark: str) -> None:
        """Keep ``watermark`` in memory."""
        self.config.set(user, repo, watermark)


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    yaml.default_flow_style = False
    return yaml


class YamlWatermarkStore:
    """Persist watermarks in a YAML state file.

    Parameters
    ----------
    path
        State file location. The file and its parent directories are created
        on the first write.

    """

    def __init__(self, path: Path) -> None:
        """Bind the store to a state file path."""
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Return the state file path."""
        return self._path

    async def load_watermark(self, user: str, repo: str) -> str | None:
        """Read the state file and return the watermark for ``user/repo``."""
        document = await asyncio.to_thread(self._read_document)
        return _section(document, self._path).get(user, repo)

    async def save_watermark(self, user: str, repo: str, watermark: str) -> None:
        """Write ``watermark`` for ``user/repo`` back to the state file."""
        await asyncio.to_thread(self._write_watermark, user, repo, watermark)

    def _read_document(self) -> dict[str, typ.Any]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise WatermarkStoreError.unreadable(self._path, exc) from exc

        try:
            loaded = _yaml().load(text)
        except YAMLError as exc:
            raise WatermarkStoreError.unreadable(self._path, exc) from exc

        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            raise WatermarkStoreError.unreadable(
                self._path, "top level is not a mapping"
            )
        return loaded

    def _write_watermark(self, user: str, repo: str, watermark: str) -> None:
        document = self._read_document()
        config = _section(document, self._path)
        config.set(user, repo, watermark)
        document[_SECTION] = msgspec.to_builtins(config)

        buffer = io.StringIO()
        _yaml().dump(document, buffer)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(buffer.getvalue(), encoding="utf-8")
        except OSError as exc:
            raise WatermarkStoreError.unwritable(self._path, exc) from exc


def _timestamps_as_text(node: object) -> object:
    """Turn YAML timestamps back into ``YYYY-MM-DDTHH:MM:SSZ`` strings.

    The YAML 1.2 safe loader resolves an unquoted ``2024-05-01T12:00:00Z``
    to a :class:`datetime.datetime`, while watermarks are compared as text.
    """
    if isinstance(node, dt.datetime):
        if node.tzinfo is None:
            node = node.replace(tzinfo=dt.UTC)
        return node.astimezone(dt.UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
    if isinstance(node, dict):
        return {key: _timestamps_as_text(value) for key, value in node.items()}
    return node


def _section(document: dict[str, typ.Any], path: Path) -> WatermarkConfig:
    raw = document.get(_SECTION)
    if raw is None:
        return WatermarkConfig()
    try:
        return msgspec.convert(_timestamps_as_text(raw), type=WatermarkConfig)
    except msgspec.ValidationError as exc:
        raise WatermarkStoreError.unreadable(path, exc) from exc
