"""GitHub REST client for repository event feeds."""

from __future__ import annotations

import dataclasses
import os
import typing as typ

import httpx
import msgspec

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import ActivityRecord, decode_activity_records

_DEFAULT_API_URL = "https://api.github.com"
_HTTP_ERROR_STATUS_THRESHOLD = 400


class ActivitySource(typ.Protocol):
    """Interface for fetching a repository's recent activity."""

    async def list_repository_events(
        self, user: str, repo: str
    ) -> list[ActivityRecord]:
        """Return the repository's events, newest first."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRESTConfig:
    """Configuration for the GitHub REST events client.

    ``token`` is optional: public repositories can be read anonymously, at a
    much lower rate limit.
    """

    token: str | None = None
    api_url: str = _DEFAULT_API_URL
    timeout_s: float = 20.0
    user_agent: str = "ghwatch/0.1"

    @classmethod
    def from_env(cls) -> GitHubRESTConfig:
        """Build configuration from ``GHWATCH_GITHUB_*`` environment variables.

        ``GHWATCH_GITHUB_TOKEN`` is optional; ``GHWATCH_GITHUB_API_URL`` must be
        an http(s) URL when set.
        """
        token = os.environ.get("GHWATCH_GITHUB_TOKEN", "").strip() or None
        api_url = os.environ.get("GHWATCH_GITHUB_API_URL", "").strip()
        if not api_url:
            return cls(token=token)
        if not api_url.startswith(("https://", "http://")):
            raise GitHubConfigError.invalid_api_url(api_url)
        return cls(token=token, api_url=api_url.rstrip("/"))


def _headers(config: GitHubRESTConfig) -> dict[str, str]:
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": config.user_agent,
    }
    if config.token is not None:
        headers["Authorization"] = f"Bearer {config.token}"
    return headers


class GitHubEventsClient:
    """httpx implementation of :class:`ActivitySource`."""

    def __init__(
        self,
        config: GitHubRESTConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client, creating an owned HTTP client when none is given."""
        if config.token is not None and not config.token.strip():
            raise GitHubConfigError.empty_token()

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers=_headers(config),
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    def events_url(self, user: str, repo: str) -> str:
        """Return the events endpoint for ``user/repo``."""
        return f"{self._config.api_url}/repos/{user}/{repo}/events"

    async def list_repository_events(
        self, user: str, repo: str
    ) -> list[ActivityRecord]:
        """Fetch the first page of the repository events feed."""
        url = self.events_url(user, repo)
        response = await self._client.get(url)
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(response.status_code, url=url)
        try:
            return decode_activity_records(response.content)
        except msgspec.DecodeError as exc:
            raise GitHubResponseShapeError.undecodable(exc) from exc
