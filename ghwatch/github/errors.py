"""Errors raised while talking to the GitHub events API."""

from __future__ import annotations


class GitHubAPIError(RuntimeError):
    """Raised when GitHub answers with an error response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, *, url: str) -> GitHubAPIError:
        """Return an error for a non-2xx response from ``url``."""
        return cls(f"GitHub HTTP {status_code} for {url}", status_code=status_code)


class GitHubResponseShapeError(RuntimeError):
    """Raised when the events feed cannot be decoded into activity records."""

    @classmethod
    def undecodable(cls, detail: object) -> GitHubResponseShapeError:
        """Return an error describing why decoding failed."""
        return cls(f"GitHub events response could not be decoded: {detail}")


class GitHubConfigError(RuntimeError):
    """Raised when the GitHub client configuration is invalid."""

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error for a token made only of whitespace."""
        return cls("GitHub token must be non-empty when provided")

    @classmethod
    def invalid_api_url(cls, url: str) -> GitHubConfigError:
        """Return an error for an API base URL that is not http(s)."""
        return cls(f"GHWATCH_GITHUB_API_URL must be an http(s) URL, got {url!r}")
