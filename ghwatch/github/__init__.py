"""GitHub events feed: record models and the REST client."""

from __future__ import annotations

from .client import ActivitySource, GitHubEventsClient, GitHubRESTConfig
from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import (
    IGNORED_KINDS,
    ActivityRecord,
    Actor,
    EventKind,
    RepositoryRef,
    decode_activity_records,
)

__all__ = [
    "IGNORED_KINDS",
    "ActivityRecord",
    "ActivitySource",
    "Actor",
    "EventKind",
    "GitHubAPIError",
    "GitHubConfigError",
    "GitHubEventsClient",
    "GitHubRESTConfig",
    "GitHubResponseShapeError",
    "RepositoryRef",
    "decode_activity_records",
]
