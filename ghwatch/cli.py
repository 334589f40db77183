"""Command-line entry point for repository activity notifications.

Usage:
    ghwatch --latest --user acme --repo widgets   # list recent activity
    ghwatch --watch --repo acme/widgets           # poll every three minutes
    ghwatch -l -w                                 # both, for the origin remote

Environment variables:
    GHWATCH_GITHUB_TOKEN          - GitHub token (optional for public repos)
    GHWATCH_GITHUB_API_URL        - API base URL (default: https://api.github.com)
    GHWATCH_POLL_INTERVAL_SECONDS - Watch period (default: 180)
    GHWATCH_CONFIG_PATH           - Watermark state file
    GHWATCH_HOOK_COMMAND          - Command run once per notification
    GHWATCH_LOG_LEVEL             - Log level (default: INFO)
"""

from __future__ import annotations

import asyncio
import contextlib
import dataclasses
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from ghwatch import __version__
from ghwatch.common.git import repository_from_remote
from ghwatch.common.slug import parse_repo_slug
from ghwatch.github.client import GitHubEventsClient, GitHubRESTConfig
from ghwatch.github.errors import GitHubConfigError
from ghwatch.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from ghwatch.notifications.config import NotificationConfig
from ghwatch.notifications.errors import NotificationConfigError, WatermarkStoreError
from ghwatch.notifications.hooks import DramatiqHookSink, hook_worker
from ghwatch.notifications.orchestrator import PollCycleOrchestrator, WatchTarget
from ghwatch.notifications.scheduler import WatchScheduler
from ghwatch.notifications.sink import ConsoleNotificationSink
from ghwatch.notifications.store import InMemoryWatermarkStore, YamlWatermarkStore

if typ.TYPE_CHECKING:
    from ghwatch.github.client import ActivitySource
    from ghwatch.notifications.hooks import HookSink
    from ghwatch.notifications.sink import NotificationSink
    from ghwatch.notifications.store import WatermarkStore

logger = get_logger(__name__)

app = App(
    name="ghwatch",
    help="List and watch activity on a GitHub repository.",
    version=__version__,
)


def resolve_target(
    user: str | None,
    repo: str | None,
    *,
    remote: str = "origin",
    cwd: Path | None = None,
) -> WatchTarget:
    """Work out which repository to poll.

    ``repo`` may be a bare name or an ``owner/name`` slug. Whatever is still
    missing is filled in from the URL of ``remote`` in the current work tree.

    Raises
    ------
    NotificationConfigError
        If no repository (or owner) can be determined.

    """
    if repo is not None and "/" in repo:
        try:
            slug_owner, repo = parse_repo_slug(repo)
        except ValueError as exc:
            raise NotificationConfigError(str(exc)) from exc
        user = user or slug_owner

    if user is None or repo is None:
        from_remote = repository_from_remote(remote, cwd=cwd)
        if from_remote is not None:
            remote_owner, remote_name = from_remote
            user = user or remote_owner
            repo = repo or remote_name

    if not repo:
        raise NotificationConfigError.missing_repository()
    if not user:
        raise NotificationConfigError.missing_user()
    return WatchTarget(user=user, repo=repo)


@dataclasses.dataclass(frozen=True, slots=True)
class RunRequest:
    """What the operator asked for."""

    target: WatchTarget
    latest: bool
    watch: bool


@dataclasses.dataclass(frozen=True, slots=True)
class RunDependencies:
    """Collaborators of a notification run."""

    source: ActivitySource
    sink: NotificationSink
    store: WatermarkStore
    hooks: HookSink | None = None


async def run_notifications(
    request: RunRequest,
    deps: RunDependencies,
    *,
    config: NotificationConfig,
    max_watch_cycles: int | None = None,
) -> WatchScheduler:
    """List and/or watch activity for ``request.target``.

    The listing runs first when both modes are requested; its records are
    then already in the seen-set when watching starts.
    """
    orchestrator = PollCycleOrchestrator(
        deps.source,
        deps.sink,
        deps.store,
        request.target,
        config=config,
        hooks=deps.hooks,
    )
    scheduler = WatchScheduler(orchestrator, config=config)

    if request.latest:
        log_info(logger, "Listing activities on %s", request.target.slug)
        await scheduler.run_once()

    if request.watch:
        log_info(logger, "Watching any activity on %s", request.target.slug)
        await scheduler.run_forever(max_cycles=max_watch_cycles)

    return scheduler


async def _run_with_github(
    request: RunRequest,
    *,
    config: NotificationConfig,
    store: WatermarkStore,
    hooks: HookSink | None,
) -> None:
    client = GitHubEventsClient(GitHubRESTConfig.from_env())
    try:
        await run_notifications(
            request,
            RunDependencies(
                source=client,
                sink=ConsoleNotificationSink(),
                store=store,
                hooks=hooks,
            ),
            config=config,
        )
    finally:
        await client.aclose()


@app.default
def notifications(  # noqa: PLR0913
    *,
    latest: typ.Annotated[bool, Parameter(name=["--latest", "-l"])] = False,
    watch: typ.Annotated[bool, Parameter(name=["--watch", "-w"])] = False,
    user: typ.Annotated[str | None, Parameter(name=["--user", "-u"])] = None,
    repo: typ.Annotated[str | None, Parameter(name=["--repo", "-r"])] = None,
    remote: str = "origin",
    interval: int | None = None,
    config: Path | None = None,
    hook_command: str | None = None,
    ephemeral: bool = False,
    log_level: typ.Annotated[str, Parameter(env_var="GHWATCH_LOG_LEVEL")] = "INFO",
) -> int:
    """List recent activity on a repository and optionally keep watching it.

    Args:
        latest: List the latest activity once.
        watch: Keep polling and show only new activity.
        user: Repository owner.
        repo: Repository name, or an owner/name slug.
        remote: Git remote used to infer the owner and repository.
        interval: Seconds between watch cycles.
        config: Watermark state file.
        hook_command: Command run once per notification, fed JSON on stdin.
        ephemeral: Keep watermarks in memory only.
        log_level: Log level.

    Returns:
        Exit code (0 for success, 1 for configuration errors).

    """
    normalized_level, invalid_level = configure_logging(log_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid log level %r, falling back to %s",
            log_level,
            normalized_level,
        )

    if not latest and not watch:
        latest = True

    try:
        target = resolve_target(user, repo, remote=remote)
        settings = _settings(interval=interval, state_path=config, hook=hook_command)
    except (NotificationConfigError, ValueError) as exc:
        log_error(logger, "%s", exc)
        return 1

    store: WatermarkStore = (
        InMemoryWatermarkStore()
        if ephemeral
        else YamlWatermarkStore(settings.resolved_state_path)
    )
    request = RunRequest(target=target, latest=latest, watch=watch)

    hooks: HookSink | None = None
    worker_context: contextlib.AbstractContextManager[object] = contextlib.nullcontext()
    if settings.hook_command is not None:
        hooks = DramatiqHookSink(settings.hook_command)
        worker_context = hook_worker()

    try:
        with worker_context:
            asyncio.run(
                _run_with_github(request, config=settings, store=store, hooks=hooks)
            )
    except (GitHubConfigError, WatermarkStoreError) as exc:
        log_error(logger, "%s", exc)
        return 1
    except KeyboardInterrupt:
        log_info(logger, "Stopped watching %s", target.slug)
        return 130
    return 0


def _settings(
    *, interval: int | None, state_path: Path | None, hook: str | None
) -> NotificationConfig:
    settings = NotificationConfig.from_env()
    if interval is not None:
        if interval < 1:
            msg = f"--interval must be positive, got: {interval}"
            raise ValueError(msg)
        settings = dataclasses.replace(settings, poll_interval_s=interval)
    if state_path is not None:
        settings = dataclasses.replace(settings, state_path=state_path)
    if hook is not None:
        settings = dataclasses.replace(settings, hook_command=hook)
    return settings


def main() -> int:
    """Entry point for the ``ghwatch`` console script."""
    return app()


if __name__ == "__main__":
    sys.exit(main())
