"""
Date-keyed history of branch tip commits.

The cache maps an ISO date to the distinct tip commits seen across all
tracked branches on that day. It is the only state carried between runs.
"""

from collections.abc import Iterable
from datetime import date, timedelta
from pathlib import Path

from ..shared_utilities import get_logger, trace_operation
from .data_models import CommitCache, RetentionPolicy
from .exceptions import ConfigurationError, PersistenceError
from .github_client import CommitSource
from .storage import read_json, write_json

logger = get_logger(__name__)


def format_date(day: date) -> str:
    """Format a date as a cache key."""
    return day.strftime("%Y-%m-%d")


def parse_repository(locator: str) -> tuple[str, str]:
    """
    Split a repository locator into owner and name.

    Accepts URLs and plain ``owner/name`` strings; the last two path
    segments are used.
    """
    path = locator.strip().rstrip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]

    segments = path.split("/")
    if len(segments) < 2 or not segments[-2] or not segments[-1]:
        raise ConfigurationError(
            f"Repository locator '{locator}' does not end in owner/name"
        )
    return segments[-2], segments[-1]


def prune_cache(cache: CommitCache, today: date, max_age_days: int) -> CommitCache:
    """Drop entries older than ``today - max_age_days``."""
    cutoff = format_date(today - timedelta(days=max_age_days))
    # ISO dates sort lexicographically
    return {day: commits for day, commits in cache.items() if day >= cutoff}


def update_cache(
    repository: str,
    source: CommitSource,
    branches: Iterable[str],
    cache: CommitCache,
    today: date,
    retention: RetentionPolicy | None = None,
) -> CommitCache:
    """
    Record today's tip commits for the tracked branches.

    Every branch is fetched before anything is written; a failure on any
    branch propagates and leaves ``cache`` untouched.

    Args:
        repository: Repository locator ending in owner/name
        source: Commit source used to look up branch tips
        branches: Branch names to poll, in policy order
        cache: Existing cache; not modified
        today: Date the entry is recorded under
        retention: Optional bound on how much history to keep

    Returns:
        Updated copy of the cache with today's entry set

    Raises:
        RemoteFetchError: A branch could not be fetched
        ConfigurationError: The repository locator is malformed
    """
    owner, name = parse_repository(repository)
    branches = list(branches)

    with trace_operation(
        "update_cache", {"repo": f"{owner}/{name}", "branches": len(branches)}
    ):
        # dict keeps first-seen order so the saved list is deterministic
        hashes: dict[str, None] = {}
        for branch in branches:
            sha = source.get_latest_commit(owner, name, branch)
            hashes.setdefault(sha, None)

    today_key = format_date(today)
    updated = dict(cache)
    updated[today_key] = list(hashes)

    if len(hashes) < len(branches):
        logger.info(
            "Branches share tip commits",
            branches=len(branches),
            distinct_commits=len(hashes),
        )

    if retention is not None and retention.max_age_days is not None:
        before = len(updated)
        updated = prune_cache(updated, today, retention.max_age_days)
        if len(updated) < before:
            logger.info(
                "Pruned cache history",
                removed=before - len(updated),
                max_age_days=retention.max_age_days,
            )

    logger.info("Cache entry recorded", date=today_key, commits=updated[today_key])
    return updated


class CommitCacheStore:
    """Loads and saves the commit cache document."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> CommitCache:
        """Load the cache; a missing file yields an empty cache."""
        data = read_json(self.path, "cache")
        if data is None:
            logger.info("No cache file found, starting empty", path=str(self.path))
            return {}

        if not isinstance(data, dict) or not all(
            isinstance(commits, list) and all(isinstance(c, str) for c in commits)
            for commits in data.values()
        ):
            raise PersistenceError(
                "Cache file must map dates to lists of commit SHAs",
                path=str(self.path),
            )

        for day in data:
            try:
                canonical = format_date(date.fromisoformat(day)) == day
            except ValueError:
                canonical = False
            if not canonical:
                raise PersistenceError(
                    f"Cache key '{day}' is not a YYYY-MM-DD date",
                    path=str(self.path),
                )

        logger.debug("Loaded cache", path=str(self.path), dates=len(data))
        return data

    def save(self, cache: CommitCache) -> None:
        """Save the cache with dates in ascending order."""
        write_json(self.path, cache, "cache", sort_keys=True)
        logger.info("Cache saved", path=str(self.path), dates=len(cache))
