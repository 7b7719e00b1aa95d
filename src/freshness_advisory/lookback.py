"""
Freshness lookback over the commit cache.

Finds the commits that were current ``days`` ago. Scheduled runs can be
missed, so when the exact day is absent the closest later day inside the
freshness window is used, and today's entry is the last resort.
"""

from datetime import date, timedelta

from ..shared_utilities import get_logger
from .commit_cache import format_date
from .data_models import CommitCache, LookbackResult
from .exceptions import CachePreconditionError, InvalidArgumentError

logger = get_logger(__name__)


def resolve_lookback(cache: CommitCache, days: int, today: date) -> LookbackResult:
    """
    Resolve the cache entry considered acceptable ``days`` days ago.

    Args:
        cache: Commit cache that already contains today's entry
        days: Freshness threshold in days
        today: Reference date

    Returns:
        The selected entry and the date it was recorded under

    Raises:
        CachePreconditionError: Today's entry is missing from the cache
        InvalidArgumentError: ``days`` is negative
    """
    if days < 0:
        raise InvalidArgumentError(
            f"Lookback requires a non-negative day count, got {days}"
        )
    today_key = format_date(today)
    if today_key not in cache:
        raise CachePreconditionError(
            f"Today's entry ({today_key}) must exist in the cache before lookback"
        )

    target_key = format_date(today - timedelta(days=days))
    if target_key in cache:
        return LookbackResult(target_key, target_key, cache[target_key])

    # Walk from the day after the target towards today
    for offset in range(days - 1, -1, -1):
        candidate = format_date(today - timedelta(days=offset))
        if candidate in cache:
            logger.warning(
                "No cache entry for lookback date, using closest later entry",
                target_date=target_key,
                resolved_date=candidate,
                gap_days=days - offset,
            )
            return LookbackResult(target_key, candidate, cache[candidate])

    # The walk ends on offset 0, today, which is always present
    return LookbackResult(target_key, today_key, cache[today_key])


def get_cache_entry(cache: CommitCache, days: int, today: date) -> list[str]:
    """Return only the commits selected by :func:`resolve_lookback`."""
    return resolve_lookback(cache, days, today).commits
