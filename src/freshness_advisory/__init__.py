"""
Branch freshness advisory.

Tracks the tip commits of a repository's branches in a date-keyed cache and
publishes an OSV advisory marking everything older than the freshness
threshold as affected.
"""

from .advisory import AdvisoryStore, create_affected_item, update_advisory
from .commit_cache import CommitCacheStore, parse_repository, update_cache
from .config import AdvisorySettings, Policy, load_policy
from .core import AdvisoryUpdater, UpdateResult
from .data_models import Advisory, AffectedItem, Event, LookbackResult, Range
from .exceptions import (
    AdvisoryError,
    CachePreconditionError,
    ConfigurationError,
    InvalidArgumentError,
    PersistenceError,
    RemoteFetchError,
)
from .lookback import get_cache_entry, resolve_lookback

__all__ = [
    "AdvisoryUpdater",
    "UpdateResult",
    "AdvisorySettings",
    "Policy",
    "load_policy",
    "update_cache",
    "parse_repository",
    "CommitCacheStore",
    "resolve_lookback",
    "get_cache_entry",
    "create_affected_item",
    "update_advisory",
    "AdvisoryStore",
    "Advisory",
    "AffectedItem",
    "Event",
    "LookbackResult",
    "Range",
    "AdvisoryError",
    "CachePreconditionError",
    "ConfigurationError",
    "InvalidArgumentError",
    "PersistenceError",
    "RemoteFetchError",
]
