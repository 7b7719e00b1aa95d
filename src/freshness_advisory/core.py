"""
Daily advisory update pipeline.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone

from ..shared_utilities import get_logger, trace_operation
from .advisory import AdvisoryStore, update_advisory
from .commit_cache import CommitCacheStore, update_cache
from .config import AdvisorySettings, Policy, load_policy
from .data_models import Advisory, CommitCache, LookbackResult, RetentionPolicy
from .github_client import CommitSource, GitHubClient


@dataclass
class UpdateResult:
    """Outcome of a single advisory update run."""

    policy: Policy
    advisory: Advisory
    cache: CommitCache
    lookback: LookbackResult
    today: str
    saved: bool


def format_timestamp(moment: datetime) -> str:
    """RFC 3339 timestamp with second precision."""
    return moment.astimezone(timezone.utc).isoformat(timespec="seconds").replace(
        "+00:00", "Z"
    )


class AdvisoryUpdater:
    """
    Runs the once-per-day pipeline: poll branch tips into the cache, then
    rebuild the advisory from the entry ``freshness_days`` back.

    Nothing is written unless every step succeeds.
    """

    def __init__(
        self,
        settings: AdvisorySettings,
        source: CommitSource | None = None,
    ):
        """Initialize the updater.

        Args:
            settings: Document locations and output options
            source: Commit source; defaults to a GitHub client
        """
        self.logger = get_logger(__name__)
        self.settings = settings
        self.source = (
            source if source is not None else GitHubClient(settings.github_token)
        )
        self.cache_store = CommitCacheStore(settings.cache_path)
        self.advisory_store = AdvisoryStore(settings.advisory_path)

    def _retention_for(self, policy: Policy) -> RetentionPolicy:
        max_age = self.settings.retention_days
        if max_age is not None and max_age < policy.freshness_days:
            self.logger.warning(
                "Retention shorter than freshness threshold, extending it",
                retention_days=max_age,
                freshness_days=policy.freshness_days,
            )
            max_age = policy.freshness_days
        return RetentionPolicy(max_age_days=max_age)

    def run(
        self,
        today: date | None = None,
        now: datetime | None = None,
        dry_run: bool = False,
    ) -> UpdateResult:
        """
        Update the cache and advisory.

        Args:
            today: Date to record commits under; defaults to the UTC date of ``now``
            now: Timestamp for ``modified``/``published``; defaults to current UTC time
            dry_run: Compute everything but write nothing

        Raises:
            AdvisoryError: Any failure; no document has been written
        """
        if now is None:
            now = datetime.now(timezone.utc)
        if today is None:
            today = now.astimezone(timezone.utc).date()
        now_timestamp = format_timestamp(now)

        with trace_operation("update_advisory", {"today": today.isoformat()}):
            policy = load_policy(self.settings.policy_path)
            cache = self.cache_store.load()
            advisory = self.advisory_store.load(now_timestamp)

            check_quota = getattr(self.source, "check_quota", None)
            if check_quota is not None:
                check_quota(len(policy.branches))

            cache = update_cache(
                policy.repository,
                self.source,
                policy.branches,
                cache,
                today,
                retention=self._retention_for(policy),
            )

            advisory, lookback = update_advisory(
                advisory,
                policy,
                cache,
                today,
                now_timestamp,
                self.settings.schema_version,
            )

            if dry_run:
                self.logger.info("Dry run, documents not written")
            else:
                self.advisory_store.save(advisory)
                self.cache_store.save(cache)

        return UpdateResult(
            policy=policy,
            advisory=advisory,
            cache=cache,
            lookback=lookback,
            today=today.isoformat(),
            saved=not dry_run,
        )
