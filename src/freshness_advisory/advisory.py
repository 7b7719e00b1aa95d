"""
Advisory assembly and persistence.
"""

from datetime import date
from pathlib import Path

from ..shared_utilities import get_logger
from .config import Policy
from .data_models import (
    RANGE_TYPE_GIT,
    SENTINEL_ORIGIN,
    AffectedItem,
    Advisory,
    CommitCache,
    Event,
    LookbackResult,
    Range,
)
from .exceptions import PersistenceError
from .lookback import resolve_lookback
from .storage import read_json, write_json

logger = get_logger(__name__)


def create_affected_item(policy: Policy, commits: list[str]) -> AffectedItem:
    """
    Build the affected range for a policy's repository.

    The range always opens at the sentinel origin; each commit closes it.
    """
    events = [Event(introduced=SENTINEL_ORIGIN)]
    events.extend(Event(fixed=sha) for sha in commits)

    return AffectedItem(
        ranges=[Range(type=RANGE_TYPE_GIT, repo=policy.repository, events=events)]
    )


def update_advisory(
    advisory: Advisory,
    policy: Policy,
    cache: CommitCache,
    today: date,
    now_timestamp: str,
    schema_version: str,
) -> tuple[Advisory, LookbackResult]:
    """
    Rewrite the advisory with the latest vulnerable range.

    ``published`` is only filled in when empty; every other field is
    recomputed from the policy and the cache.

    Returns:
        The updated advisory and the lookback it was built from
    """
    lookback = resolve_lookback(cache, policy.freshness_days, today)

    advisory.schema_version = schema_version
    advisory.id = policy.id
    if not advisory.published:
        advisory.published = now_timestamp
    advisory.modified = now_timestamp
    advisory.summary = policy.policy_link
    advisory.details = policy.description
    advisory.affected = [create_affected_item(policy, lookback.commits)]

    logger.info(
        "Advisory updated",
        advisory_id=advisory.id,
        lookback_date=lookback.resolved_date,
        fixed_commits=len(lookback.commits),
    )
    return advisory, lookback


class AdvisoryStore:
    """Loads and saves the advisory document."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self, now_timestamp: str) -> Advisory:
        """
        Load the advisory, or start a new one published at ``now_timestamp``.
        """
        data = read_json(self.path, "advisory")
        if data is None:
            logger.info("No advisory file found, creating new", path=str(self.path))
            return Advisory(published=now_timestamp)

        if not isinstance(data, dict):
            raise PersistenceError(
                "Advisory file must contain a JSON object", path=str(self.path)
            )
        try:
            return Advisory.from_dict(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise PersistenceError(
                f"Malformed advisory file: {e}", path=str(self.path)
            ) from e

    def save(self, advisory: Advisory) -> None:
        write_json(self.path, advisory.to_dict(), "advisory")
        logger.info("Advisory saved", path=str(self.path))
