"""
Tests for advisory assembly and persistence.
"""

import json

import pytest

from src.freshness_advisory.advisory import (
    AdvisoryStore,
    create_affected_item,
    update_advisory,
)
from src.freshness_advisory.config import Policy
from src.freshness_advisory.data_models import Advisory, Event
from src.freshness_advisory.exceptions import (
    CachePreconditionError,
    PersistenceError,
)

NOW = "2024-12-05T00:00:00Z"
LATER = "2024-12-06T00:00:00Z"


class TestCreateAffectedItem:
    """Test affected range construction."""

    def test_single_commit(self):
        policy = Policy(
            id="X",
            repository="owner/repo",
            freshness_days=1,
            policy_link="",
            description="",
            branches=("main",),
        )

        item = create_affected_item(policy, ["shaX"])

        assert item.to_dict() == {
            "ranges": [
                {
                    "type": "GIT",
                    "repo": "owner/repo",
                    "events": [{"introduced": "0"}, {"fixed": "shaX"}],
                }
            ]
        }

    def test_multiple_commits_keep_order(self, sample_policy):
        item = create_affected_item(sample_policy, ["sha1", "sha2"])

        assert item.ranges[0].events == [
            Event(introduced="0"),
            Event(fixed="sha1"),
            Event(fixed="sha2"),
        ]

    def test_no_commits_keeps_sentinel(self, sample_policy):
        """An empty commit set still yields the origin event."""
        item = create_affected_item(sample_policy, [])

        assert [e.to_dict() for e in item.ranges[0].events] == [{"introduced": "0"}]

    def test_repo_is_policy_locator(self, sample_policy):
        item = create_affected_item(sample_policy, ["sha"])

        assert item.ranges[0].repo == "https://github.com/owner/repo"


class TestEvent:
    def test_only_populated_key_serialized(self):
        assert Event(introduced="0").to_dict() == {"introduced": "0"}
        assert Event(fixed="sha").to_dict() == {"fixed": "sha"}

    def test_empty_string_kept(self):
        """An empty value is still a value and survives a reload."""
        event = Event(fixed="")

        assert event.to_dict() == {"fixed": ""}
        assert Event.from_dict(event.to_dict()) == event


class TestUpdateAdvisory:
    """Test rewriting advisory fields."""

    def test_fields_from_policy(self, sample_policy, today):
        cache = {"2024-12-04": ["oldSHA"], "2024-12-05": ["newSHA"]}

        advisory, lookback = update_advisory(
            Advisory(published=NOW), sample_policy, cache, today, NOW, "1.6.0"
        )

        assert advisory.schema_version == "1.6.0"
        assert advisory.id == "TEST-FRESHNESS-1"
        assert advisory.summary == "https://example.com/policy"
        assert advisory.details == "Branches must be updated daily."
        assert advisory.modified == NOW
        assert lookback.resolved_date == "2024-12-04"
        events = advisory.affected[0].ranges[0].events
        assert events == [Event(introduced="0"), Event(fixed="oldSHA")]

    def test_published_preserved(self, sample_policy, today):
        """Subsequent runs only move the modified timestamp."""
        cache = {"2024-12-05": ["sha"]}
        existing = Advisory(published="2024-01-01T00:00:00Z", modified=NOW)

        advisory, _ = update_advisory(
            existing, sample_policy, cache, today, LATER, "1.6.0"
        )

        assert advisory.published == "2024-01-01T00:00:00Z"
        assert advisory.modified == LATER

    def test_published_filled_when_empty(self, sample_policy, today):
        advisory, _ = update_advisory(
            Advisory(), sample_policy, {"2024-12-05": ["sha"]}, today, NOW, "1.6.0"
        )

        assert advisory.published == NOW

    def test_affected_replaced_not_appended(self, sample_policy, today):
        cache = {"2024-12-05": ["sha"]}
        advisory, _ = update_advisory(
            Advisory(), sample_policy, cache, today, NOW, "1.6.0"
        )
        advisory, _ = update_advisory(advisory, sample_policy, cache, today, LATER, "1.6.0")

        assert len(advisory.affected) == 1

    def test_requires_today_entry(self, sample_policy, today):
        with pytest.raises(CachePreconditionError):
            update_advisory(
                Advisory(), sample_policy, {"2024-12-04": ["a"]}, today, NOW, "1.6.0"
            )


class TestAdvisoryStore:
    """Test loading and saving the advisory document."""

    def test_missing_file_initializes_published(self, tmp_path):
        advisory = AdvisoryStore(tmp_path / "advisory.json").load(NOW)

        assert advisory == Advisory(published=NOW)

    def test_round_trip(self, tmp_path, sample_policy, today):
        store = AdvisoryStore(tmp_path / "advisory.json")
        advisory, _ = update_advisory(
            Advisory(published=NOW),
            sample_policy,
            {"2024-12-05": ["sha1", "sha2"]},
            today,
            NOW,
            "1.6.0",
        )

        store.save(advisory)

        assert store.load(LATER) == advisory

    def test_document_layout(self, tmp_path, sample_policy, today):
        path = tmp_path / "advisory.json"
        advisory, _ = update_advisory(
            Advisory(published=NOW),
            sample_policy,
            {"2024-12-05": ["sha1"]},
            today,
            NOW,
            "1.6.0",
        )

        AdvisoryStore(path).save(advisory)
        data = json.loads(path.read_text())

        assert list(data) == [
            "schema_version",
            "id",
            "modified",
            "published",
            "summary",
            "details",
            "affected",
        ]
        assert data["affected"][0]["ranges"][0]["events"] == [
            {"introduced": "0"},
            {"fixed": "sha1"},
        ]

    def test_existing_published_loaded(self, tmp_path):
        path = tmp_path / "advisory.json"
        path.write_text(json.dumps({"id": "X", "published": "2023-01-01T00:00:00Z"}))

        advisory = AdvisoryStore(path).load(NOW)

        assert advisory.published == "2023-01-01T00:00:00Z"
        assert advisory.id == "X"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "advisory.json"
        path.write_text("{not json")

        with pytest.raises(PersistenceError, match="parsing advisory"):
            AdvisoryStore(path).load(NOW)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "advisory.json"
        path.write_text("[]")

        with pytest.raises(PersistenceError):
            AdvisoryStore(path).load(NOW)

    def test_malformed_range(self, tmp_path):
        path = tmp_path / "advisory.json"
        path.write_text(json.dumps({"affected": [{"ranges": [{"type": "GIT"}]}]}))

        with pytest.raises(PersistenceError, match="Malformed"):
            AdvisoryStore(path).load(NOW)
