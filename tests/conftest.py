"""
Pytest configuration and shared fixtures.
"""

import json
from datetime import date

import pytest

from src.freshness_advisory.config import AdvisorySettings, Policy
from src.freshness_advisory.exceptions import RemoteFetchError


class FakeCommitSource:
    """In-memory commit source keyed by branch name."""

    def __init__(self, tips: dict[str, str], failing: set[str] | None = None):
        self.tips = tips
        self.failing = failing or set()
        self.calls: list[tuple[str, str, str]] = []

    def get_latest_commit(self, owner: str, repo: str, branch: str) -> str:
        self.calls.append((owner, repo, branch))
        if branch in self.failing or branch not in self.tips:
            raise RemoteFetchError(f"Unknown branch '{branch}'", branch=branch)
        return self.tips[branch]


@pytest.fixture
def today():
    """Fixed reference date for cache and lookback tests."""
    return date(2024, 12, 5)


@pytest.fixture
def sample_policy_data():
    """Sample policy document as stored on disk."""
    return {
        "id": "TEST-FRESHNESS-1",
        "repository": "https://github.com/owner/repo",
        "freshness_days": 1,
        "policy_link": "https://example.com/policy",
        "description": "Branches must be updated daily.",
        "branches": ["main", "release"],
    }


@pytest.fixture
def sample_policy(sample_policy_data):
    """Sample parsed policy."""
    return Policy.from_dict(sample_policy_data)


@pytest.fixture
def make_source():
    """Factory for in-memory commit sources."""
    return FakeCommitSource


@pytest.fixture
def fake_source():
    """Commit source where both tracked branches have distinct tips."""
    return FakeCommitSource({"main": "mockSHA1", "release": "mockSHA2"})


@pytest.fixture
def workspace(tmp_path, sample_policy_data):
    """Workspace directory with a policy file and settings pointing into it."""
    policy_path = tmp_path / "policies" / "policy.json"
    policy_path.parent.mkdir()
    policy_path.write_text(json.dumps(sample_policy_data))

    settings = AdvisorySettings(
        policy_path=policy_path,
        cache_path=tmp_path / "src" / "cache.json",
        advisory_path=tmp_path / "advisories" / "advisory.json",
    )
    return settings
