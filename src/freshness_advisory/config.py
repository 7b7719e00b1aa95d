"""
Policy and runtime configuration for the advisory updater.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..shared_utilities import get_logger
from .exceptions import ConfigurationError, InvalidArgumentError

logger = get_logger(__name__)

DEFAULT_POLICY_PATH = "policies/V8-policy.json"
DEFAULT_CACHE_PATH = "src/V8-cache.json"
DEFAULT_ADVISORY_PATH = "advisories/V8-advisory.json"
DEFAULT_SCHEMA_VERSION = "1.6.0"

REQUIRED_POLICY_FIELDS = (
    "id",
    "repository",
    "freshness_days",
    "policy_link",
    "description",
    "branches",
)


@dataclass(frozen=True)
class Policy:
    """Freshness policy for a single tracked repository."""

    id: str
    repository: str  # URL or path ending in owner/name
    freshness_days: int
    policy_link: str
    description: str
    branches: tuple[str, ...]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Policy":
        """
        Build a policy from its JSON representation.

        Raises:
            ConfigurationError: Missing fields or wrong field types
            InvalidArgumentError: Negative freshness threshold
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Policy document must be a JSON object")

        missing = [name for name in REQUIRED_POLICY_FIELDS if name not in data]
        if missing:
            raise ConfigurationError(
                f"Policy is missing required fields: {', '.join(missing)}"
            )

        freshness_days = data["freshness_days"]
        if isinstance(freshness_days, bool) or not isinstance(freshness_days, int):
            raise ConfigurationError(
                f"freshness_days must be an integer, got {freshness_days!r}"
            )
        if freshness_days < 0:
            raise InvalidArgumentError(
                f"freshness_days must be non-negative, got {freshness_days}"
            )

        branches = data["branches"]
        if not isinstance(branches, list) or not all(
            isinstance(b, str) and b for b in branches
        ):
            raise ConfigurationError("branches must be a list of branch names")
        if not branches:
            raise ConfigurationError("Policy must track at least one branch")

        for name in ("id", "repository", "policy_link", "description"):
            if not isinstance(data[name], str):
                raise ConfigurationError(f"{name} must be a string")

        return cls(
            id=data["id"],
            repository=data["repository"],
            freshness_days=freshness_days,
            policy_link=data["policy_link"],
            description=data["description"],
            branches=tuple(branches),
        )


def load_policy(path: str | Path) -> Policy:
    """Load and validate a policy file. A missing file is fatal."""
    policy_path = Path(path)
    logger.debug("Loading policy", path=str(policy_path))

    try:
        with open(policy_path) as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Policy file not found: {policy_path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Policy file is not valid JSON: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Could not read policy file: {e}") from e

    policy = Policy.from_dict(data)
    logger.info(
        "Loaded policy {policy_id}",
        policy_id=policy.id,
        repository=policy.repository,
        freshness_days=policy.freshness_days,
        branches=len(policy.branches),
    )
    return policy


def _int_from_env(name: str) -> int | None:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


@dataclass
class AdvisorySettings:
    """Runtime settings: document locations and output options."""

    policy_path: Path
    cache_path: Path
    advisory_path: Path
    schema_version: str = DEFAULT_SCHEMA_VERSION
    retention_days: int | None = None
    github_token: str | None = None

    @classmethod
    def from_env(cls, workspace: str | Path | None = None) -> "AdvisorySettings":
        """
        Build settings from environment variables.

        Relative paths resolve against the workspace, which defaults to
        GITHUB_WORKSPACE when running in Actions and the current directory
        otherwise.
        """
        if workspace is None:
            workspace = os.getenv("GITHUB_WORKSPACE") or Path.cwd()
        root = Path(workspace)

        def resolve(env_name: str, default: str) -> Path:
            path = Path(os.getenv(env_name) or default)
            return path if path.is_absolute() else root / path

        return cls(
            policy_path=resolve("POLICY_PATH", DEFAULT_POLICY_PATH),
            cache_path=resolve("CACHE_PATH", DEFAULT_CACHE_PATH),
            advisory_path=resolve("ADVISORY_PATH", DEFAULT_ADVISORY_PATH),
            schema_version=os.getenv("OSV_SCHEMA_VERSION") or DEFAULT_SCHEMA_VERSION,
            retention_days=_int_from_env("CACHE_RETENTION_DAYS"),
            github_token=os.getenv("GITHUB_TOKEN") or None,
        )
