"""
Data models for the freshness advisory.

The advisory document follows the OSV schema: one affected entry holding a
single GIT range whose events start at the sentinel origin "0".
"""

from dataclasses import dataclass, field
from typing import Any

# ISO date (YYYY-MM-DD) -> tip commit SHAs observed on that date
CommitCache = dict[str, list[str]]

RANGE_TYPE_GIT = "GIT"
SENTINEL_ORIGIN = "0"


@dataclass
class Event:
    """A range event; exactly one of introduced/fixed is set."""

    introduced: str | None = None
    fixed: str | None = None

    def to_dict(self) -> dict[str, str]:
        data = {}
        if self.introduced is not None:
            data["introduced"] = self.introduced
        if self.fixed is not None:
            data["fixed"] = self.fixed
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Event":
        return cls(introduced=data.get("introduced"), fixed=data.get("fixed"))


@dataclass
class Range:
    """An affected range within a repository's history."""

    type: str
    repo: str
    events: list[Event] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "repo": self.repo,
            "events": [event.to_dict() for event in self.events],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Range":
        return cls(
            type=data["type"],
            repo=data["repo"],
            events=[Event.from_dict(event) for event in data.get("events", [])],
        )


@dataclass
class AffectedItem:
    """Affected entry of an advisory."""

    ranges: list[Range] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"ranges": [r.to_dict() for r in self.ranges]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AffectedItem":
        return cls(ranges=[Range.from_dict(r) for r in data.get("ranges", [])])


@dataclass
class Advisory:
    """Advisory document published for downstream vulnerability databases."""

    schema_version: str = ""
    id: str = ""
    modified: str = ""
    published: str = ""  # Set once on creation, never overwritten
    summary: str = ""
    details: str = ""
    affected: list[AffectedItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary, keeping OSV field order."""
        return {
            "schema_version": self.schema_version,
            "id": self.id,
            "modified": self.modified,
            "published": self.published,
            "summary": self.summary,
            "details": self.details,
            "affected": [item.to_dict() for item in self.affected],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Advisory":
        return cls(
            schema_version=data.get("schema_version", ""),
            id=data.get("id", ""),
            modified=data.get("modified", ""),
            published=data.get("published", ""),
            summary=data.get("summary", ""),
            details=data.get("details", ""),
            affected=[AffectedItem.from_dict(item) for item in data.get("affected", [])],
        )


@dataclass(frozen=True)
class LookbackResult:
    """Cache entry selected for the freshness lookback."""

    target_date: str
    resolved_date: str
    commits: list[str]

    @property
    def exact(self) -> bool:
        return self.target_date == self.resolved_date


@dataclass(frozen=True)
class RetentionPolicy:
    """How many days of cache history to keep; None keeps everything."""

    max_age_days: int | None = None
