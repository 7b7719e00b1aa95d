"""
Rate limit tracking for GitHub API requests.
Reads the quota PyGithub records from GitHub's X-RateLimit headers.
"""

import time
from dataclasses import dataclass
from typing import Any

from loguru import logger


@dataclass
class RateLimitStatus:
    """Current rate limit status from GitHub API."""

    limit: int  # Total requests allowed per hour
    remaining: int  # Requests remaining in current window
    reset_time: int  # Unix timestamp when limit resets

    @property
    def used(self) -> int:
        return self.limit - self.remaining

    @property
    def usage_percentage(self) -> float:
        """Percentage of rate limit used (0.0 to 1.0)."""
        if self.limit == 0:
            return 0.0
        return self.used / self.limit

    @property
    def minutes_until_reset(self) -> float:
        """Minutes until rate limit resets."""
        return max(0, (self.reset_time - time.time()) / 60)


class RateLimitManager:
    """
    Tracks GitHub API quota across the requests of a single run.

    No throttling is applied; the updater issues one request per tracked
    branch, so the manager only reports and warns.
    """

    def __init__(self, safety_buffer: int = 10):
        """
        Initialize rate limit manager.

        Args:
            safety_buffer: Number of requests to keep in reserve
        """
        self.safety_buffer = safety_buffer
        self.last_status: RateLimitStatus | None = None

    def extract_rate_limit_status(self, github: Any) -> RateLimitStatus | None:
        """
        Extract rate limit information from a PyGithub client.

        Args:
            github: github.Github instance

        Returns:
            RateLimitStatus object or None if the quota is unknown
        """
        try:
            remaining, limit = github.rate_limiting
            status = RateLimitStatus(
                limit=int(limit),
                remaining=int(remaining),
                reset_time=int(github.rate_limiting_resettime),
            )
        except (ValueError, TypeError) as e:
            logger.warning(f"Failed to read rate limit status: {e}")
            return None

        self.last_status = status
        return status

    def log_rate_limit_status(self, github: Any, tool_name: str = "unknown") -> None:
        """
        Log current rate limit status.

        Args:
            github: github.Github instance
            tool_name: Name of the caller for better logging
        """
        status = self.extract_rate_limit_status(github)
        if status:
            logger.info(
                f"[{tool_name}] Rate limit: {status.remaining}/{status.limit} remaining "
                f"({status.usage_percentage:.1%} used, resets in {status.minutes_until_reset:.1f}m)"
            )

    def check_rate_limit_safety(self, required_requests: int = 1) -> tuple[bool, str]:
        """
        Check if it's safe to make a certain number of requests.

        Args:
            required_requests: Number of requests planned

        Returns:
            Tuple of (is_safe, reason)
        """
        if self.last_status is None:
            return True, "Rate limit status unknown"

        available = self.last_status.remaining - self.safety_buffer
        if available < required_requests:
            return (
                False,
                f"Only {self.last_status.remaining} requests remaining, "
                f"{required_requests} required (resets in "
                f"{self.last_status.minutes_until_reset:.1f}m)",
            )

        return True, f"{self.last_status.remaining} requests remaining"
