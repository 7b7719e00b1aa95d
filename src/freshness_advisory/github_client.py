"""
GitHub API client for fetching branch tip commits
"""

from typing import Protocol

import requests
from github import Auth, Github, GithubException, RateLimitExceededException
from github.Repository import Repository

from ..shared_utilities import RateLimitManager, get_logger
from .exceptions import RemoteFetchError


class CommitSource(Protocol):
    """Anything that can report the newest commit on a branch."""

    def get_latest_commit(self, owner: str, repo: str, branch: str) -> str:
        """Return the SHA of the newest commit reachable from ``branch``."""
        ...


class GitHubClient:
    """Client for interacting with GitHub API."""

    def __init__(
        self,
        token: str | None = None,
        rate_limit_manager: RateLimitManager | None = None,
    ):
        """Initialize GitHub client with optional token."""
        self.logger = get_logger(__name__)
        self.token = token
        if self.token:
            self.logger.debug("Using authenticated GitHub client")
            self.github = Github(auth=Auth.Token(self.token))
        else:
            self.logger.debug("Using unauthenticated GitHub client (rate limited)")
            self.github = Github()

        self.rate_limit_manager = rate_limit_manager or RateLimitManager()
        self._repos: dict[str, Repository] = {}

    def _get_repo(self, owner: str, repo: str) -> Repository:
        full_name = f"{owner}/{repo}"
        if full_name not in self._repos:
            self._repos[full_name] = self.github.get_repo(full_name)
        return self._repos[full_name]

    def get_latest_commit(self, owner: str, repo: str, branch: str) -> str:
        """
        Get the tip commit of a branch.

        GitHub lists commits newest-first, so only the first entry is read.

        Args:
            owner: Repository owner
            repo: Repository name
            branch: Branch name (any ref GitHub accepts as ``sha``)

        Returns:
            Commit SHA

        Raises:
            RemoteFetchError: Unknown repository or branch, rate limiting,
                network failure, or an empty commit list
        """
        try:
            commits = self._get_repo(owner, repo).get_commits(sha=branch)
            sha = commits[0].sha
        except IndexError as e:
            raise RemoteFetchError(
                f"No commits found on branch '{branch}' of {owner}/{repo}",
                branch=branch,
            ) from e
        except RateLimitExceededException as e:
            raise RemoteFetchError(
                f"GitHub rate limit exceeded while fetching branch '{branch}'",
                branch=branch,
            ) from e
        except GithubException as e:
            message = e.data.get("message", str(e)) if isinstance(e.data, dict) else e
            raise RemoteFetchError(
                f"GitHub API error for branch '{branch}' of {owner}/{repo}: {message}",
                branch=branch,
            ) from e
        except requests.RequestException as e:
            raise RemoteFetchError(
                f"Network error fetching branch '{branch}' of {owner}/{repo}: {e}",
                branch=branch,
            ) from e

        self.logger.debug("Fetched tip commit", branch=branch, sha=sha)
        return sha

    def check_quota(self, required_requests: int) -> bool:
        """
        Log the remaining API quota and warn if it cannot cover the planned requests.

        Reading the quota on a fresh client issues a request to GitHub, so
        credential and network failures surface here first.

        Raises:
            RemoteFetchError: The quota could not be read from GitHub
        """
        try:
            self.rate_limit_manager.log_rate_limit_status(
                self.github, tool_name="update-advisory"
            )
        except GithubException as e:
            message = e.data.get("message", str(e)) if isinstance(e.data, dict) else e
            raise RemoteFetchError(
                f"GitHub API error reading rate limit: {message}"
            ) from e
        except requests.RequestException as e:
            raise RemoteFetchError(f"Network error reading rate limit: {e}") from e

        is_safe, reason = self.rate_limit_manager.check_rate_limit_safety(
            required_requests
        )
        if not is_safe:
            self.logger.warning(f"Rate limit may be exhausted: {reason}")
        return is_safe
