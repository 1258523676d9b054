"""Async GitHub API client wrapper using githubkit.

This module provides the transport used by the fetch unit: one
GET /repos/{owner}/{repo} call per repository, parsed into a
GitHubRepository.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Protocol

from githubkit import GitHub
from githubkit.exception import RequestFailed

from repo_stars.config import get_settings
from repo_stars.logging import get_logger
from repo_stars.schemas.github_api import GitHubRepository

from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)

logger = get_logger(__name__)


class RepositorySource(Protocol):
    """Anything that can fetch a repository record by owner/name."""

    async def get_repository(self, owner: str, name: str) -> GitHubRepository: ...


class GitHubClient:
    """Async GitHub API client for repository metadata.

    Requests are anonymous unless a token is given or configured.

    Usage:
        async with GitHubClient() as client:
            repo = await client.get_repository("vuejs", "core")
            print(repo.stargazers_count)
    """

    def __init__(self, token: str | None = None) -> None:
        """Initialize the GitHub client.

        Args:
            token: Optional GitHub token. If not provided, uses GITHUB_TOKEN
                   from settings; an empty value means anonymous access.
        """
        self._token = token if token is not None else get_settings().github_token
        self._client: GitHub[Any] | None = None

    @property
    def _github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance."""
        if self._client is None:
            # one request per call; non-2xx responses surface immediately
            if self._token:
                self._client = GitHub(self._token, auto_retry=False)
            else:
                self._client = GitHub(auto_retry=False)
        return self._client

    @property
    def is_authenticated(self) -> bool:
        """Whether requests carry a token."""
        return bool(self._token)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Repository Methods
    # -------------------------------------------------------------------------
    async def get_repository(self, owner: str, name: str) -> GitHubRepository:
        """Get repository metadata.

        Args:
            owner: Repository owner (org or user)
            name: Repository name

        Returns:
            GitHubRepository with star count and organization avatar

        Raises:
            GitHubNotFoundError: If the repository doesn't exist
            GitHubRateLimitError: If the rate limit is exhausted
            GitHubClientError: For any other non-2xx response
        """
        try:
            resp = await self._github.rest.repos.async_get(owner=owner, repo=name)
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(f"Repository {owner}/{name} not found") from e
            raise self._handle_error(e) from e

        logger.debug("Fetched repository {}/{}", owner, name)
        # only stargazers_count and organization.avatar_url are read
        return GitHubRepository.model_validate(resp.json())

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, error: RequestFailed) -> GitHubClientError:
        """Convert githubkit exceptions to our custom exceptions."""
        status = error.response.status_code

        if status == 401:
            return GitHubAuthenticationError("Invalid GitHub token")
        elif status in (403, 429):
            headers = error.response.headers
            if "x-ratelimit-remaining" in headers:
                remaining = int(headers.get("x-ratelimit-remaining", "0"))
                if remaining == 0:
                    reset_ts = int(headers.get("x-ratelimit-reset", "0"))
                    reset_at = datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts else None
                    return GitHubRateLimitError(
                        "GitHub rate limit exceeded",
                        reset_at=reset_at,
                    )
            return GitHubClientError(f"Access forbidden: {error}")
        elif status == 404:
            return GitHubNotFoundError(str(error))
        else:
            return GitHubClientError(f"GitHub API error ({status}): {error}")
