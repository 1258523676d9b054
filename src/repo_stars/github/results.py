"""Result objects for fetch operations.

The fetch unit reports every outcome as a value so the caller decides
what to propagate.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from repo_stars.schemas.github_api import GitHubRepository

from .exceptions import FetchCancelledError, FetchError, UpstreamFetchError


class FetchStatus(str, Enum):
    """Final state of a single fetch."""

    SUCCESS = "success"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchResult:
    """Outcome of fetching one repository."""

    status: FetchStatus
    response: GitHubRepository | None = None
    """Repository payload (only set on SUCCESS)."""

    error: FetchError | None = None
    """FetchCancelledError or UpstreamFetchError for non-success outcomes."""

    from_cache: bool = False
    """True if the payload came from the response cache."""

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.SUCCESS

    @classmethod
    def success(cls, response: GitHubRepository, *, from_cache: bool = False) -> FetchResult:
        return cls(FetchStatus.SUCCESS, response=response, from_cache=from_cache)

    @classmethod
    def cancelled(cls, reason: str = "cancelled") -> FetchResult:
        return cls(FetchStatus.CANCELLED, error=FetchCancelledError(reason))

    @classmethod
    def failed(cls, error: UpstreamFetchError) -> FetchResult:
        return cls(FetchStatus.FAILED, error=error)
