"""GitHub access for popularity enrichment.

This module provides:
- GitHubClient: Async repository metadata client (githubkit)
- parse_identity / RepoIdentity: owner/name extraction from URLs
- ResponseCache: process-wide response cache
- RepositoryFetcher: cache-first cancellable fetch unit
- Pacing: StaggerScheduler, CancellationGate, BatchAggregator
"""

from .cache import ResponseCache, get_response_cache
from .client import GitHubClient, RepositorySource
from .exceptions import (
    FetchCancelledError,
    FetchError,
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    MalformedIdentityError,
    OperationCancelledError,
    UpstreamFetchError,
)
from .fetcher import RepositoryFetcher
from .identity import RepoIdentity, parse_identity
from .pacing import (
    BatchAggregator,
    CancellationGate,
    CancellationToken,
    EnrichmentResult,
    StaggerScheduler,
    TaskOutcome,
    TaskStatus,
)
from .results import FetchResult, FetchStatus

__all__ = [
    # Client
    "GitHubClient",
    "RepositorySource",
    # Identity & cache
    "RepoIdentity",
    "ResponseCache",
    "get_response_cache",
    "parse_identity",
    # Fetch
    "FetchResult",
    "FetchStatus",
    "RepositoryFetcher",
    # Exceptions
    "FetchCancelledError",
    "FetchError",
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "MalformedIdentityError",
    "OperationCancelledError",
    "UpstreamFetchError",
    # Pacing
    "BatchAggregator",
    "CancellationGate",
    "CancellationToken",
    "EnrichmentResult",
    "StaggerScheduler",
    "TaskOutcome",
    "TaskStatus",
]
