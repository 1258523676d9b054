"""GitHub client and enrichment exceptions."""

from datetime import datetime


class GitHubClientError(Exception):
    """Base exception for GitHub client errors."""

    pass


class GitHubAuthenticationError(GitHubClientError):
    """Raised when authentication fails (401)."""

    pass


class GitHubRateLimitError(GitHubClientError):
    """Raised when rate limit is exceeded (403 with rate limit headers)."""

    def __init__(self, message: str, reset_at: datetime | None = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class GitHubNotFoundError(GitHubClientError):
    """Raised when a resource is not found (404)."""

    pass


class MalformedIdentityError(ValueError):
    """Raised when a URL does not contain a github.com/owner/name path."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Not a GitHub repository URL: {url!r}")
        self.url = url


class OperationCancelledError(Exception):
    """Raised when a cancellation token wins the race against an operation."""

    pass


class FetchError(Exception):
    """Base class for per-item fetch failures.

    Fetch errors are returned inside a FetchResult, never raised past
    the fetch unit.
    """

    pass


class FetchCancelledError(FetchError):
    """The fetch's token was cancelled before the request completed."""

    pass


class UpstreamFetchError(FetchError):
    """The request failed (network error, non-2xx, parse error, timeout)."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
