"""Cache-first, cancellable fetch of a single repository."""

from __future__ import annotations

from repo_stars.logging import bind_repo

from .cache import ResponseCache, get_response_cache
from .client import RepositorySource
from .exceptions import OperationCancelledError, UpstreamFetchError
from .identity import RepoIdentity
from .pacing.cancellation import CancellationToken
from .results import FetchResult


class RepositoryFetcher:
    """Fetch unit: returns cached data or performs one guarded request.

    Never raises for per-item failures; every outcome comes back as a
    FetchResult. Only successful responses are cached.
    """

    def __init__(
        self,
        source: RepositorySource,
        cache: ResponseCache | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            source: Transport used on cache misses (usually GitHubClient)
            cache: Response cache (defaults to the process-wide one)
            timeout: Optional per-request timeout in seconds
        """
        self._source = source
        self._cache = cache if cache is not None else get_response_cache()
        self._timeout = timeout

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    async def fetch(self, identity: RepoIdentity, token: CancellationToken) -> FetchResult:
        """Fetch repository data for identity.

        A cache hit is returned even if the token is cancelled.

        Args:
            identity: Repository to fetch
            token: Cancellation token bound to the request

        Returns:
            FetchResult with SUCCESS, CANCELLED or FAILED status
        """
        log = bind_repo(identity.owner, identity.name)

        cached = self._cache.get(identity.key)
        if cached is not None:
            log.debug("Cache hit for {}", identity.key)
            return FetchResult.success(cached, from_cache=True)

        if token.is_cancelled:
            log.info("Request cancelled before start: {}", identity.key)
            return FetchResult.cancelled(token.reason or "cancelled")

        try:
            response = await token.run(
                self._source.get_repository(identity.owner, identity.name),
                timeout=self._timeout,
            )
        except OperationCancelledError as e:
            log.info("Request cancelled: {}", identity.key)
            return FetchResult.cancelled(str(e))
        except TimeoutError as e:
            log.warning("Request for {} timed out after {}s", identity.key, self._timeout)
            return FetchResult.failed(
                UpstreamFetchError(f"Timed out after {self._timeout}s", cause=e)
            )
        except Exception as e:
            log.warning("Error fetching star count for {}: {}", identity.key, e)
            return FetchResult.failed(UpstreamFetchError(str(e), cause=e))

        return FetchResult.success(self._cache.put(identity.key, response))
