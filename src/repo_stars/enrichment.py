"""Popularity enrichment for a caller-owned list of project records.

Usage:
    update, cancel_all = enrich_with_popularity(projects)
    sorted_projects = await update()

    # host teardown / navigate-away hook
    cancel_all()
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable

from repo_stars.config import get_settings
from repo_stars.github.cache import ResponseCache
from repo_stars.github.client import GitHubClient, RepositorySource
from repo_stars.github.fetcher import RepositoryFetcher
from repo_stars.github.pacing import (
    BatchAggregator,
    CancellationGate,
    EnrichmentResult,
    StaggerScheduler,
)
from repo_stars.logging import LogContext, get_logger
from repo_stars.schemas.project import ProjectRecord

logger = get_logger(__name__)

UpdateFn = Callable[[], Awaitable[list[ProjectRecord]]]
CancelFn = Callable[[], int]


class PopularityEnricher:
    """Staggered, cancellable star-count enrichment of project records.

    The records list is mutated in place: scores and missing icons are
    filled in, then the list is sorted most-popular first.
    """

    def __init__(
        self,
        records: list[ProjectRecord],
        *,
        source: RepositorySource | None = None,
        cache: ResponseCache | None = None,
        interval: float | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the enricher.

        Args:
            records: Caller-owned records to enrich
            source: Repository transport (default: anonymous GitHubClient)
            cache: Response cache (default: process-wide cache)
            interval: Seconds between request launches (default from settings)
            timeout: Per-request timeout in seconds (default from settings)
        """
        config = get_settings().enrichment
        if interval is None:
            interval = config.stagger_interval
        if timeout is None:
            timeout = config.fetch_timeout_seconds

        self._records = records
        self._gate = CancellationGate()
        self._fetcher = RepositoryFetcher(
            source if source is not None else GitHubClient(),
            cache,
            timeout=timeout,
        )
        self._scheduler = StaggerScheduler(self._fetcher, self._gate, interval=interval)
        self._aggregator = BatchAggregator()
        self.batch_id = uuid.uuid4().hex[:8]
        self.last_result: EnrichmentResult | None = None

    @property
    def records(self) -> list[ProjectRecord]:
        return self._records

    @property
    def scheduler(self) -> StaggerScheduler:
        return self._scheduler

    @property
    def cache(self) -> ResponseCache:
        return self._fetcher.cache

    async def run(self) -> EnrichmentResult:
        """Run one full stagger-fetch-sort cycle.

        Log records emitted during the cycle carry the batch id.
        """
        with LogContext(batch=self.batch_id):
            logger.info(
                "Enriching {} project(s) at {:.1f}s intervals",
                len(self._records),
                self._scheduler.interval,
            )
            tasks = self._scheduler.schedule(self._records)
            result = await self._aggregator.collect(self._records, tasks)

            logger.info(
                "Enrichment finished: {updated} updated, {cancelled} cancelled, "
                "{failed} failed, {skipped} skipped",
                **result.to_dict(),
            )
        self.last_result = result
        return result

    async def update(self) -> list[ProjectRecord]:
        """Run a cycle and return the (sorted) records."""
        await self.run()
        return self._records

    def cancel_all(self) -> int:
        """Cancel every outstanding request. Safe to call at any time."""
        return self._gate.cancel_all()


def enrich_with_popularity(
    records: list[ProjectRecord],
    *,
    source: RepositorySource | None = None,
    cache: ResponseCache | None = None,
    interval: float | None = None,
    timeout: float | None = None,
) -> tuple[UpdateFn, CancelFn]:
    """Bind records to an enricher and return its (update, cancel_all) pair."""
    enricher = PopularityEnricher(
        records,
        source=source,
        cache=cache,
        interval=interval,
        timeout=timeout,
    )
    return enricher.update, enricher.cancel_all
