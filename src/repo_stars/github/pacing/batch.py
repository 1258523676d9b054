"""Batch aggregation of staggered fetch outcomes.

Waits for every scheduled task to settle, applies successful results to
the caller's records and re-sorts them by popularity. One item's failure
never aborts its siblings.
"""

from __future__ import annotations

import asyncio
from collections.abc import MutableSequence, Sequence
from dataclasses import dataclass, field
from operator import attrgetter

from repo_stars.logging import get_logger
from repo_stars.schemas.github_api import GitHubRepository
from repo_stars.schemas.project import ProjectRecord

from .scheduler import TaskOutcome, TaskStatus

logger = get_logger(__name__)


@dataclass
class EnrichmentResult:
    """Result of one enrichment cycle."""

    records: MutableSequence[ProjectRecord]
    """The caller's sequence, sorted in place unless the fallback was taken."""

    outcomes: list[TaskOutcome] = field(default_factory=list)
    """Per-record outcomes in input order."""

    is_sorted: bool = True
    """False if aggregation faulted and records were returned as-is."""

    def _count(self, status: TaskStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    @property
    def total_count(self) -> int:
        return len(self.outcomes)

    @property
    def updated_count(self) -> int:
        return self._count(TaskStatus.UPDATED)

    @property
    def cancelled_count(self) -> int:
        return self._count(TaskStatus.CANCELLED)

    @property
    def failed_count(self) -> int:
        return self._count(TaskStatus.FAILED)

    @property
    def skipped_count(self) -> int:
        return self._count(TaskStatus.SKIPPED)

    @property
    def all_updated(self) -> bool:
        """Whether every record received fresh data."""
        return self.updated_count == len(self.outcomes)

    def to_dict(self) -> dict[str, object]:
        """Summary counts for JSON output."""
        return {
            "total": self.total_count,
            "updated": self.updated_count,
            "cancelled": self.cancelled_count,
            "failed": self.failed_count,
            "skipped": self.skipped_count,
            "sorted": self.is_sorted,
        }


def apply_response(record: ProjectRecord, response: GitHubRepository) -> None:
    """Copy popularity data onto a record. An existing icon is kept."""
    record.popularity_score = response.stargazers_count
    if not record.icon and response.avatar_url:
        record.icon = response.avatar_url


def sort_by_popularity(records: MutableSequence[ProjectRecord]) -> None:
    """Sort in place, most popular first; ties keep their relative order."""
    records[:] = sorted(records, key=attrgetter("popularity_score"), reverse=True)


class BatchAggregator:
    """Joins scheduled tasks and folds their results into the records.

    Usage:
        tasks = scheduler.schedule(records)
        result = await BatchAggregator().collect(records, tasks)
        print(f"Updated {result.updated_count} of {result.total_count}")
    """

    async def collect(
        self,
        records: MutableSequence[ProjectRecord],
        tasks: Sequence[asyncio.Task[TaskOutcome]],
    ) -> EnrichmentResult:
        """Wait for all tasks, apply results and sort.

        Args:
            records: Caller-owned records, aligned with tasks
            tasks: Tasks returned by StaggerScheduler.schedule

        Returns:
            EnrichmentResult; on an unexpected fault the records are
            returned unsorted instead of raising
        """
        snapshot = list(records)
        outcomes: list[TaskOutcome] = []

        try:
            settled = await asyncio.gather(*tasks, return_exceptions=True)
            outcomes = [
                self._to_outcome(index, snapshot[index], res) for index, res in enumerate(settled)
            ]

            for outcome in outcomes:
                if outcome.status is TaskStatus.UPDATED and outcome.result is not None:
                    response = outcome.result.response
                    if response is not None:
                        apply_response(outcome.record, response)

            sort_by_popularity(records)
        except Exception:
            logger.exception("One or more requests failed or were cancelled")
            return EnrichmentResult(records=records, outcomes=outcomes, is_sorted=False)

        return EnrichmentResult(records=records, outcomes=outcomes)

    @staticmethod
    def _to_outcome(
        index: int,
        record: ProjectRecord,
        res: TaskOutcome | BaseException,
    ) -> TaskOutcome:
        """Normalise a gather() slot into a TaskOutcome."""
        if isinstance(res, TaskOutcome):
            return res
        if isinstance(res, asyncio.CancelledError):
            return TaskOutcome(index, record, TaskStatus.CANCELLED, error=res)
        logger.error("Task for {} raised: {!r}", record.source_url, res)
        return TaskOutcome(index, record, TaskStatus.FAILED, error=res)
