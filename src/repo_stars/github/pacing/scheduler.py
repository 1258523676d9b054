"""Stagger scheduler for rate-limited repository fetches.

Each item gets a launch offset of ``index * interval`` measured from one
common start instant, so launches follow input order while completions
may arrive in any order.

Features:
- One cancellation token per item, registered before any delay elapses
- Cancelled-before-launch items never touch the network
- Malformed source URLs settle as SKIPPED without failing the batch
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import TYPE_CHECKING

from repo_stars.config import get_settings
from repo_stars.github.exceptions import MalformedIdentityError
from repo_stars.github.identity import parse_identity
from repo_stars.github.results import FetchResult, FetchStatus
from repo_stars.logging import get_logger
from repo_stars.schemas.project import ProjectRecord

from .cancellation import CancellationGate, CancellationToken

if TYPE_CHECKING:
    from repo_stars.github.fetcher import RepositoryFetcher

logger = get_logger(__name__)


class TaskState(IntEnum):
    """Progress of a scheduled task."""

    QUEUED = 1
    WAITING = 2
    IN_FLIGHT = 3
    SETTLED = 4


class TaskStatus(str, Enum):
    """How a scheduled task settled."""

    UPDATED = "updated"
    CANCELLED = "cancelled"
    FAILED = "failed"
    SKIPPED = "skipped"
    """Source URL has no recognisable owner/name; no request was made."""


_FETCH_TO_TASK = {
    FetchStatus.SUCCESS: TaskStatus.UPDATED,
    FetchStatus.CANCELLED: TaskStatus.CANCELLED,
    FetchStatus.FAILED: TaskStatus.FAILED,
}


@dataclass
class TaskOutcome:
    """Settled result of one scheduled task."""

    index: int
    record: ProjectRecord
    status: TaskStatus
    result: FetchResult | None = None
    error: BaseException | None = None

    @property
    def from_cache(self) -> bool:
        return self.result is not None and self.result.from_cache


@dataclass
class ScheduledTask:
    """Bookkeeping for one pending fetch. Dropped once it settles."""

    task_id: str
    index: int
    record: ProjectRecord
    delay: float
    token: CancellationToken
    state: TaskState = TaskState.QUEUED
    outcome: TaskOutcome | None = field(default=None)


class StaggerScheduler:
    """Launches one fetch per record at increasing offsets.

    Usage:
        gate = CancellationGate()
        scheduler = StaggerScheduler(fetcher, gate, interval=6.0)
        tasks = scheduler.schedule(records)
        outcomes = await asyncio.gather(*tasks)

        # from a teardown hook
        gate.cancel_all()
    """

    def __init__(
        self,
        fetcher: RepositoryFetcher,
        gate: CancellationGate | None = None,
        *,
        interval: float | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            fetcher: Fetch unit invoked for each record
            gate: Collection that receives each task's token
            interval: Seconds between launches (default from settings)
        """
        if interval is None:
            interval = get_settings().enrichment.stagger_interval
        if interval < 0:
            raise ValueError("interval must be >= 0")

        self._fetcher = fetcher
        self._gate = gate if gate is not None else CancellationGate()
        self._interval = interval
        self._pending: dict[str, ScheduledTask] = {}

        self._total_scheduled = 0
        self._total_settled = 0

    @property
    def gate(self) -> CancellationGate:
        return self._gate

    @property
    def interval(self) -> float:
        return self._interval

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------
    def schedule(self, records: Sequence[ProjectRecord]) -> list[asyncio.Task[TaskOutcome]]:
        """Schedule a fetch for every record.

        Tokens are created and registered before this returns. Must be
        called from a running event loop.

        Args:
            records: Records in launch order

        Returns:
            One asyncio task per record, aligned with the input order
        """
        loop = asyncio.get_running_loop()
        start = loop.time()
        tasks: list[asyncio.Task[TaskOutcome]] = []

        for index, record in enumerate(records):
            scheduled = ScheduledTask(
                task_id=str(uuid.uuid4()),
                index=index,
                record=record,
                delay=index * self._interval,
                token=self._gate.issue(record.source_url),
            )
            self._pending[scheduled.task_id] = scheduled
            self._total_scheduled += 1
            tasks.append(
                asyncio.create_task(
                    self._run(scheduled, start),
                    name=f"stagger-{index}",
                )
            )

        logger.debug(
            "Scheduled {} fetch(es), last launch at +{:.1f}s",
            len(tasks),
            max(len(tasks) - 1, 0) * self._interval,
        )
        return tasks

    async def _run(self, scheduled: ScheduledTask, start: float) -> TaskOutcome:
        try:
            outcome = await self._fire(scheduled, start)
        finally:
            scheduled.state = TaskState.SETTLED
            self._gate.release(scheduled.token)
            self._pending.pop(scheduled.task_id, None)
            self._total_settled += 1

        scheduled.outcome = outcome
        logger.debug("Task {} settled: {}", scheduled.index, outcome.status.value)
        return outcome

    async def _fire(self, scheduled: ScheduledTask, start: float) -> TaskOutcome:
        """Wait for the task's slot, then fetch."""
        token = scheduled.token
        record = scheduled.record

        scheduled.state = TaskState.WAITING
        remaining = start + scheduled.delay - asyncio.get_running_loop().time()
        if await token.sleep(remaining):
            logger.info("Request cancelled before launch: {}", record.source_url)
            return TaskOutcome(scheduled.index, record, TaskStatus.CANCELLED)

        try:
            identity = parse_identity(record.source_url)
        except MalformedIdentityError as e:
            logger.warning("Skipping {}: {}", record.display_name, e)
            return TaskOutcome(scheduled.index, record, TaskStatus.SKIPPED, error=e)

        scheduled.state = TaskState.IN_FLIGHT
        result = await self._fetcher.fetch(identity, token)
        return TaskOutcome(
            scheduled.index,
            record,
            _FETCH_TO_TASK[result.status],
            result=result,
            error=result.error,
        )

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------
    def cancel_all(self) -> int:
        """Cancel every outstanding task's token."""
        return self._gate.cancel_all()

    @property
    def pending(self) -> list[ScheduledTask]:
        """Tasks that have not settled yet, in launch order."""
        return sorted(self._pending.values(), key=lambda t: t.index)

    @property
    def is_idle(self) -> bool:
        return not self._pending

    def get_stats(self) -> dict[str, int | float]:
        """Get scheduler statistics."""
        return {
            "pending": len(self._pending),
            "interval": self._interval,
            "total_scheduled": self._total_scheduled,
            "total_settled": self._total_settled,
        }
