"""Unit tests for StaggerScheduler.

These tests verify launch ordering, token registration,
cancellation before and during launch, and malformed URL handling.
"""

import asyncio

import pytest

from repo_stars.github.fetcher import RepositoryFetcher
from repo_stars.github.pacing.cancellation import CancellationGate, TokenState
from repo_stars.github.pacing.scheduler import StaggerScheduler, TaskState, TaskStatus
from tests.conftest import TEST_INTERVAL
from tests.factories import FakeRepositorySource, make_project, wait_for_calls


def create_scheduler(
    source: FakeRepositorySource,
    cache,
    interval: float = TEST_INTERVAL,
) -> StaggerScheduler:
    """Helper to create a scheduler with its own gate."""
    return StaggerScheduler(RepositoryFetcher(source, cache), CancellationGate(), interval=interval)


class TestStaggerSchedulerInit:
    """Tests for scheduler initialization."""

    def test_init(self, fake_source, cache) -> None:
        scheduler = create_scheduler(fake_source, cache, interval=2.0)
        assert scheduler.interval == 2.0
        assert scheduler.is_idle

    def test_negative_interval_rejected(self, fake_source, cache) -> None:
        with pytest.raises(ValueError):
            create_scheduler(fake_source, cache, interval=-1)

    def test_interval_from_settings(self, fake_source, cache, monkeypatch) -> None:
        monkeypatch.setenv("ENRICHMENT__STAGGER_INTERVAL_MS", "250")
        scheduler = StaggerScheduler(RepositoryFetcher(fake_source, cache))
        assert scheduler.interval == 0.25


class TestSchedule:
    """Tests for schedule()."""

    @pytest.mark.asyncio
    async def test_tokens_registered_before_any_launch(self, fake_source, cache) -> None:
        scheduler = create_scheduler(fake_source, cache, interval=0.5)
        records = [make_project("a/b"), make_project("c/d"), make_project("e/f")]

        tasks = scheduler.schedule(records)

        assert scheduler.gate.outstanding == 3
        pending = scheduler.pending
        assert [p.index for p in pending] == [0, 1, 2]
        assert [p.delay for p in pending] == [0.0, 0.5, 1.0]
        assert all(p.state is TaskState.QUEUED for p in pending)
        assert all(p.token.state is TokenState.PENDING for p in pending)

        scheduler.cancel_all()
        await asyncio.gather(*tasks)

    @pytest.mark.asyncio
    async def test_tasks_settle_and_release_tokens(self, fake_source, cache) -> None:
        scheduler = create_scheduler(fake_source, cache)
        records = [make_project("a/b"), make_project("c/d")]
        tasks = scheduler.schedule(records)
        pending = scheduler.pending

        outcomes = await asyncio.gather(*tasks)

        assert [o.status for o in outcomes] == [TaskStatus.UPDATED, TaskStatus.UPDATED]
        assert [o.record for o in outcomes] == records
        assert scheduler.is_idle
        assert scheduler.gate.outstanding == 0
        assert all(p.state is TaskState.SETTLED for p in pending)
        assert all(p.token.state is TokenState.CONSUMED for p in pending)
        assert scheduler.get_stats()["total_settled"] == 2

    @pytest.mark.asyncio
    async def test_launch_order_and_spacing(self, cache) -> None:
        """Launches follow input order, at least one interval apart."""
        interval = 0.05
        source = FakeRepositorySource({"a/b": 1, "c/d": 2, "e/f": 3}, latency={"a/b": 0.2})
        scheduler = create_scheduler(source, cache, interval=interval)

        await asyncio.gather(
            *scheduler.schedule([make_project("a/b"), make_project("c/d"), make_project("e/f")])
        )

        assert source.calls == ["a/b", "c/d", "e/f"]
        gaps = [b - a for a, b in zip(source.call_times, source.call_times[1:], strict=False)]
        assert all(gap >= interval * 0.8 for gap in gaps)
        # slow first request finishes last
        assert source.completed == ["c/d", "e/f", "a/b"]

    @pytest.mark.asyncio
    async def test_empty_input(self, fake_source, cache) -> None:
        scheduler = create_scheduler(fake_source, cache)
        assert scheduler.schedule([]) == []
        assert scheduler.gate.outstanding == 0

    @pytest.mark.asyncio
    async def test_malformed_url_skipped(self, fake_source, cache) -> None:
        scheduler = create_scheduler(fake_source, cache)
        bad = make_project(github="not-a-url")

        (outcome,) = await asyncio.gather(*scheduler.schedule([bad]))

        assert outcome.status is TaskStatus.SKIPPED
        assert outcome.result is None
        assert fake_source.calls == []

    @pytest.mark.asyncio
    async def test_upstream_failure_isolated(self, cache) -> None:
        source = FakeRepositorySource({"c/d": 5})
        scheduler = create_scheduler(source, cache)

        outcomes = await asyncio.gather(
            *scheduler.schedule([make_project("a/b"), make_project("c/d")])
        )

        assert [o.status for o in outcomes] == [TaskStatus.FAILED, TaskStatus.UPDATED]


class TestCancellation:
    """Tests for cancelling scheduled tasks."""

    @pytest.mark.asyncio
    async def test_cancel_before_launch_makes_no_calls(self, fake_source, cache) -> None:
        scheduler = create_scheduler(fake_source, cache, interval=10.0)
        tasks = scheduler.schedule([make_project("a/b"), make_project("c/d")])

        assert scheduler.cancel_all() == 2
        outcomes = await asyncio.wait_for(asyncio.gather(*tasks), 1.0)

        assert [o.status for o in outcomes] == [TaskStatus.CANCELLED, TaskStatus.CANCELLED]
        assert fake_source.calls == []

    @pytest.mark.asyncio
    async def test_cancel_after_first_launch(self, cache) -> None:
        source = FakeRepositorySource({"a/b": 1, "c/d": 2, "e/f": 3})
        scheduler = create_scheduler(source, cache, interval=10.0)
        tasks = scheduler.schedule([make_project("a/b"), make_project("c/d"), make_project("e/f")])

        first = await asyncio.wait_for(tasks[0], 1.0)
        assert scheduler.cancel_all() == 2
        rest = await asyncio.wait_for(asyncio.gather(*tasks[1:]), 1.0)

        assert first.status is TaskStatus.UPDATED
        assert [o.status for o in rest] == [TaskStatus.CANCELLED, TaskStatus.CANCELLED]
        assert source.calls == ["a/b"]

    @pytest.mark.asyncio
    async def test_cancel_in_flight(self, cache) -> None:
        source = FakeRepositorySource({"a/b": 1}, hang={"a/b"})
        scheduler = create_scheduler(source, cache, interval=10.0)
        tasks = scheduler.schedule([make_project("a/b")])

        await wait_for_calls(source, 1)
        assert scheduler.pending[0].state is TaskState.IN_FLIGHT
        scheduler.cancel_all()
        (outcome,) = await asyncio.wait_for(asyncio.gather(*tasks), 1.0)

        assert outcome.status is TaskStatus.CANCELLED
        assert source.cancelled == ["a/b"]

    @pytest.mark.asyncio
    async def test_cancel_after_settle_is_noop(self, fake_source, cache) -> None:
        scheduler = create_scheduler(fake_source, cache)
        outcomes = await asyncio.gather(*scheduler.schedule([make_project("a/b")]))

        assert scheduler.cancel_all() == 0
        assert outcomes[0].status is TaskStatus.UPDATED
