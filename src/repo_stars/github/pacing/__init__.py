"""Request staggering, cancellation and batch aggregation.

Components:
- CancellationToken / CancellationGate: cooperative cancellation
- StaggerScheduler: launches one fetch per item at increasing offsets
- BatchAggregator: settle-all join, result application and sorting
"""

from .batch import (
    BatchAggregator,
    EnrichmentResult,
    apply_response,
    sort_by_popularity,
)
from .cancellation import CancellationGate, CancellationToken, TokenState
from .scheduler import (
    ScheduledTask,
    StaggerScheduler,
    TaskOutcome,
    TaskState,
    TaskStatus,
)

__all__ = [
    # Aggregation
    "BatchAggregator",
    "EnrichmentResult",
    "apply_response",
    "sort_by_popularity",
    # Cancellation
    "CancellationGate",
    "CancellationToken",
    "TokenState",
    # Scheduling
    "ScheduledTask",
    "StaggerScheduler",
    "TaskOutcome",
    "TaskState",
    "TaskStatus",
]
