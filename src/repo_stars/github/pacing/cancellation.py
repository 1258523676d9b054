"""Cancellation tokens and the gate that cancels them all at once.

A token is created per scheduled fetch. The gate holds every token that
has not settled yet, so a teardown hook can stop queued and in-flight
work with a single call.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Awaitable
from enum import IntEnum
from typing import TypeVar

from repo_stars.github.exceptions import OperationCancelledError
from repo_stars.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class TokenState(IntEnum):
    """Lifecycle of a cancellation token."""

    PENDING = 1
    CANCELLED = 2
    CONSUMED = 3


class CancellationToken:
    """One-shot cancellation handle for a single operation.

    Transitions: PENDING -> CANCELLED (via cancel) or PENDING -> CONSUMED
    (via consume, when the operation settles). Both end states are final.
    """

    def __init__(self, label: str = "") -> None:
        self.id = str(uuid.uuid4())
        self.label = label
        self.reason: str | None = None
        self._state = TokenState.PENDING
        self._event = asyncio.Event()

    def __repr__(self) -> str:
        return f"CancellationToken({self.id[:8]}, {self.label!r}, {self._state.name})"

    @property
    def state(self) -> TokenState:
        return self._state

    @property
    def is_cancelled(self) -> bool:
        return self._state is TokenState.CANCELLED

    @property
    def is_pending(self) -> bool:
        return self._state is TokenState.PENDING

    def cancel(self, reason: str = "cancelled") -> bool:
        """Signal cancellation.

        Returns:
            True if the token moved to CANCELLED, False if it had already settled
        """
        if self._state is not TokenState.PENDING:
            return False
        self._state = TokenState.CANCELLED
        self.reason = reason
        self._event.set()
        return True

    def consume(self) -> None:
        """Mark the guarded operation as settled."""
        if self._state is TokenState.PENDING:
            self._state = TokenState.CONSUMED

    async def sleep(self, delay: float) -> bool:
        """Sleep for delay seconds unless cancelled first.

        Returns:
            True if the token was cancelled before or during the sleep
        """
        if self.is_cancelled:
            return True
        if delay <= 0:
            return False
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except TimeoutError:
            return False
        return True

    async def run(self, awaitable: Awaitable[T], *, timeout: float | None = None) -> T:
        """Await an operation, abandoning it if the token is cancelled first.

        The losing operation is cancelled and awaited before returning.
        If the operation and the cancellation finish together, the
        operation's result wins.

        Args:
            awaitable: Operation to run
            timeout: Optional seconds before giving up

        Returns:
            The operation's result

        Raises:
            OperationCancelledError: If the token was cancelled first
            TimeoutError: If timeout elapsed first
            Exception: Any exception from the operation
        """
        operation = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {operation, waiter},
                timeout=timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for pending in (waiter, operation):
                if not pending.done():
                    pending.cancel()
            await asyncio.gather(waiter, operation, return_exceptions=True)

        if operation in done:
            return operation.result()
        if waiter in done:
            raise OperationCancelledError(self.reason or "cancelled")
        raise TimeoutError(f"Operation did not finish within {timeout}s")


class CancellationGate:
    """Collection of outstanding tokens, cancelled together on teardown.

    Usage:
        gate = CancellationGate()
        token = gate.issue("vuejs/core")
        ...
        gate.release(token)   # once the operation settles

        # host teardown hook
        gate.cancel_all()
    """

    def __init__(self) -> None:
        self._tokens: dict[str, CancellationToken] = {}

    def issue(self, label: str = "") -> CancellationToken:
        """Create and register a fresh token."""
        token = CancellationToken(label)
        self.register(token)
        return token

    def register(self, token: CancellationToken) -> None:
        self._tokens[token.id] = token

    def release(self, token: CancellationToken) -> None:
        """Consume a settled token and stop tracking it."""
        token.consume()
        self._tokens.pop(token.id, None)

    def cancel_all(self, reason: str = "teardown") -> int:
        """Cancel every outstanding token.

        Returns:
            Number of tokens moved to CANCELLED
        """
        cancelled = sum(1 for token in list(self._tokens.values()) if token.cancel(reason))
        if cancelled:
            logger.info("Cancelled {} outstanding request(s) ({})", cancelled, reason)
        return cancelled

    @property
    def outstanding(self) -> int:
        """Number of tokens still being tracked."""
        return len(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)
