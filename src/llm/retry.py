# src/llm/retry.py - v2
"""Bounded retry with linear backoff, as an explicit state machine.

Idle -> Attempting(n) -> Succeeded | Exhausted

``next_step`` is the pure transition function; ``run_with_retry`` drives it
against an async attempt callable and honours an optional monotonic deadline.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar, Union

from jurisdraft.core.errors import BackendError, DeadlineExceeded, QueryError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Up to ``max_retries`` extra attempts, waiting ``n * base_delay_s`` after failure n."""

    max_retries: int = 2
    base_delay_s: float = 1.0
    retryable: tuple[type[BaseException], ...] = (TransportError, BackendError)


@dataclass(frozen=True)
class RetryState:
    """Failed attempts so far and the most recent failure."""

    attempt: int = 0
    last_error: BaseException | None = None


@dataclass(frozen=True)
class Retry:
    delay_s: float
    state: RetryState


@dataclass(frozen=True)
class Fail:
    error: BaseException
    state: RetryState
    exhausted: bool


RetryDecision = Union[Retry, Fail]


def next_step(state: RetryState, error: BaseException, policy: RetryPolicy) -> RetryDecision:
    """Decide what follows a failed attempt.

    Non-retryable errors fail immediately with ``exhausted=False``; retryable
    ones retry until the policy budget is spent.
    """
    failed = RetryState(attempt=state.attempt + 1, last_error=error)
    if not isinstance(error, policy.retryable):
        return Fail(error=error, state=failed, exhausted=False)
    if failed.attempt > policy.max_retries:
        return Fail(error=error, state=failed, exhausted=True)
    return Retry(delay_s=failed.attempt * policy.base_delay_s, state=failed)


def remaining_time(deadline: float | None) -> float | None:
    """Seconds left until a ``time.monotonic()`` deadline, or None if unbounded."""
    if deadline is None:
        return None
    return deadline - time.monotonic()


async def run_with_retry(
    attempt: Callable[[float | None], Awaitable[T]],
    policy: RetryPolicy,
    *,
    deadline: float | None = None,
    label: str = "query",
) -> T:
    """Run ``attempt(remaining_s)`` under ``policy``.

    Raises:
        QueryError: Retry budget exhausted; ``cause`` is the last failure.
        DeadlineExceeded: The deadline expired before an attempt or backoff.
        Exception: Non-retryable failures propagate unchanged.
    """
    state = RetryState()
    while True:
        remaining = remaining_time(deadline)
        if remaining is not None and remaining <= 0:
            raise DeadlineExceeded(f"{label}: deadline expired", cause=state.last_error)

        try:
            return await attempt(remaining)
        except Exception as e:  # noqa: BLE001 - classified by next_step
            decision = next_step(state, e, policy)

        if isinstance(decision, Fail):
            if decision.exhausted:
                raise QueryError(
                    f"{label} failed after {decision.state.attempt} attempts",
                    cause=decision.error,
                ) from decision.error
            raise decision.error

        remaining = remaining_time(deadline)
        if remaining is not None and decision.delay_s >= remaining:
            raise DeadlineExceeded(
                f"{label}: deadline expires before next attempt",
                cause=decision.state.last_error,
            ) from decision.state.last_error

        logger.warning(
            "%s - %s (attempt %d/%d), retrying in %.1fs",
            label, type(decision.state.last_error).__name__,
            decision.state.attempt, policy.max_retries + 1, decision.delay_s,
        )
        await asyncio.sleep(decision.delay_s)
        state = decision.state
