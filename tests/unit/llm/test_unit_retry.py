# tests/unit/llm/test_unit_retry.py - v1
"""Tests for llm/retry.py."""

from __future__ import annotations

import time

import pytest

from jurisdraft.core.errors import (
    BackendError,
    DeadlineExceeded,
    DecodeError,
    QueryError,
    TransportError,
)
from jurisdraft.llm.retry import Fail, Retry, RetryPolicy, RetryState, next_step, run_with_retry


class TestNextStep:
    def test_linear_backoff(self):
        policy = RetryPolicy(max_retries=2, base_delay_s=1.0)
        first = next_step(RetryState(), TransportError("x"), policy)
        assert isinstance(first, Retry)
        assert first.delay_s == 1.0
        second = next_step(first.state, TransportError("x"), policy)
        assert isinstance(second, Retry)
        assert second.delay_s == 2.0

    def test_exhausted_after_budget(self):
        policy = RetryPolicy(max_retries=2, base_delay_s=1.0)
        state = RetryState(attempt=2)
        decision = next_step(state, BackendError("boom"), policy)
        assert isinstance(decision, Fail)
        assert decision.exhausted is True
        assert decision.state.attempt == 3

    def test_non_retryable_fails_immediately(self):
        decision = next_step(RetryState(), DecodeError("bad"), RetryPolicy())
        assert isinstance(decision, Fail)
        assert decision.exhausted is False

    def test_zero_retries(self):
        decision = next_step(RetryState(), TransportError("x"), RetryPolicy(max_retries=0))
        assert isinstance(decision, Fail)
        assert decision.exhausted is True


class TestRunWithRetry:
    @pytest.mark.asyncio
    async def test_success_after_failures(self):
        calls = []

        async def attempt(remaining):
            calls.append(remaining)
            if len(calls) < 3:
                raise TransportError("refused")
            return "ok"

        result = await run_with_retry(attempt, RetryPolicy(max_retries=2, base_delay_s=0))
        assert result == "ok"
        assert calls == [None, None, None]

    @pytest.mark.asyncio
    async def test_exhausted_raises_query_error(self):
        calls = 0

        async def attempt(remaining):
            nonlocal calls
            calls += 1
            raise BackendError("model overloaded", status_code=503)

        with pytest.raises(QueryError) as exc_info:
            await run_with_retry(attempt, RetryPolicy(max_retries=2, base_delay_s=0))
        assert calls == 3
        assert isinstance(exc_info.value.cause, BackendError)
        assert not isinstance(exc_info.value, DeadlineExceeded)

    @pytest.mark.asyncio
    async def test_non_retryable_propagates_unchanged(self):
        async def attempt(remaining):
            raise DecodeError("garbage")

        with pytest.raises(DecodeError):
            await run_with_retry(attempt, RetryPolicy(base_delay_s=0))

    @pytest.mark.asyncio
    async def test_expired_deadline_skips_attempt(self):
        called = False

        async def attempt(remaining):
            nonlocal called
            called = True

        with pytest.raises(DeadlineExceeded):
            await run_with_retry(attempt, RetryPolicy(), deadline=time.monotonic() - 1)
        assert called is False

    @pytest.mark.asyncio
    async def test_backoff_longer_than_deadline(self):
        calls = 0

        async def attempt(remaining):
            nonlocal calls
            calls += 1
            raise TransportError("refused")

        with pytest.raises(DeadlineExceeded) as exc_info:
            await run_with_retry(
                attempt, RetryPolicy(base_delay_s=60), deadline=time.monotonic() + 5,
            )
        assert calls == 1
        assert isinstance(exc_info.value.cause, TransportError)

    @pytest.mark.asyncio
    async def test_remaining_time_passed_to_attempt(self):
        seen = []

        async def attempt(remaining):
            seen.append(remaining)
            return 1

        await run_with_retry(attempt, RetryPolicy(), deadline=time.monotonic() + 30)
        assert 0 < seen[0] <= 30
