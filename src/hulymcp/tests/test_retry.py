"""Tests for backoff and the classified retry loop.

Delays are recorded by a virtual clock; nothing actually sleeps.
"""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from hulymcp.foundation.errors import Err, Ok, Result
from hulymcp.runtime.retry import (
    CONNECTION_RETRY,
    NO_RETRY,
    ExponentialBackoff,
    RetryDecision,
    RetryPolicy,
    retry,
)

from .conftest import VirtualClock


def scripted(*outcomes: Result[str, str]):
    """Attempt function returning the given results in order, counting calls."""
    remaining = list(outcomes)
    calls: list[int] = []

    async def attempt() -> Result[str, str]:
        calls.append(1)
        return remaining.pop(0)

    return attempt, calls


def always_retry(_: str) -> RetryDecision:
    return RetryDecision.RETRY


# ═════════════════════════════════════════════════════════════════════════════
# Backoff
# ═════════════════════════════════════════════════════════════════════════════


def test_exponential_backoff_doubles_and_caps() -> None:
    """base * 2^n, never above max_delay."""
    backoff = ExponentialBackoff(base=0.1, max_delay=0.5)
    assert [backoff.delay(n) for n in range(4)] == pytest.approx([0.1, 0.2, 0.4, 0.5])


def test_jitter_stays_within_band() -> None:
    """Jittered delay is within [0.5, 1.5) of the nominal delay."""
    backoff = ExponentialBackoff(base=1.0, jitter=True)
    for _ in range(50):
        assert 0.5 <= backoff.delay(0) < 1.5


def test_connection_policy_delays() -> None:
    """Default connection policy: 3 attempts, 100ms then 200ms."""
    assert CONNECTION_RETRY.max_attempts == 3
    assert [CONNECTION_RETRY.get_delay(n) for n in range(CONNECTION_RETRY.max_retries)] == pytest.approx([0.1, 0.2])


def test_policy_rejects_zero_attempts() -> None:
    with pytest.raises(ValidationError):
        RetryPolicy(max_attempts=0)


# ═════════════════════════════════════════════════════════════════════════════
# Retry Loop
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_first_success_makes_one_attempt(clock: VirtualClock) -> None:
    attempt, calls = scripted(Ok("session"))

    result = await retry(attempt, always_retry, sleep=clock.sleep)

    assert result == Ok("session")
    assert len(calls) == 1
    assert clock.delays == []


@pytest.mark.asyncio
async def test_transient_failures_exhaust_attempts(clock: VirtualClock) -> None:
    """Three attempts, delays base and 2*base, last error returned."""
    attempt, calls = scripted(Err("e1"), Err("e2"), Err("e3"))

    result = await retry(attempt, always_retry, CONNECTION_RETRY, sleep=clock.sleep)

    assert result == Err("e3")
    assert len(calls) == 3
    assert clock.delays == pytest.approx([0.1, 0.2])


@pytest.mark.asyncio
async def test_success_on_third_attempt(clock: VirtualClock) -> None:
    attempt, calls = scripted(Err("down"), Err("down"), Ok("session"))

    result = await retry(attempt, always_retry, sleep=clock.sleep)

    assert result.unwrap() == "session"
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_stop_decision_ends_immediately(clock: VirtualClock) -> None:
    """A STOP-classified failure is returned after one attempt with no delay."""
    attempt, calls = scripted(Err("auth"), Ok("never"))

    result = await retry(attempt, lambda e: RetryDecision.STOP, sleep=clock.sleep)

    assert result == Err("auth")
    assert len(calls) == 1
    assert clock.delays == []


@pytest.mark.asyncio
async def test_classifier_sees_each_error(clock: VirtualClock) -> None:
    """Classification is per failure: retry the first, stop on the second."""
    seen: list[str] = []

    def classify(error: str) -> RetryDecision:
        seen.append(error)
        return RetryDecision.STOP if error == "fatal" else RetryDecision.RETRY

    attempt, calls = scripted(Err("flaky"), Err("fatal"), Ok("never"))
    result = await retry(attempt, classify, sleep=clock.sleep)

    assert result == Err("fatal")
    assert seen == ["flaky", "fatal"]
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_no_retry_policy(clock: VirtualClock) -> None:
    attempt, calls = scripted(Err("down"), Ok("never"))

    assert (await retry(attempt, always_retry, NO_RETRY, sleep=clock.sleep)).is_err()
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_retries_are_logged(clock: VirtualClock, caplog: pytest.LogCaptureFixture) -> None:
    attempt, _ = scripted(Err("down"), Ok("up"))

    with caplog.at_level(logging.INFO, logger="hulymcp.retry"):
        await retry(attempt, always_retry, sleep=clock.sleep, label="data")

    assert "[data] Retry 1/2 after 0.1s (down)" in caplog.text
