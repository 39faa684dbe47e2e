"""Retry policy and the generic classified retry loop.

The loop retries an attempt whose failure the caller's classifier marks as
RETRY, sleeping per the policy's backoff between attempts. Attempts never
overlap: attempt n+1 starts only after attempt n and its delay complete.
"""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Annotated, Callable, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .backoff import Backoff, ExponentialBackoff

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from hulymcp.foundation.errors import Result


logger = logging.getLogger("hulymcp.retry")

A = TypeVar("A")
E = TypeVar("E")

Sleep = Callable[[float], "Awaitable[None]"]


class RetryDecision(StrEnum):
    """Classifier verdict for a failed attempt."""
    RETRY = "retry"
    STOP = "stop"


class RetryPolicy(BaseModel):
    """Bounded retry configuration.

    Attributes:
        max_attempts: Total attempts including the first (>= 1)
        backoff: Delay strategy between attempts

    Example:
        >>> policy = RetryPolicy(max_attempts=3, backoff=ExponentialBackoff(base=0.1))
        >>> [policy.get_delay(n) for n in range(policy.max_retries)]
        [0.1, 0.2]
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Backoff protocol
        extra="forbid",
    )

    max_attempts: Annotated[int, Field(ge=1, le=10)] = 3
    backoff: Backoff = Field(default_factory=ExponentialBackoff, repr=False)

    @computed_field
    @property
    def max_retries(self) -> int:
        """Retries after the initial attempt."""
        return self.max_attempts - 1

    def get_delay(self, attempt: int) -> float:
        """Delay before retry number `attempt` (0-indexed)."""
        return self.backoff.delay(attempt)


# 1 initial attempt + 2 retries, 100ms doubling
CONNECTION_RETRY = RetryPolicy(max_attempts=3, backoff=ExponentialBackoff(base=0.1))
NO_RETRY = RetryPolicy(max_attempts=1)


async def retry(
    attempt: Callable[[], Awaitable[Result[A, E]]],
    classify: Callable[[E], RetryDecision],
    policy: RetryPolicy = CONNECTION_RETRY,
    *,
    sleep: Sleep = asyncio.sleep,
    label: str = "retry",
) -> Result[A, E]:
    """Run `attempt` until it succeeds, the classifier says STOP, or attempts run out.

    Args:
        attempt: Async callable producing one Result per call
        classify: Maps a failure to RETRY or STOP
        policy: Attempt bound and backoff
        sleep: Awaitable delay function, injectable for virtual clocks
        label: Name used in retry log lines

    Returns:
        The first Ok, the first STOP-classified Err, or the last Err once
        attempts are exhausted.
    """
    result = await attempt()
    retries = 0

    while result.is_err() and retries < policy.max_retries:
        error = result.unwrap_err()
        if classify(error) is RetryDecision.STOP:
            break

        delay = policy.get_delay(retries)
        logger.info(f"[{label}] Retry {retries + 1}/{policy.max_retries} after {delay:.1f}s ({error})")

        await sleep(delay)
        result = await attempt()
        retries += 1

    return result
