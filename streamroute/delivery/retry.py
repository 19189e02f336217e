"""Retry policy and the stateless retry decision used by the executor."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

MAX_RETRIES = 5
RETRY_INTERVAL_SECONDS = 0.5

NOT_FOUND_MARKER = "ResourceNotFound"


class RetryPolicy(BaseModel):
    """Fixed-interval retry ceiling.  No backoff, no jitter."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=MAX_RETRIES, ge=0)
    retry_interval: float = Field(default=RETRY_INTERVAL_SECONDS, ge=0)


class RetryDecision(BaseModel):
    """Outcome of ``decide_retry``.

    ``next_count`` is only meaningful when ``retry`` is true.
    """

    model_config = ConfigDict(frozen=True)

    retry: bool
    next_count: int
    delay: float


def decide_retry(retry_count: int, policy: RetryPolicy) -> RetryDecision:
    """Decide whether a failed attempt numbered *retry_count* may be retried.

    *retry_count* is zero for the first attempt of a batch and keeps
    counting across every retry of that batch, including retries of a
    reduced record set after a partial failure.

    >>> decide_retry(4, RetryPolicy()).retry
    True
    >>> decide_retry(5, RetryPolicy()).retry
    False
    """
    if retry_count >= policy.max_retries:
        return RetryDecision(retry=False, next_count=retry_count, delay=0.0)
    return RetryDecision(
        retry=True, next_count=retry_count + 1, delay=policy.retry_interval
    )


def indicates_not_found(message: str) -> bool:
    """Whether an error message reports a missing destination."""
    return NOT_FOUND_MARKER in message
