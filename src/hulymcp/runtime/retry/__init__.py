"""Classified retry with exponential backoff."""

from .backoff import Backoff, ExponentialBackoff
from .policy import CONNECTION_RETRY, NO_RETRY, RetryDecision, RetryPolicy, retry

__all__ = [
    "Backoff", "ExponentialBackoff",
    "RetryPolicy", "RetryDecision", "CONNECTION_RETRY", "NO_RETRY", "retry",
]
