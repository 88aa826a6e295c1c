"""
Resilience patterns module.

Components:
    - ExponentialBackoff: Doubling wait sequence capped at a ceiling and
      bounded by an elapsed-time budget
    - retry_operation: Async retry loop driven by the error hierarchy
    - run_cancellable: Race an awaitable against a cancellation event
"""

from .backoff import ExponentialBackoff
from .retry import (
    RetryStats,
    retry_operation,
    run_cancellable,
)

__all__ = [
    # Backoff
    "ExponentialBackoff",
    # Retry
    "RetryStats",
    "retry_operation",
    "run_cancellable",
]
