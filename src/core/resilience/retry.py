"""
Retry loop with exception-aware handling.

Uses the exception hierarchy to make retry decisions:
- Transient errors: retry with exponential backoff until the time budget is spent
- Everything else: fail immediately (no retry)
- Cancellation: stop immediately, distinct from exhaustion
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from core.errors.exceptions import (
    NakadiError,
    OperationCancelledError,
    RetryExhaustedError,
    is_transient_error,
)
from core.resilience.backoff import ExponentialBackoff

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryStats:
    """Statistics from a retry operation."""

    attempts: int = 0
    total_delay: float = 0.0
    final_error: Exception | None = None
    success: bool = False

    @property
    def retried(self) -> bool:
        """Whether any retries occurred."""
        return self.attempts > 1


def _log_not_retried(operation: str, error: NakadiError, stats: RetryStats) -> None:
    logger.debug(
        "Error for %s is not retried: %s",
        operation,
        str(error)[:200],
        extra={
            "operation": operation,
            "error_type": type(error).__name__,
            "error_category": error.category.value,
            "attempt": stats.attempts,
            "error_message": str(error)[:200],
        },
    )


def _log_retry_attempt(
    operation: str,
    error: NakadiError,
    stats: RetryStats,
    delay: float,
    elapsed: float,
) -> None:
    logger.warning(
        "Retryable error for %s, will retry",
        operation,
        extra={
            "operation": operation,
            "attempt": stats.attempts,
            "error_category": error.category.value,
            "delay_seconds": round(delay, 3),
            "elapsed_seconds": round(elapsed, 3),
            "error_message": str(error)[:200],
        },
    )


def _log_retry_exhausted(
    operation: str, error: NakadiError, stats: RetryStats, elapsed: float
) -> None:
    logger.error(
        "Retry budget exhausted for %s: %s",
        operation,
        str(error)[:200],
        extra={
            "operation": operation,
            "error_type": type(error).__name__,
            "error_category": error.category.value,
            "total_attempts": stats.attempts,
            "elapsed_seconds": round(elapsed, 3),
            "error_message": str(error)[:200],
        },
    )


def _check_cancelled(cancel: asyncio.Event | None, operation: str) -> None:
    if cancel is not None and cancel.is_set():
        raise OperationCancelledError(
            f"{operation} cancelled", context={"operation": operation}
        )


async def run_cancellable(
    factory: Callable[[], Awaitable[T]],
    cancel: asyncio.Event | None,
    operation: str,
) -> T:
    """
    Await factory() unless cancel is set first.

    Raises:
        OperationCancelledError: cancel was set before factory() completed
    """
    if cancel is None:
        return await factory()

    _check_cancelled(cancel, operation)
    work = asyncio.ensure_future(factory())
    stop = asyncio.ensure_future(cancel.wait())
    try:
        done, _ = await asyncio.wait({work, stop}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (work, stop):
            if not task.done():
                task.cancel()

    if work in done:
        return work.result()
    raise OperationCancelledError(
        f"{operation} cancelled", context={"operation": operation}
    )


async def retry_operation(
    attempt: Callable[[], Awaitable[T]],
    *,
    operation: str,
    backoff: ExponentialBackoff | None = None,
    should_retry: Callable[[NakadiError], bool] = is_transient_error,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    cancel: asyncio.Event | None = None,
) -> T:
    """
    Run attempt() until it succeeds, fails permanently, or the budget runs out.

    Without a backoff the attempt runs exactly once and its error is raised
    unchanged. Only NakadiError subclasses are considered for retry; any
    other exception propagates immediately.

    Args:
        attempt: Zero-argument coroutine factory performing one attempt
        operation: Operation name for logs and error context
        backoff: Scheduler bounding the retries, or None to disable retry
        should_retry: Predicate selecting retry-eligible errors
        sleep: Awaitable pause, injected for tests
        cancel: Optional event that aborts the operation when set

    Raises:
        RetryExhaustedError: Budget spent; wraps the last retryable error
        OperationCancelledError: cancel was set
        NakadiError: The first non-retryable classified error
    """
    stats = RetryStats()
    if backoff is not None:
        backoff.reset()

    while True:
        _check_cancelled(cancel, operation)
        stats.attempts += 1
        try:
            result = await run_cancellable(attempt, cancel, operation)
        except OperationCancelledError:
            raise
        except NakadiError as e:
            stats.final_error = e
            if backoff is None or not should_retry(e):
                _log_not_retried(operation, e, stats)
                raise

            delay = backoff.next_backoff()
            if delay is None:
                _log_retry_exhausted(operation, e, stats, backoff.elapsed)
                raise RetryExhaustedError(
                    e,
                    attempts=stats.attempts,
                    elapsed=backoff.elapsed,
                    context={"operation": operation},
                ) from e

            _log_retry_attempt(operation, e, stats, delay, backoff.elapsed)
            _check_cancelled(cancel, operation)
            await run_cancellable(lambda: sleep(delay), cancel, operation)
            stats.total_delay += delay
            continue

        stats.success = True
        if stats.retried:
            logger.info(
                "Retry succeeded for %s after %d attempts",
                operation,
                stats.attempts,
                extra={
                    "operation": operation,
                    "total_attempts": stats.attempts,
                    "delay_seconds": round(stats.total_delay, 3),
                },
            )
        return result


__all__ = [
    "RetryStats",
    "retry_operation",
    "run_cancellable",
]
