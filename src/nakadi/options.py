"""
Retry options for resource operations and their merge with defaults.

Durations are seconds. A zero (or negative) duration means "unset" and takes
the default; any positive value is kept as given.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, replace

from core.resilience.backoff import ExponentialBackoff

DEFAULT_INITIAL_RETRY_INTERVAL = 0.5
DEFAULT_MAX_RETRY_INTERVAL = 60.0
DEFAULT_MAX_ELAPSED_TIME = 15 * 60.0


@dataclass(frozen=True)
class RetryDefaults:
    initial_retry_interval: float = DEFAULT_INITIAL_RETRY_INTERVAL
    max_retry_interval: float = DEFAULT_MAX_RETRY_INTERVAL
    max_elapsed_time: float = DEFAULT_MAX_ELAPSED_TIME


DEFAULTS = RetryDefaults()


@dataclass
class SubscriptionOptions:
    """Retry behaviour of SubscriptionAPI operations."""

    retry: bool = False
    initial_retry_interval: float = 0.0
    max_retry_interval: float = 0.0
    max_elapsed_time: float = 0.0

    # Also retry 5xx responses that carried a problem body
    retry_server_errors: bool = False

    def __post_init__(self):
        """Ensure proper types from YAML/env vars. None means unset."""
        self.initial_retry_interval = float(self.initial_retry_interval or 0.0)
        self.max_retry_interval = float(self.max_retry_interval or 0.0)
        self.max_elapsed_time = float(self.max_elapsed_time or 0.0)
        # bool('false') would be True, so only accept real booleans
        if not isinstance(self.retry, bool):
            raise TypeError(f"retry must be a bool, got {self.retry!r}")
        if not isinstance(self.retry_server_errors, bool):
            raise TypeError(
                f"retry_server_errors must be a bool, got {self.retry_server_errors!r}"
            )

    def with_defaults(self, defaults: RetryDefaults = DEFAULTS) -> "SubscriptionOptions":
        return with_defaults(self, defaults)

    def new_backoff(
        self, clock: Callable[[], float] = time.monotonic
    ) -> ExponentialBackoff | None:
        """Backoff for one operation, or None when retry is disabled."""
        if not self.retry:
            return None
        resolved = self.with_defaults()
        return ExponentialBackoff(
            initial_interval=resolved.initial_retry_interval,
            # A preserved initial interval above the default ceiling raises the ceiling
            max_interval=max(resolved.max_retry_interval, resolved.initial_retry_interval),
            max_elapsed_time=resolved.max_elapsed_time,
            clock=clock,
        )


def with_defaults(
    options: SubscriptionOptions | None,
    defaults: RetryDefaults = DEFAULTS,
) -> SubscriptionOptions:
    """
    Return fully populated options; the input is never modified.

    Unset durations take the value from ``defaults``; set fields, including
    ``retry`` and ``retry_server_errors``, are preserved. ``None`` yields the
    defaults with retry disabled. Applying this twice equals applying it once.
    """
    if options is None:
        options = SubscriptionOptions()

    return replace(
        options,
        initial_retry_interval=_or_default(
            options.initial_retry_interval, defaults.initial_retry_interval
        ),
        max_retry_interval=_or_default(
            options.max_retry_interval, defaults.max_retry_interval
        ),
        max_elapsed_time=_or_default(options.max_elapsed_time, defaults.max_elapsed_time),
    )


def _or_default(value: float, default: float) -> float:
    return value if value > 0 else default


__all__ = [
    "DEFAULTS",
    "DEFAULT_INITIAL_RETRY_INTERVAL",
    "DEFAULT_MAX_ELAPSED_TIME",
    "DEFAULT_MAX_RETRY_INTERVAL",
    "RetryDefaults",
    "SubscriptionOptions",
    "with_defaults",
]
