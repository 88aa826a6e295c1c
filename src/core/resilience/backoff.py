"""
Exponential backoff scheduler bounded by an elapsed-time budget.

Produces successive wait durations that double after each step, clamped at
max_interval. Once the time elapsed since reset() reaches max_elapsed_time,
next_backoff() returns None and the caller must stop retrying.
"""

import random
import time
from collections.abc import Callable


class ExponentialBackoff:
    """
    Stateful backoff sequence over wall-clock time.

    One instance per logical operation; not shared between tasks.

    Usage:
        backoff = ExponentialBackoff(0.5, 60.0, 900.0)
        backoff.reset()
        while True:
            ...
            delay = backoff.next_backoff()
            if delay is None:
                break  # budget exhausted
            await asyncio.sleep(delay)
    """

    def __init__(
        self,
        initial_interval: float,
        max_interval: float,
        max_elapsed_time: float,
        multiplier: float = 2.0,
        randomization_factor: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if initial_interval <= 0:
            raise ValueError(f"initial_interval must be > 0, got {initial_interval}")
        if max_interval < initial_interval:
            raise ValueError(
                f"max_interval ({max_interval}) must be >= initial_interval ({initial_interval})"
            )
        if max_elapsed_time <= 0:
            raise ValueError(f"max_elapsed_time must be > 0, got {max_elapsed_time}")
        if not 0.0 <= randomization_factor < 1.0:
            raise ValueError(
                f"randomization_factor must be in [0, 1), got {randomization_factor}"
            )

        self.initial_interval = float(initial_interval)
        self.max_interval = float(max_interval)
        self.max_elapsed_time = float(max_elapsed_time)
        self.multiplier = float(multiplier)
        self.randomization_factor = float(randomization_factor)
        self._clock = clock
        self._current_interval = self.initial_interval
        self._start_time = self._clock()

    def reset(self) -> None:
        """Restart the elapsed-time clock and the interval sequence."""
        self._current_interval = self.initial_interval
        self._start_time = self._clock()

    @property
    def elapsed(self) -> float:
        """Seconds since the last reset()."""
        return self._clock() - self._start_time

    def next_backoff(self) -> float | None:
        """
        Return the next wait duration, or None once the budget is spent.

        Returns:
            Delay in seconds, never above max_interval
        """
        if self.elapsed >= self.max_elapsed_time:
            return None

        delay = self._randomize(self._current_interval)
        self._increment()
        return min(delay, self.max_interval)

    def _increment(self) -> None:
        if self._current_interval >= self.max_interval / self.multiplier:
            self._current_interval = self.max_interval
        else:
            self._current_interval *= self.multiplier

    def _randomize(self, interval: float) -> float:
        if not self.randomization_factor:
            return interval
        delta = self.randomization_factor * interval
        return random.uniform(interval - delta, interval + delta)


__all__ = ["ExponentialBackoff"]
