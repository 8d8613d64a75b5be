"""Token bucket rate limiter for transport admission control.

A transport's rate limiter is checked before anything else touches the
channel, so over-quota traffic is shed without skewing circuit breaker
statistics.

Algorithm:
    The bucket holds at most ``limit_for_period`` permits and refills evenly,
    ``limit_for_period`` permits per ``refresh_period_seconds``. ``acquire``
    takes one permit, waiting at most ``timeout_seconds`` for the bucket to
    refill. A timeout of 0 fails fast.
"""

import threading
import time
from typing import Callable

from infrastructure.logging import get_module_logger

logger = get_module_logger()


class RateLimitExceededError(Exception):
    """Raised when no permit could be acquired within the timeout."""

    pass


class RateLimiter:
    """Thread-safe token bucket rate limiter.

    Args:
        name: Name of the limiter (typically the transport name)
        limit_for_period: Permits granted per refresh period, also the burst size
        refresh_period_seconds: Length of the refresh period
        timeout_seconds: Max time ``acquire`` waits for a permit
        clock: Monotonic time source, injectable for tests
        sleep: Sleep function, injectable for tests

    Example:
        limiter = RateLimiter("chat", limit_for_period=10, refresh_period_seconds=1)
        limiter.acquire()  # raises RateLimitExceededError when over quota
    """

    def __init__(
        self,
        name: str,
        limit_for_period: int = 20,
        refresh_period_seconds: float = 1.0,
        timeout_seconds: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if limit_for_period < 1:
            raise ValueError("limit_for_period must be at least 1")
        if refresh_period_seconds <= 0:
            raise ValueError("refresh_period_seconds must be positive")
        if timeout_seconds < 0:
            raise ValueError("timeout_seconds must not be negative")

        self.name = name
        self.limit_for_period = limit_for_period
        self.refresh_period_seconds = refresh_period_seconds
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self._sleep = sleep

        self._tokens = float(limit_for_period)
        self._last_refill = clock()
        self._permitted_count = 0
        self._rejected_count = 0

        self._lock = threading.Lock()

    @property
    def _refill_rate(self) -> float:
        """Permits added per second."""
        return self.limit_for_period / self.refresh_period_seconds

    def _refill(self, now: float) -> None:
        elapsed = now - self._last_refill
        if elapsed > 0:
            self._tokens = min(
                float(self.limit_for_period),
                self._tokens + elapsed * self._refill_rate,
            )
            self._last_refill = now

    def try_acquire(self) -> bool:
        """Take a permit if one is available right now, without waiting."""
        with self._lock:
            self._refill(self._clock())
            if self._tokens >= 1:
                self._tokens -= 1
                self._permitted_count += 1
                return True
            return False

    def acquire(self) -> None:
        """Take a permit, waiting up to ``timeout_seconds``.

        Raises:
            RateLimitExceededError: If no permit became available in time
        """
        deadline = self._clock() + self.timeout_seconds

        while True:
            with self._lock:
                now = self._clock()
                self._refill(now)
                if self._tokens >= 1:
                    self._tokens -= 1
                    self._permitted_count += 1
                    return
                wait = (1 - self._tokens) / self._refill_rate

                if now + wait > deadline:
                    self._rejected_count += 1
                    logger.warning(
                        "rate_limit_exceeded",
                        name=self.name,
                        limit_for_period=self.limit_for_period,
                        refresh_period_seconds=self.refresh_period_seconds,
                    )
                    raise RateLimitExceededError(
                        f"Rate limiter '{self.name}' has no permits available "
                        f"(limit {self.limit_for_period} per "
                        f"{self.refresh_period_seconds}s)."
                    )

            self._sleep(wait)

    def get_stats(self) -> dict:
        """Get rate limiter statistics."""
        with self._lock:
            self._refill(self._clock())
            return {
                "name": self.name,
                "available_permits": int(self._tokens),
                "permitted_count": self._permitted_count,
                "rejected_count": self._rejected_count,
            }
