"""In-process retrier with backoff for transient delivery failures.

Retries a single call a bounded number of times, sleeping between attempts
on the calling (worker) thread. Nothing is persisted or queued: once the
attempt budget is spent the original exception propagates.

Backoff calculation (wait_seconds=0.5, backoff_multiplier=2.0):
    Attempt 1: no delay (first try)
    Attempt 2: wait 0.5s
    Attempt 3: wait 1.0s
    Delays are capped at max_wait_seconds when set.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Type

from infrastructure.logging import get_module_logger

logger = get_module_logger()


@dataclass(frozen=True)
class RetryEvent:
    """Retry lifecycle event passed to ``on_retry`` and ``on_failure``.

    Only the error type is carried, never the error message: messages raised
    by HTTP clients can embed endpoint URLs with secret tokens.

    Attributes:
        name: Retrier name (typically the transport name)
        attempt: Attempt number that just failed (1-based)
        max_attempts: Attempt budget
        delay_seconds: Wait before the next attempt (0 after the final failure)
        error_type: Class name of the exception raised by the attempt
    """

    name: str
    attempt: int
    max_attempts: int
    delay_seconds: float
    error_type: str

    @property
    def is_final(self) -> bool:
        return self.attempt >= self.max_attempts


def log_retry(event: RetryEvent) -> None:
    """Default ``on_retry`` callback."""
    logger.warning(
        "retry_scheduled",
        name=event.name,
        attempt=event.attempt,
        max_attempts=event.max_attempts,
        delay_seconds=event.delay_seconds,
        error_type=event.error_type,
    )


def log_retry_failure(event: RetryEvent) -> None:
    """Default ``on_failure`` callback."""
    logger.error(
        "retry_attempts_exhausted",
        name=event.name,
        attempts=event.attempt,
        error_type=event.error_type,
    )


class Retrier:
    """Bounded retry with fixed or exponential backoff.

    Args:
        name: Name of the retrier (typically the transport name)
        max_attempts: Total attempts, first call included
        wait_seconds: Wait before the first retry
        backoff_multiplier: Factor applied to the wait after every retry;
            1.0 keeps a fixed interval
        max_wait_seconds: Optional cap for a single wait
        retry_on: Exception types that are retried; others propagate at once
        on_retry: Called before each backoff sleep
        on_failure: Called once after the final failed attempt
        sleep: Sleep function, injectable for tests

    Example:
        retrier = Retrier("chat", max_attempts=3, wait_seconds=0.5)
        retrier.call(post_to_webhook, payload)
    """

    def __init__(
        self,
        name: str,
        max_attempts: int = 3,
        wait_seconds: float = 0.5,
        backoff_multiplier: float = 1.0,
        max_wait_seconds: Optional[float] = None,
        retry_on: Tuple[Type[Exception], ...] = (Exception,),
        on_retry: Optional[Callable[[RetryEvent], None]] = log_retry,
        on_failure: Optional[Callable[[RetryEvent], None]] = log_retry_failure,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if wait_seconds < 0:
            raise ValueError("wait_seconds must not be negative")
        if backoff_multiplier < 1.0:
            raise ValueError("backoff_multiplier must be >= 1.0")

        self.name = name
        self.max_attempts = max_attempts
        self.wait_seconds = wait_seconds
        self.backoff_multiplier = backoff_multiplier
        self.max_wait_seconds = max_wait_seconds
        self.retry_on = retry_on
        self._on_retry = on_retry
        self._on_failure = on_failure
        self._sleep = sleep

        self._succeeded_without_retry = 0
        self._succeeded_with_retry = 0
        self._failed = 0
        self._total_attempts = 0
        self._lock = threading.Lock()

    def compute_delay(self, attempt: int) -> float:
        """Delay before the attempt following ``attempt`` (1-based)."""
        delay = self.wait_seconds * (self.backoff_multiplier ** (attempt - 1))
        if self.max_wait_seconds is not None:
            delay = min(delay, self.max_wait_seconds)
        return delay

    def call(self, func: Callable, *args, **kwargs) -> Any:
        """Call ``func`` until it succeeds or the attempt budget is spent.

        Raises:
            Exception: The last exception raised by ``func``, or the first one
                that is not listed in ``retry_on``
        """
        attempt = 0
        while True:
            attempt += 1
            self._record_attempt()
            try:
                result = func(*args, **kwargs)
            except self.retry_on as e:
                if attempt >= self.max_attempts:
                    self._record_outcome(failed=True, retried=attempt > 1)
                    if self._on_failure:
                        self._on_failure(
                            RetryEvent(
                                name=self.name,
                                attempt=attempt,
                                max_attempts=self.max_attempts,
                                delay_seconds=0,
                                error_type=type(e).__name__,
                            )
                        )
                    raise

                delay = self.compute_delay(attempt)
                if self._on_retry:
                    self._on_retry(
                        RetryEvent(
                            name=self.name,
                            attempt=attempt,
                            max_attempts=self.max_attempts,
                            delay_seconds=delay,
                            error_type=type(e).__name__,
                        )
                    )
                if delay > 0:
                    self._sleep(delay)
                continue
            except Exception:
                self._record_outcome(failed=True, retried=attempt > 1)
                raise

            self._record_outcome(failed=False, retried=attempt > 1)
            return result

    def _record_attempt(self) -> None:
        with self._lock:
            self._total_attempts += 1

    def _record_outcome(self, failed: bool, retried: bool) -> None:
        with self._lock:
            if failed:
                self._failed += 1
            elif retried:
                self._succeeded_with_retry += 1
            else:
                self._succeeded_without_retry += 1

    def get_stats(self) -> dict:
        """Get retrier statistics."""
        with self._lock:
            return {
                "name": self.name,
                "max_attempts": self.max_attempts,
                "succeeded_without_retry": self._succeeded_without_retry,
                "succeeded_with_retry": self._succeeded_with_retry,
                "failed": self._failed,
                "total_attempts": self._total_attempts,
            }
