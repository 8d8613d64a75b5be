"""Circuit breaker implementation for transport resilience.

The circuit breaker pattern stops calling a failing delivery channel:
1. CLOSED state: Normal operation, calls pass through
2. OPEN state: Fast-fail calls without touching the channel (after threshold failures)
3. HALF_OPEN state: Test recovery with a limited number of trial calls

State transitions:
- CLOSED -> OPEN: After failure_threshold consecutive failures
- OPEN -> HALF_OPEN: After timeout period expires
- HALF_OPEN -> CLOSED: After successful trial call
- HALF_OPEN -> OPEN: If trial call fails

One breaker guards exactly one transport; its state is shared by every call
made through that transport.
"""

import threading
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

from infrastructure.logging import get_module_logger

logger = get_module_logger()


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"  # Normal operation
    OPEN = "open"  # Failing, reject calls immediately
    HALF_OPEN = "half_open"  # Testing recovery


class CircuitBreakerOpenError(Exception):
    """Raised when circuit breaker is open and the call is rejected."""

    pass


class CircuitBreaker:
    """Circuit breaker for transport operations.

    Args:
        name: Name of the circuit (typically the transport name)
        failure_threshold: Number of consecutive failures before opening
        timeout_seconds: Seconds to wait before attempting recovery (HALF_OPEN)
        half_open_max_calls: Max concurrent trial calls in HALF_OPEN state
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        timeout_seconds: float = 60,
        half_open_max_calls: int = 3,
        clock: Callable[[], float] = time.monotonic,
    ):
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")
        if half_open_max_calls < 1:
            raise ValueError("half_open_max_calls must be at least 1")

        self.name = name
        self.failure_threshold = failure_threshold
        self.timeout_seconds = timeout_seconds
        self.half_open_max_calls = half_open_max_calls
        self._clock = clock

        # State management
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._total_failures = 0
        self._rejected_count = 0
        self._opened_at: Optional[float] = None
        self._last_failure_time: Optional[datetime] = None
        self._half_open_calls = 0

        # Thread safety
        self._lock = threading.Lock()

    @property
    def state(self) -> CircuitState:
        """Get current circuit state."""
        with self._lock:
            return self._state

    def call(self, func: Callable, *args, **kwargs) -> Any:
        """Execute function through circuit breaker.

        Args:
            func: Function to call
            *args, **kwargs: Arguments to pass to function

        Returns:
            Result from function

        Raises:
            CircuitBreakerOpenError: If circuit is open
            Exception: Any exception raised by func
        """
        trial_call = self._admit()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            self._on_failure(e, trial_call)
            raise
        except BaseException:
            # Interrupts are not channel failures, but the trial slot is freed
            if trial_call:
                with self._lock:
                    self._half_open_calls = max(0, self._half_open_calls - 1)
            raise
        self._on_success(trial_call)
        return result

    def _admit(self) -> bool:
        """Let a call through or reject it.

        Returns:
            True if the call is a HALF_OPEN trial call

        Raises:
            CircuitBreakerOpenError: If the call is rejected
        """
        with self._lock:
            if self._state == CircuitState.OPEN and self._should_attempt_reset():
                self._transition_to_half_open()

            if self._state == CircuitState.CLOSED:
                return False

            if self._state == CircuitState.HALF_OPEN:
                if self._half_open_calls < self.half_open_max_calls:
                    self._half_open_calls += 1
                    return True
                self._rejected_count += 1
                logger.debug(
                    "circuit_breaker_half_open_limit",
                    name=self.name,
                    calls=self._half_open_calls,
                )
                raise CircuitBreakerOpenError(
                    f"Circuit breaker '{self.name}' is HALF_OPEN "
                    f"(max concurrent trial calls reached)."
                )

            self._rejected_count += 1
            retry_in = int(self.timeout_seconds - (self._clock() - self._opened_at))
            logger.warning(
                "circuit_breaker_open",
                name=self.name,
                failure_count=self._failure_count,
                retry_in_seconds=retry_in,
            )
            raise CircuitBreakerOpenError(
                f"Circuit breaker '{self.name}' is OPEN. Retry in {retry_in} seconds."
            )

    def _on_success(self, trial_call: bool) -> None:
        """Handle successful call."""
        with self._lock:
            self._success_count += 1
            if trial_call:
                self._half_open_calls = max(0, self._half_open_calls - 1)

            if self._state == CircuitState.HALF_OPEN:
                logger.info(
                    "circuit_breaker_success_half_open",
                    name=self.name,
                    success_count=self._success_count,
                )
                self._transition_to_closed()
            elif self._state == CircuitState.CLOSED and self._failure_count > 0:
                logger.debug(
                    "circuit_breaker_failure_count_reset",
                    name=self.name,
                    previous_failures=self._failure_count,
                )
                self._failure_count = 0

    def _on_failure(self, exception: Exception, trial_call: bool) -> None:
        """Handle failed call."""
        with self._lock:
            self._failure_count += 1
            self._total_failures += 1
            self._last_failure_time = datetime.now(timezone.utc)
            if trial_call:
                self._half_open_calls = max(0, self._half_open_calls - 1)

            if self._state == CircuitState.HALF_OPEN:
                logger.warning(
                    "circuit_breaker_recovery_failed",
                    name=self.name,
                    error_type=type(exception).__name__,
                )
                self._transition_to_open()
            elif self._state == CircuitState.CLOSED:
                if self._failure_count >= self.failure_threshold:
                    logger.error(
                        "circuit_breaker_threshold_exceeded",
                        name=self.name,
                        failure_count=self._failure_count,
                        threshold=self.failure_threshold,
                        error_type=type(exception).__name__,
                    )
                    self._transition_to_open()
                else:
                    logger.warning(
                        "circuit_breaker_failure",
                        name=self.name,
                        failure_count=self._failure_count,
                        threshold=self.failure_threshold,
                        error_type=type(exception).__name__,
                    )

    def _should_attempt_reset(self) -> bool:
        """Check if enough time has passed to attempt recovery."""
        if self._opened_at is None:
            return True
        return self._clock() - self._opened_at >= self.timeout_seconds

    def _transition_to_closed(self) -> None:
        logger.info("circuit_breaker_closed", name=self.name)
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._half_open_calls = 0
        self._opened_at = None

    def _transition_to_open(self) -> None:
        logger.error(
            "circuit_breaker_opened",
            name=self.name,
            timeout_seconds=self.timeout_seconds,
        )
        self._state = CircuitState.OPEN
        self._half_open_calls = 0
        self._opened_at = self._clock()

    def _transition_to_half_open(self) -> None:
        logger.info("circuit_breaker_half_open", name=self.name)
        self._state = CircuitState.HALF_OPEN
        self._failure_count = 0
        self._half_open_calls = 0

    def get_stats(self) -> dict:
        """Get circuit breaker statistics.

        ``failure_count`` is the current run of consecutive failures;
        ``success_count`` and ``total_failures`` are lifetime totals of
        calls that reached the wrapped function.
        """
        with self._lock:
            return {
                "name": self.name,
                "state": self._state.value,
                "failure_count": self._failure_count,
                "success_count": self._success_count,
                "total_failures": self._total_failures,
                "rejected_count": self._rejected_count,
                "last_failure_time": (
                    self._last_failure_time.isoformat()
                    if self._last_failure_time
                    else None
                ),
                "half_open_calls": self._half_open_calls,
            }

    def reset(self) -> None:
        """Manually reset circuit breaker (for testing/admin operations)."""
        with self._lock:
            logger.info("circuit_breaker_manual_reset", name=self.name)
            self._transition_to_closed()
