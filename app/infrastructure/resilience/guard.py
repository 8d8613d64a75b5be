"""Resilience guard: fixed compositions of protections around a raw call.

A guard wraps one transport's raw send with up to three protections. Two
nesting orders are supported, and each transport picks one by construction:

Composition A (``RATE_LIMIT_THEN_CIRCUIT``)::

    rate_limiter.acquire() -> circuit_breaker.call(raw)

    Over-quota calls fail with RateLimitExceededError before the breaker is
    consulted, so throttled traffic never counts toward breaker statistics.

Composition B (``CIRCUIT_AROUND_RETRY``)::

    circuit_breaker.call(lambda: retrier.call(raw))

    An open breaker fails with CircuitBreakerOpenError and no attempt is made.
    The whole retry sequence is a single breaker call: only its final outcome
    updates breaker health.

Usage:
    guard = circuit_guarded_retry(
        circuit_breaker=CircuitBreaker("chat"),
        retrier=Retrier("chat", max_attempts=3),
    )
    guard.call(post_message, payload)
"""

from enum import Enum
from typing import Any, Callable, Optional

from infrastructure.resilience.circuit_breaker import CircuitBreaker
from infrastructure.resilience.rate_limiter import RateLimiter
from infrastructure.resilience.retry import Retrier


class GuardComposition(Enum):
    """Supported nesting orders."""

    RATE_LIMIT_THEN_CIRCUIT = "rate_limit_then_circuit"
    CIRCUIT_AROUND_RETRY = "circuit_around_retry"


class ResilienceGuard:
    """Protections for a single transport, applied in a fixed order.

    Prefer the builder functions ``rate_limited_circuit`` and
    ``circuit_guarded_retry`` over calling the constructor directly.

    Args:
        composition: Nesting order of the protections
        rate_limiter: Only valid with RATE_LIMIT_THEN_CIRCUIT
        circuit_breaker: Valid with both compositions
        retrier: Only valid with CIRCUIT_AROUND_RETRY
    """

    def __init__(
        self,
        composition: GuardComposition,
        rate_limiter: Optional[RateLimiter] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        retrier: Optional[Retrier] = None,
    ):
        if (
            composition == GuardComposition.RATE_LIMIT_THEN_CIRCUIT
            and retrier is not None
        ):
            raise ValueError(
                "A retrier is not part of the rate_limit_then_circuit composition"
            )
        if (
            composition == GuardComposition.CIRCUIT_AROUND_RETRY
            and rate_limiter is not None
        ):
            raise ValueError(
                "A rate limiter is not part of the circuit_around_retry composition"
            )

        self.composition = composition
        self.rate_limiter = rate_limiter
        self.circuit_breaker = circuit_breaker
        self.retrier = retrier

    @property
    def is_passthrough(self) -> bool:
        """True when no protection is configured."""
        return (
            self.rate_limiter is None
            and self.circuit_breaker is None
            and self.retrier is None
        )

    def call(self, func: Callable, *args, **kwargs) -> Any:
        """Run ``func`` through the configured protections.

        Raises:
            RateLimitExceededError: No permit (composition A)
            CircuitBreakerOpenError: Circuit is open
            Exception: Whatever ``func`` raised, after retries if any
        """
        if self.composition == GuardComposition.RATE_LIMIT_THEN_CIRCUIT:
            if self.rate_limiter is not None:
                self.rate_limiter.acquire()
            if self.circuit_breaker is not None:
                return self.circuit_breaker.call(func, *args, **kwargs)
            return func(*args, **kwargs)

        if self.retrier is not None:
            retrier = self.retrier

            def attempt_sequence():
                return retrier.call(func, *args, **kwargs)

        else:

            def attempt_sequence():
                return func(*args, **kwargs)

        if self.circuit_breaker is not None:
            return self.circuit_breaker.call(attempt_sequence)
        return attempt_sequence()

    def get_stats(self) -> dict:
        """Stats of every configured protection, keyed by kind."""
        stats: dict = {"composition": self.composition.value}
        if self.rate_limiter is not None:
            stats["rate_limiter"] = self.rate_limiter.get_stats()
        if self.circuit_breaker is not None:
            stats["circuit_breaker"] = self.circuit_breaker.get_stats()
        if self.retrier is not None:
            stats["retrier"] = self.retrier.get_stats()
        return stats


def rate_limited_circuit(
    rate_limiter: Optional[RateLimiter] = None,
    circuit_breaker: Optional[CircuitBreaker] = None,
) -> ResilienceGuard:
    """Build composition A: rate limiter first, then circuit breaker."""
    return ResilienceGuard(
        GuardComposition.RATE_LIMIT_THEN_CIRCUIT,
        rate_limiter=rate_limiter,
        circuit_breaker=circuit_breaker,
    )


def circuit_guarded_retry(
    circuit_breaker: Optional[CircuitBreaker] = None,
    retrier: Optional[Retrier] = None,
) -> ResilienceGuard:
    """Build composition B: circuit breaker around the whole retry sequence."""
    return ResilienceGuard(
        GuardComposition.CIRCUIT_AROUND_RETRY,
        circuit_breaker=circuit_breaker,
        retrier=retrier,
    )
