"""Resilience patterns and implementations.

This module contains the protections applied around transport sends: circuit
breakers, rate limiters, retriers and the guards that compose them.
"""

from infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerOpenError,
    CircuitState,
)
from infrastructure.resilience.guard import (
    GuardComposition,
    ResilienceGuard,
    circuit_guarded_retry,
    rate_limited_circuit,
)
from infrastructure.resilience.rate_limiter import (
    RateLimiter,
    RateLimitExceededError,
)
from infrastructure.resilience.retry import Retrier, RetryEvent
from infrastructure.resilience.service import ResilienceService

__all__ = [
    # Circuit Breaker
    "CircuitBreaker",
    "CircuitBreakerOpenError",
    "CircuitState",
    # Rate Limiter
    "RateLimiter",
    "RateLimitExceededError",
    # Retry
    "Retrier",
    "RetryEvent",
    # Guards
    "GuardComposition",
    "ResilienceGuard",
    "circuit_guarded_retry",
    "rate_limited_circuit",
    # Service
    "ResilienceService",
]
