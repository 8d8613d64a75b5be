"""Infrastructure settings __init__ - exports all infrastructure settings."""

from infrastructure.configuration.infrastructure.resilience import (
    CircuitBreakerSettings,
    RateLimiterSettings,
    ResilienceSettings,
    RetrySettings,
)

__all__ = [
    "CircuitBreakerSettings",
    "RateLimiterSettings",
    "ResilienceSettings",
    "RetrySettings",
]
