"""Resilience infrastructure settings.

Default budgets for the per-transport protections: rate limiter, circuit
breaker and retrier. Every transport gets its own instances built from these
defaults; the values are shared, the state is not.
"""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class RateLimiterSettings(InfrastructureSettings):
    """Token bucket rate limiter defaults.

    Environment Variables:
        RATE_LIMIT_PERMITS: Permits granted per refresh period (default: 20)
        RATE_LIMIT_PERIOD_SECONDS: Length of the refresh period (default: 1.0)
        RATE_LIMIT_TIMEOUT_SECONDS: Max time to wait for a permit, 0 fails fast
            (default: 0.0)

    Example:
        ```python
        from infrastructure.configuration import settings

        permits = settings.resilience.rate_limiter.limit_for_period
        ```
    """

    limit_for_period: int = Field(
        default=20,
        alias="RATE_LIMIT_PERMITS",
        ge=1,
        description="Permits granted per refresh period",
    )
    refresh_period_seconds: float = Field(
        default=1.0,
        alias="RATE_LIMIT_PERIOD_SECONDS",
        gt=0,
        description="Refresh period for the permit bucket (seconds)",
    )
    timeout_seconds: float = Field(
        default=0.0,
        alias="RATE_LIMIT_TIMEOUT_SECONDS",
        ge=0,
        description="Maximum wait for a permit before rejecting (seconds)",
    )


class CircuitBreakerSettings(InfrastructureSettings):
    """Circuit breaker defaults.

    Environment Variables:
        CIRCUIT_BREAKER_FAILURE_THRESHOLD: Consecutive failures before opening
            (default: 5)
        CIRCUIT_BREAKER_TIMEOUT_SECONDS: Seconds to stay OPEN before a trial call
            (default: 60)
        CIRCUIT_BREAKER_HALF_OPEN_MAX_CALLS: Concurrent trial calls in HALF_OPEN
            (default: 3)
    """

    failure_threshold: int = Field(
        default=5,
        alias="CIRCUIT_BREAKER_FAILURE_THRESHOLD",
        ge=1,
        description="Consecutive failures before the circuit opens",
    )
    timeout_seconds: float = Field(
        default=60,
        alias="CIRCUIT_BREAKER_TIMEOUT_SECONDS",
        gt=0,
        description="Seconds the circuit stays OPEN before HALF_OPEN",
    )
    half_open_max_calls: int = Field(
        default=3,
        alias="CIRCUIT_BREAKER_HALF_OPEN_MAX_CALLS",
        ge=1,
        description="Max concurrent trial calls while HALF_OPEN",
    )


class RetrySettings(InfrastructureSettings):
    """Retry defaults for transient delivery failures.

    Environment Variables:
        RETRY_MAX_ATTEMPTS: Total attempts including the first one (default: 3)
        RETRY_WAIT_SECONDS: Wait before the first retry (default: 0.5)
        RETRY_BACKOFF_MULTIPLIER: Multiplier applied to the wait after each
            retry, 1.0 keeps a fixed interval (default: 2.0)
        RETRY_MAX_WAIT_SECONDS: Upper bound for a single wait (default: 5.0)

    Backoff:
        Delay calculation: min(wait * (multiplier ^ (attempt - 1)), max_wait)

        Example with defaults (wait=0.5s, multiplier=2, max=5s):
            Retry 1: 0.5s
            Retry 2: 1.0s
    """

    max_attempts: int = Field(
        default=3,
        alias="RETRY_MAX_ATTEMPTS",
        ge=1,
        description="Maximum attempts per delivery, first call included",
    )
    wait_seconds: float = Field(
        default=0.5,
        alias="RETRY_WAIT_SECONDS",
        ge=0,
        description="Wait before the first retry (seconds)",
    )
    backoff_multiplier: float = Field(
        default=2.0,
        alias="RETRY_BACKOFF_MULTIPLIER",
        ge=1.0,
        description="Exponential backoff multiplier",
    )
    max_wait_seconds: float = Field(
        default=5.0,
        alias="RETRY_MAX_WAIT_SECONDS",
        ge=0,
        description="Cap for a single backoff wait (seconds)",
    )


class ResilienceSettings(InfrastructureSettings):
    """Aggregates the rate limiter, circuit breaker and retry defaults.

    Example:
        ```python
        from infrastructure.configuration import settings

        threshold = settings.resilience.circuit_breaker.failure_threshold
        attempts = settings.resilience.retry.max_attempts
        ```
    """

    rate_limiter: RateLimiterSettings
    circuit_breaker: CircuitBreakerSettings
    retry: RetrySettings

    def __init__(self, **kwargs):
        settings_map = {
            "rate_limiter": RateLimiterSettings,
            "circuit_breaker": CircuitBreakerSettings,
            "retry": RetrySettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)
