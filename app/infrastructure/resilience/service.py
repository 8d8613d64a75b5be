"""Resilience service for dependency injection.

Provides a class-based interface to circuit breakers, rate limiters and
retriers, and builds the per-transport guards out of them.
"""

from typing import Any, Dict, Optional, TYPE_CHECKING

import structlog
from infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitState,
)
from infrastructure.resilience.guard import (
    GuardComposition,
    ResilienceGuard,
    circuit_guarded_retry,
    rate_limited_circuit,
)
from infrastructure.resilience.rate_limiter import RateLimiter
from infrastructure.resilience.retry import Retrier

if TYPE_CHECKING:
    from infrastructure.configuration.infrastructure.resilience import (
        ResilienceSettings,
    )

logger = structlog.get_logger()


def _or_default(value, default):
    """Explicit value if given (zero included), the settings default otherwise."""
    return value if value is not None else default


class ResilienceService:
    """Class-based resilience service.

    Keeps one registry per component kind, keyed by name (typically the
    transport name), so each transport owns its own breaker, limiter and
    retrier. Defaults for new components come from ``ResilienceSettings``.

    Usage:
        service = ResilienceService(settings.resilience)
        guard = service.build_guard(
            "chat", GuardComposition.CIRCUIT_AROUND_RETRY
        )
        guard.call(client.send_dict, payload)
    """

    def __init__(self, settings: Optional["ResilienceSettings"] = None):
        """Initialize resilience service.

        Args:
            settings: Resilience settings; defaults are loaded from the
                environment when omitted.
        """
        if settings is None:
            from infrastructure.configuration.infrastructure.resilience import (
                ResilienceSettings,
            )

            settings = ResilienceSettings()
        self._settings = settings
        self._circuit_breakers: Dict[str, CircuitBreaker] = {}
        self._rate_limiters: Dict[str, RateLimiter] = {}
        self._retriers: Dict[str, Retrier] = {}

    def create_circuit_breaker(
        self,
        name: str,
        failure_threshold: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
        half_open_max_calls: Optional[int] = None,
    ) -> CircuitBreaker:
        """Create and register a new circuit breaker.

        Args:
            name: Unique name for the circuit breaker
            failure_threshold: Consecutive failures before opening
            timeout_seconds: Seconds to wait before attempting recovery
            half_open_max_calls: Max trial calls in HALF_OPEN state

        Raises:
            ValueError: If circuit breaker with this name already exists
        """
        if name in self._circuit_breakers:
            raise ValueError(f"Circuit breaker '{name}' already exists")

        defaults = self._settings.circuit_breaker
        cb = CircuitBreaker(
            name=name,
            failure_threshold=_or_default(
                failure_threshold, defaults.failure_threshold
            ),
            timeout_seconds=_or_default(timeout_seconds, defaults.timeout_seconds),
            half_open_max_calls=_or_default(
                half_open_max_calls, defaults.half_open_max_calls
            ),
        )
        self._circuit_breakers[name] = cb

        logger.info(
            "circuit_breaker_created",
            name=name,
            failure_threshold=cb.failure_threshold,
            timeout_seconds=cb.timeout_seconds,
        )

        return cb

    def get_circuit_breaker(self, name: str) -> Optional[CircuitBreaker]:
        """Get a circuit breaker by name, or None if not found."""
        return self._circuit_breakers.get(name)

    def get_or_create_circuit_breaker(self, name: str, **kwargs) -> CircuitBreaker:
        """Get existing circuit breaker or create if not found.

        Keyword arguments are used only if a new breaker is created.
        """
        existing = self.get_circuit_breaker(name)
        if existing:
            return existing
        return self.create_circuit_breaker(name, **kwargs)

    def create_rate_limiter(
        self,
        name: str,
        limit_for_period: Optional[int] = None,
        refresh_period_seconds: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
    ) -> RateLimiter:
        """Create and register a new rate limiter.

        Raises:
            ValueError: If rate limiter with this name already exists
        """
        if name in self._rate_limiters:
            raise ValueError(f"Rate limiter '{name}' already exists")

        defaults = self._settings.rate_limiter
        limiter = RateLimiter(
            name=name,
            limit_for_period=_or_default(
                limit_for_period, defaults.limit_for_period
            ),
            refresh_period_seconds=_or_default(
                refresh_period_seconds, defaults.refresh_period_seconds
            ),
            timeout_seconds=_or_default(timeout_seconds, defaults.timeout_seconds),
        )
        self._rate_limiters[name] = limiter

        logger.info(
            "rate_limiter_created",
            name=name,
            limit_for_period=limiter.limit_for_period,
            refresh_period_seconds=limiter.refresh_period_seconds,
        )

        return limiter

    def get_rate_limiter(self, name: str) -> Optional[RateLimiter]:
        return self._rate_limiters.get(name)

    def get_or_create_rate_limiter(self, name: str, **kwargs) -> RateLimiter:
        existing = self.get_rate_limiter(name)
        if existing:
            return existing
        return self.create_rate_limiter(name, **kwargs)

    def create_retrier(
        self,
        name: str,
        max_attempts: Optional[int] = None,
        wait_seconds: Optional[float] = None,
        backoff_multiplier: Optional[float] = None,
        max_wait_seconds: Optional[float] = None,
    ) -> Retrier:
        """Create and register a new retrier.

        Raises:
            ValueError: If retrier with this name already exists
        """
        if name in self._retriers:
            raise ValueError(f"Retrier '{name}' already exists")

        defaults = self._settings.retry
        retrier = Retrier(
            name=name,
            max_attempts=_or_default(max_attempts, defaults.max_attempts),
            wait_seconds=_or_default(wait_seconds, defaults.wait_seconds),
            backoff_multiplier=_or_default(
                backoff_multiplier, defaults.backoff_multiplier
            ),
            max_wait_seconds=_or_default(
                max_wait_seconds, defaults.max_wait_seconds
            ),
        )
        self._retriers[name] = retrier

        logger.info(
            "retrier_created",
            name=name,
            max_attempts=retrier.max_attempts,
            wait_seconds=retrier.wait_seconds,
        )

        return retrier

    def get_retrier(self, name: str) -> Optional[Retrier]:
        return self._retriers.get(name)

    def get_or_create_retrier(self, name: str, **kwargs) -> Retrier:
        existing = self.get_retrier(name)
        if existing:
            return existing
        return self.create_retrier(name, **kwargs)

    def build_guard(
        self, name: str, composition: Optional[GuardComposition]
    ) -> ResilienceGuard:
        """Build the guard for one transport.

        Args:
            name: Transport name; components are registered under it
            composition: Nesting order, or None for a passthrough guard

        Returns:
            ResilienceGuard wired with this service's components
        """
        if composition is None:
            return rate_limited_circuit()

        if composition == GuardComposition.RATE_LIMIT_THEN_CIRCUIT:
            guard = rate_limited_circuit(
                rate_limiter=self.get_or_create_rate_limiter(name),
                circuit_breaker=self.get_or_create_circuit_breaker(name),
            )
        else:
            guard = circuit_guarded_retry(
                circuit_breaker=self.get_or_create_circuit_breaker(name),
                retrier=self.get_or_create_retrier(name),
            )

        logger.debug(
            "resilience_guard_built", name=name, composition=composition.value
        )
        return guard

    def get_all_circuit_breaker_stats(self) -> Dict[str, Dict[str, Any]]:
        """Get statistics for all registered circuit breakers."""
        return {name: cb.get_stats() for name, cb in self._circuit_breakers.items()}

    def get_all_stats(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        """Get statistics for every registered component, grouped by kind."""
        return {
            "circuit_breakers": self.get_all_circuit_breaker_stats(),
            "rate_limiters": {
                name: limiter.get_stats()
                for name, limiter in self._rate_limiters.items()
            },
            "retriers": {
                name: retrier.get_stats() for name, retrier in self._retriers.items()
            },
        }

    def get_open_circuit_breakers(self) -> list[str]:
        """Get list of circuit breakers that are currently OPEN."""
        return [
            name
            for name, cb in self._circuit_breakers.items()
            if cb.state == CircuitState.OPEN
        ]

    def reset_circuit_breaker(self, name: str) -> None:
        """Manually reset a circuit breaker.

        Raises:
            KeyError: If circuit breaker not found
        """
        cb = self._circuit_breakers.get(name)
        if not cb:
            raise KeyError(f"Circuit breaker '{name}' not found")

        cb.reset()

    def list_circuit_breakers(self) -> list[str]:
        """List all registered circuit breaker names."""
        return list(self._circuit_breakers.keys())
