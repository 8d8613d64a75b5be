"""Notification transport abstract base class.

All transport implementations (log, chat webhook, email) must implement this
interface. The dispatcher depends on nothing else.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from infrastructure.notifications.models import (
    Category,
    MessageContext,
    freeze_context,
)
from infrastructure.resilience.guard import ResilienceGuard


class NotificationTransport(ABC):
    """Abstract base class for notification transports.

    Each transport delivers a notification through one channel. ``send``
    validates the input, then runs ``send_raw`` through the transport's
    resilience guard, if it has one. Failures are raised, never swallowed;
    the dispatcher turns them into outcomes.

    Args:
        guard: Optional resilience guard. A guard without components is
            dropped and ``send_raw`` is called directly.

    Example Implementation:
        class ConsoleTransport(NotificationTransport):

            def send_raw(self, category, message, context):
                print(category.format("svc-a"), message)
    """

    def __init__(self, guard: Optional[ResilienceGuard] = None):
        if guard is not None and guard.is_passthrough:
            guard = None
        self._guard = guard

    @property
    def guard(self) -> Optional[ResilienceGuard]:
        return self._guard

    @property
    def transport_name(self) -> str:
        """Transport identity used in outcomes and logs.

        Returns:
            Concrete class name unless a subclass overrides it
        """
        return type(self).__name__

    def validate(
        self, category: Category, message: str, context: MessageContext
    ) -> None:
        """Reject input before the guard is consulted.

        Raises:
            ValueError: If the input cannot be delivered by this transport
        """
        if category is None:
            raise ValueError("Notification category cannot be None")

    def send(
        self,
        category: Category,
        message: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Validate and deliver a notification.

        Raises:
            ValueError: On invalid input (never retried, never counted by
                the circuit breaker)
            RateLimitExceededError: When the guard has no permit
            CircuitBreakerOpenError: When the guard's circuit is open
            Exception: Whatever the channel raised
        """
        frozen = freeze_context(context)
        self.validate(category, message, frozen)

        if self._guard is None:
            self.send_raw(category, message, frozen)
        else:
            self._guard.call(self.send_raw, category, message, frozen)

    @abstractmethod
    def send_raw(
        self, category: Category, message: str, context: MessageContext
    ) -> None:
        """Deliver the notification through the channel, unprotected."""
        pass
