"""Notification system core models.

Platform-agnostic models shared by the dispatcher and every transport.
Callers describe *what* happened (a Category plus a message); transports
decide how it is rendered on their channel.

Uses Pydantic BaseModel for:
- Runtime input validation (non-blank category descriptions)
- Immutability (categories are shared read-only across worker threads)
"""

from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from infrastructure.resilience.circuit_breaker import CircuitBreakerOpenError
from infrastructure.resilience.rate_limiter import RateLimitExceededError


class Severity(IntEnum):
    """Notification severity, ordered from least to most severe."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4


class Category(BaseModel):
    """Immutable notification category.

    Categories are typically declared once as module constants and reused
    for every notification of that kind.

    Attributes:
        severity: Severity of notifications in this category
        description: Short human-readable description (required, non-blank)

    Example:
        REMOTE_CALL_FAILED = Category(
            severity=Severity.ERROR, description="Remote call failed"
        )
        REMOTE_CALL_FAILED.format("svc-a")
        # "[error] svc-a - Remote call failed"
    """

    model_config = ConfigDict(frozen=True)

    severity: Severity
    description: str

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        """Ensure description is not blank."""
        if not v or not v.strip():
            raise ValueError("Category description cannot be blank")
        return v

    def format(self, originator: str) -> str:
        """Render ``[<severity>] <originator> - <description>``."""
        return f"[{self.severity.name.lower()}] {originator} - {self.description}"


MessageContext = Mapping[str, Any]


def freeze_context(context: Optional[Mapping[str, Any]]) -> MessageContext:
    """Return a read-only snapshot of a message context.

    Args:
        context: Caller's context mapping, or None for an empty context

    Returns:
        MappingProxyType over a shallow copy, preserving insertion order

    Raises:
        ValueError: If the context contains a None key
    """
    if not context:
        return MappingProxyType({})
    if any(key is None for key in context):
        raise ValueError("Message context keys cannot be None")
    return MappingProxyType(dict(context))


class OutcomeStatus(Enum):
    """Result of delivering one notification through one transport."""

    SENT = "sent"
    RATE_LIMITED = "rate_limited"
    CIRCUIT_OPEN = "circuit_open"
    FAILED = "failed"


class DeliveryOutcome(BaseModel):
    """Outcome of a single transport send within one dispatch.

    Attributes:
        transport: Transport identity (class name unless overridden)
        error: Exception raised by the transport, None on success
        elapsed_seconds: Wall time spent in the delivery task

    Example:
        outcome = DeliveryOutcome(transport="LogTransport")
        outcome.describe()  # "LogTransport[OK]"
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    transport: str
    error: Optional[Exception] = None
    elapsed_seconds: float = 0.0

    @property
    def is_success(self) -> bool:
        """Check if delivery was successful."""
        return self.error is None

    @property
    def status(self) -> OutcomeStatus:
        if self.error is None:
            return OutcomeStatus.SENT
        if isinstance(self.error, RateLimitExceededError):
            return OutcomeStatus.RATE_LIMITED
        if isinstance(self.error, CircuitBreakerOpenError):
            return OutcomeStatus.CIRCUIT_OPEN
        return OutcomeStatus.FAILED

    def describe(self) -> str:
        """Render ``<transport>[OK]`` or ``<transport>[ERROR: <message>]``."""
        if self.error is None:
            return f"{self.transport}[OK]"
        message = str(self.error) or type(self.error).__name__
        return f"{self.transport}[ERROR: {message}]"


class DispatchReport(BaseModel):
    """All outcomes of one dispatch, in transport registration order."""

    model_config = ConfigDict(frozen=True)

    outcomes: Tuple[DeliveryOutcome, ...]

    @property
    def success_count(self) -> int:
        return sum(1 for o in self.outcomes if o.is_success)

    @property
    def failure_count(self) -> int:
        return len(self.outcomes) - self.success_count

    @property
    def delivered(self) -> bool:
        """True if at least one transport delivered the notification."""
        return self.success_count > 0

    @property
    def all_failed(self) -> bool:
        return self.success_count == 0

    def summary(self) -> str:
        """Outcome descriptions joined by ``", "``."""
        return ", ".join(o.describe() for o in self.outcomes)
