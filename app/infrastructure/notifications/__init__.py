"""Centralized notification dispatcher.

Provides multi-transport notification delivery (application log, Slack
webhook, email) with:
- Concurrent fan-out to every transport
- Per-transport resilience guards (rate limiter, circuit breaker, retrier)
- Failure isolation: delivery errors never reach the caller
- One aggregate log entry per notification

Usage:
    from infrastructure.notifications import (
        Category,
        LogTransport,
        NotificationDispatcher,
        Severity,
    )

    EXPORT_FAILED = Category(severity=Severity.ERROR, description="Export failed")

    dispatcher = NotificationDispatcher([LogTransport(), chat_transport])
    delivered = dispatcher.send(
        EXPORT_FAILED,
        "Nightly export did not finish",
        context={"job_id": "42"},
    )
"""

# Models
from infrastructure.notifications.models import (
    Category,
    DeliveryOutcome,
    DispatchReport,
    OutcomeStatus,
    Severity,
    freeze_context,
)

# Dispatcher
from infrastructure.notifications.dispatcher import NotificationDispatcher

# Transport interface
from infrastructure.notifications.transports.base import NotificationTransport

# Transport implementations
from infrastructure.notifications.transports.chat import ChatWebhookTransport
from infrastructure.notifications.transports.email import EmailTransport
from infrastructure.notifications.transports.log import LogTransport

# Service
from infrastructure.notifications.service import NotificationService

# Export all public interfaces
__all__ = [
    # Models
    "Category",
    "DeliveryOutcome",
    "DispatchReport",
    "OutcomeStatus",
    "Severity",
    "freeze_context",
    # Dispatcher
    "NotificationDispatcher",
    # Transport interface
    "NotificationTransport",
    # Transport implementations
    "ChatWebhookTransport",
    "EmailTransport",
    "LogTransport",
    # Service
    "NotificationService",
]
