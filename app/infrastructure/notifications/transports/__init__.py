"""Notification transport implementations."""

from infrastructure.notifications.transports.base import NotificationTransport
from infrastructure.notifications.transports.chat import ChatWebhookTransport
from infrastructure.notifications.transports.email import EmailTransport
from infrastructure.notifications.transports.log import LogTransport

__all__ = [
    "NotificationTransport",
    "ChatWebhookTransport",
    "EmailTransport",
    "LogTransport",
]
