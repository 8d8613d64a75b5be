"""
Dependency injection services.

Provides application-scoped provider functions for the notifier.
"""

from infrastructure.services.providers import (
    get_notification_service,
    get_resilience_service,
    get_settings,
)

__all__ = [
    "get_notification_service",
    "get_resilience_service",
    "get_settings",
]
