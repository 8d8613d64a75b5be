"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the notifier
using Pydantic BaseSettings with domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    NotificationSettings, ResilienceSettings, SlackSettings, EmailSettings:
        Section classes (for testing)

Example:
    ```python
    from infrastructure.configuration import settings

    originator = settings.originator
    max_attempts = settings.resilience.retry.max_attempts

    if settings.slack.is_configured:
        # Wire the chat transport...
    ```
"""

from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.features import NotificationSettings
from infrastructure.configuration.infrastructure import (
    CircuitBreakerSettings,
    RateLimiterSettings,
    ResilienceSettings,
    RetrySettings,
)
from infrastructure.configuration.integrations import EmailSettings, SlackSettings

__all__ = [
    "settings",
    "Settings",
    "NotificationSettings",
    "ResilienceSettings",
    "RateLimiterSettings",
    "CircuitBreakerSettings",
    "RetrySettings",
    "SlackSettings",
    "EmailSettings",
]
