"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from infrastructure.notifications.service import NotificationService
from infrastructure.resilience.service import ResilienceService


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process,
    even if called from multiple packages.

    Usage:
        from infrastructure.services import get_settings
        settings = get_settings()

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_resilience_service() -> ResilienceService:
    """
    Get application-scoped resilience service singleton.

    Guard state (breaker state, permits, retry counters) lives as long as the
    process, so every caller must share this one instance.

    Returns:
        ResilienceService: Cached service configured from application settings.
    """
    return ResilienceService(get_settings().resilience)


@lru_cache
def get_notification_service() -> NotificationService:
    """
    Get application-scoped notification service singleton.

    Usage:
        from infrastructure.services import get_notification_service

        notifications = get_notification_service()
        notifications.send(EXPORT_FAILED, "Nightly export did not finish")

    Returns:
        NotificationService: Cached service with the default transports wired
            from application settings.
    """
    return NotificationService(
        get_settings(), resilience_service=get_resilience_service()
    )
