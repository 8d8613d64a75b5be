"""Notifier configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Integration settings
from infrastructure.configuration.integrations import (
    EmailSettings,
    SlackSettings,
)

# Feature settings
from infrastructure.configuration.features import NotificationSettings

# Infrastructure settings
from infrastructure.configuration.infrastructure import ResilienceSettings


class Settings(BaseSettings):
    """Notifier configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object.
    Settings are organized by concern:

    - **Integrations**: Delivery collaborators (Slack webhook, SMTP relay)
    - **Features**: Notification dispatch behavior
    - **Infrastructure**: Resilience defaults (rate limiter, circuit breaker, retry)

    Environment Variables:
        PREFIX: Environment prefix for non-production deployments
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        APP_NAME: Application name, used as the default notification originator

    Example:
        ```python
        from infrastructure.configuration import settings

        webhook_configured = settings.slack.is_configured
        threshold = settings.resilience.circuit_breaker.failure_threshold

        if settings.is_production:
            # Production-specific logic...
        ```
    """

    # Application-level settings
    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    APP_NAME: str = "notifier"

    # Integration settings
    slack: SlackSettings
    email: EmailSettings

    # Feature settings
    notifications: NotificationSettings

    # Infrastructure settings
    resilience: ResilienceSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    @property
    def originator(self) -> str:
        """Originator shown in notification titles."""
        return self.notifications.originator or self.APP_NAME

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            # Integrations
            "slack": SlackSettings,
            "email": EmailSettings,
            # Features
            "notifications": NotificationSettings,
            # Infrastructure
            "resilience": ResilienceSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the singleton settings instance
settings = Settings()
