"""Slack chat webhook integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class SlackSettings(IntegrationSettings):
    """Slack incoming webhook configuration.

    The webhook URL embeds a secret token and must never be logged; the
    service name is what shows up in logs instead.

    Environment Variables:
        SLACK_WEBHOOK_URL: Incoming webhook URL (chat transport disabled if empty)
        SLACK_SERVICE_NAME: Name used for this webhook in logs
        SLACK_TIMEOUT_SECONDS: HTTP timeout for a single webhook call

    Example:
        ```python
        from infrastructure.configuration import settings

        if settings.slack.is_configured:
            url = settings.slack.SLACK_WEBHOOK_URL
        ```
    """

    SLACK_WEBHOOK_URL: str = Field(default="", alias="SLACK_WEBHOOK_URL")
    SLACK_SERVICE_NAME: str = Field(default="alerts", alias="SLACK_SERVICE_NAME")
    SLACK_TIMEOUT_SECONDS: int = Field(default=10, alias="SLACK_TIMEOUT_SECONDS", ge=1)

    @property
    def is_configured(self) -> bool:
        return bool(self.SLACK_WEBHOOK_URL)
