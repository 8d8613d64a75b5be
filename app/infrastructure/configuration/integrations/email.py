"""Email (SMTP relay) integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class EmailSettings(IntegrationSettings):
    """SMTP relay and notification email configuration.

    Environment Variables:
        SMTP_HOST: Relay host (email transport disabled if empty)
        SMTP_PORT: Relay port (default: 587)
        SMTP_USER: Optional login user
        SMTP_PASSWORD: Optional login password
        SMTP_USE_TLS: Issue STARTTLS after connecting (default: True)
        SMTP_USE_SSL: Connect with implicit TLS, port 465 usually (default: False)
        SMTP_TIMEOUT_SECONDS: Socket timeout for the relay (default: 30)
        EMAIL_FROM: 'From' address
        EMAIL_TO: Comma-separated 'To' addresses
        EMAIL_TEMPLATE: Template name rendered for every notification
        EMAIL_TEMPLATE_DIR: Directory holding templates (default: bundled)
    """

    SMTP_HOST: str = Field(default="", alias="SMTP_HOST")
    SMTP_PORT: int = Field(default=587, alias="SMTP_PORT")
    SMTP_USER: str | None = Field(default=None, alias="SMTP_USER")
    SMTP_PASSWORD: str | None = Field(default=None, alias="SMTP_PASSWORD")
    SMTP_USE_TLS: bool = Field(default=True, alias="SMTP_USE_TLS")
    SMTP_USE_SSL: bool = Field(default=False, alias="SMTP_USE_SSL")
    SMTP_TIMEOUT_SECONDS: int = Field(default=30, alias="SMTP_TIMEOUT_SECONDS", ge=1)
    EMAIL_FROM: str = Field(default="", alias="EMAIL_FROM")
    EMAIL_TO: str = Field(default="", alias="EMAIL_TO")
    EMAIL_TEMPLATE: str = Field(default="notification.html", alias="EMAIL_TEMPLATE")
    EMAIL_TEMPLATE_DIR: str | None = Field(default=None, alias="EMAIL_TEMPLATE_DIR")

    @property
    def is_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.EMAIL_FROM and self.EMAIL_TO)
