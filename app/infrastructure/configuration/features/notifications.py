"""Notification dispatch feature settings."""

from typing import Literal

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings

GuardName = Literal["none", "rate_limit_then_circuit", "circuit_around_retry"]


class NotificationSettings(FeatureSettings):
    """Notification dispatcher configuration.

    Environment Variables:
        NOTIFICATION_ORIGINATOR: Originator shown in titles (default: APP_NAME)
        NOTIFICATION_VERBOSE: Log message bodies and payloads (default: False).
            Message bodies may be sensitive; keep disabled in production.
        NOTIFICATION_MAX_WORKERS: Upper bound on concurrent deliveries per send
            (default: one worker per transport)
        NOTIFICATION_LOG_GUARD: Guard composition for the log transport
        NOTIFICATION_CHAT_GUARD: Guard composition for the chat transport
        NOTIFICATION_EMAIL_GUARD: Guard composition for the email transport

    Guard compositions:
        - none: raw send, no protection
        - rate_limit_then_circuit: rate limiter first, then circuit breaker
        - circuit_around_retry: circuit breaker around the whole retry sequence
    """

    originator: str | None = Field(default=None, alias="NOTIFICATION_ORIGINATOR")
    verbose: bool = Field(default=False, alias="NOTIFICATION_VERBOSE")
    max_workers: int | None = Field(
        default=None, alias="NOTIFICATION_MAX_WORKERS", ge=1
    )
    log_guard: GuardName = Field(default="none", alias="NOTIFICATION_LOG_GUARD")
    chat_guard: GuardName = Field(
        default="circuit_around_retry", alias="NOTIFICATION_CHAT_GUARD"
    )
    email_guard: GuardName = Field(
        default="rate_limit_then_circuit", alias="NOTIFICATION_EMAIL_GUARD"
    )
