"""Notification service for dependency injection.

Provides a class-based interface to the notification system for easier DI
and testing, and wires the default transports from settings.
"""

from typing import Any, Dict, Mapping, Optional, Sequence, TYPE_CHECKING

import structlog
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.models import Category, DispatchReport
from infrastructure.notifications.transports.base import NotificationTransport
from infrastructure.resilience.guard import GuardComposition, ResilienceGuard
from infrastructure.resilience.service import ResilienceService

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = structlog.get_logger()


def parse_guard_composition(name: str) -> Optional[GuardComposition]:
    """Map a configured guard name to a composition, ``none`` to None."""
    if name == "none":
        return None
    return GuardComposition(name)


class NotificationService:
    """Class-based notification service.

    Wraps the NotificationDispatcher with a service interface to support
    dependency injection and easier testing with mocks.

    This is a thin facade - all actual work is delegated to the underlying
    NotificationDispatcher instance.

    Default wiring (when neither transports nor a dispatcher are given):
    - LogTransport, always
    - ChatWebhookTransport, when SLACK_WEBHOOK_URL is set
    - EmailTransport, when SMTP_HOST, EMAIL_FROM and EMAIL_TO are set

    Each transport gets the guard composition named in the notification
    settings, built by the resilience service.

    Usage:
        from infrastructure.configuration import settings
        from infrastructure.notifications import NotificationService

        service = NotificationService(settings)
        delivered = service.send(DEPLOY_FAILED, "Rollout halted", cause=exc)
    """

    def __init__(
        self,
        settings: "Settings",
        transports: Optional[Sequence[NotificationTransport]] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
        resilience_service: Optional[ResilienceService] = None,
    ):
        """Initialize notification service.

        Args:
            settings: Settings instance (required, passed from provider).
            transports: Optional transports. If not provided, creates default
                transports based on settings.
            dispatcher: Optional pre-configured NotificationDispatcher instance.
                If not provided, creates one with the transports.
            resilience_service: Optional ResilienceService building the guards.
                If not provided, creates one from settings.
        """
        self._settings = settings
        self._resilience_service = resilience_service or ResilienceService(
            settings.resilience
        )

        if dispatcher is None:
            if transports is None:
                transports = self._create_default_transports()

            dispatcher = NotificationDispatcher(
                transports,
                verbose=settings.notifications.verbose,
                max_workers=settings.notifications.max_workers,
            )

        self._dispatcher = dispatcher

    def _build_guard(self, name: str, composition_name: str) -> ResilienceGuard:
        return self._resilience_service.build_guard(
            name, parse_guard_composition(composition_name)
        )

    def _create_default_transports(self) -> list[NotificationTransport]:
        # Import here to avoid circular dependency at module level
        from infrastructure.notifications.transports.chat import ChatWebhookTransport
        from infrastructure.notifications.transports.email import EmailTransport
        from infrastructure.notifications.transports.log import LogTransport

        settings = self._settings
        notifications = settings.notifications
        originator = settings.originator

        transports: list[NotificationTransport] = [
            LogTransport(guard=self._build_guard("log", notifications.log_guard))
        ]

        if settings.slack.is_configured:
            from integrations.slack.webhook import SlackWebhookService

            webhook_service = SlackWebhookService(
                service_name=settings.slack.SLACK_SERVICE_NAME,
                webhook_url=settings.slack.SLACK_WEBHOOK_URL,
                timeout_seconds=settings.slack.SLACK_TIMEOUT_SECONDS,
                verbose=notifications.verbose,
            )
            transports.append(
                ChatWebhookTransport(
                    webhook_service=webhook_service,
                    originator=originator,
                    guard=self._build_guard("chat", notifications.chat_guard),
                )
            )

        email = settings.email
        if email.is_configured:
            from integrations.email.service import SmtpEmailService
            from integrations.email.templates import JinjaTemplateRenderer

            email_service = SmtpEmailService(
                host=email.SMTP_HOST,
                port=email.SMTP_PORT,
                user=email.SMTP_USER,
                password=email.SMTP_PASSWORD,
                use_tls=email.SMTP_USE_TLS,
                use_ssl=email.SMTP_USE_SSL,
                timeout_seconds=email.SMTP_TIMEOUT_SECONDS,
                renderer=JinjaTemplateRenderer(email.EMAIL_TEMPLATE_DIR),
                verbose=notifications.verbose,
            )
            transports.append(
                EmailTransport(
                    email_service=email_service,
                    originator=originator,
                    sender=email.EMAIL_FROM,
                    to=email.EMAIL_TO,
                    template_name=email.EMAIL_TEMPLATE,
                    guard=self._build_guard("email", notifications.email_guard),
                )
            )

        logger.info(
            "notification_transports_configured",
            transports=[t.transport_name for t in transports],
        )
        return transports

    def send(
        self,
        category: Category,
        message: str,
        context: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> bool:
        """Send a notification through every transport.

        Returns:
            True if at least one transport delivered the notification
        """
        return self._dispatcher.send(category, message, context=context, cause=cause)

    def dispatch(
        self,
        category: Category,
        message: str,
        context: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> DispatchReport:
        """Send a notification and return the per-transport outcomes."""
        return self._dispatcher.dispatch(
            category, message, context=context, cause=cause
        )

    @property
    def transports(self) -> tuple[NotificationTransport, ...]:
        return self._dispatcher.transports

    @property
    def dispatcher(self) -> NotificationDispatcher:
        """Access underlying NotificationDispatcher instance."""
        return self._dispatcher

    def get_resilience_stats(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        """Statistics of every guard component, grouped by kind."""
        return self._resilience_service.get_all_stats()
