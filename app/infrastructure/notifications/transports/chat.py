"""Chat transport implementation using a Slack incoming webhook."""

from typing import Optional, TYPE_CHECKING

from infrastructure.notifications.formatting import format_context_json
from infrastructure.notifications.models import Category, MessageContext, Severity
from infrastructure.notifications.transports.base import NotificationTransport
from infrastructure.resilience.guard import ResilienceGuard

if TYPE_CHECKING:
    from integrations.slack.webhook import SlackWebhookService

SEVERITY_EMOJI = {
    Severity.ERROR: ":exclamation:",
    Severity.WARN: ":warning:",
}
DEFAULT_EMOJI = ":information_source:"


class ChatWebhookTransport(NotificationTransport):
    """Posts notifications to a chat channel as a header plus markdown section.

    Args:
        webhook_service: Webhook client used to post messages
        originator: Name of the notifying system, shown in the title
        guard: Optional resilience guard

    Example:
        transport = ChatWebhookTransport(
            webhook_service=SlackWebhookService("alerts", url),
            originator="billing-api",
            guard=circuit_guarded_retry(CircuitBreaker("chat"), Retrier("chat")),
        )
    """

    def __init__(
        self,
        webhook_service: "SlackWebhookService",
        originator: str,
        guard: Optional[ResilienceGuard] = None,
    ):
        if webhook_service is None:
            raise ValueError("Chat webhook service is required")
        if not originator or not originator.strip():
            raise ValueError("Originator cannot be blank")

        super().__init__(guard)
        self.webhook_service = webhook_service
        self.originator = originator

    def validate(
        self, category: Category, message: str, context: MessageContext
    ) -> None:
        super().validate(category, message, context)
        if not message or not message.strip():
            raise ValueError("Chat message cannot be blank")

    def build_title(self, category: Category) -> str:
        emoji = SEVERITY_EMOJI.get(category.severity, DEFAULT_EMOJI)
        return f"{emoji} {category.format(self.originator)}"

    def build_text(self, message: str, context: MessageContext) -> str:
        if not context:
            return message
        return f"{message}\n```\n{format_context_json(context)}\n```"

    def send_raw(
        self, category: Category, message: str, context: MessageContext
    ) -> None:
        self.webhook_service.send_markdown(
            self.build_title(category), self.build_text(message, context)
        )
