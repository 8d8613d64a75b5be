"""Email transport implementation using a templated HTML email service."""

from typing import Optional, TYPE_CHECKING

from infrastructure.notifications.formatting import stringify_context
from infrastructure.notifications.models import Category, MessageContext
from infrastructure.notifications.transports.base import NotificationTransport
from infrastructure.resilience.guard import ResilienceGuard

if TYPE_CHECKING:
    from integrations.email.service import EmailService


class EmailTransport(NotificationTransport):
    """Sends notifications as HTML emails rendered from a template.

    The template receives the caller's context entries plus three reserved
    keys: ``title`` (formatted category), ``message`` and ``context`` (all
    context values as strings).

    Args:
        email_service: Service that renders and sends the email
        originator: Name of the notifying system, shown in the subject
        sender: 'From' address
        to: Comma-separated 'To' addresses
        template_name: Template rendered for every notification
        guard: Optional resilience guard
    """

    def __init__(
        self,
        email_service: "EmailService",
        originator: str,
        sender: str,
        to: str,
        template_name: str,
        guard: Optional[ResilienceGuard] = None,
    ):
        if email_service is None:
            raise ValueError("Email service is required")
        for field, value in (
            ("Originator", originator),
            ("Sender", sender),
            ("Recipients", to),
            ("Template name", template_name),
        ):
            if not value or not value.strip():
                raise ValueError(f"{field} cannot be blank")

        super().__init__(guard)
        self.email_service = email_service
        self.originator = originator
        self.sender = sender
        self.to = to
        self.template_name = template_name

    def send_raw(
        self, category: Category, message: str, context: MessageContext
    ) -> None:
        title = category.format(self.originator)

        template_context = dict(context)
        template_context["title"] = title
        template_context["message"] = message
        template_context["context"] = stringify_context(context)

        self.email_service.send_html_with_template(
            self.sender, self.to, title, self.template_name, template_context
        )
