"""Email integration: SMTP sending and Jinja2 templates."""

from integrations.email.service import (
    EmailService,
    SmtpEmailService,
    create_html_message,
    parse_recipients,
)
from integrations.email.templates import JinjaTemplateRenderer

__all__ = [
    "EmailService",
    "SmtpEmailService",
    "create_html_message",
    "parse_recipients",
    "JinjaTemplateRenderer",
]
