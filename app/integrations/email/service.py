"""Email services for HTML notifications.

``EmailService`` is the interface transports depend on; ``SmtpEmailService``
sends through an SMTP relay and renders bodies with a Jinja2 template
renderer.
"""

import smtplib
import ssl
from abc import ABC, abstractmethod
from email.message import EmailMessage
from typing import Any, Mapping, Optional

from infrastructure.logging import get_module_logger
from integrations.email.templates import JinjaTemplateRenderer

logger = get_module_logger()


class EmailService(ABC):
    """Sends HTML emails."""

    @abstractmethod
    def send_html(self, sender: str, to: str, subject: str, body: str) -> None:
        """Send an HTML email.

        Args:
            sender: 'From' address
            to: Comma-separated 'To' addresses
            subject: Subject line
            body: HTML body
        """
        pass

    @abstractmethod
    def send_html_with_template(
        self,
        sender: str,
        to: str,
        subject: str,
        template_name: str,
        context: Mapping[str, Any],
    ) -> None:
        """Render a template and send the result as an HTML email."""
        pass


def parse_recipients(to: str) -> list[str]:
    """Split a comma-separated address list, trimming whitespace."""
    return [r.strip() for r in (to or "").split(",") if r.strip()]


def create_html_message(sender: str, to: str, subject: str, body: str) -> EmailMessage:
    """Create a multipart message with a plain text fallback and an HTML part.

    Raises:
        ValueError: If the sender or recipients are missing, or a header value
            is invalid
    """
    recipients = parse_recipients(to)
    if not sender or not sender.strip():
        raise ValueError("Email sender cannot be blank")
    if not recipients:
        raise ValueError("Email recipients cannot be blank")

    email = EmailMessage()
    try:
        email["Subject"] = subject
        email["From"] = sender
        email["To"] = ", ".join(recipients)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid email header: {e}") from e
    email.set_content(subject or "")
    email.add_alternative(body or "", subtype="html")
    return email


class SmtpEmailService(EmailService):
    """SMTP-backed email service.

    Args:
        host: SMTP relay host
        port: SMTP relay port
        user: Optional login user
        password: Optional login password
        use_tls: Issue STARTTLS after connecting (ignored with use_ssl)
        use_ssl: Connect with implicit TLS
        timeout_seconds: Socket timeout for the relay
        renderer: Template renderer (default: bundled templates)
        verbose: Log email bodies (may contain sensitive content)

    Example:
        service = SmtpEmailService("smtp.example.com", user="bot", password="...")
        service.send_html_with_template(
            "bot@example.com",
            "oncall@example.com",
            "[error] billing - Export failed",
            "notification.html",
            {"title": "...", "message": "...", "context": {}},
        )
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        user: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        use_ssl: bool = False,
        timeout_seconds: int = 30,
        renderer: Optional[JinjaTemplateRenderer] = None,
        verbose: bool = False,
    ):
        if not host or not host.strip():
            raise ValueError("SMTP host cannot be blank")

        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.use_ssl = use_ssl
        self.timeout_seconds = timeout_seconds
        self.renderer = renderer or JinjaTemplateRenderer()
        self.verbose = verbose

    def send_html(self, sender: str, to: str, subject: str, body: str) -> None:
        email = create_html_message(sender, to, subject, body)

        if self.verbose:
            logger.debug("email_sending", to=email["To"], subject=subject, body=body)
        else:
            logger.info("email_sending", to=email["To"], subject=subject)

        if self.use_ssl:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(
                self.host, self.port, timeout=self.timeout_seconds, context=context
            ) as server:
                self._maybe_login(server)
                server.send_message(email)
        else:
            with smtplib.SMTP(
                self.host, self.port, timeout=self.timeout_seconds
            ) as server:
                if self.use_tls:
                    server.starttls(context=ssl.create_default_context())
                self._maybe_login(server)
                server.send_message(email)

    def send_html_with_template(
        self,
        sender: str,
        to: str,
        subject: str,
        template_name: str,
        context: Mapping[str, Any],
    ) -> None:
        body = self.renderer.render(template_name, context)
        self.send_html(sender, to, subject, body)

    def _maybe_login(self, server: smtplib.SMTP) -> None:
        if self.user and self.password:
            server.login(self.user, self.password)
