"""Slack incoming webhook client.

A lightweight client for posting messages to one Slack channel through an
incoming webhook. Each instance wraps one webhook URL; the URL embeds a
secret token, so logs only ever name the service.

Resilience (retries, circuit breaking, rate limiting) is not applied here;
callers wrap ``send`` in a resilience guard.
"""

import json
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from slack_sdk.webhook import WebhookClient

from infrastructure.logging import get_module_logger

logger = get_module_logger()

# Slack refuses section blocks whose text is longer than this
MAX_SECTION_TEXT_LENGTH = 3000


class SlackWebhookError(Exception):
    """Raised when Slack answers a webhook call with a non-200 status."""

    def __init__(self, service_name: str, status_code: int, body: str = ""):
        self.service_name = service_name
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"Slack webhook '{service_name}' returned HTTP {status_code}: {body}"
        )


def create_header_block(title: str) -> Dict:
    """Create a header block with plain text and emoji support."""
    return {
        "type": "header",
        "text": {"type": "plain_text", "text": title, "emoji": True},
    }


def create_section_block(text: str) -> Dict:
    """Create a markdown section block, truncating text to the Slack limit."""
    return {
        "type": "section",
        "text": {"type": "mrkdwn", "text": (text or "")[:MAX_SECTION_TEXT_LENGTH]},
    }


def build_markdown_message(title: str, text: str) -> Dict[str, Any]:
    """Build a webhook payload made of a header and a markdown section.

    Args:
        title: Header text (plain text, emoji codes allowed)
        text: Section text in Slack mrkdwn, hard-truncated to
            MAX_SECTION_TEXT_LENGTH characters

    Returns:
        Webhook payload dict
    """
    return {"blocks": [create_header_block(title), create_section_block(text)]}


def validate_webhook_url(webhook_url: Optional[str]) -> str:
    """Check that a webhook URL is usable.

    Raises:
        ValueError: If the URL is missing, malformed, or still contains an
            unexpanded ``$`` placeholder
    """
    if webhook_url is None:
        raise ValueError("Webhook URL is required")
    if "$" in webhook_url:
        raise ValueError("Webhook URL contains unexpanded environment variable?")

    parsed = urlparse(webhook_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Webhook URL must be an absolute http(s) URL")
    return webhook_url


class SlackWebhookService:
    """Posts messages to a Slack channel through an incoming webhook.

    Args:
        service_name: Name of this webhook in logs (the URL must not be logged)
        webhook_url: Slack incoming webhook URL
        client: Optional pre-built slack_sdk WebhookClient
        timeout_seconds: HTTP timeout for a single call
        verbose: Log payloads (may contain sensitive message content)

    Example:
        service = SlackWebhookService("alerts", settings.slack.SLACK_WEBHOOK_URL)
        service.send_markdown(":warning: Disk almost full", "`/var` is at 91%")
    """

    def __init__(
        self,
        service_name: str,
        webhook_url: str,
        client: Optional[WebhookClient] = None,
        timeout_seconds: int = 30,
        verbose: bool = False,
    ):
        if not service_name or not service_name.strip():
            raise ValueError("Service name cannot be blank")

        self.service_name = service_name
        self._webhook_url = validate_webhook_url(webhook_url)
        # Retries belong to the resilience guard, not to the HTTP client
        self._client = client or WebhookClient(
            url=self._webhook_url, timeout=timeout_seconds, retry_handlers=[]
        )
        self.verbose = verbose

    def send(self, payload: Dict[str, Any]) -> None:
        """Post a raw webhook payload.

        Raises:
            ValueError: If the payload is None or not JSON serializable
            SlackWebhookError: If Slack does not answer with HTTP 200
        """
        if payload is None:
            raise ValueError("Payload cannot be None")
        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Error serializing to JSON: {e}") from e

        if self.verbose:
            logger.debug("slack_webhook_sending", service=self.service_name, payload=body)
        else:
            logger.info("slack_webhook_sending", service=self.service_name)

        response = self._client.send_dict(payload)
        if response.status_code != 200:
            logger.warning(
                "slack_webhook_failed",
                service=self.service_name,
                status_code=response.status_code,
            )
            raise SlackWebhookError(
                self.service_name, response.status_code, response.body or ""
            )

    def send_plain_text(self, text: str) -> None:
        """Post plain text."""
        self.send({"text": text})

    def send_markdown(self, title: str, text: str) -> None:
        """Post a header and a markdown section, see ``build_markdown_message``."""
        self.send(build_markdown_message(title, text))
