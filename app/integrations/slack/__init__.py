"""Slack integration: incoming webhook client."""

from integrations.slack.webhook import (
    MAX_SECTION_TEXT_LENGTH,
    SlackWebhookError,
    SlackWebhookService,
    build_markdown_message,
)

__all__ = [
    "MAX_SECTION_TEXT_LENGTH",
    "SlackWebhookError",
    "SlackWebhookService",
    "build_markdown_message",
]
