"""Unit tests for ChatWebhookTransport."""

import json

import pytest

from infrastructure.notifications.models import Category, Severity
from infrastructure.notifications.transports.chat import ChatWebhookTransport


@pytest.fixture
def transport(mock_webhook_service):
    return ChatWebhookTransport(webhook_service=mock_webhook_service, originator="svc-a")


@pytest.mark.unit
class TestChatWebhookTransportInitialization:
    """Tests for construction checks."""

    def test_requires_webhook_service(self):
        with pytest.raises(ValueError):
            ChatWebhookTransport(webhook_service=None, originator="svc-a")

    @pytest.mark.parametrize("originator", [None, "", "  "])
    def test_requires_originator(self, mock_webhook_service, originator):
        with pytest.raises(ValueError):
            ChatWebhookTransport(
                webhook_service=mock_webhook_service, originator=originator
            )


@pytest.mark.unit
class TestChatWebhookTransportSend:
    """Tests for title and text rendering."""

    @pytest.mark.parametrize(
        "severity,emoji",
        [
            (Severity.ERROR, ":exclamation:"),
            (Severity.WARN, ":warning:"),
            (Severity.INFO, ":information_source:"),
            (Severity.DEBUG, ":information_source:"),
            (Severity.TRACE, ":information_source:"),
        ],
    )
    def test_title_has_severity_emoji(
        self, transport, mock_webhook_service, severity, emoji
    ):
        category = Category(severity=severity, description="Remote call failed")

        transport.send(category, "no answer")

        title, _ = mock_webhook_service.send_markdown.call_args.args
        assert title == f"{emoji} {category.format('svc-a')}"

    def test_text_without_context(self, transport, mock_webhook_service, error_category):
        transport.send(error_category, "no answer")

        _, text = mock_webhook_service.send_markdown.call_args.args
        assert text == "no answer"

    def test_context_appended_as_json_block(
        self, transport, mock_webhook_service, error_category
    ):
        transport.send(error_category, "no answer", {"order_id": "A-1", "attempt": 2})

        _, text = mock_webhook_service.send_markdown.call_args.args
        message, block = text.split("\n", 1)
        assert message == "no answer"
        assert block.startswith("```\n")
        assert block.endswith("\n```")
        assert json.loads(block[4:-4]) == {"order_id": "A-1", "attempt": 2}

    @pytest.mark.parametrize("message", ["", "   ", None])
    def test_blank_message_rejected(
        self, transport, mock_webhook_service, error_category, message
    ):
        with pytest.raises(ValueError):
            transport.send(error_category, message)

        mock_webhook_service.send_markdown.assert_not_called()

    def test_webhook_errors_propagate(
        self, transport, mock_webhook_service, error_category
    ):
        mock_webhook_service.send_markdown.side_effect = ConnectionError("reset")

        with pytest.raises(ConnectionError):
            transport.send(error_category, "no answer")
