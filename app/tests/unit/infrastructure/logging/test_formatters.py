"""Unit tests for infrastructure.logging.formatters module."""

import pytest

from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_environment_info,
    mask_sensitive_data,
    scrub_webhook_urls,
    truncate_large_values,
)

WEBHOOK_URL = "https://hooks.slack.com/services/T000/B000/XXXX"


@pytest.mark.unit
class TestAddEnvironmentInfo:
    """Test suite for add_environment_info processor factory."""

    def test_production_when_prefix_empty(self):
        processor = add_environment_info("notifier")

        result = processor(None, "info", {"event": "test_event"})

        assert result == {
            "event": "test_event",
            "app_name": "notifier",
            "environment": "production",
        }

    def test_prefix_names_environment(self):
        processor = add_environment_info("notifier", "staging-")

        result = processor(None, "info", {"event": "test"})

        assert result["environment"] == "staging-"

    def test_keeps_explicit_values(self):
        processor = add_environment_info("notifier")

        result = processor(None, "info", {"app_name": "billing"})

        assert result["app_name"] == "billing"


@pytest.mark.unit
class TestMaskSensitiveData:
    """Test suite for mask_sensitive_data processor factory."""

    def test_masks_webhook_url_key(self):
        processor = mask_sensitive_data()

        result = processor(None, "info", {"event": "x", "webhook_url": WEBHOOK_URL})

        assert result["webhook_url"] == "***REDACTED***"

    def test_masks_case_insensitive_partial_match(self):
        processor = mask_sensitive_data()

        result = processor(None, "info", {"SMTP_PASSWORD": "hunter2"})

        assert result["SMTP_PASSWORD"] == "***REDACTED***"

    def test_masks_nested_notification_context(self):
        processor = mask_sensitive_data()

        result = processor(
            None,
            "debug",
            {"notification_context": {"order_id": "A-1", "api_token": "abc"}},
        )

        assert result["notification_context"] == {
            "order_id": "A-1",
            "api_token": "***REDACTED***",
        }

    def test_scrubs_webhook_url_inside_text(self):
        processor = mask_sensitive_data()

        result = processor(
            None, "error", {"results": f"Chat[ERROR: cannot reach {WEBHOOK_URL}]"}
        )

        assert "XXXX" not in result["results"]
        assert "https://hooks.slack.com/***" in result["results"]

    def test_keeps_none_values(self):
        processor = mask_sensitive_data()

        result = processor(None, "info", {"password": None})

        assert result["password"] is None

    def test_keeps_regular_fields(self):
        processor = mask_sensitive_data()

        result = processor(None, "info", {"service": "alerts", "status_code": 500})

        assert result == {"service": "alerts", "status_code": 500}

    def test_custom_mask_and_patterns(self):
        processor = mask_sensitive_data(
            mask_value="[hidden]", additional_patterns=frozenset({"recipient"})
        )

        result = processor(None, "info", {"recipient": "oncall@example.com"})

        assert result["recipient"] == "[hidden]"

    def test_patterns_include_secrets(self):
        assert {"webhook_url", "password", "token"} <= SENSITIVE_PATTERNS


@pytest.mark.unit
class TestScrubWebhookUrls:
    """Test suite for scrub_webhook_urls."""

    def test_replaces_secret_path(self):
        assert scrub_webhook_urls(f"posting to {WEBHOOK_URL} now") == (
            "posting to https://hooks.slack.com/*** now"
        )

    def test_leaves_other_urls(self):
        assert scrub_webhook_urls("https://example.com/a") == "https://example.com/a"


@pytest.mark.unit
class TestTruncateLargeValues:
    """Test suite for truncate_large_values processor factory."""

    def test_truncates_long_strings(self):
        processor = truncate_large_values(max_length=10)

        result = processor(None, "info", {"notification_message": "x" * 25})

        assert result["notification_message"].startswith("x" * 10)
        assert "25 chars total" in result["notification_message"]

    def test_truncates_nested_values(self):
        processor = truncate_large_values(max_length=5)

        result = processor(None, "info", {"notification_context": {"dump": "y" * 8}})

        assert result["notification_context"]["dump"].startswith("yyyyy...")

    def test_keeps_short_strings(self):
        processor = truncate_large_values(max_length=10)

        result = processor(None, "info", {"results": "Log[OK]"})

        assert result["results"] == "Log[OK]"

    def test_ignores_non_strings(self):
        processor = truncate_large_values(max_length=1)

        result = processor(None, "info", {"count": 12345})

        assert result["count"] == 12345
