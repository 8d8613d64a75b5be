"""Shared fixtures for the notifier test suite."""

import pytest
import structlog

NOTIFIER_ENV_VARS = (
    "PREFIX",
    "LOG_LEVEL",
    "APP_NAME",
    "NOTIFICATION_ORIGINATOR",
    "NOTIFICATION_VERBOSE",
    "NOTIFICATION_MAX_WORKERS",
    "NOTIFICATION_LOG_GUARD",
    "NOTIFICATION_CHAT_GUARD",
    "NOTIFICATION_EMAIL_GUARD",
    "RATE_LIMIT_PERMITS",
    "RATE_LIMIT_PERIOD_SECONDS",
    "RATE_LIMIT_TIMEOUT_SECONDS",
    "CIRCUIT_BREAKER_FAILURE_THRESHOLD",
    "CIRCUIT_BREAKER_TIMEOUT_SECONDS",
    "CIRCUIT_BREAKER_HALF_OPEN_MAX_CALLS",
    "RETRY_MAX_ATTEMPTS",
    "RETRY_WAIT_SECONDS",
    "RETRY_BACKOFF_MULTIPLIER",
    "RETRY_MAX_WAIT_SECONDS",
    "SLACK_WEBHOOK_URL",
    "SLACK_SERVICE_NAME",
    "SLACK_TIMEOUT_SECONDS",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASSWORD",
    "SMTP_USE_TLS",
    "SMTP_USE_SSL",
    "SMTP_TIMEOUT_SECONDS",
    "EMAIL_FROM",
    "EMAIL_TO",
    "EMAIL_TEMPLATE",
    "EMAIL_TEMPLATE_DIR",
)


@pytest.fixture(autouse=True)
def clear_logging_context():
    """Keep structlog context vars from leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every notifier environment variable for the test."""
    for name in NOTIFIER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    """Injectable clock whose ``sleep`` advances time instantly."""
    return FakeClock()
