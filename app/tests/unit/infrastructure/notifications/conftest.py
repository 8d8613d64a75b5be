"""Test fixtures for notification infrastructure tests."""

import threading
from typing import Optional

import pytest
from unittest.mock import MagicMock

from infrastructure.notifications.models import Category, Severity
from infrastructure.notifications.transports.base import NotificationTransport


class RecordingTransport(NotificationTransport):
    """Transport recording every delivery, optionally raising an error."""

    def __init__(self, error: Optional[Exception] = None, guard=None):
        super().__init__(guard)
        self.error = error
        self.calls = []
        self.threads = []
        self._lock = threading.Lock()

    def send_raw(self, category, message, context):
        with self._lock:
            self.calls.append((category, message, context))
            self.threads.append(threading.current_thread().name)
        if self.error is not None:
            raise self.error


@pytest.fixture
def category_factory():
    """Factory for creating Category instances.

    Example:
        category = category_factory(severity=Severity.WARN)
    """

    def _factory(
        severity: Severity = Severity.ERROR,
        description: str = "Remote call failed",
    ) -> Category:
        return Category(severity=severity, description=description)

    return _factory


@pytest.fixture
def error_category(category_factory):
    return category_factory()


@pytest.fixture
def recording_transport():
    return RecordingTransport()


@pytest.fixture
def failing_transport():
    return RecordingTransport(error=RuntimeError("channel down"))


@pytest.fixture
def mock_webhook_service():
    """Mock SlackWebhookService."""
    return MagicMock()


@pytest.fixture
def mock_email_service():
    """Mock EmailService."""
    return MagicMock()


@pytest.fixture
def transport_factory():
    """Factory for recording transports with a given class name.

    The class name is what dispatch summaries report, so each name gets its
    own subclass.

    Example:
        t1 = transport_factory("T1")
        t2 = transport_factory("T2", error=RuntimeError("down"))
    """
    classes = {}

    def _factory(name: str = "RecordingTransport", error=None, guard=None):
        if name not in classes:
            classes[name] = type(name, (RecordingTransport,), {})
        return classes[name](error=error, guard=guard)

    return _factory
