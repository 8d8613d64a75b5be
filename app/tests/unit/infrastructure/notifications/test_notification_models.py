"""Unit tests for notification models."""

from types import MappingProxyType

import pytest
from pydantic import ValidationError

from infrastructure.notifications.models import (
    Category,
    DeliveryOutcome,
    DispatchReport,
    OutcomeStatus,
    Severity,
    freeze_context,
)
from infrastructure.resilience.circuit_breaker import CircuitBreakerOpenError
from infrastructure.resilience.rate_limiter import RateLimitExceededError


@pytest.mark.unit
class TestSeverity:
    """Tests for severity ordering."""

    def test_ordered_from_trace_to_error(self):
        assert (
            Severity.TRACE
            < Severity.DEBUG
            < Severity.INFO
            < Severity.WARN
            < Severity.ERROR
        )


@pytest.mark.unit
class TestCategory:
    """Tests for Category."""

    def test_format(self):
        category = Category(severity=Severity.ERROR, description="Remote call failed")

        assert category.format("svc-a") == "[error] svc-a - Remote call failed"

    @pytest.mark.parametrize(
        "severity,prefix",
        [
            (Severity.TRACE, "[trace]"),
            (Severity.DEBUG, "[debug]"),
            (Severity.INFO, "[info]"),
            (Severity.WARN, "[warn]"),
        ],
    )
    def test_format_uses_lowercase_severity(self, severity, prefix):
        category = Category(severity=severity, description="Disk almost full")

        assert category.format("db-1").startswith(prefix)

    @pytest.mark.parametrize("description", ["", "   "])
    def test_rejects_blank_description(self, description):
        with pytest.raises(ValidationError):
            Category(severity=Severity.INFO, description=description)

    def test_is_immutable(self, error_category):
        with pytest.raises(ValidationError):
            error_category.description = "changed"

    def test_is_hashable(self, category_factory):
        first = category_factory()
        second = category_factory()

        assert hash(first) == hash(second)
        assert {first, second} == {first}


@pytest.mark.unit
class TestFreezeContext:
    """Tests for read-only context snapshots."""

    def test_none_becomes_empty(self):
        assert dict(freeze_context(None)) == {}

    def test_snapshot_is_read_only(self):
        frozen = freeze_context({"order_id": "A-1"})

        assert isinstance(frozen, MappingProxyType)
        with pytest.raises(TypeError):
            frozen["order_id"] = "B-2"

    def test_snapshot_is_detached_from_caller(self):
        context = {"order_id": "A-1"}
        frozen = freeze_context(context)

        context["order_id"] = "B-2"

        assert frozen["order_id"] == "A-1"

    def test_preserves_order(self):
        frozen = freeze_context({"b": 1, "a": 2, "c": 3})

        assert list(frozen) == ["b", "a", "c"]

    def test_rejects_none_key(self):
        with pytest.raises(ValueError):
            freeze_context({None: "value"})


@pytest.mark.unit
class TestDeliveryOutcome:
    """Tests for DeliveryOutcome."""

    def test_success(self):
        outcome = DeliveryOutcome(transport="LogTransport")

        assert outcome.is_success is True
        assert outcome.status == OutcomeStatus.SENT
        assert outcome.describe() == "LogTransport[OK]"

    def test_failure(self):
        outcome = DeliveryOutcome(transport="T2", error=RuntimeError("x"))

        assert outcome.is_success is False
        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.describe() == "T2[ERROR: x]"

    def test_empty_message_uses_exception_type(self):
        outcome = DeliveryOutcome(transport="T2", error=TimeoutError())

        assert outcome.describe() == "T2[ERROR: TimeoutError]"

    def test_rate_limited_status(self):
        outcome = DeliveryOutcome(
            transport="EmailTransport", error=RateLimitExceededError("no permit")
        )

        assert outcome.status == OutcomeStatus.RATE_LIMITED

    def test_circuit_open_status(self):
        outcome = DeliveryOutcome(
            transport="ChatWebhookTransport", error=CircuitBreakerOpenError("open")
        )

        assert outcome.status == OutcomeStatus.CIRCUIT_OPEN


@pytest.mark.unit
class TestDispatchReport:
    """Tests for DispatchReport aggregation."""

    def test_mixed_outcomes(self):
        report = DispatchReport(
            outcomes=(
                DeliveryOutcome(transport="T1"),
                DeliveryOutcome(transport="T2", error=RuntimeError("x")),
                DeliveryOutcome(transport="T3"),
            )
        )

        assert report.success_count == 2
        assert report.failure_count == 1
        assert report.delivered is True
        assert report.all_failed is False
        assert report.summary() == "T1[OK], T2[ERROR: x], T3[OK]"

    def test_all_failed(self):
        report = DispatchReport(
            outcomes=(DeliveryOutcome(transport="T1", error=RuntimeError("x")),)
        )

        assert report.delivered is False
        assert report.all_failed is True
