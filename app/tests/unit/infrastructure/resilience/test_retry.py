"""Unit tests for the in-process retrier."""

import pytest
from unittest.mock import MagicMock, patch

from infrastructure.resilience.retry import Retrier, RetryEvent


class Flaky:
    """Callable failing a fixed number of times before succeeding."""

    def __init__(self, failures: int, error: Exception = None):
        self.failures = failures
        self.error = error or ConnectionError("connection reset")
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return "delivered"


def make_retrier(fake_clock, **kwargs):
    kwargs.setdefault("on_retry", None)
    kwargs.setdefault("on_failure", None)
    return Retrier(kwargs.pop("name", "chat"), sleep=fake_clock.sleep, **kwargs)


@pytest.mark.unit
class TestRetrierInitialization:
    """Tests for Retrier configuration."""

    def test_default_configuration(self):
        retrier = Retrier("chat")

        assert retrier.max_attempts == 3
        assert retrier.wait_seconds == 0.5
        assert retrier.backoff_multiplier == 1.0
        assert retrier.max_wait_seconds is None

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_attempts": 0},
            {"wait_seconds": -0.1},
            {"backoff_multiplier": 0.5},
        ],
    )
    def test_rejects_invalid_configuration(self, kwargs):
        with pytest.raises(ValueError):
            Retrier("chat", **kwargs)


@pytest.mark.unit
class TestRetrierBackoff:
    """Tests for delay calculation."""

    def test_fixed_interval(self):
        retrier = Retrier("chat", wait_seconds=0.5)

        assert [retrier.compute_delay(n) for n in (1, 2, 3)] == [0.5, 0.5, 0.5]

    def test_exponential_backoff(self):
        retrier = Retrier("chat", wait_seconds=0.5, backoff_multiplier=2.0)

        assert [retrier.compute_delay(n) for n in (1, 2, 3)] == [0.5, 1.0, 2.0]

    def test_backoff_is_capped(self):
        retrier = Retrier(
            "chat", wait_seconds=1.0, backoff_multiplier=10.0, max_wait_seconds=5.0
        )

        assert retrier.compute_delay(3) == 5.0


@pytest.mark.unit
class TestRetrierCall:
    """Tests for Retrier.call."""

    def test_returns_result_without_retry(self, fake_clock):
        retrier = make_retrier(fake_clock)
        func = Flaky(failures=0)

        assert retrier.call(func) == "delivered"
        assert func.calls == 1
        assert fake_clock.sleeps == []

    def test_retries_until_success(self, fake_clock):
        retrier = make_retrier(
            fake_clock, max_attempts=3, wait_seconds=0.5, backoff_multiplier=2.0
        )
        func = Flaky(failures=2)

        assert retrier.call(func) == "delivered"
        assert func.calls == 3
        assert fake_clock.sleeps == [0.5, 1.0]

    def test_reraises_original_exception_when_exhausted(self, fake_clock):
        error = TimeoutError("read timed out")
        retrier = make_retrier(fake_clock, max_attempts=3)
        func = Flaky(failures=10, error=error)

        with pytest.raises(TimeoutError) as exc_info:
            retrier.call(func)

        assert exc_info.value is error
        assert func.calls == 3
        assert len(fake_clock.sleeps) == 2

    def test_non_retryable_exception_propagates_immediately(self, fake_clock):
        retrier = make_retrier(fake_clock, retry_on=(ConnectionError,))
        func = Flaky(failures=5, error=ValueError("bad payload"))

        with pytest.raises(ValueError):
            retrier.call(func)

        assert func.calls == 1
        assert fake_clock.sleeps == []

    def test_single_attempt_never_sleeps(self, fake_clock):
        retrier = make_retrier(fake_clock, max_attempts=1)

        with pytest.raises(ConnectionError):
            retrier.call(Flaky(failures=1))

        assert fake_clock.sleeps == []

    def test_passes_arguments(self, fake_clock):
        retrier = make_retrier(fake_clock)

        assert retrier.call(lambda a, b=0: a * b, 3, b=4) == 12


@pytest.mark.unit
class TestRetrierCallbacks:
    """Tests for retry lifecycle callbacks."""

    def test_on_retry_receives_events(self, fake_clock):
        on_retry = MagicMock()
        retrier = make_retrier(
            fake_clock, max_attempts=3, wait_seconds=0.5, on_retry=on_retry
        )

        retrier.call(Flaky(failures=2))

        assert on_retry.call_count == 2
        first = on_retry.call_args_list[0].args[0]
        assert first == RetryEvent(
            name="chat",
            attempt=1,
            max_attempts=3,
            delay_seconds=0.5,
            error_type="ConnectionError",
        )
        assert first.is_final is False

    def test_on_failure_called_once_after_last_attempt(self, fake_clock):
        on_failure = MagicMock()
        retrier = make_retrier(fake_clock, max_attempts=2, on_failure=on_failure)

        with pytest.raises(ConnectionError):
            retrier.call(Flaky(failures=5))

        on_failure.assert_called_once()
        event = on_failure.call_args.args[0]
        assert event.attempt == 2
        assert event.is_final is True

    def test_events_never_carry_error_messages(self, fake_clock):
        on_failure = MagicMock()
        retrier = make_retrier(fake_clock, max_attempts=1, on_failure=on_failure)
        secret_error = ConnectionError("https://hooks.slack.com/services/T/B/SECRET")

        with pytest.raises(ConnectionError):
            retrier.call(Flaky(failures=1, error=secret_error))

        event = on_failure.call_args.args[0]
        assert "SECRET" not in repr(event)

    @patch("infrastructure.resilience.retry.logger")
    def test_default_callbacks_log(self, mock_logger, fake_clock):
        retrier = Retrier("chat", max_attempts=2, sleep=fake_clock.sleep)

        with pytest.raises(ConnectionError):
            retrier.call(Flaky(failures=5))

        mock_logger.warning.assert_called_once_with(
            "retry_scheduled",
            name="chat",
            attempt=1,
            max_attempts=2,
            delay_seconds=0.5,
            error_type="ConnectionError",
        )
        mock_logger.error.assert_called_once_with(
            "retry_attempts_exhausted",
            name="chat",
            attempts=2,
            error_type="ConnectionError",
        )


@pytest.mark.unit
class TestRetrierStats:
    """Tests for retrier statistics."""

    def test_counts_outcomes(self, fake_clock):
        retrier = make_retrier(fake_clock, max_attempts=2)

        retrier.call(Flaky(failures=0))
        retrier.call(Flaky(failures=1))
        with pytest.raises(ConnectionError):
            retrier.call(Flaky(failures=2))

        stats = retrier.get_stats()
        assert stats["succeeded_without_retry"] == 1
        assert stats["succeeded_with_retry"] == 1
        assert stats["failed"] == 1
        assert stats["total_attempts"] == 5
