"""Notification dispatcher with concurrent multi-transport fan-out.

Centralized notification delivery that:
- Delivers every notification through all registered transports at once
- Isolates transports: one failing, throttled or open-circuit transport never
  blocks or cancels the others
- Never raises because delivery failed; the caller only learns whether at
  least one transport delivered
- Emits exactly one aggregate log entry per notification

Usage Example:
    from infrastructure.notifications import (
        Category,
        LogTransport,
        NotificationDispatcher,
        Severity,
    )

    REMOTE_CALL_FAILED = Category(
        severity=Severity.ERROR, description="Remote call failed"
    )

    dispatcher = NotificationDispatcher([LogTransport(), chat_transport])

    delivered = dispatcher.send(
        REMOTE_CALL_FAILED,
        "Payment provider did not answer",
        context={"order_id": "A-1001"},
        cause=exc,
    )
"""

import contextvars
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Mapping, Optional, Sequence

import structlog
from infrastructure.logging import bind_dispatch_context
from infrastructure.notifications.formatting import format_cause
from infrastructure.notifications.models import (
    Category,
    DeliveryOutcome,
    DispatchReport,
    MessageContext,
    freeze_context,
)
from infrastructure.notifications.transports.base import NotificationTransport

logger = structlog.get_logger()


class NotificationDispatcher:
    """Concurrent fan-out of notifications to a fixed set of transports.

    Each ``send`` runs one task per transport on a thread pool scoped to the
    call and waits for all of them. Exceptions raised by a transport are
    captured as that transport's ``DeliveryOutcome``.

    Attributes:
        transports: Registered transports, de-duplicated by identity
        verbose: Include message bodies and context in the aggregate log
        max_workers: Upper bound on concurrent deliveries per send
            (default: one worker per transport)

    Example:
        dispatcher = NotificationDispatcher(
            [LogTransport(), chat_transport, email_transport],
            verbose=False,
        )

        report = dispatcher.dispatch(category, "Nightly export failed")
        logger.info("export_alert", results=report.summary())
    """

    def __init__(
        self,
        transports: Sequence[NotificationTransport],
        *,
        verbose: bool = False,
        max_workers: Optional[int] = None,
    ):
        """Initialize notification dispatcher.

        Args:
            transports: Transports to deliver through (required, non-empty)
            verbose: Log message bodies and context (may be sensitive)
            max_workers: Optional cap on worker threads per send

        Raises:
            ValueError: If no transports are given or one of them is None
        """
        if not transports:
            raise ValueError("No notification transports defined")
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        unique: list[NotificationTransport] = []
        for transport in transports:
            if transport is None:
                raise ValueError("Notification transport cannot be None")
            if not any(transport is known for known in unique):
                unique.append(transport)

        self._transports = tuple(unique)
        self.verbose = verbose
        self.max_workers = max_workers

        logger.info(
            "notification_dispatcher_initialized",
            transports=[t.transport_name for t in self._transports],
            verbose=verbose,
        )

    @property
    def transports(self) -> tuple[NotificationTransport, ...]:
        return self._transports

    def send(
        self,
        category: Category,
        message: str,
        context: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> bool:
        """Send a notification through every transport.

        Args:
            category: Notification category (required)
            message: Message body, passed to transports as is
            context: Optional key/value details, never mutated
            cause: Optional exception, rendered and appended to the message

        Returns:
            True if at least one transport delivered the notification

        Raises:
            ValueError: If category is None or the context has a None key
        """
        return self.dispatch(category, message, context=context, cause=cause).delivered

    def dispatch(
        self,
        category: Category,
        message: str,
        context: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> DispatchReport:
        """Send a notification and return the outcome of every transport.

        Same arguments and validation as ``send``.
        """
        if category is None:
            raise ValueError("Notification category cannot be None")

        frozen = freeze_context(context)
        if cause is not None:
            message = f"{message}: {format_cause(cause)}"

        with bind_dispatch_context(
            notification_category=category.description
        ) as dispatch_id:
            outcomes = self._fan_out(category, message, frozen)
            report = DispatchReport(outcomes=tuple(outcomes))
            self._log_report(report, category, message, frozen, dispatch_id)

        return report

    def _fan_out(
        self, category: Category, message: str, context: MessageContext
    ) -> list[DeliveryOutcome]:
        workers = min(self.max_workers or len(self._transports), len(self._transports))

        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="notification"
        ) as executor:
            futures = [
                executor.submit(
                    contextvars.copy_context().run,
                    self._deliver,
                    transport,
                    category,
                    message,
                    context,
                )
                for transport in self._transports
            ]
            return [future.result() for future in futures]

    @staticmethod
    def _deliver(
        transport: NotificationTransport,
        category: Category,
        message: str,
        context: MessageContext,
    ) -> DeliveryOutcome:
        started = time.monotonic()
        try:
            transport.send(category, message, context)
        except Exception as e:
            return DeliveryOutcome(
                transport=transport.transport_name,
                error=e,
                elapsed_seconds=time.monotonic() - started,
            )
        return DeliveryOutcome(
            transport=transport.transport_name,
            elapsed_seconds=time.monotonic() - started,
        )

    def _log_report(
        self,
        report: DispatchReport,
        category: Category,
        message: str,
        context: MessageContext,
        dispatch_id: str,
    ) -> None:
        fields: dict[str, Any] = {
            "results": report.summary(),
            "severity": category.severity.name.lower(),
            "description": category.description,
            "dispatch_id": dispatch_id,
        }
        if self.verbose:
            fields["notification_message"] = message
            fields["notification_context"] = dict(context)

        if report.all_failed:
            logger.error("notification_not_sent", **fields)
        elif report.failure_count > 0:
            logger.warning("notification_partially_sent", **fields)
        else:
            logger.debug("notification_sent", **fields)
