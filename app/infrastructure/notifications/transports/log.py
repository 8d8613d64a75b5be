"""Log transport: writes notifications to the application log."""

from infrastructure.logging import get_module_logger
from infrastructure.notifications.formatting import format_context_compact
from infrastructure.notifications.models import Category, MessageContext, Severity
from infrastructure.notifications.transports.base import NotificationTransport

logger = get_module_logger()

# stdlib logging has no TRACE level
_LOG_METHODS = {
    Severity.ERROR: "error",
    Severity.WARN: "warning",
    Severity.INFO: "info",
    Severity.DEBUG: "debug",
    Severity.TRACE: "debug",
}


class LogTransport(NotificationTransport):
    """Writes each notification as one structured log entry.

    The event text is ``<description>: <message>`` followed by
    `` (k1=v1, k2=v2)`` when the context is not empty. The log level follows
    the category severity.
    """

    def send_raw(
        self, category: Category, message: str, context: MessageContext
    ) -> None:
        text = f"{category.description}: {message}"
        if context:
            text += f" ({format_context_compact(context)})"

        log = getattr(logger, _LOG_METHODS.get(category.severity, "info"))
        log(text, severity=category.severity.name.lower())
