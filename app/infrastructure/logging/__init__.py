"""Structured logging for the notifier (structlog).

Modules get their logger with ``get_module_logger()``; the dispatcher binds
a dispatch id around each fan-out so that entries written by transports on
worker threads can be correlated with the aggregate ``notification_*`` entry.

Processors:
    - add_environment_info(): Adds app name and environment
    - mask_sensitive_data(): Redacts secrets, nested context included
    - truncate_large_values(): Limits string lengths
"""

from infrastructure.logging.setup import (
    build_processors,
    configure_logging,
    get_logger,
    get_module_logger,
)
from infrastructure.logging.context import (
    bind_dispatch_context,
    clear_dispatch_context,
    get_dispatch_id,
)
from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_environment_info,
    mask_sensitive_data,
    scrub_webhook_urls,
    truncate_large_values,
)

__all__ = [
    # Setup
    "build_processors",
    "configure_logging",
    "get_logger",
    "get_module_logger",
    # Context
    "bind_dispatch_context",
    "clear_dispatch_context",
    "get_dispatch_id",
    # Processors
    "SENSITIVE_PATTERNS",
    "add_environment_info",
    "mask_sensitive_data",
    "scrub_webhook_urls",
    "truncate_large_values",
]
