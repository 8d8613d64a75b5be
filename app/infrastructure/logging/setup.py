"""Structlog configuration and logger setup.

Configures structlog once per process. Notifications fan out on worker
threads, so entries carry the thread name next to the call site, and the
dispatch id bound by ``bind_dispatch_context`` is merged from context vars.

Usage:
    from infrastructure.logging import configure_logging, get_module_logger

    configure_logging(settings=settings)

    logger = get_module_logger()
    logger.info("event_name", key="value")
"""

import inspect
import logging
import sys
from typing import TYPE_CHECKING, Any, Optional

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.logging.formatters import (
    add_environment_info,
    mask_sensitive_data,
    truncate_large_values,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def _is_test_environment() -> bool:
    """Detect if running in a test environment.

    Returns:
        True if pytest is in sys.modules, False otherwise
    """
    return "pytest" in sys.modules


def build_processors(app_name: str, prefix: str, production: bool) -> list[Any]:
    """Build the processor chain used outside of tests.

    Console rendering in development, one JSON object per line in production.
    Secrets are masked before anything is rendered.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.THREAD_NAME,
            ]
        ),
        add_environment_info(app_name, prefix),
        mask_sensitive_data(),
        truncate_large_values(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if production:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
    settings: Optional["Settings"] = None,
) -> BoundLogger:
    """Configure structured logging.

    Args:
        log_level: Optional override for log level (DEBUG, INFO, WARNING, etc).
            Defaults to settings.LOG_LEVEL.
        is_production: Optional override for production mode (JSON output).
            Defaults to settings.is_production.
        settings: Settings instance. Defaults to the module singleton.

    Returns:
        Configured logger instance
    """
    if _is_test_environment():
        # Nothing is emitted: the root logger sits above CRITICAL
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s", level=logging.CRITICAL + 1, force=True
        )
        return structlog.stdlib.get_logger()

    if settings is None:
        from infrastructure.configuration import settings as default_settings

        settings = default_settings

    production = is_production if is_production is not None else settings.is_production

    structlog.configure(
        processors=build_processors(settings.APP_NAME, settings.PREFIX, production),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level_name = (log_level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        format="%(message)s", level=getattr(logging, level_name, logging.INFO)
    )

    return structlog.stdlib.get_logger()


# Module-level logger (auto-configured on import)
logger: BoundLogger = configure_logging()


def _calling_module_name(depth: int = 2) -> Optional[str]:
    frame = inspect.currentframe()
    for _ in range(depth):
        if frame is None:
            return None
        frame = frame.f_back
    if frame is None:
        return None
    module = inspect.getmodule(frame)
    return module.__name__ if module else frame.f_globals.get("__name__")


def get_logger(name: Optional[str] = None) -> BoundLogger:
    """Get a logger bound to ``name`` or, by default, the calling module."""
    return logger.bind(logger_name=name or _calling_module_name() or "unknown")


def get_module_logger() -> BoundLogger:
    """Get a logger for the calling module with full path context.

    Binds ``component`` (last module path segment) and ``module_path``.

    Example:
        # In integrations/slack/webhook.py
        logger = get_module_logger()
        # context: {"component": "webhook",
        #           "module_path": "integrations.slack.webhook"}
    """
    module_name = _calling_module_name()
    if not module_name:
        return logger.bind(component="unknown")
    return logger.bind(component=module_name.split(".")[-1], module_path=module_name)
