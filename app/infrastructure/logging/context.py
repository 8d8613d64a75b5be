"""Dispatch context binding for structured logging.

Binds a dispatch id to structlog context vars so every log entry produced
while one notification is being fanned out (including entries emitted by
transports on worker threads) can be correlated.

Usage:
    from infrastructure.logging import bind_dispatch_context

    with bind_dispatch_context(category="deploy_failed"):
        logger.info("dispatching")

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_dispatch_context(
    dispatch_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind dispatch-scoped context to all logs within the context manager.

    Args:
        dispatch_id: Unique dispatch identifier. Auto-generated if not provided.
        **extra_context: Additional key-value pairs to include in logs.
            ``None`` values are skipped.

    Yields:
        The dispatch id bound for the block.

    Example:
        with bind_dispatch_context() as dispatch_id:
            logger.info("fan_out_started")
    """
    context: dict[str, Any] = {"dispatch_id": dispatch_id or uuid.uuid4().hex}
    context.update({k: v for k, v in extra_context.items() if v is not None})

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["dispatch_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_dispatch_id() -> Optional[str]:
    """Get the current dispatch id from the logging context, if any."""
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("dispatch_id")


def clear_dispatch_context() -> None:
    """Clear all context vars from the logging context."""
    structlog.contextvars.clear_contextvars()
