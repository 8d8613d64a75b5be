"""Text helpers shared by the dispatcher and transports."""

import json
from typing import Any, Mapping, Optional

MAX_CAUSE_DEPTH = 5


def format_cause(cause: BaseException, max_depth: int = MAX_CAUSE_DEPTH) -> str:
    """Render an exception and its chain without a stack trace.

    Example:
        ``"RuntimeError: upload failed; caused by TimeoutError: read timed out"``

    Args:
        cause: Exception to render
        max_depth: Maximum number of exceptions rendered from the chain
    """
    parts = []
    seen = set()
    current: Optional[BaseException] = cause
    while current is not None and id(current) not in seen and len(parts) < max_depth:
        seen.add(id(current))
        message = str(current)
        name = type(current).__name__
        parts.append(f"{name}: {message}" if message else name)
        current = current.__cause__ or (
            None if current.__suppress_context__ else current.__context__
        )
    return "; caused by ".join(parts)


def stringify(value: Any) -> str:
    """Convert a context value to text, ``None`` becomes an empty string."""
    if value is None:
        return ""
    return str(value)


def stringify_context(context: Optional[Mapping[Any, Any]]) -> dict[str, str]:
    """Stringify every value of a context, dropping ``None`` keys."""
    if not context:
        return {}
    return {str(k): stringify(v) for k, v in context.items() if k is not None}


def format_context_compact(context: Optional[Mapping[str, Any]]) -> str:
    """Render a context as ``k1=v1, k2=v2`` in insertion order."""
    if not context:
        return ""
    return ", ".join(f"{k}={stringify(v)}" for k, v in context.items())


def format_context_json(context: Optional[Mapping[str, Any]]) -> str:
    """Render a context as pretty-printed JSON.

    Values that are not JSON serializable are rendered with ``str``; if the
    mapping still cannot be serialized, ``str(context)`` is returned.
    """
    if not context:
        return ""
    try:
        return json.dumps(dict(context), indent=2, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(dict(context))
