"""Custom log processors for structured logging.

These processors are plugged into the structlog pipeline by
``configure_logging``. Verbose notification logging puts whole message
bodies and the caller's context mapping into log entries, so masking and
truncation also walk nested mappings.

Usage:
    from infrastructure.logging.formatters import mask_sensitive_data

    processor = mask_sensitive_data(additional_patterns=frozenset({"iban"}))
"""

import re
from typing import Any, Callable, Mapping

Processor = Callable[[Any, str, dict[str, Any]], dict[str, Any]]

# Sensitive field patterns that should be masked in logs
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "authorization",
        "credential",
        "private_key",
        "webhook_url",
        "cookie",
    }
)

# Incoming webhook URLs carry their secret in the path
WEBHOOK_URL_PATTERN = re.compile(r"(https://hooks\.slack\.com/)\S+")


def add_environment_info(app_name: str, prefix: str = "") -> Processor:
    """Create a processor that tags entries with the app and environment.

    Args:
        app_name: Application name, also the default notification originator
        prefix: Environment prefix; empty means production

    Returns:
        A structlog processor function.
    """
    environment = prefix or "production"

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict.setdefault("app_name", app_name)
        event_dict.setdefault("environment", environment)
        return event_dict

    return processor


def scrub_webhook_urls(text: str) -> str:
    """Replace the secret part of any webhook URL found in ``text``."""
    return WEBHOOK_URL_PATTERN.sub(r"\1***", text)


def mask_sensitive_data(
    mask_value: str = "***REDACTED***",
    additional_patterns: frozenset[str] | None = None,
) -> Processor:
    """Create a processor that masks sensitive data in log entries.

    Values whose key contains a sensitive pattern (case-insensitive) are
    replaced, nested mappings such as ``notification_context`` included.
    Webhook URLs embedded in other string values are scrubbed.

    Args:
        mask_value: The string to replace sensitive values with.
        additional_patterns: Extra patterns to consider sensitive.

    Returns:
        A structlog processor function.
    """
    patterns = SENSITIVE_PATTERNS
    if additional_patterns:
        patterns = patterns | additional_patterns

    def mask(key: Any, value: Any) -> Any:
        if value is None:
            return None
        key_lower = str(key).lower()
        if any(pattern in key_lower for pattern in patterns):
            return mask_value
        if isinstance(value, Mapping):
            return {k: mask(k, v) for k, v in value.items()}
        if isinstance(value, str):
            return scrub_webhook_urls(value)
        return value

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        return {key: mask(key, value) for key, value in event_dict.items()}

    return processor


def truncate_large_values(max_length: int = 2000) -> Processor:
    """Create a processor that truncates overly large string values.

    Args:
        max_length: Maximum string length before truncation.

    Returns:
        A structlog processor function.
    """

    def truncate(value: Any) -> Any:
        if isinstance(value, str) and len(value) > max_length:
            return value[:max_length] + f"...[truncated, {len(value)} chars total]"
        if isinstance(value, Mapping):
            return {k: truncate(v) for k, v in value.items()}
        return value

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        return {key: truncate(value) for key, value in event_dict.items()}

    return processor
