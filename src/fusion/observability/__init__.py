"""Observability module for the fusion transport.

Structured logging built on structlog: JSON output for production,
colored console output for development, per-request context binding and
redaction of secret-looking values.

Example:
    >>> from fusion.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("fusion.client.send_json", args={"action": "getConfig"})
"""

from fusion.observability.logging import (
    configure_logging,
    get_logger,
    is_debug_mode,
    request_context,
    sanitize_for_logging,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "is_debug_mode",
    "request_context",
    "sanitize_for_logging",
]
