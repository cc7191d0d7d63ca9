"""Structured logging for the fusion transport.

structlog events are routed through the stdlib logging module, so agent
events and third-party records (httpx) share one handler and one format.
Logs go to stderr.

Environment Variables:
    FUSION_LOG_FORMAT: "json" or "console" (default)
    FUSION_LOG_LEVEL: DEBUG, INFO (default), WARNING, ERROR or CRITICAL
    FUSION_SERVICE_NAME: Value of the ``service`` field (default "fusion-agent")
    FUSION_DEBUG: Truthy ("1", "true", ...) to log the full message bodies
        exchanged with the server; otherwise only their sizes are logged

Every event passes through a redaction step before rendering: a value
stored under a password-, token- or secret-like key is replaced by
REDACTED_PLACEHOLDER, at any nesting depth. JSON protocol arguments can
therefore be logged as they are.

Example:
    >>> from fusion.observability.logging import (
    ...     configure_logging, get_logger, request_context,
    ... )
    >>>
    >>> configure_logging(log_format="json", log_level="DEBUG")
    >>> logger = get_logger("fusion.transport.client")
    >>> with request_context(protocol="json", url="https://glpi.example.com/"):
    ...     logger.debug("fusion.client.send_json", args={"action": "getConfig"})
"""

import logging
import os
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "console"
DEFAULT_SERVICE_NAME = "fusion-agent"

ENV_LOG_FORMAT = "FUSION_LOG_FORMAT"
ENV_LOG_LEVEL = "FUSION_LOG_LEVEL"
ENV_SERVICE_NAME = "FUSION_SERVICE_NAME"
ENV_DEBUG = "FUSION_DEBUG"

REDACTED_PLACEHOLDER = "***REDACTED***"

# Substrings, matched case-insensitively against keys
_SENSITIVE_KEY_PATTERNS = frozenset(
    {"password", "passwd", "token", "secret", "key", "authorization", "auth"}
)

_TRUTHY = frozenset({"true", "1", "yes", "on"})

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_logging_configured = False


def _is_sensitive_key(key: object) -> bool:
    lower = str(key).lower()
    return any(pattern in lower for pattern in _SENSITIVE_KEY_PATTERNS)


def _redact(value: Any) -> Any:
    if isinstance(value, Mapping):
        return sanitize_for_logging(value)
    if isinstance(value, (list, tuple)):
        return [_redact(item) for item in value]
    return value


def sanitize_for_logging(data: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a copy of ``data`` with secret-looking values redacted.

    Keys containing password, passwd, token, secret, key, authorization or
    auth (case-insensitive) have their value replaced; nested mappings and
    sequences are walked.

    Example:
        >>> sanitize_for_logging({"action": "getConfig", "password": "secret123"})
        {'action': 'getConfig', 'password': '***REDACTED***'}
    """
    if not data:
        return {}
    return {
        key: REDACTED_PLACEHOLDER if _is_sensitive_key(key) else _redact(value)
        for key, value in data.items()
    }


def _redact_event(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    return sanitize_for_logging(event_dict)


def is_debug_mode() -> bool:
    """Return True if FUSION_DEBUG is set to a truthy value."""
    return os.environ.get(ENV_DEBUG, "").strip().lower() in _TRUTHY


def _resolve_level(name: str) -> int:
    try:
        return _LEVELS[name.upper()]
    except KeyError:
        raise ValueError(
            f"Unknown log level {name!r}, expected one of {', '.join(_LEVELS)}"
        ) from None


def _build_renderer(log_format: str) -> Processor:
    if log_format.lower() == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _redact_event,
    ]


def configure_logging(
    log_format: str | None = None,
    log_level: str | None = None,
    service_name: str | None = None,
    force: bool = False,
) -> None:
    """Install the structlog pipeline and the root stderr handler.

    Arguments left to None are read from the environment, then from the
    defaults. Calling again is a no-op unless ``force`` is True.

    Raises:
        ValueError: If the log level is not a known level name
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    level = _resolve_level(log_level or os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL))
    renderer = _build_renderer(log_format or os.environ.get(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT))
    service = service_name or os.environ.get(ENV_SERVICE_NAME, DEFAULT_SERVICE_NAME)

    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    structlog.contextvars.bind_contextvars(service=service)
    _logging_configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, configuring defaults on first call."""
    if not _logging_configured:
        configure_logging()
    return structlog.stdlib.get_logger(name)


@contextmanager
def request_context(**values: Any) -> Iterator[None]:
    """Bind ``values`` to every event logged inside the block.

    Bindings made by the caller before entering are restored on exit.
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield
