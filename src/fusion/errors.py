"""Fusion transport error taxonomy.

Every failure a send operation can run into is modelled here. The client
raises these internally, then logs and converts them into a ``None`` result
at the ``send_json``/``send_xml`` boundary.
"""
from __future__ import annotations

from typing import Any


class FusionError(Exception):
    """Base exception for all fusion transport errors.

    Attributes:
        code: Error code following the fusion:<area>/<reason> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class TransportError(FusionError):
    """Raised when the HTTP exchange itself failed.

    Covers connection errors, timeouts and unsuccessful status codes. The
    underlying httpx exception, if any, is kept as ``cause``.

    Attributes:
        url: Target URL (sanitized)
        status_code: HTTP status when a response was received
        cause: Original exception, if any
    """

    def __init__(
        self,
        url: str,
        reason: str,
        status_code: int | None = None,
        cause: Exception | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details_dict: dict[str, Any] = {"url": url, "reason": reason}
        if status_code is not None:
            details_dict["status_code"] = status_code
        if details:
            details_dict.update(details)
        super().__init__(
            code="fusion:transport/failure",
            message=f"Request to {url} failed: {reason}",
            details=details_dict,
        )
        self.url = url
        self.status_code = status_code
        self.cause = cause


class CompressionError(FusionError):
    """Raised when an outbound body cannot be compressed."""

    def __init__(self, mode: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="fusion:compression/failed",
            message=f"Compression with {mode} failed: {reason}",
            details={"mode": mode, "reason": reason, **(details or {})},
        )
        self.mode = mode
        self.reason = reason


class DecompressionError(FusionError):
    """Raised when an inbound body cannot be decompressed.

    Never carries a partial buffer: callers get either the full plain
    payload or this error.
    """

    def __init__(self, mode: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="fusion:compression/decompress_failed",
            message=f"Decompression with {mode} failed: {reason}",
            details={"mode": mode, "reason": reason, **(details or {})},
        )
        self.mode = mode
        self.reason = reason


class EmptyResponseError(FusionError):
    """Raised when the server answered with an empty body."""

    def __init__(self, url: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="fusion:protocol/empty_response",
            message=f"Unknown content format: empty response from {url}",
            details={"url": url, **(details or {})},
        )
        self.url = url


class UnknownResponseFormatError(FusionError):
    """Raised when a response body matches none of the known wire formats.

    Attributes:
        prefix: Bounded prefix of the raw body, for diagnostics
    """

    def __init__(self, url: str, prefix: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="fusion:protocol/unknown_format",
            message=f"Unknown content format from {url}",
            details={"url": url, "prefix": prefix, **(details or {})},
        )
        self.url = url
        self.prefix = prefix


class JSONParseError(FusionError):
    """Raised when a JSON protocol response is not valid UTF-8 JSON."""

    def __init__(self, url: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="fusion:protocol/invalid_json",
            message=f"Invalid JSON response from {url}: {reason}",
            details={"url": url, "reason": reason, **(details or {})},
        )
        self.url = url
        self.reason = reason


class MessageParseError(FusionError):
    """Raised when a decompressed XML reply is not a valid inbound message.

    Attributes:
        first_line: First line of the offending text
    """

    def __init__(
        self, reason: str, first_line: str = "", details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(
            code="fusion:protocol/invalid_message",
            message=f"Unexpected content, starting with {first_line}: {reason}",
            details={"reason": reason, "first_line": first_line, **(details or {})},
        )
        self.reason = reason
        self.first_line = first_line


__all__ = [
    "CompressionError",
    "DecompressionError",
    "EmptyResponseError",
    "FusionError",
    "JSONParseError",
    "MessageParseError",
    "TransportError",
    "UnknownResponseFormatError",
]
