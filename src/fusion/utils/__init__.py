"""Utility modules for the fusion transport.

This package contains helpers shared across the transport, such as
log sanitization for URLs and raw response bodies.
"""

__all__: list[str] = []
