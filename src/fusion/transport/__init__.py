"""Transport layer for the fusion agent.

This module provides the HTTP client speaking the JSON and legacy XML
agent protocols, together with its building blocks:

- GLPIClient: send_json / send_xml against a GLPI server
- Compression strategies probed from the host capabilities
- Response sniffing of the reply wire format
- Query string building for JSON protocol requests

Example:
    >>> from fusion.transport import GLPIClient
    >>>
    >>> with GLPIClient() as client:
    ...     client.send_json("https://glpi.example.com/plugins/fusioninventory/",
    ...                      {"action": "getConfig"})
"""

from fusion.transport.client import GLPIClient, MessageParser, ParsedMessage
from fusion.transport.compression import (
    CompressionMode,
    CompressionStrategy,
    GzipProcessCompression,
    NoCompression,
    ZlibCompression,
    ZlibGzipCompression,
    get_compression,
    get_decompressor,
    is_gzip_runnable,
    is_zlib_available,
    select_compression,
)
from fusion.transport.query import build_url, encode_value
from fusion.transport.sniffer import ResponseFormat, SniffResult, sniff_response

__all__ = [
    "CompressionMode",
    "CompressionStrategy",
    "GLPIClient",
    "GzipProcessCompression",
    "MessageParser",
    "NoCompression",
    "ParsedMessage",
    "ResponseFormat",
    "SniffResult",
    "ZlibCompression",
    "ZlibGzipCompression",
    "build_url",
    "encode_value",
    "get_compression",
    "get_decompressor",
    "is_gzip_runnable",
    "is_zlib_available",
    "select_compression",
    "sniff_response",
]
