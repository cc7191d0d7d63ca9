"""Constants for the fusion transport.

This module defines protocol-wide constants used across the codebase.
"""

# Wire content types advertised on outbound XML requests
CONTENT_TYPE_ZLIB = "application/x-compress-zlib"
CONTENT_TYPE_GZIP = "application/x-compress-gzip"
CONTENT_TYPE_XML = "application/xml"

# Stream signatures searched for in inbound responses
ZLIB_SIGNATURE = b"\x78\x9c"
GZIP_SIGNATURE = b"\x1f\x8b\x08"

# Empty marker some proxies put in front of error XML
HTML_WRAPPER_MARKER = b"<html></html>"

MAX_ENCODED_VALUE_LENGTH = 1500
"""Upper bound for one percent-encoded query parameter value.

Longer values lose their head, TRUNCATION_STEP characters at a time,
behind a single TRUNCATION_MARKER until they fit.
"""

TRUNCATION_STEP = 5
TRUNCATION_MARKER = "…"  # horizontal ellipsis

# Default request timeout in seconds
DEFAULT_TIMEOUT_SECONDS = 180.0

# Executable used when no in-process zlib is available
GZIP_EXECUTABLE = "gzip"

# Root elements of the legacy XML protocol
REQUEST_ROOT = "REQUEST"
REPLY_ROOT = "REPLY"

# Package version, also sent in the default User-Agent
AGENT_VERSION = "0.1.0"
DEFAULT_USER_AGENT = f"FusionInventory-Agent_v{AGENT_VERSION}"
