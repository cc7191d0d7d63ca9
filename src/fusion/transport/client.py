"""Synchronous HTTP client for GLPI / FusionInventory servers.

The agent talks to its server with two protocols:

- the JSON protocol: arguments encoded in the URL of a GET request, JSON
  reply (``send_json``)
- the legacy XML protocol: a compressed XML document POSTed to the server,
  reply in zlib, gzip or plain XML whatever was asked (``send_xml``)

Both operations either fully succeed or return None. Every failure is
logged here with its error code and a bounded diagnostic; deciding whether
to retry belongs to the caller. Connection handling, TLS, proxies and
timeouts belong to the underlying httpx client.

Example:
    >>> from fusion.transport.client import GLPIClient
    >>> from fusion.models.message import OutboundMessage
    >>>
    >>> with GLPIClient() as client:
    ...     config = client.send_json(
    ...         "https://glpi.example.com/plugins/fusioninventory/",
    ...         {"action": "getConfig", "machineid": "host-2026-10-19-11-16-00",
    ...          "task": {"inventory": "2.6"}},
    ...     )
    ...     prolog = client.send_xml(
    ...         "https://glpi.example.com/plugins/fusioninventory/",
    ...         OutboundMessage(deviceid="host-2026-10-19-11-16-00", query="PROLOG"),
    ...     )
"""

import json
from collections.abc import Callable, Mapping
from typing import Any, Protocol

import httpx

from fusion.config import ClientConfig
from fusion.errors import (
    CompressionError,
    DecompressionError,
    EmptyResponseError,
    FusionError,
    JSONParseError,
    MessageParseError,
    TransportError,
    UnknownResponseFormatError,
)
from fusion.models.message import InboundMessage
from fusion.observability import get_logger, is_debug_mode, request_context
from fusion.transport.compression import (
    CompressionMode,
    CompressionStrategy,
    get_compression,
    get_decompressor,
    select_compression,
)
from fusion.transport.query import build_url
from fusion.transport.sniffer import ResponseFormat, SniffResult, sniff_response
from fusion.utils.sanitization import bounded_prefix, first_line, sanitize_url

logger = get_logger(__name__)

_DECOMPRESSION_MODES = {
    ResponseFormat.DEFLATE: CompressionMode.ZLIB,
    ResponseFormat.GZIP: CompressionMode.GZIP,
}


class ParsedMessage(Protocol):
    """What a message parser hands back: anything exposing its content."""

    def get_content(self) -> Any: ...


MessageParser = Callable[[str], ParsedMessage]


def _message_bytes(message: Any) -> bytes:
    if isinstance(message, bytes):
        return message
    if isinstance(message, str):
        return message.encode("utf-8")
    content = message.get_content()
    if isinstance(content, bytes):
        return content
    return str(content).encode("utf-8")


class GLPIClient:
    """HTTP client for the JSON and legacy XML agent protocols.

    The compression strategy is chosen once, at construction, and never
    changes afterwards. It decides the Content-Type advertised on every
    request and how XML request bodies are compressed.

    Attributes:
        config: Client settings
        compression: Selected compression strategy
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
        compression: CompressionStrategy | CompressionMode | str | None = None,
        message_parser: MessageParser | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client settings (defaults to ClientConfig())
            client: Existing httpx client to send requests with; the caller
                keeps ownership and closes it
            transport: Custom httpx transport for an owned client (e.g.
                httpx.MockTransport in tests); ignored when ``client`` is given
            compression: Strategy or mode forcing the compression; probed
                from the host when None
            message_parser: Parser for XML replies (defaults to
                InboundMessage.parse)
        """
        self.config = config or ClientConfig()

        if compression is None:
            strategy = select_compression(disabled=self.config.no_compression)
        elif isinstance(compression, CompressionStrategy):
            strategy = compression
        else:
            strategy = get_compression(compression)
        self._compression = strategy

        self._message_parser: MessageParser = message_parser or InboundMessage.parse
        self._headers = {
            "Pragma": "no-cache",
            "Content-Type": strategy.content_type,
            "User-Agent": self.config.user_agent,
        }

        if client is not None:
            self._client = client
            self._owns_client = False
        else:
            self._client = httpx.Client(
                timeout=self.config.timeout,
                verify=self.config.verify,
                transport=transport,
            )
            self._owns_client = True

    @property
    def compression(self) -> CompressionStrategy:
        return self._compression

    @property
    def headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return dict(self._headers)

    def __enter__(self) -> "GLPIClient":
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def send_json(self, url: str | httpx.URL, args: Mapping[str, Any]) -> Any:
        """Send a JSON protocol request.

        Args:
            url: Server URL
            args: Request arguments; ``action`` is mandatory. Values may be
                scalars, sequences of scalars or mappings of scalars.

        Returns:
            Decoded JSON value, or None on failure
        """
        request_url = build_url(url, args, max_length=self.config.max_value_length)

        with request_context(protocol="json", url=sanitize_url(str(url))):
            # Secret-looking arguments are redacted by the logging pipeline
            logger.debug("fusion.client.send_json", args=dict(args))
            try:
                response = self._request("GET", request_url)
                if not response.is_success:
                    logger.warning("fusion.client.json_status", status_code=response.status_code)
                return self._decode_json(response.content, str(url))
            except FusionError as e:
                self._log_failure(e)
                return None

    def send_xml(self, url: str | httpx.URL, message: Any) -> Any:
        """Send a legacy XML protocol message.

        Args:
            url: Server URL
            message: OutboundMessage, any object with ``get_content()``, or
                the XML document itself as str or bytes

        Returns:
            Content of the parsed reply, or None on failure
        """
        target = str(url)
        payload = _message_bytes(message)

        with request_context(protocol="xml", url=sanitize_url(target)):
            logger.debug(
                "fusion.client.send_xml",
                size=len(payload),
                compression=self._compression.mode.value,
            )
            if is_debug_mode():
                logger.debug(
                    "fusion.client.sending_message",
                    content=payload.decode("utf-8", errors="replace"),
                )

            try:
                body = self._compression.compress(payload)
                if not body:
                    raise CompressionError(self._compression.mode.value, "empty request body")
                response = self._request("POST", target, content=body)
                if not response.is_success:
                    raise TransportError(
                        sanitize_url(target),
                        f"HTTP {response.status_code} {response.reason_phrase}",
                        status_code=response.status_code,
                    )

                raw = response.content
                if not raw:
                    raise EmptyResponseError(sanitize_url(target))

                result = sniff_response(raw)
                logger.debug(
                    "fusion.client.response_format", format=result.format.value, size=len(raw)
                )
                if not result.is_known:
                    raise UnknownResponseFormatError(sanitize_url(target), bounded_prefix(raw))

                text = self._decode_payload(result, raw)
                if is_debug_mode():
                    logger.debug("fusion.client.receiving_message", content=text)

                return self._parse_reply(text)
            except FusionError as e:
                self._log_failure(e)
                return None

    def _request(self, method: str, url: str, content: bytes | None = None) -> httpx.Response:
        try:
            return self._client.request(method, url, headers=self._headers, content=content)
        except httpx.HTTPError as e:
            raise TransportError(sanitize_url(url), f"{type(e).__name__}: {e}", cause=e) from e

    @staticmethod
    def _decode_json(content: bytes, url: str) -> Any:
        try:
            return json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise JSONParseError(
                sanitize_url(url), str(e), details={"prefix": bounded_prefix(content)}
            ) from e

    @staticmethod
    def _decode_payload(result: SniffResult, raw: bytes) -> str:
        payload = result.payload or b""
        mode = _DECOMPRESSION_MODES.get(result.format)
        try:
            if mode is not None:
                payload = get_decompressor(mode).decompress(payload)
            if not payload:
                raise DecompressionError(result.format.value, "empty result")
        except DecompressionError as e:
            e.details["prefix"] = bounded_prefix(raw)
            raise

        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MessageParseError(
                f"invalid UTF-8: {e}", first_line=first_line(bounded_prefix(payload))
            ) from e

    def _parse_reply(self, text: str) -> Any:
        try:
            reply = self._message_parser(text)
            if reply is None:
                raise MessageParseError("parser returned no message", first_line=first_line(text))
            return reply.get_content()
        except MessageParseError:
            raise
        except Exception as e:
            raise MessageParseError(
                f"{type(e).__name__}: {e}", first_line=first_line(text)
            ) from e

    @staticmethod
    def _log_failure(error: FusionError) -> None:
        logger.error(
            "fusion.client.request_failed",
            code=error.code,
            error=error.message,
            **error.details,
        )


__all__ = ["GLPIClient", "MessageParser", "ParsedMessage"]
