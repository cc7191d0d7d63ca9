"""Wire format detection for legacy XML protocol responses.

Servers answer in zlib, gzip or plain XML whatever the agent asked for,
and the Content-Type they send cannot be trusted. The format is therefore
guessed from the raw bytes, first match wins:

1. a zlib header (78 9C) anywhere in the body -> DEFLATE
2. a gzip header (1F 8B 08) anywhere in the body -> GZIP
3. a body ending with a closing ``>`` after an XML-looking fragment,
   optionally preceded by an empty ``<html></html>`` marker -> PLAIN_XML
4. anything else -> UNKNOWN

Leading noise before a signature is tolerated; the payload starts at the
signature. Detection never raises.

Example:
    >>> sniff_response(b"<REPLY><RESPONSE>SEND</RESPONSE></REPLY>\\n").format
    <ResponseFormat.PLAIN_XML: 'plain_xml'>
    >>> sniff_response(b"garbage").format
    <ResponseFormat.UNKNOWN: 'unknown'>
"""

from dataclasses import dataclass
from enum import Enum

from fusion.models.constants import GZIP_SIGNATURE, HTML_WRAPPER_MARKER, ZLIB_SIGNATURE


class ResponseFormat(str, Enum):
    """Wire format of a response body."""

    DEFLATE = "deflate"
    GZIP = "gzip"
    PLAIN_XML = "plain_xml"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SniffResult:
    """Classification of a response body.

    Attributes:
        format: Detected wire format
        payload: Bytes considered the payload proper, None when UNKNOWN
    """

    format: ResponseFormat
    payload: bytes | None = None

    @property
    def is_known(self) -> bool:
        return self.format is not ResponseFormat.UNKNOWN


UNKNOWN_RESULT = SniffResult(ResponseFormat.UNKNOWN)


def _trailing_xml_fragment(data: bytes) -> bytes | None:
    body = data.rstrip()
    if not body.endswith(b">"):
        return None

    # Skip an empty HTML wrapper only when XML follows it
    if body.startswith(HTML_WRAPPER_MARKER) and b"<" in body[len(HTML_WRAPPER_MARKER) :]:
        body = body[len(HTML_WRAPPER_MARKER) :]

    start = body.find(b"<")
    if start < 0:
        return None
    return body[start:]


def sniff_response(data: bytes) -> SniffResult:
    """Classify a raw response body.

    Args:
        data: Raw response bytes

    Returns:
        SniffResult; UNKNOWN for anything unrecognised, including empty or
        non-bytes input
    """
    if not data or not isinstance(data, (bytes, bytearray, memoryview)):
        return UNKNOWN_RESULT
    data = bytes(data)

    offset = data.find(ZLIB_SIGNATURE)
    if offset >= 0:
        return SniffResult(ResponseFormat.DEFLATE, data[offset:])

    offset = data.find(GZIP_SIGNATURE)
    if offset >= 0:
        return SniffResult(ResponseFormat.GZIP, data[offset:])

    fragment = _trailing_xml_fragment(data)
    if fragment is not None:
        return SniffResult(ResponseFormat.PLAIN_XML, fragment)

    return UNKNOWN_RESULT


__all__ = ["ResponseFormat", "SniffResult", "sniff_response"]
