"""Query string building for the JSON protocol.

JSON protocol requests are plain GETs: every argument travels in the URL.
``action`` always comes first; the other arguments follow in iteration
order, using PHP-style brackets for sequences (``key[]=v``) and mappings
(``key[sub]=v``).

Values are percent-encoded as UTF-8. A value whose encoded form is longer
than MAX_ENCODED_VALUE_LENGTH loses its head: five characters at a time are
replaced by one ellipsis until it fits, keeping the tail (usually the
distinguishing part of a path) intact.

Example:
    >>> build_url("https://glpi.example.com/plugins/fusioninventory/",
    ...           {"action": "getConfig", "task": {"inventory": "1.0"}})
    'https://glpi.example.com/plugins/fusioninventory/?action=getConfig&task[inventory]=1.0'
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from fusion.models.constants import (
    MAX_ENCODED_VALUE_LENGTH,
    TRUNCATION_MARKER,
    TRUNCATION_STEP,
)


def _escape(value: str) -> str:
    # Unreserved characters only (RFC 3986), everything else percent-encoded
    return quote(value, safe="", encoding="utf-8", errors="strict")


def encode_value(value: Any, max_length: int = MAX_ENCODED_VALUE_LENGTH) -> str:
    """Percent-encode one scalar value, truncating its head when too long.

    Args:
        value: Scalar value; None and "" encode to ""
        max_length: Upper bound for the encoded length

    Returns:
        Encoded value, at most ``max_length`` characters long

    Raises:
        ValueError: If truncation is needed but ``max_length`` is shorter
            than the encoded truncation marker
    """
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)
    if not text:
        return ""

    encoded = _escape(text)
    if len(encoded) > max_length and max_length < len(_escape(TRUNCATION_MARKER)):
        raise ValueError(f"max_length {max_length} cannot hold the truncation marker")
    while len(encoded) > max_length:
        text = TRUNCATION_MARKER + text[TRUNCATION_STEP:]
        encoded = _escape(text)
    return encoded


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def build_url(
    base_url: Any,
    parameters: Mapping[str, Any],
    max_length: int = MAX_ENCODED_VALUE_LENGTH,
) -> str:
    """Build a JSON protocol GET URL.

    ``parameters`` must hold an ``action`` entry; a missing one is encoded
    as an empty action and left to the server to reject.

    Args:
        base_url: Server URL (str or httpx.URL)
        parameters: Ordered mapping of argument name to scalar, sequence
            of scalars or mapping of scalars
        max_length: Upper bound for each encoded value

    Returns:
        Full request URL
    """
    parts = [f"{base_url}?action={encode_value(parameters.get('action'), max_length)}"]

    for key, value in parameters.items():
        if key == "action":
            continue
        if _is_sequence(value):
            for item in value:
                parts.append(f"{key}[]={encode_value(item or '', max_length)}")
        elif isinstance(value, Mapping):
            for sub_key, item in value.items():
                parts.append(f"{key}[{sub_key}]={encode_value(item, max_length)}")
        else:
            encoded = encode_value(value, max_length)
            if encoded:
                parts.append(f"{key}={encoded}")

    return "&".join(parts)


__all__ = ["build_url", "encode_value"]
