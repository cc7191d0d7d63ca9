"""Legacy XML protocol messages.

OutboundMessage builds the ``<REQUEST>`` document the agent posts to the
server; InboundMessage turns the server ``<REPLY>`` document into nested
Python data.

XML to data mapping (both directions):
- an element with children becomes a dict keyed by child tag
- sibling elements sharing a tag become a list
- a leaf element becomes its text ("" when empty)
- attributes are kept under "@name"; text next to attributes or
  children is kept under "#text"

Example:
    >>> message = OutboundMessage(deviceid="host-2026-10-19-11-16-00", query="PROLOG")
    >>> print(message.get_content())  # doctest: +ELLIPSIS
    <?xml version="1.0" encoding="UTF-8" ?>
    <REQUEST>
    ...
    >>> reply = InboundMessage.parse("<REPLY><PROLOG_FREQ>24</PROLOG_FREQ></REPLY>")
    >>> reply.get_content()
    {'PROLOG_FREQ': '24'}
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

from pydantic import Field

from fusion.errors import MessageParseError
from fusion.models.base import FusionBaseModel
from fusion.models.constants import REPLY_ROOT, REQUEST_ROOT
from fusion.utils.sanitization import first_line

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" ?>'
ATTRIBUTE_PREFIX = "@"
TEXT_KEY = "#text"


def _fill_element(element: ET.Element, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, dict):
        for key, child in value.items():
            key = str(key)
            if key == TEXT_KEY:
                element.text = str(child)
            elif key.startswith(ATTRIBUTE_PREFIX):
                element.set(key[len(ATTRIBUTE_PREFIX) :], str(child))
            elif isinstance(child, (list, tuple)):
                for item in child:
                    _fill_element(ET.SubElement(element, key), item)
            else:
                _fill_element(ET.SubElement(element, key), child)
        return
    element.text = str(value)


def _element_to_data(element: ET.Element) -> Any:
    children = list(element)
    text = (element.text or "").strip()
    if not children and not element.attrib:
        return element.text or ""

    data: dict[str, Any] = {
        f"{ATTRIBUTE_PREFIX}{name}": value for name, value in element.attrib.items()
    }
    for child in children:
        value = _element_to_data(child)
        if child.tag in data:
            existing = data[child.tag]
            if isinstance(existing, list):
                existing.append(value)
            else:
                data[child.tag] = [existing, value]
        else:
            data[child.tag] = value
    if text:
        data[TEXT_KEY] = text
    return data


class OutboundMessage(FusionBaseModel):
    """Message posted to the server with the legacy XML protocol.

    Attributes:
        deviceid: Agent device identifier
        query: Query type (PROLOG, INVENTORY, ...)
        content: Optional nested payload rendered under <CONTENT>
    """

    deviceid: str = Field(..., min_length=1)
    query: str = Field(..., min_length=1)
    content: dict[str, Any] | None = None

    def get_content(self) -> str:
        """Render the message as an XML document string."""
        root = ET.Element(REQUEST_ROOT)
        body: dict[str, Any] = {}
        if self.content is not None:
            body["CONTENT"] = self.content
        body["DEVICEID"] = self.deviceid
        body["QUERY"] = self.query
        _fill_element(root, body)
        ET.indent(root, space="  ")
        return f"{XML_DECLARATION}\n{ET.tostring(root, encoding='unicode')}\n"


class InboundMessage(FusionBaseModel):
    """Reply received from the server with the legacy XML protocol."""

    content: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def parse(cls, text: str) -> "InboundMessage":
        """Parse a ``<REPLY>`` document.

        Raises:
            MessageParseError: If the text is not well-formed XML or its
                root element is not REPLY
        """
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise MessageParseError(str(e), first_line=first_line(text)) from e

        if root.tag != REPLY_ROOT:
            raise MessageParseError(
                f"unexpected root element '{root.tag}'", first_line=first_line(text)
            )

        content = _element_to_data(root)
        if not isinstance(content, dict):
            content = {}
        return cls(content=content)

    def get_content(self) -> dict[str, Any]:
        """Return the reply payload as nested data."""
        return self.content


__all__ = ["InboundMessage", "OutboundMessage"]
