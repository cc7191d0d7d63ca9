"""Fusion: transport client for the GLPI / FusionInventory agent protocols.

Exchanges inventory and discovery messages with a GLPI server, either as
compressed XML documents POSTed to the server or as JSON requests encoded
in GET URLs.

Example:
    >>> from fusion import GLPIClient, OutboundMessage
    >>>
    >>> with GLPIClient() as client:
    ...     reply = client.send_xml(
    ...         "https://glpi.example.com/plugins/fusioninventory/",
    ...         OutboundMessage(deviceid="host-2026-10-19-11-16-00", query="PROLOG"),
    ...     )
"""

from fusion.config import ClientConfig
from fusion.errors import FusionError
from fusion.models.constants import AGENT_VERSION
from fusion.models.message import InboundMessage, OutboundMessage
from fusion.transport.client import GLPIClient
from fusion.transport.compression import CompressionMode

__version__ = AGENT_VERSION

__all__ = [
    "ClientConfig",
    "CompressionMode",
    "FusionError",
    "GLPIClient",
    "InboundMessage",
    "OutboundMessage",
    "__version__",
]
