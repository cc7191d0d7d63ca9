"""Fusion data models.

Exports the legacy XML protocol messages and the shared base model.
"""

from fusion.models.base import FusionBaseModel
from fusion.models.message import InboundMessage, OutboundMessage

__all__ = [
    "FusionBaseModel",
    "InboundMessage",
    "OutboundMessage",
]
