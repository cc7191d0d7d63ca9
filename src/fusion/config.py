"""Client configuration.

ClientConfig groups the settings of a GLPIClient. Values come from
arguments, or from the environment through ``ClientConfig.from_env()``:

    FUSION_TIMEOUT: Request timeout in seconds
    FUSION_USER_AGENT: User-Agent header value
    FUSION_NO_SSL_CHECK: Disable TLS certificate verification ("1", "true", ...)
    FUSION_NO_COMPRESSION: Send XML requests uncompressed ("1", "true", ...)
"""

from __future__ import annotations

import os

from pydantic import Field

from fusion.models.base import FusionBaseModel
from fusion.models.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    MAX_ENCODED_VALUE_LENGTH,
)

ENV_TIMEOUT = "FUSION_TIMEOUT"
ENV_USER_AGENT = "FUSION_USER_AGENT"
ENV_NO_SSL_CHECK = "FUSION_NO_SSL_CHECK"
ENV_NO_COMPRESSION = "FUSION_NO_COMPRESSION"

_TRUTHY = ("true", "1", "yes", "on")


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


class ClientConfig(FusionBaseModel):
    """Settings for GLPIClient.

    Attributes:
        timeout: Request timeout in seconds
        user_agent: User-Agent header sent with every request
        verify: Verify the server TLS certificate
        no_compression: Never compress XML requests
        max_value_length: Upper bound for each encoded query value
    """

    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    verify: bool = True
    no_compression: bool = False
    # 9 is the encoded length of the truncation marker
    max_value_length: int = Field(default=MAX_ENCODED_VALUE_LENGTH, ge=9)

    @classmethod
    def from_env(cls, **overrides: object) -> ClientConfig:
        """Build a config from FUSION_* environment variables.

        Keyword arguments take precedence over the environment.

        Raises:
            pydantic.ValidationError: If a value is out of range or malformed
        """
        values: dict[str, object] = {}
        timeout = os.environ.get(ENV_TIMEOUT)
        if timeout:
            values["timeout"] = timeout
        user_agent = os.environ.get(ENV_USER_AGENT)
        if user_agent:
            values["user_agent"] = user_agent
        if _env_flag(ENV_NO_SSL_CHECK):
            values["verify"] = False
        if _env_flag(ENV_NO_COMPRESSION):
            values["no_compression"] = True
        values.update(overrides)
        return cls.model_validate(values)
