"""Shared pytest fixtures for fusion tests."""

from __future__ import annotations

import pytest

from fusion.config import ENV_NO_COMPRESSION, ENV_NO_SSL_CHECK, ENV_TIMEOUT, ENV_USER_AGENT
from fusion.observability.logging import ENV_DEBUG

# Load fusion.testing fixtures (mock_server, glpi_client)
pytest_plugins = ["fusion.testing.fixtures"]


@pytest.fixture(autouse=True)
def _clean_fusion_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep FUSION_* variables from the developer shell out of tests."""
    for name in (ENV_DEBUG, ENV_NO_COMPRESSION, ENV_NO_SSL_CHECK, ENV_TIMEOUT, ENV_USER_AGENT):
        monkeypatch.delenv(name, raising=False)
