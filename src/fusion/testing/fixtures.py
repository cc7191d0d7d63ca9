"""Pytest fixtures for fusion tests.

Fixtures (use with pytest):
    mock_server: Fresh MockServer for the test.
    glpi_client: GLPIClient wired to mock_server, zlib compression forced.
"""

from collections.abc import Iterator

import pytest

from fusion.testing.mocks import MockServer
from fusion.transport.client import GLPIClient
from fusion.transport.compression import CompressionMode

DEFAULT_TEST_SERVER_URL = "http://glpi.test/plugins/fusioninventory/"


@pytest.fixture
def mock_server() -> MockServer:
    return MockServer()


@pytest.fixture
def glpi_client(mock_server: MockServer) -> Iterator[GLPIClient]:
    """GLPIClient sending to ``mock_server``; closed after the test."""
    with GLPIClient(
        transport=mock_server.transport(),
        compression=CompressionMode.ZLIB,
    ) as client:
        yield client
