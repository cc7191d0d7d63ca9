"""Testing helpers for code built on the fusion transport.

- MockServer: in-process GLPI server stand-in for httpx.MockTransport
- zlib_response / gzip_response / json_response: canned server replies
- fusion.testing.fixtures: pytest fixtures (load with
  ``pytest_plugins = ["fusion.testing.fixtures"]``)
"""

from fusion.testing.mocks import MockServer, gzip_response, json_response, zlib_response

__all__ = [
    "MockServer",
    "gzip_response",
    "json_response",
    "zlib_response",
]
