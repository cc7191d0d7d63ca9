"""Compression strategies for the legacy XML protocol.

The agent compresses every XML request body and advertises the format in
its Content-Type header. Which format is used depends on what the host can
do, probed once per client in this order:

1. zlib (RFC 1950) in process, advertised as application/x-compress-zlib
2. an external ``gzip`` executable (RFC 1952), advertised as
   application/x-compress-gzip
3. no compression, advertised as application/xml

Strategies raise CompressionError / DecompressionError on failure; they
never return a partial buffer.

Example:
    >>> from fusion.transport.compression import select_compression
    >>>
    >>> strategy = select_compression()
    >>> strategy.mode.value
    'zlib'
    >>> strategy.decompress(strategy.compress(b"<REQUEST/>"))
    b'<REQUEST/>'
"""

import importlib
import os
import shutil
import subprocess  # nosec B404
import tempfile
from abc import ABC, abstractmethod
from enum import Enum
from types import ModuleType

from fusion.errors import CompressionError, DecompressionError
from fusion.models.constants import (
    CONTENT_TYPE_GZIP,
    CONTENT_TYPE_XML,
    CONTENT_TYPE_ZLIB,
    GZIP_EXECUTABLE,
)
from fusion.observability import get_logger

logger = get_logger(__name__)

_GZIP_WARNING_STATUS = 2


class CompressionMode(str, Enum):
    """Compression modes, in capability precedence order."""

    ZLIB = "zlib"
    GZIP = "gzip"
    NONE = "none"


def _load_zlib() -> ModuleType | None:
    try:
        return importlib.import_module("zlib")
    except ImportError:
        return None


def is_zlib_available() -> bool:
    """Return True if an in-process deflate/inflate facility is importable."""
    return _load_zlib() is not None


def is_gzip_runnable(executable: str = GZIP_EXECUTABLE) -> bool:
    """Return True if a gzip executable can be found on PATH."""
    return shutil.which(executable) is not None


class CompressionStrategy(ABC):
    """One way of (de)compressing XML request and response bodies."""

    mode: CompressionMode
    content_type: str

    @abstractmethod
    def compress(self, data: bytes) -> bytes:
        """Compress an outbound body.

        Raises:
            CompressionError: If the body cannot be compressed
        """

    @abstractmethod
    def decompress(self, data: bytes) -> bytes:
        """Decompress an inbound body.

        Raises:
            DecompressionError: If the stream is malformed or the
                decompressor failed
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(mode={self.mode.value!r})"


class NoCompression(CompressionStrategy):
    """Plaintext passthrough."""

    mode = CompressionMode.NONE
    content_type = CONTENT_TYPE_XML

    def compress(self, data: bytes) -> bytes:
        return data

    def decompress(self, data: bytes) -> bytes:
        return data


class ZlibCompression(CompressionStrategy):
    """In-process zlib (RFC 1950 framed deflate)."""

    mode = CompressionMode.ZLIB
    content_type = CONTENT_TYPE_ZLIB
    wbits = 15

    def __init__(self) -> None:
        zlib = _load_zlib()
        if zlib is None:
            raise CompressionError(self.mode.value, "zlib module is not available")
        self._zlib = zlib

    def compress(self, data: bytes) -> bytes:
        try:
            compressor = self._zlib.compressobj(wbits=self.wbits)
            result: bytes = compressor.compress(data) + compressor.flush()
        except (self._zlib.error, TypeError) as e:
            raise CompressionError(self.mode.value, str(e)) from e
        return result

    def decompress(self, data: bytes) -> bytes:
        try:
            result: bytes = self._zlib.decompress(data, wbits=self.wbits)
        except (self._zlib.error, TypeError) as e:
            raise DecompressionError(self.mode.value, str(e)) from e
        return result


class ZlibGzipCompression(ZlibCompression):
    """In-process RFC 1952 gzip framing, used to read gzip replies."""

    mode = CompressionMode.GZIP
    content_type = CONTENT_TYPE_GZIP
    wbits = 31


class GzipProcessCompression(CompressionStrategy):
    """RFC 1952 gzip through an external ``gzip`` process.

    Each call writes its input to its own temporary file, runs
    ``gzip -c <file>`` (or ``gzip -dc <file>``) and reads the whole standard
    output. The temporary file is removed on every exit path.
    """

    mode = CompressionMode.GZIP
    content_type = CONTENT_TYPE_GZIP

    def __init__(self, executable: str = GZIP_EXECUTABLE) -> None:
        self.executable = executable

    def compress(self, data: bytes) -> bytes:
        try:
            output = self._run(["-c"], data)
        except (OSError, subprocess.CalledProcessError) as e:
            raise CompressionError(self.mode.value, str(e)) from e
        if not output:
            raise CompressionError(self.mode.value, "gzip produced no output")
        return output

    def decompress(self, data: bytes) -> bytes:
        try:
            return self._run(["-dc"], data)
        except subprocess.CalledProcessError as e:
            # Exit status 2 is a warning (trailing garbage ignored): output is complete
            if e.returncode == _GZIP_WARNING_STATUS and e.stdout:
                return bytes(e.stdout)
            raise DecompressionError(self.mode.value, str(e)) from e
        except OSError as e:
            raise DecompressionError(self.mode.value, str(e)) from e

    def _run(self, flags: list[str], data: bytes) -> bytes:
        fd, path = tempfile.mkstemp(prefix="fusion-", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            completed = subprocess.run(  # nosec B603
                [self.executable, *flags, path],
                stdin=subprocess.DEVNULL,
                capture_output=True,
                check=True,
            )
            return completed.stdout
        finally:
            try:
                os.unlink(path)
            except FileNotFoundError:
                pass


_STRATEGIES: dict[CompressionMode, type[CompressionStrategy]] = {
    CompressionMode.ZLIB: ZlibCompression,
    CompressionMode.GZIP: GzipProcessCompression,
    CompressionMode.NONE: NoCompression,
}


def get_compression(mode: CompressionMode | str) -> CompressionStrategy:
    """Build the strategy for a given mode, without probing the host.

    Raises:
        ValueError: If mode is not a known compression mode
    """
    return _STRATEGIES[CompressionMode(mode)]()


def get_decompressor(mode: CompressionMode | str) -> CompressionStrategy:
    """Return a strategy able to read a response framed as ``mode``.

    gzip replies are read in process when zlib is importable, through the
    gzip executable otherwise.

    Raises:
        DecompressionError: If no decompressor for ``mode`` exists on this host
    """
    mode = CompressionMode(mode)
    if mode is CompressionMode.NONE:
        return NoCompression()
    if is_zlib_available():
        return ZlibCompression() if mode is CompressionMode.ZLIB else ZlibGzipCompression()
    if mode is CompressionMode.GZIP:
        return GzipProcessCompression()
    raise DecompressionError(mode.value, "zlib module is not available")


def select_compression(disabled: bool = False) -> CompressionStrategy:
    """Probe the host and return the first available strategy.

    Args:
        disabled: Skip probing and use plaintext (agent --no-compression).

    Returns:
        ZlibCompression, GzipProcessCompression or NoCompression
    """
    strategy: CompressionStrategy
    if disabled:
        strategy = NoCompression()
        reason = "disabled_by_configuration"
    elif is_zlib_available():
        strategy = ZlibCompression()
        reason = "zlib_module_available"
    elif is_gzip_runnable():
        strategy = GzipProcessCompression()
        reason = "gzip_executable_found"
    else:
        strategy = NoCompression()
        reason = "no_compressor_available"

    logger.debug(
        "fusion.compression.selected",
        mode=strategy.mode.value,
        content_type=strategy.content_type,
        reason=reason,
    )
    return strategy


__all__ = [
    "CompressionMode",
    "CompressionStrategy",
    "GzipProcessCompression",
    "NoCompression",
    "ZlibCompression",
    "ZlibGzipCompression",
    "get_compression",
    "get_decompressor",
    "is_gzip_runnable",
    "is_zlib_available",
    "select_compression",
]
