# split_get/errors.py
"""
Exception hierarchy for SplitGet.

Every failure the downloader can report derives from SplitGetError, so callers
can catch one base class and still branch on the specific stage that failed.
"""

from typing import Optional


class SplitGetError(Exception):
    """Base class for all downloader errors."""


class ConfigError(SplitGetError, ValueError):
    """A configuration value is out of range."""


class AllocationError(SplitGetError):
    """The receive buffer could not be created or grown."""


class ResolutionError(SplitGetError):
    """Hostname lookup failed."""

    def __init__(self, host: str, reason: str = ""):
        self.host = host
        super().__init__(f"Could not resolve host '{host}'" + (f": {reason}" if reason else ""))


class ConnectError(SplitGetError):
    """TCP connection could not be established."""

    def __init__(self, host: str, port: int, reason: str = ""):
        self.host = host
        self.port = port
        super().__init__(f"Could not connect to {host}:{port}" + (f": {reason}" if reason else ""))


class TransferError(SplitGetError):
    """Read or write failure in the middle of an exchange."""


class MalformedUrlError(SplitGetError, ValueError):
    """URL has no '/' separating host from path."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Could not split url into host/path: '{url}'")


class InvalidPlanError(SplitGetError, ValueError):
    """Chunk planner received a non-positive size or count."""


class HttpStatusError(SplitGetError):
    """Response carried a status the caller cannot use."""

    def __init__(self, status: Optional[int], context: str = ""):
        self.status = status
        message = f"HTTP status {status}"
        if context:
            message = f"{context}: {message}"
        super().__init__(message)


class DiscoveryError(SplitGetError):
    """Size discovery request failed."""


class RangeIgnoredError(SplitGetError):
    """Server answered a ranged request with the whole resource (status 200)."""

    def __init__(self, body: bytes):
        self.body = body
        super().__init__(f"Server ignored Range header and sent {len(body)} bytes")


class ChunkFailure(SplitGetError):
    """A chunk exhausted its retry budget."""

    def __init__(self, index: int, start: int, end: int, attempts: int, reason: str = ""):
        self.index = index
        self.start = start
        self.end = end
        self.attempts = attempts
        message = f"Chunk {index} (bytes {start}-{end}) failed after {attempts} attempt(s)"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class IncompleteDownloadError(SplitGetError):
    """Reassembled payload length differs from the advertised size."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Download incomplete: expected {expected} bytes, got {actual}")
