# split_get/connection.py
"""
TCP connection to a single host:port, built on asyncio streams.
"""

import asyncio
import logging
import socket
from typing import AsyncIterator, Optional

from split_get.buffer import GrowableBuffer
from split_get.errors import ConnectError, ResolutionError, TransferError

logger = logging.getLogger(__name__)


class Connection:
    """One TCP stream, owned by exactly one request/response exchange."""

    def __init__(self, host: str, port: int, reader: asyncio.StreamReader,
                 writer: asyncio.StreamWriter, read_timeout: float = 30.0):
        self.host = host
        self.port = port
        self._reader = reader
        self._writer = writer
        self.read_timeout = read_timeout
        self.closed = False

    @classmethod
    async def open(cls, host: str, port: int, connect_timeout: float = 30.0,
                   read_timeout: float = 30.0) -> "Connection":
        """Resolve host and connect to the first address that accepts."""
        loop = asyncio.get_running_loop()
        try:
            addresses = await asyncio.wait_for(
                loop.getaddrinfo(host, port, type=socket.SOCK_STREAM), timeout=connect_timeout)
        except asyncio.TimeoutError as e:
            raise ResolutionError(host, f"lookup timed out after {connect_timeout}s") from e
        except (socket.gaierror, UnicodeError) as e:
            raise ResolutionError(host, str(e)) from e
        if not addresses:
            raise ResolutionError(host, "no addresses returned")

        last_error: Optional[BaseException] = None
        for family, _, _, _, sockaddr in addresses:
            address = sockaddr[0]
            try:
                reader, writer = await asyncio.wait_for(
                    asyncio.open_connection(address, port, family=family),
                    timeout=connect_timeout)
            except (OSError, asyncio.TimeoutError) as e:
                logger.debug("Connect to %s (%s):%d failed: %r", host, address, port, e)
                last_error = e
                continue
            logger.debug("Connected to %s (%s):%d", host, address, port)
            return cls(host, port, reader, writer, read_timeout=read_timeout)

        reason = "timed out" if isinstance(last_error, asyncio.TimeoutError) else str(last_error)
        raise ConnectError(host, port, reason) from last_error

    async def write_all(self, data: bytes):
        """Send every byte of data or raise TransferError."""
        try:
            self._writer.write(data)
            await asyncio.wait_for(self._writer.drain(), timeout=self.read_timeout)
        except (OSError, asyncio.TimeoutError) as e:
            raise TransferError(f"Write to {self.host}:{self.port} failed: {e!r}") from e

    async def iter_chunks(self, read_size: int = 8192) -> AsyncIterator[bytes]:
        """Yield received data until the peer closes the connection."""
        while True:
            try:
                data = await asyncio.wait_for(self._reader.read(read_size), timeout=self.read_timeout)
            except asyncio.TimeoutError as e:
                raise TransferError(
                    f"Read from {self.host}:{self.port} timed out after {self.read_timeout}s") from e
            except OSError as e:
                raise TransferError(f"Read from {self.host}:{self.port} failed: {e!r}") from e
            if not data:
                return
            yield data

    async def read_until_closed(self, buffer: GrowableBuffer, read_size: int = 8192) -> int:
        """Read into buffer until EOF and return the number of bytes read."""
        total = 0
        async for data in self.iter_chunks(read_size):
            total += buffer.write(data)
        return total

    async def close(self):
        if self.closed:
            return
        self.closed = True
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except OSError as e:
            logger.debug("Error while closing %s:%d: %r", self.host, self.port, e)

    async def __aenter__(self) -> "Connection":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
