# split_get/client.py
"""
Single request/response exchange over a fresh HTTP/1.0 connection.
"""

import logging
from typing import Optional, Tuple

from split_get.buffer import GrowableBuffer
from split_get.config import DownloadConfig
from split_get.connection import Connection
from split_get.errors import MalformedUrlError
from split_get.request import HttpMethod, build_request
from split_get.response import HttpResponse

logger = logging.getLogger(__name__)


def split_url(url: str) -> Tuple[str, str]:
    """Split ``host/path`` at the first '/'. The path keeps its leading slash."""
    index = url.find("/")
    if index <= 0:
        raise MalformedUrlError(url)
    return url[:index], url[index:]


class HttpClient:
    """Performs one query per call. Never retries; errors propagate as raised."""

    def __init__(self, config: Optional[DownloadConfig] = None):
        self.config = config or DownloadConfig()

    async def query(self, host: str, path: str, range: str = "", port: Optional[int] = None,
                    method: HttpMethod = HttpMethod.GET) -> HttpResponse:
        """Build, send, and read one request; the connection is always released."""
        port = port or self.config.port
        request = build_request(host, path, range, method=method, user_agent=self.config.user_agent)
        buffer = GrowableBuffer(self.config.initial_buffer_size)

        conn = await Connection.open(host, port,
                                     connect_timeout=self.config.connect_timeout,
                                     read_timeout=self.config.read_timeout)
        async with conn:
            await conn.write_all(request.data)
            received = await conn.read_until_closed(buffer, self.config.read_size)

        logger.debug("%s %s:%d%s range=%r -> %d bytes",
                     request.method.value, host, port, path, range or "-", received)
        return HttpResponse(buffer)

    async def query_url(self, url: str, range: str = "", port: Optional[int] = None,
                        method: HttpMethod = HttpMethod.GET) -> HttpResponse:
        host, path = split_url(url)
        return await self.query(host, path, range, port=port, method=method)
