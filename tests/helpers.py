"""Test servers and canned responses shared by the test modules."""

import asyncio
import contextlib
import re
from typing import Callable, List, Optional

from split_get.buffer import GrowableBuffer
from split_get.response import HttpResponse

_RANGE_HEADER = re.compile(rb"\r\nRange: bytes=(\d+)-(\d+)\r\n")


def make_response(raw: bytes) -> HttpResponse:
    buffer = GrowableBuffer(16)
    buffer.write(raw)
    return HttpResponse(buffer)


def http_response(body: bytes = b"", status: str = "200 OK", headers: Optional[List[str]] = None) -> bytes:
    lines = [f"HTTP/1.0 {status}"] + (headers or [])
    return ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1") + body


def range_response(data: bytes, request: bytes) -> bytes:
    """Answer request the way a range-capable server would."""
    if request.startswith(b"HEAD "):
        return http_response(headers=[f"Content-Length: {len(data)}", "Accept-Ranges: bytes"])
    match = _RANGE_HEADER.search(request)
    if not match:
        return http_response(data, headers=[f"Content-Length: {len(data)}"])
    start, end = int(match.group(1)), int(match.group(2))
    body = data[start:end + 1]
    return http_response(body, status="206 Partial Content", headers=[
        f"Content-Length: {len(body)}",
        f"Content-Range: bytes {start}-{end}/{len(data)}",
    ])


@contextlib.asynccontextmanager
async def scripted_server(handler: Callable[[bytes], bytes]):
    """TCP server that reads one request head, writes handler(request), and closes.

    Yields (port, requests) where requests collects every request head received.
    """
    requests = []

    async def on_client(reader, writer):
        data = b""
        while b"\r\n\r\n" not in data:
            chunk = await reader.read(4096)
            if not chunk:
                break
            data += chunk
        requests.append(data)
        response = handler(data)
        if response:
            writer.write(response)
            await writer.drain()
        writer.close()

    server = await asyncio.start_server(on_client, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield port, requests
    finally:
        server.close()
        await server.wait_closed()
