# split_get/request.py
"""HTTP/1.0 request formatting."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

HTTP_VERSION = "HTTP/1.0"


class HttpMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"


@dataclass(frozen=True)
class HttpRequest:
    """A fully formatted request, ready to put on the wire."""
    method: HttpMethod
    host: str
    path: str
    range: str
    data: bytes

    def __bytes__(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)


def build_request(host: str, path: str, range: str = "",
                  method: HttpMethod = HttpMethod.GET,
                  user_agent: Optional[str] = None) -> HttpRequest:
    """Format a request line plus Host and optional Range headers.

    ``range`` is ``"<start>-<end>"`` or empty for the whole resource.
    """
    if not host:
        raise ValueError("host must not be empty")
    if not path.startswith("/"):
        raise ValueError(f"path must start with '/', got '{path}'")

    lines = [f"{HttpMethod(method).value} {path} {HTTP_VERSION}", f"Host: {host}"]
    if range:
        lines.append(f"Range: bytes={range}")
    if user_agent:
        lines.append(f"User-Agent: {user_agent}")
    text = "\r\n".join(lines) + "\r\n\r\n"
    return HttpRequest(method=HttpMethod(method), host=host, path=path, range=range,
                       data=text.encode("latin-1"))
