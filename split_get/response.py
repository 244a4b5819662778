# split_get/response.py
"""
Raw HTTP response parsing.

Only the status line and a handful of headers are interpreted; everything else
in the header block is treated as opaque.
"""

import logging
import re
from typing import Dict, Optional, Tuple

from split_get.buffer import GrowableBuffer

logger = logging.getLogger(__name__)

HEADER_SEPARATOR = b"\r\n\r\n"

_STATUS_LINE = re.compile(rb"^HTTP/\d+(?:\.\d+)?\s+(\d{3})")
_CONTENT_RANGE = re.compile(r"^\s*bytes\s+(\d+)-(\d+)/(\d+|\*)\s*$", re.IGNORECASE)


def split_header_body(raw: bytes) -> int:
    """Return the offset where the body starts.

    Without a blank-line separator the whole response is body, so 0 is returned.
    """
    header_end = raw.find(HEADER_SEPARATOR)
    if header_end == -1:
        return 0
    return header_end + len(HEADER_SEPARATOR)


def header_block(raw: bytes) -> bytes:
    offset = split_header_body(raw)
    if offset == 0:
        return b""
    return raw[:offset - len(HEADER_SEPARATOR)]


def status_code(raw: bytes) -> Optional[int]:
    match = _STATUS_LINE.match(header_block(raw))
    return int(match.group(1)) if match else None


def parse_headers(raw: bytes) -> Dict[str, str]:
    """Header fields keyed by lower-cased name. Later duplicates win."""
    headers = {}
    lines = header_block(raw).decode("latin-1").split("\r\n")
    for line in lines[1:]:
        name, sep, value = line.partition(":")
        if not sep:
            continue
        headers[name.strip().lower()] = value.strip()
    return headers


def content_length(raw: bytes) -> Optional[int]:
    """Value of Content-Length, or None when missing or unparsable."""
    value = parse_headers(raw).get("content-length")
    if value is None:
        return None
    try:
        length = int(value)
    except ValueError:
        logger.warning("Ignoring unparsable Content-Length: %r", value)
        return None
    if length < 0:
        logger.warning("Ignoring negative Content-Length: %d", length)
        return None
    return length


def content_range(raw: bytes) -> Optional[Tuple[int, int, Optional[int]]]:
    """Parse ``Content-Range: bytes start-end/total`` into a tuple.

    total is None when the server sends ``*``.
    """
    value = parse_headers(raw).get("content-range")
    if value is None:
        return None
    match = _CONTENT_RANGE.match(value)
    if not match:
        logger.warning("Ignoring unparsable Content-Range: %r", value)
        return None
    start, end, total = match.groups()
    return int(start), int(end), None if total == "*" else int(total)


class HttpResponse:
    """A received response: the bytes read from the buffer plus their header/body split.

    The buffer itself is not kept, so its spare capacity is released once the
    caller drops it.
    """

    def __init__(self, buffer: GrowableBuffer):
        self.raw = bytes(buffer)
        self.body_offset = split_header_body(self.raw)

    @property
    def body(self) -> bytes:
        if self.body_offset == 0:
            return self.raw
        with memoryview(self.raw) as view:
            return view[self.body_offset:].tobytes()

    @property
    def headers(self) -> Dict[str, str]:
        return parse_headers(self.raw)

    @property
    def status(self) -> Optional[int]:
        return status_code(self.raw)

    @property
    def content_length(self) -> Optional[int]:
        return content_length(self.raw)

    @property
    def content_range(self) -> Optional[Tuple[int, int, Optional[int]]]:
        return content_range(self.raw)

    def __len__(self) -> int:
        return len(self.raw)

    def __repr__(self) -> str:
        return f"<HttpResponse status={self.status} length={len(self.raw)} body={len(self.body)}>"
