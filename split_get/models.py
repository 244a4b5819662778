# split_get/models.py
"""
Data Models for SplitGet
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ChunkInfo:
    """One byte range of the target resource"""
    index: int
    start: int
    end: int  # inclusive
    retries: int = 0
    completed: bool = False
    worker_id: Optional[int] = None

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def range(self) -> str:
        """Range value as sent after ``bytes=``."""
        return f"{self.start}-{self.end}"


@dataclass
class ServerCapabilities:
    """What size discovery learned about the server"""
    status: Optional[int] = None
    content_length: Optional[int] = None
    supports_range: bool = True
    accept_ranges: Optional[str] = None


@dataclass
class DownloadResult:
    """Outcome of a finished download"""
    payload: bytes
    total_size: Optional[int]
    chunks: List[ChunkInfo] = field(default_factory=list)
    ranged: bool = False
    elapsed: float = 0.0

    @property
    def is_complete(self) -> bool:
        return self.total_size is None or len(self.payload) == self.total_size
