# split_get/planner.py
"""Splits a resource of known size into contiguous byte ranges."""

from typing import List

from split_get.errors import InvalidPlanError
from split_get.models import ChunkInfo


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


def default_chunk_size(total_size: int, worker_count: int) -> int:
    """Chunk size giving one chunk per worker."""
    if total_size <= 0 or worker_count <= 0:
        raise InvalidPlanError(
            f"total_size and worker_count must be positive, got {total_size} and {worker_count}")
    return _ceil_div(total_size, worker_count)


def num_tasks(total_size: int, max_chunk_size: int) -> int:
    """Number of chunks needed so that none exceeds max_chunk_size."""
    if total_size <= 0:
        raise InvalidPlanError(f"total_size must be positive, got {total_size}")
    if max_chunk_size <= 0:
        raise InvalidPlanError(f"max_chunk_size must be positive, got {max_chunk_size}")
    return _ceil_div(total_size, max_chunk_size)


def plan(total_size: int, max_chunk_size: int, worker_count: int) -> List[ChunkInfo]:
    """Ordered chunks covering [0, total_size) with no gaps or overlaps.

    worker_count only limits how many chunks run at once; it never changes
    how many chunks there are.
    """
    if worker_count <= 0:
        raise InvalidPlanError(f"worker_count must be positive, got {worker_count}")
    count = num_tasks(total_size, max_chunk_size)

    chunks = []
    for i in range(count):
        start = i * max_chunk_size
        end = start + max_chunk_size - 1
        if i == count - 1:
            end = total_size - 1
        chunks.append(ChunkInfo(index=i, start=start, end=end))
    return chunks
