# split_get/buffer.py
"""
Growable byte buffer for socket reads of unknown total length.
"""

from split_get.errors import AllocationError


class GrowableBuffer:
    """Zero-filled byte region that doubles its capacity on demand.

    ``length`` counts the bytes written so far; ``capacity`` is the size of the
    backing region. Bytes past ``length`` are always zero.
    """

    def __init__(self, initial_size: int = 1024):
        if initial_size <= 0:
            raise ValueError(f"initial_size must be positive, got {initial_size}")
        try:
            self._data = bytearray(initial_size)
        except MemoryError as e:
            raise AllocationError(f"Could not allocate {initial_size} bytes") from e
        self.length = 0

    @property
    def capacity(self) -> int:
        return len(self._data)

    @property
    def remaining(self) -> int:
        return self.capacity - self.length

    def grow(self):
        """Double the capacity, keeping existing bytes at their offsets."""
        old_capacity = self.capacity
        try:
            self._data.extend(bytes(old_capacity))
        except MemoryError as e:
            raise AllocationError(
                f"Could not grow buffer from {old_capacity} to {old_capacity * 2} bytes") from e

    def write(self, data: bytes) -> int:
        """Append data, growing as many times as needed."""
        size = len(data)
        while self.remaining < size:
            self.grow()
        self._data[self.length:self.length + size] = data
        self.length += size
        return size

    def snapshot(self) -> bytes:
        """Copy of the whole region, including unused capacity."""
        return bytes(self._data)

    def __bytes__(self) -> bytes:
        # Slicing the view copies once; slicing the bytearray would copy twice
        with memoryview(self._data) as view:
            return view[:self.length].tobytes()

    def __len__(self) -> int:
        return self.length
