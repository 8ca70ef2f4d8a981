from __future__ import annotations

from typing import BinaryIO


def grown_capacity(minimum: int) -> int:
    """Smallest power of two that is >= `minimum` (at least 1)."""
    if minimum < 0:
        raise ValueError("minimum must be >= 0")
    size = 1
    while size < minimum:
        size += size
    return size


class ScratchBuffer:
    """Fixed-capacity byte window that successive chunks of a source are read into.

    The capacity is chosen once and never changes. Only the first `fill()`
    result bytes of `data` are meaningful after a fill.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must be >= 0")
        self._data = bytearray(capacity)
        self._view = memoryview(self._data)

    @property
    def capacity(self) -> int:
        """Size of the window in bytes."""
        return len(self._data)

    @property
    def data(self) -> bytearray:
        return self._data

    def fill(self, source: BinaryIO) -> int:
        """Read from `source` until the buffer is full or a read returns nothing.

        Returns the number of valid bytes at the front of the buffer; 0 means
        the source is exhausted. Read errors propagate as `OSError`.
        """
        filled = 0
        while filled < len(self._data):
            got = source.readinto(self._view[filled:])
            if not got:
                break
            filled += got
        return filled

    def release(self) -> None:
        self._view.release()

    def __enter__(self) -> ScratchBuffer:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
