from __future__ import annotations

import logging
from typing import BinaryIO

from blocksearch.core.buffers import grown_capacity

logger = logging.getLogger(__name__)


def load_needle(stream: BinaryIO, *, initial_capacity: int = 128) -> bytes:
    """Read `stream` to end-of-stream and return everything read as the needle.

    Storage starts at `initial_capacity` bytes, doubles whenever it runs full
    and is trimmed to the exact length at the end. An empty stream yields
    ``b""``. Read errors propagate as `OSError`; a partial needle is never
    returned.
    """
    buf = bytearray(grown_capacity(initial_capacity))
    used = 0
    while True:
        if used == len(buf):
            buf.extend(bytes(grown_capacity(used + 1) - len(buf)))
        with memoryview(buf) as view:
            got = stream.readinto(view[used:])
        if not got:
            break
        used += got
    del buf[used:]
    logger.debug("needle loaded: %d bytes", used)
    return bytes(buf)
