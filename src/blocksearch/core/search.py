from __future__ import annotations

import logging
import os
from typing import BinaryIO

from blocksearch.core.buffers import ScratchBuffer
from blocksearch.core.errors import ChunkTooSmall
from blocksearch.core.io import open_haystack

logger = logging.getLogger(__name__)


def scan(
    source: BinaryIO, needle: bytes, scratch: ScratchBuffer, start_offset: int = 0
) -> int | None:
    """Find the first occurrence of `needle` in `source`. Returns offset or None.

    `source` is consumed strictly forward, one `scratch`-sized chunk at a time;
    `start_offset` is the absolute offset of its current position and is only
    used to report the result. A match may straddle any number of chunk
    boundaries: the partial-match count survives each refill.

    An empty needle matches at `start_offset` without reading anything.
    Raises `ChunkTooSmall` before reading when the scratch buffer cannot hold
    the needle. Read errors propagate.
    """
    nlen = len(needle)
    if nlen > scratch.capacity:
        raise ChunkTooSmall("Buffer needs to be at least as large as <needle>!")
    if not nlen:
        return start_offset

    first = needle[0]
    buf = scratch.data
    already_matched = 0
    fpos = start_offset
    while True:
        read = scratch.fill(source)
        if not read:
            return None
        logger.debug("chunk at %#x: %d bytes", fpos, read)

        # Positions below 0 address the `carried` bytes that ended the previous
        # chunk. They matched needle[:carried], so they are read back from there.
        carried = already_matched
        boff = 0
        while boff < read:
            if not already_matched:
                # Nothing in progress: skip straight to the next possible start.
                if boff >= 0:
                    boff = buf.find(first, boff, read)
                    if boff < 0:
                        break
                elif needle[carried + boff] != first:
                    boff += 1
                    continue
            byte = buf[boff] if boff >= 0 else needle[carried + boff]
            if needle[already_matched] == byte:
                already_matched += 1
                if already_matched == nlen:
                    offset = fpos + boff - already_matched + 1
                    logger.debug("match at %#x", offset)
                    return offset
            elif already_matched:
                boff -= already_matched
                already_matched = 0
            boff += 1
        fpos += read


def find_bytes(
    path: str | os.PathLike[str], needle: bytes, *, chunk_size: int, start: int = 0
) -> int | None:
    """Scan the file at `path` from `start` for `needle` using `chunk_size` chunks."""
    if len(needle) > chunk_size:
        raise ChunkTooSmall("Buffer needs to be at least as large as <needle>!")
    with ScratchBuffer(chunk_size) as scratch, open_haystack(path, start) as source:
        return scan(source, needle, scratch, start)

