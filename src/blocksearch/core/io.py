from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO

from blocksearch.core.errors import InvalidOffset

logger = logging.getLogger(__name__)


class SeekFailed(OSError):
    """Raised when the haystack cannot be positioned at the requested start offset."""


@contextmanager
def open_haystack(path: str | os.PathLike[str], start: int = 0) -> Iterator[BinaryIO]:
    """Open `path` for unbuffered reading, positioned at byte `start`.

    Works for regular files as well as block devices and other special files.
    Only reads forward from `start`; the handle is closed on every exit path.

    - Negative `start` raises `InvalidOffset`.
    - A missing file raises `FileNotFoundError`.
    - A source that cannot seek to a non-zero `start` raises `SeekFailed`.
    - A `start` beyond EOF is accepted; reads then return nothing.
    """
    if start < 0:
        raise InvalidOffset("offset must be >= 0")
    try:
        fh = open(path, "rb", buffering=0)  # noqa: SIM115
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None
    try:
        if start:
            try:
                fh.seek(start, os.SEEK_SET)
            except (OSError, OverflowError) as exc:
                errno = getattr(exc, "errno", None)
                raise SeekFailed(
                    errno, "Failure changing the current file offset position"
                ) from exc
        logger.debug("haystack %s opened at offset %#x", path, start)
        yield fh
    finally:
        fh.close()
