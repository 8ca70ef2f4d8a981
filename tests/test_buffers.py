from __future__ import annotations

import io

import pytest

from blocksearch.core.buffers import ScratchBuffer, grown_capacity


@pytest.mark.parametrize(
    ("minimum", "expected"),
    [(0, 1), (1, 1), (2, 2), (3, 4), (128, 128), (129, 256), (1000, 1024)],
)
def test_grown_capacity_is_next_power_of_two(minimum: int, expected: int) -> None:
    assert grown_capacity(minimum) == expected


def test_grown_capacity_negative() -> None:
    with pytest.raises(ValueError):
        grown_capacity(-1)


def test_scratch_capacity_fixed() -> None:
    with ScratchBuffer(8) as s:
        assert s.capacity == 8
        assert s.fill(io.BytesIO(b"0123456789abc")) == 8
        assert bytes(s.data) == b"01234567"
        assert s.capacity == 8


def test_fill_final_short_chunk_then_exhausted() -> None:
    src = io.BytesIO(b"0123456789")
    with ScratchBuffer(4) as s:
        assert s.fill(src) == 4
        assert s.fill(src) == 4
        assert s.fill(src) == 2
        assert bytes(s.data[:2]) == b"89"
        assert s.fill(src) == 0


class _OneByteAtATime:
    def __init__(self, data: bytes) -> None:
        self._src = io.BytesIO(data)

    def readinto(self, b) -> int:
        return self._src.readinto(b[:1])


def test_fill_keeps_reading_short_reads_until_full() -> None:
    with ScratchBuffer(5) as s:
        assert s.fill(_OneByteAtATime(b"abcdefg")) == 5
        assert bytes(s.data) == b"abcde"


def test_zero_capacity_reads_nothing() -> None:
    with ScratchBuffer(0) as s:
        assert s.fill(io.BytesIO(b"abc")) == 0


def test_negative_capacity() -> None:
    with pytest.raises(ValueError):
        ScratchBuffer(-1)
