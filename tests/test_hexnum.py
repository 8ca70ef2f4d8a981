from __future__ import annotations

import pytest

from blocksearch.core.errors import InvalidHexNumber, UsageError
from blocksearch.core.hexnum import MAX_OFFSET, format_hex, parse_hex


@pytest.mark.parametrize(
    ("text", "value"),
    [("0", 0), ("1", 1), ("f", 15), ("F", 15), ("10", 16), ("1000", 4096), ("DeadBeef", 0xDEADBEEF)],
)
def test_parse_hex(text: str, value: int) -> None:
    assert parse_hex(text) == value


def test_parse_hex_max_value() -> None:
    assert parse_hex("7fffffffffffffff") == MAX_OFFSET
    assert parse_hex("00007fffffffffffffff") == MAX_OFFSET


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("", "Number without any digits!"),
        ("0x10", "Invalid hexadecimal digit in number!"),
        ("-1", "Invalid hexadecimal digit in number!"),
        (" 1", "Invalid hexadecimal digit in number!"),
        ("g", "Invalid hexadecimal digit in number!"),
        ("8000000000000000", "Hexadecimal number exceeds its supported maximum value!"),
    ],
)
def test_parse_hex_errors(text: str, message: str) -> None:
    with pytest.raises(InvalidHexNumber) as info:
        parse_hex(text)
    assert str(info.value) == message
    assert isinstance(info.value, UsageError)


@pytest.mark.parametrize(
    ("value", "text"),
    [(0, "0"), (9, "9"), (10, "a"), (0x1A2, "1a2"), (0x1000, "1000"), (MAX_OFFSET, "7fffffffffffffff")],
)
def test_format_hex(value: int, text: str) -> None:
    assert format_hex(value) == text


def test_format_hex_negative() -> None:
    with pytest.raises(ValueError):
        format_hex(-1)
