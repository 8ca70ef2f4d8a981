from __future__ import annotations

from blocksearch.core.errors import InvalidHexNumber

XDIGITS = "0123456789abcdef"
_DIGIT_VALUES = {ch: i for i, ch in enumerate(XDIGITS)}
_DIGIT_VALUES.update({ch.upper(): i for i, ch in enumerate(XDIGITS)})

# Largest value of a signed 64-bit file offset.
MAX_OFFSET = (1 << 63) - 1


def parse_hex(text: str) -> int:
    """Parse hexadecimal `text` without radix prefix, sign or whitespace.

    Digits are case-insensitive. Raises `InvalidHexNumber` for empty input,
    foreign characters, or values beyond `MAX_OFFSET`.
    """
    if not text:
        raise InvalidHexNumber("Number without any digits!")
    value = 0
    for ch in text:
        digit = _DIGIT_VALUES.get(ch)
        if digit is None:
            raise InvalidHexNumber("Invalid hexadecimal digit in number!")
        value = value << 4 | digit
        if value > MAX_OFFSET:
            raise InvalidHexNumber("Hexadecimal number exceeds its supported maximum value!")
    return value


def format_hex(value: int) -> str:
    """Lowercase shortest hex representation of a non-negative `value`."""
    if value < 0:
        raise ValueError("value must be >= 0")
    digits: list[str] = []
    while True:
        digits.append(XDIGITS[value & 0xF])
        value >>= 4
        if not value:
            break
    return "".join(reversed(digits))
