"""
Deterministic 32-bit string hashing for similarity scoring.

The rolling hash reproduces the shift-and-subtract hash used by the
original matcher service: every step multiplies by 31 (shift left by 5,
subtract once), adds the character code, and truncates to a signed
32-bit integer. Python integers never overflow, so the truncation is
explicit; without it every computed score would change.
"""

from typing import Iterator

INT32_MASK = 0xFFFFFFFF
INT32_SIGN_BIT = 0x80000000


def to_int32(value: int) -> int:
    """Truncate an arbitrary integer to signed 32-bit two's complement."""
    value &= INT32_MASK
    if value & INT32_SIGN_BIT:
        value -= 1 << 32
    return value


def _utf16_code_units(text: str) -> Iterator[int]:
    # Astral characters are hashed as their surrogate pair.
    for char in text:
        code = ord(char)
        if code > 0xFFFF:
            code -= 0x10000
            yield 0xD800 + (code >> 10)
            yield 0xDC00 + (code & 0x3FF)
        else:
            yield code


def string_hash(text: str) -> int:
    """
    Hash a string to a stable non-negative integer.

    Args:
        text: Any string. The empty string hashes to 0.

    Returns:
        Absolute value of the final signed 32-bit accumulator, so the
        result lies in [0, 2**31].
    """
    acc = 0
    for code in _utf16_code_units(text):
        acc = to_int32((acc << 5) - acc + code)
    return abs(acc)
