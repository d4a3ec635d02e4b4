#!/usr/bin/env python3
"""ISM7 TX - Catalog/converter layer - Helper functions."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import timedelta as td

from .const import BYTE_MAX, CHARS_PER_TELEGRAM, SWORD_MAX, SWORD_MIN, WORD_MAX

_LOGGER = logging.getLogger(__name__)


def _check_byte(value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"Invalid value: {value}, is not an int")
    if not 0 <= value <= BYTE_MAX:
        raise ValueError(f"Invalid value: {value}, is not a byte (0-255)")
    return value


def word_from_bytes(low: int, high: int, signed: bool = False) -> int:
    """Convert a low & a high byte into a 16-bit word (2's complement if signed)."""
    word = _check_byte(high) << 8 | _check_byte(low)
    if signed and word > SWORD_MAX:
        return word - 2**16
    return word


def bytes_from_word(value: int, signed: bool = False) -> tuple[int, int]:
    """Convert a 16-bit word into its (low, high) bytes."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"Invalid value: {value}, is not an int")
    if signed:
        if not SWORD_MIN <= value <= SWORD_MAX:
            raise ValueError(f"Invalid value: {value}, is not a signed word")
        value &= WORD_MAX
    elif not 0 <= value <= WORD_MAX:
        raise ValueError(f"Invalid value: {value}, is not an unsigned word")
    return value & BYTE_MAX, value >> 8


def words_to_int(words: Iterable[int]) -> int:
    """Combine 16-bit words (least significant first) into a single integer."""
    return sum(w << (16 * idx) for idx, w in enumerate(words))


def int_to_words(value: int, count: int) -> list[int]:
    """Split an integer into `count` 16-bit words (least significant first)."""
    if value < 0 or value >= 2 ** (16 * count):
        raise ValueError(f"Invalid value: {value}, does not fit in {count} words")
    return [(value >> (16 * idx)) & WORD_MAX for idx in range(count)]


def td_from_bm2(low: int, high: int) -> td:
    """Convert a BM-2 time (high: whole hours, low: minutes) into a timedelta."""
    return td(hours=_check_byte(high), minutes=_check_byte(low))


def td_to_str(value: td) -> str:
    """Return a timedelta as [d.]hh:mm:ss, as a .NET TimeSpan would be serialised."""
    secs = int(value.total_seconds())
    sign, secs = ("-", -secs) if secs < 0 else ("", secs)
    days, secs = divmod(secs, 86400)
    hours, secs = divmod(secs, 3600)
    mins, secs = divmod(secs, 60)
    result = f"{hours:02d}:{mins:02d}:{secs:02d}"
    return f"{sign}{days}.{result}" if days else f"{sign}{result}"


def parse_number(value: str) -> float:
    """Parse a number using the invariant format (a '.' as the decimal point).

    Raise a ValueError if the string is not a finite number.
    """
    if not isinstance(value, str) or "_" in value:  # float() accepts '1_000'
        raise ValueError(f"Invalid value: {value}, is not a number")
    result = float(value.strip())
    if not math.isfinite(result):
        raise ValueError(f"Invalid value: {value}, is not a finite number")
    return result


def parse_condition(expr: str | None) -> float | None:
    """Return a min/max condition as a float, or None if it can't be parsed."""
    if expr is None:
        return None
    try:
        return parse_number(expr)
    except ValueError:
        return None


def is_multiple_of(value: float, step: float, origin: float = 0) -> bool:
    """Return True if value is a whole number of steps from the origin."""
    steps = (value - origin) / step
    return math.isclose(steps, round(steps), abs_tol=1e-9)


def str_from_chars(chars: Iterable[int]) -> str:
    """Return a string of the printable ASCII characters."""
    result = bytearray([x for x in chars if 31 < x < 127])
    return result.decode("ascii").strip() if result else ""


def chars_from_str(value: str, length: int) -> list[int]:
    """Convert a string to a list of ASCII characters, padded with NULs to length."""
    if not isinstance(value, str):
        raise ValueError(f"Invalid value: {value}, is not a string")
    if len(value) > length:
        raise ValueError(f"Invalid value: {value}, is longer than {length} chars")
    if not all(31 < ord(x) < 127 for x in value):
        raise ValueError(f"Invalid value: {value}, is not printable ASCII")
    return [ord(x) for x in value] + [0] * (length - len(value))


def text_length(num_telegrams: int) -> int:
    return num_telegrams * CHARS_PER_TELEGRAM
