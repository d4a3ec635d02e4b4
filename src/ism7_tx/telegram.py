#!/usr/bin/env python3
"""ISM7 TX - a telegram conversion framework for Wolf ISM7 controllers.

Provide the telegrams (received), the writes (to be sent) and the values exchanged
with downstream consumers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta as td
from typing import Any, TypeAlias

from . import exceptions as exc
from .const import BYTE_MAX, TelegramNrT
from .helpers import td_to_str, word_from_bytes

ValueT: TypeAlias = int | float | str | td


def _check_telegram_nr(nr: Any) -> None:
    if not isinstance(nr, int) or isinstance(nr, bool) or nr < 0:
        raise exc.TelegramInvalid(f"Invalid telegram number: {nr}")


def _check_payload_byte(nr: TelegramNrT, byte: Any) -> None:
    if not isinstance(byte, int) or isinstance(byte, bool) or not 0 <= byte <= BYTE_MAX:
        raise exc.TelegramInvalid(f"Invalid telegram {nr}: {byte} is not a byte")


@dataclass(frozen=True)
class Telegram:
    """A telegram, as received from the bus: its number, and a low & a high byte."""

    nr: TelegramNrT
    low: int
    high: int

    def __post_init__(self) -> None:
        _check_telegram_nr(self.nr)
        _check_payload_byte(self.nr, self.low)
        _check_payload_byte(self.nr, self.high)

    def __str__(self) -> str:
        return f"{self.nr:>5} {self.low:02X} {self.high:02X}"

    @classmethod
    def from_bytes(cls, nr: TelegramNrT, payload: bytes) -> Telegram:
        """Create a telegram from its (2-byte) payload."""
        if len(payload) != 2:
            raise exc.TelegramInvalid(
                f"Invalid telegram {nr}: payload is {len(payload)} bytes, not 2"
            )
        return cls(nr, payload[0], payload[1])

    @classmethod
    def from_str(cls, line: str) -> Telegram:
        """Create a telegram from a log line: `nr low high` (ints, maybe 0x-prefixed)."""
        try:
            nr, low, high = (int(x, 0) for x in line.split())
        except ValueError as err:
            raise exc.TelegramInvalid(f"Invalid telegram: '{line}'") from err
        return cls(nr, low, high)

    @property
    def payload(self) -> bytes:
        return bytes((self.low, self.high))

    @property
    def word(self) -> int:
        return word_from_bytes(self.low, self.high)


@dataclass(frozen=True)
class InfoWrite:
    """A telegram to be written to the device (an InfoWrite)."""

    nr: TelegramNrT
    low: int
    high: int

    def __post_init__(self) -> None:
        _check_telegram_nr(self.nr)
        _check_payload_byte(self.nr, self.low)
        _check_payload_byte(self.nr, self.high)

    def __str__(self) -> str:
        return f"{self.nr:>5} {self.low:02X} {self.high:02X}"

    @property
    def payload(self) -> bytes:
        return bytes((self.low, self.high))

    @property
    def word(self) -> int:
        return word_from_bytes(self.low, self.high)

    def as_telegram(self) -> Telegram:
        """Return the telegram the device would echo back after this write."""
        return Telegram(self.nr, self.low, self.high)


@dataclass(frozen=True)
class Value:
    """A typed value, as taken from a converter.

    Enumerated values also carry the raw value from which their text was derived.
    """

    value: ValueT
    raw: int | None = None

    def __str__(self) -> str:
        return str(self.to_json())

    def to_json(self) -> int | float | str:
        """Return the value as a JSON-serializable primitive."""
        if isinstance(self.value, td):
            return td_to_str(self.value)
        return self.value
