#!/usr/bin/env python3
"""ISM7 TX - the converter templates (is a stateful process).

A converter is bound to a single parameter (descriptor), and to the telegram(s) that
carry its value. It accumulates telegrams until its value is complete, then exposes
that value exactly once (a read is destructive).

The converter states are:
  EMPTY    - there is no value (the initial state, and the state after a read)
  PARTIAL  - some (but not all) of the telegrams of a multi-telegram value have arrived
  COMPLETE - the value is complete (and unread)

Single-telegram converters go straight from EMPTY to COMPLETE. A newer telegram always
replaces an older one, even if its value has not been read (latest value wins).

Converters are not thread-safe. Each is owned by one device, whose caller serialises
the telegram feed and the reading of values.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, ClassVar

from . import exceptions as exc
from .const import (
    SZ_DATA_TYPE,
    SZ_FACTOR,
    SZ_TELEGRAM_NRS,
    ConverterState,
    ConverterType,
    DataType,
    TelegramNrT,
    ValueShape,
)
from .helpers import (
    bytes_from_word,
    chars_from_str,
    int_to_words,
    is_multiple_of,
    parse_number,
    str_from_chars,
    td_from_bm2,
    text_length,
    word_from_bytes,
    words_to_int,
)
from .telegram import InfoWrite, Telegram, Value

if TYPE_CHECKING:
    from .const import CtidT
    from .descriptors import (
        ListParameterDescriptor,
        NumericParameterDescriptor,
        ParameterDescriptor,
    )


_LOGGER = logging.getLogger(__name__)


_PartT = tuple[int, int]  # the (low, high) bytes of a telegram


def _scale(raw: int, factor: float) -> int | float:
    return raw if factor == 1 else raw / factor


def _unscale(converter: ConverterTemplateBase, number: float, factor: float) -> int:
    """Return the raw value of a number, which must be a whole number of 1/factor."""
    if not is_multiple_of(number * factor, 1):
        raise exc.WriteValueOutOfRange(
            f"{converter}: {number} is not a multiple of its resolution ({1 / factor})"
        )
    return round(number * factor)


def _parse_numeric(descriptor: NumericParameterDescriptor, value: str) -> float:
    """Parse a numeric value, and check it against the parameter's constraints."""

    try:
        result = parse_number(value)
    except ValueError as err:
        raise exc.WriteValueInvalid(
            f"{descriptor}: '{value}' is not a number"
        ) from err

    if descriptor.min_value is not None and result < descriptor.min_value:
        raise exc.WriteValueOutOfRange(
            f"{descriptor}: {result} is less than the minimum ({descriptor.min_value})"
        )
    if descriptor.max_value is not None and result > descriptor.max_value:
        raise exc.WriteValueOutOfRange(
            f"{descriptor}: {result} is more than the maximum ({descriptor.max_value})"
        )
    if descriptor.step_width and not is_multiple_of(
        result, descriptor.step_width, origin=descriptor.min_value or 0
    ):
        raise exc.WriteValueOutOfRange(
            f"{descriptor}: {result} is not a multiple of the step width "
            f"({descriptor.step_width})"
        )

    return result


class PartAccumulator:
    """The parts of a multi-telegram value, as received since it was last read.

    Each part is keyed by its telegram number. A part that arrives again replaces its
    older self, and the order of arrival is irrelevant.
    """

    def __init__(self, parts: Iterable[TelegramNrT]) -> None:
        self._parts: tuple[TelegramNrT, ...] = tuple(parts)
        self._received: dict[TelegramNrT, _PartT] = {}

        if not self._parts or len(set(self._parts)) != len(self._parts):
            raise exc.CatalogError(f"Invalid telegram numbers: {self._parts}")

    def __contains__(self, nr: object) -> bool:
        return nr in self._parts

    def __repr__(self) -> str:
        return f"PartAccumulator(parts={self._parts}, received={self.received})"

    def add(self, telegram: Telegram) -> bool:
        """Store the telegram if it is one of the parts, and return True if so."""
        if telegram.nr not in self._parts:
            return False
        self._received[telegram.nr] = (telegram.low, telegram.high)
        return True

    def clear(self) -> None:
        self._received.clear()

    @property
    def received(self) -> tuple[TelegramNrT, ...]:
        return tuple(p for p in self._parts if p in self._received)

    @property
    def missing(self) -> tuple[TelegramNrT, ...]:
        return tuple(p for p in self._parts if p not in self._received)

    @property
    def is_empty(self) -> bool:
        return not self._received

    @property
    def is_complete(self) -> bool:
        return len(self._received) == len(self._parts)

    def values(self) -> list[_PartT]:
        """Return the parts, in the order of their telegram numbers."""
        if not self.is_complete:
            raise exc.ConverterStateInvalid(f"Parts are missing: {self.missing}")
        return [self._received[p] for p in self._parts]


class ConverterTemplateBase:
    """The base class for all converter templates."""

    TYPE: ClassVar[ConverterType]
    SHAPES: ClassVar[frozenset[ValueShape]]

    _TEMPLATE_ATTRS: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self, descriptor: ParameterDescriptor, telegram_nrs: Sequence[TelegramNrT]
    ) -> None:
        if descriptor.shape not in self.SHAPES:
            raise exc.CatalogShapeInvalid(
                f"{descriptor}: a {self.TYPE} converter can't convert a {descriptor.shape}"
            )

        self.descriptor = descriptor
        self._telegram_nrs: tuple[TelegramNrT, ...] = tuple(telegram_nrs)

    def __str__(self) -> str:
        return f"{self.ctid} ({self.TYPE}): {self.descriptor.name}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self}, state={self.state})"

    @classmethod
    def from_template(
        cls, descriptor: ParameterDescriptor, template: dict[str, Any]
    ) -> ConverterTemplateBase:
        """Create a converter from a (validated) converter template of the catalog."""
        kwargs = {k: template[k] for k in cls._TEMPLATE_ATTRS if k in template}
        return cls(descriptor, template[SZ_TELEGRAM_NRS], **kwargs)

    @property
    def ctid(self) -> CtidT:
        return self.descriptor.ctid

    @property
    def telegram_nrs(self) -> tuple[TelegramNrT, ...]:
        return self._telegram_nrs

    @property
    def has_value(self) -> bool:
        """Return True if there is a complete value that has not yet been read."""
        raise NotImplementedError

    @property
    def state(self) -> ConverterState:
        """Return the state of the converter."""
        raise NotImplementedError

    def add_telegram(self, telegram: Telegram) -> bool:
        """Add a telegram, and return True if it was one of this converter's."""
        raise NotImplementedError

    def _peek(self) -> Value:
        """Return the (complete) value."""
        raise NotImplementedError

    def _clear(self) -> None:
        """Discard the value (and any partial state)."""
        raise NotImplementedError

    def peek_value(self) -> Value | None:
        """Return the value without consuming it (or None if there isn't one)."""
        return self._peek() if self.has_value else None

    def take_value(self) -> Value:
        """Return the value and reset the converter (the value is consumed).

        Raise ConverterStateInvalid if there is no (complete) value.
        """
        if not self.has_value:
            raise exc.ConverterStateInvalid(f"{self}: has no value (state={self.state})")

        result = self._peek()
        self._clear()
        return result

    def get_write(self, value: str) -> list[InfoWrite]:
        """Convert a value into the telegrams to be written to the device."""
        raise exc.WriteUnsupported(f"CTID '{self.ctid}' is not yet implemented")


class SingleTelegramConverterBase(ConverterTemplateBase):
    """The base class for converters whose value is carried in a single telegram."""

    def __init__(
        self, descriptor: ParameterDescriptor, telegram_nrs: Sequence[TelegramNrT]
    ) -> None:
        super().__init__(descriptor, telegram_nrs)

        if len(self.telegram_nrs) != 1:
            raise exc.CatalogError(
                f"{self}: expects a single telegram, not {self.telegram_nrs}"
            )

        self._value: Value | None = None

    @property
    def telegram_nr(self) -> TelegramNrT:
        return self._telegram_nrs[0]

    @property
    def has_value(self) -> bool:
        return self._value is not None

    @property
    def state(self) -> ConverterState:
        return ConverterState.COMPLETE if self.has_value else ConverterState.EMPTY

    def add_telegram(self, telegram: Telegram) -> bool:
        if telegram.nr != self.telegram_nr:
            return False
        self._value = self._decode(telegram.low, telegram.high)
        return True

    def _decode(self, low: int, high: int) -> Value:
        """Convert the bytes of a telegram into a value."""
        raise NotImplementedError

    def _peek(self) -> Value:
        assert self._value is not None  # mypy
        return self._value

    def _clear(self) -> None:
        self._value = None


class MultiTelegramConverterBase(ConverterTemplateBase):
    """The base class for converters whose value is spread over several telegrams.

    The value is complete only once every telegram has arrived (at least once) since
    it was last read, and it is decoded from the latest telegrams when it is read.
    """

    def __init__(
        self, descriptor: ParameterDescriptor, telegram_nrs: Sequence[TelegramNrT]
    ) -> None:
        super().__init__(descriptor, telegram_nrs)
        self._parts = PartAccumulator(self.telegram_nrs)

    @property
    def has_value(self) -> bool:
        return self._parts.is_complete

    @property
    def state(self) -> ConverterState:
        if self._parts.is_complete:
            return ConverterState.COMPLETE
        if self._parts.is_empty:
            return ConverterState.EMPTY
        return ConverterState.PARTIAL

    def add_telegram(self, telegram: Telegram) -> bool:
        return self._parts.add(telegram)

    def _decode(self, parts: list[_PartT]) -> Value:
        """Convert the bytes of the telegrams into a value."""
        raise NotImplementedError

    def _peek(self) -> Value:
        return self._decode(self._parts.values())

    def _clear(self) -> None:
        self._parts.clear()


########################################################################################


class NumericConverter(SingleTelegramConverterBase):
    """A number, from a byte or a (signed) word, divided by a factor."""

    TYPE = ConverterType.NUMERIC
    SHAPES = frozenset((ValueShape.NUMERIC,))

    _TEMPLATE_ATTRS = (SZ_DATA_TYPE, SZ_FACTOR)

    descriptor: NumericParameterDescriptor

    def __init__(
        self,
        descriptor: ParameterDescriptor,
        telegram_nrs: Sequence[TelegramNrT],
        data_type: DataType | str = DataType.WORD,
        factor: float = 1,
    ) -> None:
        super().__init__(descriptor, telegram_nrs)

        if factor <= 0:
            raise exc.CatalogError(f"{self}: factor is not positive: {factor}")

        self.data_type = DataType(data_type)
        self.factor = factor

    def _decode(self, low: int, high: int) -> Value:
        if self.data_type == DataType.BYTE:
            return Value(_scale(low, self.factor))
        raw = word_from_bytes(low, high, signed=self.data_type == DataType.SIGNED_WORD)
        return Value(_scale(raw, self.factor))

    def get_write(self, value: str) -> list[InfoWrite]:
        number = _parse_numeric(self.descriptor, value)
        raw = _unscale(self, number, self.factor)

        try:
            if self.data_type == DataType.BYTE:
                low, high = bytes_from_word(raw)
                if high:
                    raise ValueError(f"Invalid value: {raw}, is not a byte")
            else:
                low, high = bytes_from_word(
                    raw, signed=self.data_type == DataType.SIGNED_WORD
                )
        except ValueError as err:
            raise exc.WriteValueOutOfRange(
                f"{self}: {number} can't be encoded as a {self.data_type}"
            ) from err

        return [InfoWrite(self.telegram_nr, low, high)]


class ListConverter(SingleTelegramConverterBase):
    """An option of an enumeration, as its text (and its raw value)."""

    TYPE = ConverterType.LIST
    SHAPES = frozenset((ValueShape.LIST,))

    descriptor: ListParameterDescriptor

    def _decode(self, low: int, high: int) -> Value:
        raw = word_from_bytes(low, high)
        if (text := self.descriptor.text_for(raw)) is None:
            _LOGGER.warning("%s: %s is not one of its options", self, raw)
            text = str(raw)
        return Value(text, raw=raw)

    def get_write(self, value: str) -> list[InfoWrite]:
        """Convert an option (its text, or its raw value) into a telegram."""

        if (raw := self.descriptor.value_for(value)) is None:
            try:
                raw = int(value.strip())
            except ValueError as err:
                raise exc.WriteValueInvalid(
                    f"{self}: '{value}' is not one of its options"
                ) from err
            if self.descriptor.text_for(raw) is None:
                raise exc.WriteValueInvalid(f"{self}: {raw} is not one of its options")

        return [InfoWrite(self.telegram_nr, *bytes_from_word(raw))]


class BM2TimeConverter(SingleTelegramConverterBase):
    """A duration, as whole hours (the high byte) and minutes (the low byte)."""

    TYPE = ConverterType.BM2_TIME
    SHAPES = frozenset((ValueShape.NUMERIC, ValueShape.OTHER))

    def _decode(self, low: int, high: int) -> Value:
        return Value(td_from_bm2(low, high))


class MultiNumericConverter(MultiTelegramConverterBase):
    """A number, from several words (least significant first), divided by a factor.

    For example, an energy counter that is larger than 65535.
    """

    TYPE = ConverterType.MULTI_NUMERIC
    SHAPES = frozenset((ValueShape.NUMERIC,))

    _TEMPLATE_ATTRS = (SZ_FACTOR,)

    descriptor: NumericParameterDescriptor

    def __init__(
        self,
        descriptor: ParameterDescriptor,
        telegram_nrs: Sequence[TelegramNrT],
        factor: float = 1,
    ) -> None:
        super().__init__(descriptor, telegram_nrs)

        if factor <= 0:
            raise exc.CatalogError(f"{self}: factor is not positive: {factor}")

        self.factor = factor

    def _decode(self, parts: list[_PartT]) -> Value:
        raw = words_to_int(word_from_bytes(low, high) for low, high in parts)
        return Value(_scale(raw, self.factor))

    def get_write(self, value: str) -> list[InfoWrite]:
        number = _parse_numeric(self.descriptor, value)
        raw = _unscale(self, number, self.factor)

        try:
            words = int_to_words(raw, len(self.telegram_nrs))
        except ValueError as err:
            raise exc.WriteValueOutOfRange(
                f"{self}: {number} can't be encoded in {len(self.telegram_nrs)} words"
            ) from err

        return [
            InfoWrite(nr, *bytes_from_word(word))
            for nr, word in zip(self.telegram_nrs, words)
        ]


class TextConverter(MultiTelegramConverterBase):
    """A text, of two ASCII characters per telegram (the low byte first)."""

    TYPE = ConverterType.TEXT
    SHAPES = frozenset((ValueShape.TEXT, ValueShape.OTHER))

    def _decode(self, parts: list[_PartT]) -> Value:
        return Value(str_from_chars(c for part in parts for c in part))

    def get_write(self, value: str) -> list[InfoWrite]:
        try:
            chars = chars_from_str(value, text_length(len(self.telegram_nrs)))
        except ValueError as err:
            raise exc.WriteValueInvalid(f"{self}: {err}") from err

        return [
            InfoWrite(nr, chars[idx * 2], chars[idx * 2 + 1])
            for idx, nr in enumerate(self.telegram_nrs)
        ]
