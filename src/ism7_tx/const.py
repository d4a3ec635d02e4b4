#!/usr/bin/env python3
"""ISM7 TX - a telegram conversion framework for Wolf ISM7 controllers."""

from __future__ import annotations

from enum import StrEnum
from typing import Final, TypeAlias

__dev_mode__ = False  # NOTE: this is const.py
DEV_MODE = __dev_mode__

CtidT: TypeAlias = str  # converter template id, e.g. "1234"
PtidT: TypeAlias = int  # parameter type id, unique per logical parameter
TelegramNrT: TypeAlias = int  # the info number addressing a telegram


# telegram payloads are a low & a high byte, i.e. one 16-bit word
BYTE_MAX: Final[int] = 0xFF
WORD_MAX: Final[int] = 0xFFFF
SWORD_MIN: Final[int] = -(2**15)
SWORD_MAX: Final[int] = 2**15 - 1

CHARS_PER_TELEGRAM: Final[int] = 2  # text converters


# used by catalog schemas...
SZ_CONVERTER_TEMPLATES: Final = "converter_templates"
SZ_PARAMETERS: Final = "parameters"

SZ_CTID: Final = "ctid"
SZ_TYPE: Final = "type"
SZ_TELEGRAM_NR: Final = "telegram_nr"
SZ_TELEGRAM_NRS: Final = "telegram_nrs"
SZ_DATA_TYPE: Final = "data_type"
SZ_FACTOR: Final = "factor"

SZ_SHAPE: Final = "shape"
SZ_NAME: Final = "name"
SZ_WRITABLE: Final = "writable"
SZ_CONTROL_TYPE: Final = "control_type"
SZ_MIN_VALUE: Final = "min_value"
SZ_MAX_VALUE: Final = "max_value"
SZ_STEP_WIDTH: Final = "step_width"
SZ_UNIT_NAME: Final = "unit_name"
SZ_OPTIONS: Final = "options"
SZ_IS_BOOLEAN: Final = "is_boolean"
SZ_VALUE: Final = "value"
SZ_TEXT: Final = "text"


class ValueShape(StrEnum):
    """The shape of a parameter's value, fixed when the catalog is loaded."""

    NUMERIC = "numeric"
    LIST = "list"
    TEXT = "text"
    OTHER = "other"


class ConverterType(StrEnum):
    """The closed set of converter templates that can be instantiated."""

    NUMERIC = "numeric"
    LIST = "list"
    BM2_TIME = "bm2_time"
    MULTI_NUMERIC = "multi_numeric"
    TEXT = "text"


class ConverterState(StrEnum):
    EMPTY = "empty"
    PARTIAL = "partial"
    COMPLETE = "complete"


class DataType(StrEnum):
    """How the two bytes of a single telegram are to be read."""

    BYTE = "byte"  # the low byte only
    WORD = "word"  # unsigned, 0-65535
    SIGNED_WORD = "signed_word"  # 2's complement, -32768-32767
