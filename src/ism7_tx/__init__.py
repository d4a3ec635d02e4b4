#!/usr/bin/env python3
"""ISM7 TX - a telegram conversion framework for Wolf ISM7 controllers."""

from __future__ import annotations

from .catalog import Catalog, build_catalog, load_catalog
from .const import (
    SZ_CONVERTER_TEMPLATES,
    SZ_PARAMETERS,
    ConverterState,
    ConverterType,
    CtidT,
    DataType,
    PtidT,
    TelegramNrT,
    ValueShape,
)
from .converters import (
    BM2TimeConverter,
    ConverterTemplateBase,
    ListConverter,
    MultiNumericConverter,
    NumericConverter,
    PartAccumulator,
    TextConverter,
)
from .descriptors import (
    ListOption,
    ListParameterDescriptor,
    NumericParameterDescriptor,
    OtherParameterDescriptor,
    ParameterDescriptor,
    TextParameterDescriptor,
)
from .logger import TLG_LOGGER, set_telegram_logging
from .registry import CONVERTER_CLASSES, create_converter
from .schemas import SCH_CATALOG, SZ_TELEGRAM_LOG
from .telegram import InfoWrite, Telegram, Value, ValueT
from .version import VERSION

__all__ = [
    "VERSION",
    #
    "SZ_CONVERTER_TEMPLATES",
    "SZ_PARAMETERS",
    "SZ_TELEGRAM_LOG",
    "SCH_CATALOG",
    #
    "ConverterState",
    "ConverterType",
    "CtidT",
    "DataType",
    "PtidT",
    "TelegramNrT",
    "ValueShape",
    "ValueT",
    #
    "InfoWrite",
    "Telegram",
    "Value",
    #
    "ListOption",
    "ListParameterDescriptor",
    "NumericParameterDescriptor",
    "OtherParameterDescriptor",
    "ParameterDescriptor",
    "TextParameterDescriptor",
    #
    "BM2TimeConverter",
    "ConverterTemplateBase",
    "ListConverter",
    "MultiNumericConverter",
    "NumericConverter",
    "PartAccumulator",
    "TextConverter",
    #
    "CONVERTER_CLASSES",
    "create_converter",
    #
    "Catalog",
    "build_catalog",
    "load_catalog",
    #
    "TLG_LOGGER",
    "set_telegram_logging",
]
