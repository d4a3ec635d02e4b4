#!/usr/bin/env python3
"""ISM7 TX - exceptions within the catalog/converter layer."""

from __future__ import annotations


class Ism7Exception(Exception):
    """Base class for all exceptions of the telegram conversion framework.

    A subclass may carry a HINT, which is appended to its message (e.g. how a
    caller can avoid the error).
    """

    HINT: str | None = None

    def __init__(self, message: str | None = None) -> None:
        super().__init__(*(() if message is None else (message,)))
        self.message = message

    def __str__(self) -> str:
        hint = f"hint: {self.HINT}" if self.HINT else ""
        if not self.message:
            return hint
        return f"{self.message} ({hint})" if hint else self.message


class _Ism7LowerError(Ism7Exception):
    """A failure in the lower layer (catalog, telegram, converter)."""


########################################################################################
# Errors when loading the catalog (descriptors & converter templates)


class CatalogError(_Ism7LowerError):
    """The catalog is invalid, or cannot be loaded."""


class CatalogShapeInvalid(CatalogError):
    """A parameter descriptor declares an inconsistent shape."""

    HINT = "check the constraints of the parameter in the catalog"


########################################################################################
# Errors when converting telegrams into values, and values into writes


class TelegramInvalid(_Ism7LowerError):
    """The telegram is corrupt/not internally consistent."""


class ConverterError(_Ism7LowerError):
    """The converter cannot complete the conversion."""


class ConverterStateInvalid(ConverterError):
    """The converter was used out of sequence (this shouldn't happen)."""

    HINT = "check has_value before calling take_value()"


class WriteError(ConverterError):
    """The value cannot be converted into telegram writes."""


class WriteUnsupported(WriteError):
    """The converter does not support writes at the protocol level."""


class WriteValueInvalid(WriteError):
    """The value cannot be parsed into the shape the converter expects."""


class WriteValueOutOfRange(WriteValueInvalid):
    """The value violates a min/max/step constraint, or is finer than the resolution."""
