#!/usr/bin/env python3
"""ISM7 MQTT - exceptions above the catalog/converter layer."""

from __future__ import annotations

from ism7_tx.exceptions import (
    CatalogError as CatalogError,
    ConverterError as ConverterError,
    Ism7Exception as Ism7Exception,
    TelegramInvalid as TelegramInvalid,
    WriteError as WriteError,
    WriteUnsupported as WriteUnsupported,
    WriteValueInvalid as WriteValueInvalid,
    WriteValueOutOfRange as WriteValueOutOfRange,
)


class _Ism7UpperError(Ism7Exception):
    """A failure in the upper layer (config, devices, discovery)."""


class ConfigInvalid(_Ism7UpperError):
    """The (global) configuration is invalid."""

    HINT = "check the devices & mqtt sections of the config file"


########################################################################################
# Errors when handling the write requests of a device


class ParameterNotFound(_Ism7UpperError):
    """The device does not expose the parameter."""


class ParameterNotWritable(WriteError):
    """The parameter is read-only (or has no converter)."""
