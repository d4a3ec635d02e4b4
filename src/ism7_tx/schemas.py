#!/usr/bin/env python3
"""ISM7 TX - a telegram conversion framework for Wolf ISM7 controllers.

Schema processor for the catalog/converter (lower) layer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Final, TypedDict

import voluptuous as vol

from .const import (
    SZ_CONTROL_TYPE,
    SZ_CONVERTER_TEMPLATES,
    SZ_CTID,
    SZ_DATA_TYPE,
    SZ_FACTOR,
    SZ_IS_BOOLEAN,
    SZ_MAX_VALUE,
    SZ_MIN_VALUE,
    SZ_NAME,
    SZ_OPTIONS,
    SZ_PARAMETERS,
    SZ_SHAPE,
    SZ_STEP_WIDTH,
    SZ_TELEGRAM_NR,
    SZ_TELEGRAM_NRS,
    SZ_TEXT,
    SZ_TYPE,
    SZ_UNIT_NAME,
    SZ_VALUE,
    SZ_WRITABLE,
    WORD_MAX,
    DataType,
    ValueShape,
)

_LOGGER = logging.getLogger(__name__)


#
# 1/3: Converter templates (keyed by CTID)
SCH_CTID = vol.All(vol.Coerce(str), vol.Length(min=1))
SCH_TELEGRAM_NR = vol.All(int, vol.Range(min=0))

# voluptuous doesn't like StrEnums, hence str(s)
SCH_DATA_TYPE = vol.All(str, vol.In([str(s) for s in DataType]))


def NormaliseTelegramNrs() -> Callable[[dict[str, Any]], dict[str, Any]]:
    """Return a validator that converts a telegram_nr into a list of telegram_nrs."""

    def normalise_telegram_nrs(node_value: dict[str, Any]) -> dict[str, Any]:
        if SZ_TELEGRAM_NR not in node_value:
            return node_value
        result = {k: v for k, v in node_value.items() if k != SZ_TELEGRAM_NR}
        return result | {SZ_TELEGRAM_NRS: [node_value[SZ_TELEGRAM_NR]]}

    return normalise_telegram_nrs


def _unique(node_value: list[Any]) -> list[Any]:
    if len(set(node_value)) != len(node_value):
        raise vol.Invalid(f"has duplicates: {node_value}")
    return node_value


SCH_CONVERTER_TEMPLATE = vol.All(
    vol.Schema(
        {
            # the type is not vol.In(): a template of an unknown type is not an error
            vol.Required(SZ_TYPE): vol.All(str, vol.Length(min=1)),
            vol.Exclusive(SZ_TELEGRAM_NR, "telegram"): SCH_TELEGRAM_NR,
            vol.Exclusive(SZ_TELEGRAM_NRS, "telegram"): vol.All(
                [SCH_TELEGRAM_NR], vol.Length(min=1), _unique
            ),
            vol.Optional(SZ_DATA_TYPE): SCH_DATA_TYPE,
            vol.Optional(SZ_FACTOR): vol.All(
                vol.Coerce(float), vol.Range(min=0, min_included=False)
            ),
        },
        extra=vol.PREVENT_EXTRA,
    ),
    NormaliseTelegramNrs(),
    vol.Schema({vol.Required(SZ_TELEGRAM_NRS): list}, extra=vol.ALLOW_EXTRA),
)


#
# 2/3: Parameter descriptors (keyed by PTID)
SCH_OPTION = vol.Schema(
    {
        vol.Required(SZ_VALUE): vol.All(int, vol.Range(min=0, max=WORD_MAX)),
        vol.Required(SZ_TEXT): vol.All(vol.Coerce(str), vol.Length(min=1)),
    },
    extra=vol.PREVENT_EXTRA,
)

SCH_CONDITION = vol.Any(None, vol.Coerce(str))  # parsed later, not here

SCH_PARAMETER_BASE = vol.Schema(
    {
        vol.Required(SZ_NAME): vol.All(str, vol.Length(min=1)),
        vol.Required(SZ_CTID): SCH_CTID,
        vol.Optional(SZ_WRITABLE, default=False): bool,
        vol.Optional(SZ_CONTROL_TYPE, default=""): vol.Any(None, str),
    },
    extra=vol.PREVENT_EXTRA,
)

SCH_NUMERIC_PARAMETER = SCH_PARAMETER_BASE.extend(
    {
        vol.Required(SZ_SHAPE): str(ValueShape.NUMERIC),
        vol.Optional(SZ_MIN_VALUE): SCH_CONDITION,
        vol.Optional(SZ_MAX_VALUE): SCH_CONDITION,
        vol.Optional(SZ_STEP_WIDTH): vol.Any(None, int, float, str),
        vol.Optional(SZ_UNIT_NAME): vol.Any(None, str),
    }
)

SCH_LIST_PARAMETER = SCH_PARAMETER_BASE.extend(
    {
        vol.Required(SZ_SHAPE): str(ValueShape.LIST),
        vol.Required(SZ_OPTIONS): [SCH_OPTION],
        vol.Optional(SZ_IS_BOOLEAN, default=False): bool,
    }
)

SCH_TEXT_PARAMETER = SCH_PARAMETER_BASE.extend(
    {vol.Required(SZ_SHAPE): str(ValueShape.TEXT)}
)

SCH_OTHER_PARAMETER = SCH_PARAMETER_BASE.extend(
    {vol.Required(SZ_SHAPE): str(ValueShape.OTHER)}
)

SCH_PARAMETER = vol.Any(
    SCH_NUMERIC_PARAMETER,
    SCH_LIST_PARAMETER,
    SCH_TEXT_PARAMETER,
    SCH_OTHER_PARAMETER,
)


#
# 3/3: The catalog
SCH_PTID = vol.All(int, vol.Range(min=0))

SCH_CATALOG = vol.Schema(
    {
        vol.Required(SZ_CONVERTER_TEMPLATES, default={}): vol.Any(
            None, {SCH_CTID: SCH_CONVERTER_TEMPLATE}
        ),
        vol.Required(SZ_PARAMETERS, default={}): vol.Any(
            None, {SCH_PTID: SCH_PARAMETER}
        ),
    },
    extra=vol.PREVENT_EXTRA,
)


#
# Telegram log configuration
SZ_FILE_NAME: Final = "file_name"
SZ_TELEGRAM_LOG: Final = "telegram_log"
SZ_ROTATE_BACKUPS: Final = "rotate_backups"
SZ_ROTATE_BYTES: Final = "rotate_bytes"


class TlgLogConfigT(TypedDict):
    file_name: str
    rotate_backups: int
    rotate_bytes: int | None


def _telegram_log_from_file_name(
    default_backups: int,
) -> Callable[[str], TlgLogConfigT]:
    def telegram_log_from_file_name(file_name: str) -> TlgLogConfigT:
        return {
            SZ_FILE_NAME: file_name,
            SZ_ROTATE_BACKUPS: default_backups,
            SZ_ROTATE_BYTES: None,
        }

    return telegram_log_from_file_name


def sch_telegram_log_dict_factory(
    default_backups: int = 0,
) -> dict[vol.Required, vol.Any]:
    """Return the schema dict of the telegram log, for extending a config schema.

    The telegram log is either None (no log file), a file name (rotated at midnight,
    keeping default_backups files) or a dict with a file_name and a rotation policy.
    """

    sch_rotation = {
        vol.Optional(SZ_ROTATE_BACKUPS, default=default_backups): vol.Any(
            None, vol.All(int, vol.Range(min=0))
        ),
        vol.Optional(SZ_ROTATE_BYTES): vol.Any(None, vol.All(int, vol.Range(min=1))),
    }

    return {
        vol.Required(SZ_TELEGRAM_LOG, default=None): vol.Any(
            None,
            vol.All(str, _telegram_log_from_file_name(default_backups)),
            vol.Schema(
                {vol.Required(SZ_FILE_NAME): str} | sch_rotation,
                extra=vol.PREVENT_EXTRA,
            ),
        )
    }


SCH_TELEGRAM_LOG = vol.Schema(
    sch_telegram_log_dict_factory(default_backups=7), extra=vol.PREVENT_EXTRA
)
