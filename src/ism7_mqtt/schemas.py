#!/usr/bin/env python3
"""ISM7 MQTT - a bridge between Wolf ISM7 controllers and MQTT/Home Assistant.

Schema processor for upper layer.
"""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from ism7_tx.schemas import (  # noqa: F401
    SCH_CATALOG,
    SCH_PTID,
    SZ_TELEGRAM_LOG,
    sch_telegram_log_dict_factory,
)

from . import exceptions as exc
from .const import (
    DEFAULT_DISCOVERY_ID,
    DEFAULT_QOS,
    DEFAULT_TOPIC_PREFIX,
    SZ_CATALOG,
    SZ_DEVICES,
    SZ_DISCOVERY_ID,
    SZ_IP_ADDRESS,
    SZ_MQTT,
    SZ_NAME,
    SZ_PARAMETERS,
    SZ_QOS,
    SZ_TOPIC_PREFIX,
    SZ_WRITE_ADDRESS,
)

_LOGGER = logging.getLogger(__name__)


#
# 1/3: MQTT configuration
SCH_MQTT = vol.Schema(
    {
        vol.Optional(SZ_TOPIC_PREFIX, default=DEFAULT_TOPIC_PREFIX): vol.All(
            str, vol.Length(min=1)
        ),
        vol.Optional(SZ_DISCOVERY_ID, default=DEFAULT_DISCOVERY_ID): vol.All(
            str, vol.Length(min=1)
        ),
        vol.Optional(SZ_QOS, default=DEFAULT_QOS): vol.All(int, vol.In([0, 1, 2])),
    },
    extra=vol.PREVENT_EXTRA,
)


#
# 2/3: Device configuration
def _unique_names(node_value: list[dict[str, Any]]) -> list[dict[str, Any]]:
    names = [(d[SZ_IP_ADDRESS], d[SZ_NAME]) for d in node_value]
    if len(set(names)) != len(names):
        raise vol.Invalid("devices must have unique (ip_address, name) pairs")
    return node_value


SCH_DEVICE = vol.Schema(
    {
        vol.Required(SZ_NAME): vol.All(str, vol.Length(min=1)),
        vol.Required(SZ_IP_ADDRESS): vol.All(str, vol.Length(min=1)),
        vol.Required(SZ_WRITE_ADDRESS): vol.All(int, vol.Range(min=0, max=0xFF)),
        vol.Optional(SZ_PARAMETERS, default=[]): [SCH_PTID],
    },
    extra=vol.PREVENT_EXTRA,
)

SCH_DEVICES = vol.All([SCH_DEVICE], _unique_names)


#
# 3/3: Global configuration
SCH_GLOBAL_CONFIG = (
    vol.Schema(
        {
            vol.Required(SZ_CATALOG): SCH_CATALOG,
            vol.Optional(SZ_MQTT, default={}): SCH_MQTT,
            vol.Optional(SZ_DEVICES, default=[]): SCH_DEVICES,
        },
        extra=vol.PREVENT_EXTRA,
    )
    .extend(sch_telegram_log_dict_factory(default_backups=0))
)


def load_config(config: dict[str, Any]) -> dict[str, Any]:
    """Validate the global config (a dict, e.g. from YAML), and return it.

    Raise ConfigInvalid if it is invalid.
    """

    try:
        return SCH_GLOBAL_CONFIG(config)  # type: ignore[no-any-return]
    except vol.Invalid as err:
        raise exc.ConfigInvalid(f"Config is invalid: {err}") from err
