#!/usr/bin/env python3
"""ISM7 MQTT - a bridge between Wolf ISM7 controllers and MQTT/Home Assistant."""

from __future__ import annotations

from enum import StrEnum
from typing import Final

from ism7_tx.const import (  # noqa: F401
    SZ_NAME as SZ_NAME,
    SZ_PARAMETERS as SZ_PARAMETERS,
    PtidT as PtidT,
    ValueShape as ValueShape,
)

# used by config schemas...
SZ_CATALOG: Final = "catalog"
SZ_DEVICES: Final = "devices"
SZ_DISCOVERY_ID: Final = "discovery_id"
SZ_IP_ADDRESS: Final = "ip_address"
SZ_MQTT: Final = "mqtt"
SZ_QOS: Final = "qos"
SZ_TOPIC_PREFIX: Final = "topic_prefix"
SZ_WRITE_ADDRESS: Final = "write_address"

DEFAULT_DISCOVERY_ID: Final = "ism7"
DEFAULT_QOS: Final = 0
DEFAULT_TOPIC_PREFIX: Final = "Wolf"

DISCOVERY_PREFIX: Final = "homeassistant"
MANUFACTURER: Final = "Wolf"

TEXT_SUFFIX: Final = "text"  # the sub-topic of the text of an enumerated value
SET_TOPIC: Final = "set"  # the sub-topic of commands


# control types that suppress a parameter from discovery
CONTROL_TYPE_DAY_SWITCH_TIMES: Final = "DaySwitchTimes"
CONTROL_TYPE_NO_DISPLAY: Final = "NO_DISPLAY"  # a substring, not a type

# the option texts of boolean (two-state) enumerations
PAYLOADS_ON: Final = ("Ein", "Aktiviert")
PAYLOADS_OFF: Final = ("Aus", "Deaktiviert")

UNIT_CELSIUS: Final = "°C"
UNIT_PERCENT: Final = "%"


class HaType(StrEnum):
    """The Home Assistant (MQTT) components a parameter may be discovered as."""

    BINARY_SENSOR = "binary_sensor"
    NUMBER = "number"
    SELECT = "select"
    SENSOR = "sensor"
    SWITCH = "switch"
    TEXT = "text"


# a guess at an icon, from (a substring of) the parameter's name
ICON_BY_NAME: Final[dict[str, str]] = {
    "brenner": "mdi:fire",
    "solar": "mdi:solar-panel",
    "ventil": "mdi:pipe-valve",
    "heizung": "mdi:radiator",
    "pumpe": "mdi:pump",
    "druck": "mdi:gauge",
}

ICON_THERMOMETER: Final = "mdi:thermometer"
