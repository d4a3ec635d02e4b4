#!/usr/bin/env python3
"""ISM7 MQTT - a bridge between Wolf ISM7 controllers and MQTT/Home Assistant.

Works with the telegram conversion framework (ism7_tx) to expose the parameters of
running devices via MQTT, including Home Assistant discovery.
"""

from __future__ import annotations

from ism7_tx import VERSION

from .device import RunningDevice, RunningParameter, build_devices, devices_from_config
from .discovery import DiscoveryMessage, HaDiscovery, publish_discovery, publish_values
from .schemas import SCH_GLOBAL_CONFIG, load_config

__all__ = [
    "VERSION",
    #
    "SCH_GLOBAL_CONFIG",
    "load_config",
    #
    "RunningDevice",
    "RunningParameter",
    "build_devices",
    "devices_from_config",
    #
    "DiscoveryMessage",
    "HaDiscovery",
    "publish_discovery",
    "publish_values",
]
