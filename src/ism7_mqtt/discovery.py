#!/usr/bin/env python3
"""ISM7 MQTT - Home Assistant (MQTT) discovery, and the publishing of values.

Each exposable parameter of a device is discovered as a Home Assistant component,
with a config topic of: homeassistant/<component>/<unique_id>/config
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from paho.mqtt import client as mqtt

from ism7_tx import ListParameterDescriptor, NumericParameterDescriptor, ValueShape
from ism7_tx.helpers import parse_condition

from .const import (
    CONTROL_TYPE_DAY_SWITCH_TIMES,
    CONTROL_TYPE_NO_DISPLAY,
    DEFAULT_DISCOVERY_ID,
    DEFAULT_QOS,
    DISCOVERY_PREFIX,
    ICON_BY_NAME,
    ICON_THERMOMETER,
    MANUFACTURER,
    PAYLOADS_OFF,
    PAYLOADS_ON,
    UNIT_CELSIUS,
    UNIT_PERCENT,
    HaType,
)
from .helpers import join_topic, launder_id

if TYPE_CHECKING:
    from ism7_tx import ParameterDescriptor

    from .device import RunningDevice, RunningParameter


_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveryMessage:
    """A discovery document, and the topic it is to be published to."""

    path: str
    content: dict[str, Any]

    def to_json(self) -> str:
        return json.dumps(self.content, ensure_ascii=False)


def ha_type(descriptor: ParameterDescriptor) -> HaType | None:
    """Return the Home Assistant component of a parameter."""

    writable = descriptor.is_writable

    if isinstance(descriptor, ListParameterDescriptor):
        if writable:
            return HaType.SWITCH if descriptor.is_boolean else HaType.SELECT
        return HaType.BINARY_SENSOR if descriptor.is_boolean else HaType.SENSOR

    if descriptor.shape == ValueShape.NUMERIC:
        return HaType.NUMBER if writable else HaType.SENSOR

    if descriptor.shape in (ValueShape.TEXT, ValueShape.OTHER):
        return HaType.TEXT if writable else HaType.SENSOR

    return None


def is_suppressed(descriptor: ParameterDescriptor) -> bool:
    """Return True if the control type of the parameter excludes it from discovery."""
    control_type = descriptor.control_type or ""
    return (
        control_type == CONTROL_TYPE_DAY_SWITCH_TIMES
        or CONTROL_TYPE_NO_DISPLAY in control_type
    )


def _numeric_properties(descriptor: NumericParameterDescriptor) -> dict[str, Any]:
    result: dict[str, Any] = {}

    if descriptor.is_writable:
        for key, expr in (
            ("min", descriptor.min_value_condition),
            ("max", descriptor.max_value_condition),
        ):
            if expr is None:
                continue
            if (value := parse_condition(expr)) is not None:
                result[key] = value
            else:
                _LOGGER.debug(
                    "Cannot parse %s value condition '%s' for PTID %s",
                    key,
                    expr,
                    descriptor.ptid,
                )
        if descriptor.step_width is not None:
            result["step"] = descriptor.step_width

    if unit := descriptor.unit_name:
        result["unit_of_measurement"] = unit
        if unit == UNIT_CELSIUS:
            result["icon"] = ICON_THERMOMETER
            result["state_class"] = "measurement"
        elif unit == UNIT_PERCENT:
            result["state_class"] = "measurement"

    return result


def _list_properties(descriptor: ListParameterDescriptor) -> dict[str, Any]:
    texts = [o.text for o in descriptor.options]

    if not descriptor.is_boolean:
        return {"options": texts, "device_class": "enum"}

    result: dict[str, Any] = {}
    if on := next((t for t in PAYLOADS_ON if t in texts), None):
        result["payload_on"] = on
    if off := next((t for t in PAYLOADS_OFF if t in texts), None):
        result["payload_off"] = off
    return result


def discovery_properties(descriptor: ParameterDescriptor) -> dict[str, Any]:
    """Return the shape-specific properties of a discovery document."""
    if isinstance(descriptor, NumericParameterDescriptor):
        return _numeric_properties(descriptor)
    if isinstance(descriptor, ListParameterDescriptor):
        return _list_properties(descriptor)
    return {}


def _publish(client: mqtt.Client, topic: str, payload: str, qos: int) -> bool:
    info: mqtt.MQTTMessageInfo = client.publish(topic, payload=payload, qos=qos)
    if info.rc != mqtt.MQTT_ERR_SUCCESS:
        _LOGGER.warning("Failed to publish to %s: %s", topic, mqtt.error_string(info.rc))
        return False
    return True


def guess_icon(name: str) -> str | None:
    """Return an icon for the parameter, as guessed from its name."""
    name = name.lower()
    return next((icon for k, icon in ICON_BY_NAME.items() if k in name), None)


class HaDiscovery:
    """The Home Assistant discovery documents of a set of devices."""

    def __init__(
        self,
        devices: Iterable[RunningDevice],
        discovery_id: str = DEFAULT_DISCOVERY_ID,
    ) -> None:
        self.devices = list(devices)
        self.discovery_id = discovery_id

    def object_id(self, device: RunningDevice, param: RunningParameter) -> str:
        return launder_id(
            f"{self.discovery_id}_{device.name}_{device.write_address}"
            f"_{param.ptid}_{param.name}"
        )

    def device_info(self, device: RunningDevice) -> dict[str, Any]:
        return {
            "configuration_url": f"http://{device.ip_address}/",
            "manufacturer": MANUFACTURER,
            "model": device.name,
            "name": f"{self.discovery_id} {device.name}",
            "connections": [["ip_dev", f"{device.ip_address}_{device.name}"]],
        }

    def message(
        self, device: RunningDevice, param: RunningParameter
    ) -> DiscoveryMessage | None:
        """Return the discovery document of a parameter, or None if not exposable."""

        descriptor = param.descriptor

        if param.converter is None:
            return None
        if (type_ := ha_type(descriptor)) is None:
            return None
        if is_suppressed(descriptor):
            _LOGGER.debug("%s: is suppressed from discovery", param)
            return None

        unique_id = self.object_id(device, param)

        content: dict[str, Any] = {
            "unique_id": unique_id,
            "state_topic": param.state_topic,
        }
        if param.is_writable:
            content["command_topic"] = param.command_topic
        content |= {"name": descriptor.name, "object_id": unique_id}

        content |= discovery_properties(descriptor)
        if "icon" not in content and (icon := guess_icon(descriptor.name)):
            content["icon"] = icon

        content["device"] = self.device_info(device)

        return DiscoveryMessage(
            join_topic(DISCOVERY_PREFIX, type_, unique_id, "config"), content
        )

    def messages(self) -> Iterator[DiscoveryMessage]:
        for device in self.devices:
            for param in device.parameters:
                if msg := self.message(device, param):
                    yield msg

    def publish(self, client: mqtt.Client, qos: int = DEFAULT_QOS) -> int:
        """Publish the discovery documents, and return how many were published."""

        _LOGGER.info("Publishing HA discovery info for ID %s", self.discovery_id)

        return sum(
            _publish(client, msg.path, msg.to_json(), qos) for msg in self.messages()
        )


def publish_discovery(
    client: mqtt.Client,
    devices: Iterable[RunningDevice],
    discovery_id: str = DEFAULT_DISCOVERY_ID,
    qos: int = DEFAULT_QOS,
) -> int:
    """Publish the discovery documents of the devices via a (connected) client."""
    return HaDiscovery(devices, discovery_id).publish(client, qos=qos)


def publish_values(
    client: mqtt.Client, device: RunningDevice, qos: int = DEFAULT_QOS
) -> dict[str, Any]:
    """Take the new values of a device, and publish each (as text) to its own topic."""

    values = device.take_values()
    for key, value in values.items():
        _publish(client, join_topic(device.mqtt_topic, key), str(value), qos)
    return values
