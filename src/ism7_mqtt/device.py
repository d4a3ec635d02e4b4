#!/usr/bin/env python3
"""ISM7 MQTT - the running devices, and their parameters.

A running device owns one converter per parameter, feeds it the telegrams it receives,
takes the values that are complete (once each) and turns write requests into the
telegrams to be written.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from ism7_tx import (
    TLG_LOGGER,
    InfoWrite,
    Telegram,
    TelegramNrT,
    ValueShape,
    build_catalog,
)

from . import exceptions as exc
from .const import (
    DEFAULT_TOPIC_PREFIX,
    SET_TOPIC,
    SZ_CATALOG,
    SZ_DEVICES,
    SZ_IP_ADDRESS,
    SZ_MQTT,
    SZ_NAME,
    SZ_PARAMETERS,
    SZ_TOPIC_PREFIX,
    SZ_WRITE_ADDRESS,
    TEXT_SUFFIX,
)
from .helpers import join_topic, launder_id
from .schemas import load_config

if TYPE_CHECKING:
    from ism7_tx import Catalog, ConverterTemplateBase, CtidT, ParameterDescriptor, PtidT


_LOGGER = logging.getLogger(__name__)


class RunningParameter:
    """A parameter of a running device, with its converter (if it is convertible)."""

    def __init__(
        self,
        device: RunningDevice,
        descriptor: ParameterDescriptor,
        converter: ConverterTemplateBase | None,
    ) -> None:
        self.device = device
        self.descriptor = descriptor
        self.converter = converter

        self.mqtt_name = launder_id(descriptor.name)
        self.is_duplicate = False  # set by the device, once it has all its parameters

    def __str__(self) -> str:
        return f"{self.device.name}: {self.descriptor}"

    @property
    def ptid(self) -> PtidT:
        return self.descriptor.ptid

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def is_list(self) -> bool:
        return self.descriptor.shape == ValueShape.LIST

    @property
    def is_writable(self) -> bool:
        return self.descriptor.is_writable and self.converter is not None

    @property
    def key(self) -> str:
        """Return the sub-topic of the parameter (the name, and the PTID if needed)."""
        if self.is_duplicate:
            return f"{self.mqtt_name}/{self.ptid}"
        return self.mqtt_name

    @property
    def value_key(self) -> str:
        """Return the sub-topic of its (discoverable) value: the text, for lists."""
        return join_topic(self.key, TEXT_SUFFIX) if self.is_list else self.key

    @property
    def state_topic(self) -> str:
        return join_topic(self.device.mqtt_topic, self.value_key)

    @property
    def command_topic(self) -> str:
        return join_topic(self.device.mqtt_topic, SET_TOPIC, self.value_key)

    def take_value(self) -> dict[str, Any]:
        """Return the value(s) of the parameter by sub-topic, if it has a new value.

        Enumerated values are published twice: as the raw value and as its text.
        """

        if self.converter is None or not self.converter.has_value:
            return {}

        value = self.converter.take_value()
        if self.is_list:
            return {self.key: value.raw, self.value_key: value.to_json()}
        return {self.key: value.to_json()}


class RunningDevice:
    """A device (e.g. a BM-2), with the parameters it exposes."""

    def __init__(
        self,
        name: str,
        ip_address: str,
        write_address: int,
        parameters: Iterable[tuple[ParameterDescriptor, ConverterTemplateBase | None]],
        topic_prefix: str = DEFAULT_TOPIC_PREFIX,
    ) -> None:
        self.name = name
        self.ip_address = ip_address
        self.write_address = write_address
        self.topic_prefix = topic_prefix

        self._parameters: list[RunningParameter] = []
        self._by_ctid: dict[CtidT, ConverterTemplateBase] = {}
        self._by_nr: dict[TelegramNrT, list[ConverterTemplateBase]] = {}
        self._by_key: dict[str, RunningParameter] = {}

        for descriptor, converter in parameters:
            self._add_parameter(RunningParameter(self, descriptor, converter))

        self._set_duplicates()

    def __str__(self) -> str:
        return f"{self.name} ({self.ip_address})"

    def __repr__(self) -> str:
        return (
            f"RunningDevice(name={self.name!r}, ip_address={self.ip_address!r}, "
            f"parameters={len(self._parameters)})"
        )

    def _add_parameter(self, param: RunningParameter) -> None:
        if param.converter is None:
            _LOGGER.debug("%s: is not convertible (ignored)", param)
            self._parameters.append(param)
            return

        if param.converter.ctid in self._by_ctid:
            raise exc.ConfigInvalid(
                f"{self}: converter template {param.converter.ctid} is used by "
                f"more than one parameter: {self._by_ctid[param.converter.ctid]}, {param}"
            )

        self._parameters.append(param)
        self._by_ctid[param.converter.ctid] = param.converter
        for nr in param.converter.telegram_nrs:
            self._by_nr.setdefault(nr, []).append(param.converter)

    def _set_duplicates(self) -> None:
        counts = Counter(p.mqtt_name for p in self._parameters)
        for param in self._parameters:
            param.is_duplicate = counts[param.mqtt_name] > 1
        self._by_key = {p.key: p for p in self._parameters}

    @classmethod
    def from_catalog(
        cls,
        catalog: Catalog,
        name: str,
        ip_address: str,
        write_address: int,
        ptids: Iterable[PtidT],
        topic_prefix: str = DEFAULT_TOPIC_PREFIX,
    ) -> RunningDevice:
        """Create a device, with a new converter for each of its parameters."""
        return cls(
            name,
            ip_address,
            write_address,
            ((catalog.descriptor(p), catalog.create_converter(p)) for p in ptids),
            topic_prefix=topic_prefix,
        )

    @property
    def mqtt_topic(self) -> str:
        return join_topic(self.topic_prefix, self.ip_address, self.name)

    @property
    def parameters(self) -> list[RunningParameter]:
        return list(self._parameters)

    @property
    def telegram_nrs(self) -> list[TelegramNrT]:
        return sorted(self._by_nr)

    def converter(self, ctid: CtidT) -> ConverterTemplateBase | None:
        return self._by_ctid.get(ctid)

    def parameter(self, key: str) -> RunningParameter:
        """Return the parameter of a sub-topic (with, or without, the text suffix)."""
        if param := self._by_key.get(key):
            return param
        if key.endswith(f"/{TEXT_SUFFIX}") and (
            param := self._by_key.get(key.removesuffix(f"/{TEXT_SUFFIX}"))
        ):
            if param.is_list:
                return param
        raise exc.ParameterNotFound(f"{self}: has no such parameter: {key}")

    def add_telegram(self, telegram: Telegram) -> int:
        """Feed a telegram to its converter(s), and return how many accepted it."""

        count = sum(c.add_telegram(telegram) for c in self._by_nr.get(telegram.nr, []))
        if count:
            TLG_LOGGER.info("%s < %s", self.name, telegram)
        else:
            _LOGGER.debug("%s: telegram %s is not one of ours (ignored)", self, telegram)
        return count

    def add_telegrams(self, telegrams: Iterable[Telegram]) -> int:
        return sum(self.add_telegram(t) for t in telegrams)

    def take_values(self) -> dict[str, Any]:
        """Return the new values of the device by sub-topic (each is taken once only).

        A converter that fails is logged, and does not affect the others.
        """

        result: dict[str, Any] = {}
        for param in self._parameters:
            try:
                result |= param.take_value()
            except exc.Ism7Exception:
                _LOGGER.exception("%s: failed to take its value", param)
        return result

    def get_writes(self, key: str, value: str) -> list[InfoWrite]:
        """Return the telegrams to write for a value of a parameter (by sub-topic).

        Raise ParameterNotFound, ParameterNotWritable or a WriteError.
        """

        param = self.parameter(key)
        if not param.is_writable:
            raise exc.ParameterNotWritable(f"{param}: is not writable")

        assert param.converter is not None  # mypy
        writes = param.converter.get_write(value)
        _LOGGER.debug("%s: '%s' is %s", param, value, [str(w) for w in writes])
        return writes

    def get_writes_for_topic(self, topic: str, value: str) -> list[InfoWrite]:
        """Return the telegrams to write for a value received on a command topic."""

        prefix = f"{join_topic(self.mqtt_topic, SET_TOPIC)}/"
        if not topic.startswith(prefix):
            raise exc.ParameterNotFound(f"{self}: not one of its command topics: {topic}")
        return self.get_writes(topic.removeprefix(prefix), value)


def devices_from_config(config: dict[str, Any]) -> list[RunningDevice]:
    """Return the devices of a global config (a dict, e.g. from YAML).

    Raise ConfigInvalid (or CatalogError) if the config is invalid.
    """
    return build_devices(load_config(config))


def build_devices(config: dict[str, Any]) -> list[RunningDevice]:
    """Return the devices of a global config that has already been validated."""

    catalog = build_catalog(config[SZ_CATALOG])
    topic_prefix = config[SZ_MQTT].get(SZ_TOPIC_PREFIX, DEFAULT_TOPIC_PREFIX)

    devices = []
    for cfg in config[SZ_DEVICES]:
        if unknown := [p for p in cfg[SZ_PARAMETERS] if p not in catalog]:
            raise exc.ConfigInvalid(
                f"Device {cfg[SZ_NAME]}: has parameters not in the catalog: {unknown}"
            )
        devices.append(
            RunningDevice.from_catalog(
                catalog,
                cfg[SZ_NAME],
                cfg[SZ_IP_ADDRESS],
                cfg[SZ_WRITE_ADDRESS],
                cfg[SZ_PARAMETERS],
                topic_prefix=topic_prefix,
            )
        )

    return devices
