#!/usr/bin/env python3
"""ISM7 MQTT - Test the running devices."""

import logging
from unittest.mock import patch

import pytest

from ism7_mqtt import RunningDevice, build_devices, devices_from_config, load_config
from ism7_mqtt import exceptions as exc
from ism7_tx import (
    Catalog,
    InfoWrite,
    NumericParameterDescriptor,
    Telegram,
    create_converter,
)
from ism7_tx.exceptions import ConverterError

from .helpers import telegrams


def test_device(device: RunningDevice) -> None:
    assert device.name == "BM-2"
    assert device.ip_address == "192.168.1.10"
    assert device.write_address == 0x35
    assert device.mqtt_topic == "Wolf/192.168.1.10/BM-2"

    assert len(device.parameters) == 11
    assert device.converter("100").telegram_nrs == (12,)  # type: ignore[union-attr]
    assert device.converter("109") is None  # not convertible
    assert device.telegram_nrs == [12, 13, 14, 15, 16, 17, 18, 20, 21, 22, 30, 31, 32]


def test_device_duplicate_names(device: RunningDevice) -> None:
    pumps = [p for p in device.parameters if p.name == "Pumpe"]

    assert [p.is_duplicate for p in pumps] == [True, True]
    assert [p.key for p in pumps] == ["Pumpe/15", "Pumpe/17"]
    assert pumps[0].state_topic == "Wolf/192.168.1.10/BM-2/Pumpe/15"

    others = [p for p in device.parameters if p.name != "Pumpe"]
    assert not any(p.is_duplicate for p in others)


def test_device_keys(device: RunningDevice) -> None:
    brenner = device.parameter("Brenner")

    assert brenner.key == "Brenner"
    assert brenner.value_key == "Brenner/text"
    assert brenner.state_topic == "Wolf/192.168.1.10/BM-2/Brenner/text"
    assert brenner.command_topic == "Wolf/192.168.1.10/BM-2/set/Brenner/text"

    assert device.parameter("Brenner/text") is brenner
    assert device.parameter("Aussentemperatur").name == "Außentemperatur"

    with pytest.raises(exc.ParameterNotFound):
        device.parameter("Pumpe")  # is ambiguous
    with pytest.raises(exc.ParameterNotFound):
        device.parameter("Kesseltemperatur/text")  # is not a list


def test_device_take_values(device: RunningDevice) -> None:
    """A telegram of raw value 200 with a factor of 10 gives 20.0, exactly once."""

    assert device.take_values() == {}

    assert device.add_telegram(Telegram(12, 200, 0)) == 1
    assert device.take_values() == {"Kesseltemperatur": 20.0}
    assert device.take_values() == {}

    assert device.add_telegram(Telegram(99, 1, 2)) == 0


def test_device_take_values_all(device: RunningDevice) -> None:
    count = device.add_telegrams(
        telegrams(
            (12, 200, 0),
            (13, 30, 2),
            (14, 1, 0),
            (20, 0x10, 0x27),
            (30, 0x31, 0x2E),
            (31, 0x32, 0x33),
            (16, 0xF6, 0xFF),
            (18, 80, 0),
            (22, 20, 0),
        )
    )
    assert count == 9

    assert device.take_values() == {
        "Kesseltemperatur": 20.0,
        "Brennerlaufzeit": "02:30:00",
        "Brenner": 1,
        "Brenner/text": "Ein",
        "Aussentemperatur": -1.0,
        "Pumpe/15": 80,
        "Pumpe/17": 20,
    }  # Brennerstarts & Softwareversion are incomplete

    device.add_telegrams(telegrams((21, 1, 0), (32, 0, 0)))
    assert device.take_values() == {"Brennerstarts": 75536, "Softwareversion": "1.23"}


def test_device_take_values_isolates_failures(
    device: RunningDevice, caplog: pytest.LogCaptureFixture
) -> None:
    device.add_telegrams(telegrams((12, 200, 0), (14, 0, 0)))

    conv = device.converter("100")
    with patch.object(conv, "take_value", side_effect=ConverterError("oops")):
        with caplog.at_level(logging.ERROR):
            values = device.take_values()

    assert values == {"Brenner": 0, "Brenner/text": "Aus"}
    assert "failed to take its value" in caplog.text


def test_device_writes(device: RunningDevice) -> None:
    assert device.get_writes("Warmwassersolltemperatur", "50") == [InfoWrite(15, 50, 0)]
    assert device.get_writes("Brenner/text", "Ein") == [InfoWrite(14, 1, 0)]
    assert device.get_writes("Brenner", "0") == [InfoWrite(14, 0, 0)]
    assert device.get_writes("Betriebsart/text", "Heizbetrieb") == [
        InfoWrite(17, 2, 0)
    ]

    assert device.get_writes_for_topic(
        "Wolf/192.168.1.10/BM-2/set/Brenner/text", "Aus"
    ) == [InfoWrite(14, 0, 0)]


def test_device_writes_invalid(device: RunningDevice) -> None:
    with pytest.raises(exc.WriteValueOutOfRange):
        device.get_writes("Warmwassersolltemperatur", "150")
    with pytest.raises(exc.WriteValueInvalid):
        device.get_writes("Betriebsart", "Sommerbetrieb")

    with pytest.raises(exc.ParameterNotWritable):
        device.get_writes("Kesseltemperatur", "50")
    with pytest.raises(exc.ParameterNotWritable):
        device.get_writes("Schaltzeiten", "06:00")  # has no converter
    with pytest.raises(exc.ParameterNotFound):
        device.get_writes("Vorlauftemperatur", "50")
    with pytest.raises(exc.ParameterNotFound):
        device.get_writes_for_topic("Wolf/192.168.1.10/BM-2/Brenner/text", "Aus")

    # a failed write does not affect the converters
    device.add_telegram(Telegram(15, 45, 0))
    assert device.take_values() == {"Warmwassersolltemperatur": 45}


def test_device_duplicate_ctid(catalog: Catalog) -> None:
    with pytest.raises(exc.ConfigInvalid):
        RunningDevice.from_catalog(catalog, "BM-2", "192.168.1.10", 0x35, [7, 7])


def test_device_shared_telegram() -> None:
    """Two converters (of different templates) may share a telegram number."""

    descs = [
        NumericParameterDescriptor(ptid=p, name=f"Wert {p}", ctid=c)
        for p, c in ((1, "200"), (2, "201"))
    ]
    templates = [
        {"type": "numeric", "telegram_nrs": [40], "data_type": "byte"},
        {"type": "numeric", "telegram_nrs": [40], "data_type": "word"},
    ]
    device = RunningDevice(
        "BM-2",
        "192.168.1.10",
        0x35,
        [(d, create_converter(d, t)) for d, t in zip(descs, templates)],
    )

    assert device.add_telegram(Telegram(40, 1, 1)) == 2
    assert device.take_values() == {"Wert_1": 1, "Wert_2": 257}


def test_devices_from_config(config: dict) -> None:
    devices = devices_from_config(config)
    assert [d.name for d in devices] == ["BM-2"]

    config["mqtt"]["topic_prefix"] = "Heizung"
    assert devices_from_config(config)[0].mqtt_topic == "Heizung/192.168.1.10/BM-2"


def test_devices_from_config_invalid(config: dict) -> None:
    config["devices"][0]["parameters"].append(99)
    with pytest.raises(exc.ConfigInvalid):
        devices_from_config(config)

    config["devices"][0]["parameters"].pop()
    config["devices"].append(dict(config["devices"][0]))
    with pytest.raises(exc.ConfigInvalid):  # the same device, twice
        devices_from_config(config)

    with pytest.raises(exc.ConfigInvalid):
        load_config({"catalog": {}, "mqtt": {"qos": 3}})


def test_load_config_defaults() -> None:
    config = load_config({"catalog": {}})

    assert config["mqtt"] == {"topic_prefix": "Wolf", "discovery_id": "ism7", "qos": 0}
    assert config["devices"] == []
    assert config["telegram_log"] is None


def test_build_devices(config: dict) -> None:
    config = load_config(config)

    with patch("ism7_mqtt.device.load_config") as mock_load:
        devices = build_devices(config)

    mock_load.assert_not_called()
    assert [d.name for d in devices] == ["BM-2"]
