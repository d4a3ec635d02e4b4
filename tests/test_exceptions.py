#!/usr/bin/env python3
"""ISM7 TX - Test the exceptions (their messages, and hints)."""

from ism7_mqtt.exceptions import ConfigInvalid, ParameterNotWritable
from ism7_tx import exceptions as exc


def test_exception_str() -> None:
    assert str(exc.WriteValueInvalid("Brenner: 'An' is not an option")) == (
        "Brenner: 'An' is not an option"
    )
    assert str(exc.ConverterStateInvalid("Kessel: has no value")) == (
        "Kessel: has no value (hint: check has_value before calling take_value())"
    )
    assert str(exc.ConverterStateInvalid()) == (
        "hint: check has_value before calling take_value()"
    )
    assert str(exc.TelegramInvalid()) == ""


def test_exception_hierarchy() -> None:
    assert issubclass(exc.WriteValueOutOfRange, exc.WriteValueInvalid)
    assert issubclass(ParameterNotWritable, exc.WriteError)
    assert issubclass(ConfigInvalid, exc.Ism7Exception)
    assert issubclass(exc.CatalogShapeInvalid, exc.Ism7Exception)
