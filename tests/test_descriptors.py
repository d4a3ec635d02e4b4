#!/usr/bin/env python3
"""ISM7 TX - Test the parameter descriptors."""

import logging

import pytest

from ism7_tx import (
    ListOption,
    ListParameterDescriptor,
    NumericParameterDescriptor,
    TextParameterDescriptor,
    ValueShape,
)
from ism7_tx.exceptions import CatalogShapeInvalid

ON_OFF = (ListOption(0, "Aus"), ListOption(1, "Ein"))


def test_numeric_descriptor() -> None:
    desc = NumericParameterDescriptor(
        ptid=12,
        name="Warmwassersolltemperatur",
        ctid="105",
        is_writable=True,
        min_value_condition="20",
        max_value_condition="65.5",
        step_width="0.5",  # type: ignore[arg-type]
        unit_name="°C",
    )

    assert desc.shape == ValueShape.NUMERIC
    assert desc.min_value == 20
    assert desc.max_value == 65.5
    assert desc.step_width == 0.5
    assert str(desc) == "12 (numeric): Warmwassersolltemperatur"


def test_numeric_descriptor_conditions(caplog: pytest.LogCaptureFixture) -> None:
    desc = NumericParameterDescriptor(
        ptid=12, name="Vorlauf", ctid="105", min_value_condition="$(P99)"
    )

    with caplog.at_level(logging.WARNING):
        assert desc.min_value is None
    assert "Cannot parse min value condition '$(P99)' for PTID 12" in caplog.text

    assert desc.max_value is None  # no condition, no warning
    assert caplog.text.count("Cannot parse") == 1


@pytest.mark.parametrize("step_width", ["abc", 0, -1, True])
def test_numeric_descriptor_invalid(step_width: object) -> None:
    with pytest.raises(CatalogShapeInvalid):
        NumericParameterDescriptor(
            ptid=12, name="Vorlauf", ctid="105", step_width=step_width  # type: ignore[arg-type]
        )


def test_list_descriptor() -> None:
    desc = ListParameterDescriptor(
        ptid=9, name="Brenner", ctid="102", options=ON_OFF, is_boolean=True
    )

    assert desc.shape == ValueShape.LIST
    assert desc.text_for(1) == "Ein"
    assert desc.text_for(2) is None
    assert desc.value_for("Aus") == 0
    assert desc.value_for("ein") == 1
    assert desc.value_for("An") is None


def test_list_descriptor_invalid() -> None:
    with pytest.raises(CatalogShapeInvalid):
        ListParameterDescriptor(ptid=9, name="Brenner", ctid="102")

    with pytest.raises(CatalogShapeInvalid):
        ListParameterDescriptor(
            ptid=9,
            name="Brenner",
            ctid="102",
            options=(ListOption(0, "Aus"), ListOption(0, "Ein")),
        )

    with pytest.raises(CatalogShapeInvalid):
        ListParameterDescriptor(
            ptid=9,
            name="Brenner",
            ctid="102",
            options=ON_OFF + (ListOption(2, "Auto"),),
            is_boolean=True,
        )


def test_descriptors_are_frozen() -> None:
    desc = TextParameterDescriptor(ptid=11, name="Softwareversion", ctid="104")

    assert desc.shape == ValueShape.TEXT
    assert not desc.is_writable

    with pytest.raises(AttributeError):  # dataclasses.FrozenInstanceError
        desc.name = "Version"  # type: ignore[misc]
