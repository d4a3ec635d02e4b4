#!/usr/bin/env python3
"""ISM7 TX - Test the registry of converter templates."""

from ism7_tx import (
    CONVERTER_CLASSES,
    BM2TimeConverter,
    ConverterType,
    ListOption,
    ListParameterDescriptor,
    NumericConverter,
    NumericParameterDescriptor,
    TextParameterDescriptor,
    create_converter,
)
from ism7_tx.registry import converter_class

NUMERIC = NumericParameterDescriptor(ptid=7, name="Kesseltemperatur", ctid="100")


def test_converter_classes() -> None:
    assert set(CONVERTER_CLASSES) == set(ConverterType)

    for type_, cls in CONVERTER_CLASSES.items():
        assert cls.TYPE == type_
        assert cls.SHAPES

    assert converter_class("numeric") is NumericConverter
    assert converter_class("bm2_time") is BM2TimeConverter
    assert converter_class("day_switch_times") is None


def test_create_converter() -> None:
    template = {"type": "numeric", "telegram_nrs": [12], "factor": 10.0}

    conv = create_converter(NUMERIC, template)
    assert isinstance(conv, NumericConverter)
    assert conv.ctid == "100"
    assert conv.telegram_nrs == (12,)
    assert conv.factor == 10

    other = create_converter(NUMERIC, template)
    assert other is not conv  # each parameter has its own converter


def test_create_converter_unknown_type() -> None:
    template = {"type": "day_switch_times", "telegram_nrs": [19]}
    assert create_converter(NUMERIC, template) is None


def test_create_converter_wrong_shape() -> None:
    text = TextParameterDescriptor(ptid=11, name="Softwareversion", ctid="104")
    assert create_converter(text, {"type": "numeric", "telegram_nrs": [30]}) is None

    brenner = ListParameterDescriptor(
        ptid=9, name="Brenner", ctid="102", options=(ListOption(0, "Aus"),)
    )
    assert create_converter(brenner, {"type": "bm2_time", "telegram_nrs": [14]}) is None
