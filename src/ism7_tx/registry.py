#!/usr/bin/env python3
"""ISM7 TX - the registry of converter templates (the conversion dispatch).

The set of converter templates is closed: a converter template type that is not
in this table is not convertible.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .const import SZ_TYPE, ConverterType
from .converters import (
    BM2TimeConverter,
    ConverterTemplateBase,
    ListConverter,
    MultiNumericConverter,
    NumericConverter,
    TextConverter,
)

if TYPE_CHECKING:
    from .descriptors import ParameterDescriptor


_LOGGER = logging.getLogger(__name__)


CONVERTER_CLASSES: dict[ConverterType, type[ConverterTemplateBase]] = {
    c.TYPE: c
    for c in (
        NumericConverter,
        ListConverter,
        BM2TimeConverter,
        MultiNumericConverter,
        TextConverter,
    )
}


def converter_class(type_: str) -> type[ConverterTemplateBase] | None:
    """Return the converter class of a converter template type, if there is one."""
    try:
        return CONVERTER_CLASSES[ConverterType(type_)]
    except ValueError:
        return None


def create_converter(
    descriptor: ParameterDescriptor, template: dict[str, Any]
) -> ConverterTemplateBase | None:
    """Return a new converter for the parameter, or None if it is not convertible.

    A parameter is not convertible if the type of its converter template is unknown,
    or if that converter can't convert a parameter of its shape.
    """

    if (cls := converter_class(template[SZ_TYPE])) is None:
        _LOGGER.debug(
            "%s: converter template %s is of an unknown type: %s",
            descriptor,
            descriptor.ctid,
            template[SZ_TYPE],
        )
        return None

    if descriptor.shape not in cls.SHAPES:
        _LOGGER.debug(
            "%s: a %s converter can't convert a %s", descriptor, cls.TYPE, descriptor.shape
        )
        return None

    return cls.from_template(descriptor, template)
