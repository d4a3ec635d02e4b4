#!/usr/bin/env python3
"""ISM7 TX - the parameter descriptors (the catalog-time model of parameters).

A descriptor says what a parameter is (identity, writability, shape & constraints),
but not how its value is carried on the wire: that is the job of its converter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property
from typing import ClassVar

from . import exceptions as exc
from .const import CtidT, PtidT, ValueShape
from .helpers import parse_condition

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListOption:
    """One option of an enumerated parameter: the raw (wire) value, and its text."""

    value: int
    text: str


@dataclass(frozen=True, kw_only=True)
class ParameterDescriptor:
    """The base class for all parameter descriptors."""

    SHAPE: ClassVar[ValueShape]

    ptid: PtidT
    name: str
    ctid: CtidT
    is_writable: bool = False
    control_type: str = ""

    def __str__(self) -> str:
        return f"{self.ptid} ({self.SHAPE}): {self.name}"

    @property
    def shape(self) -> ValueShape:
        return self.SHAPE


@dataclass(frozen=True, kw_only=True)
class NumericParameterDescriptor(ParameterDescriptor):
    """A numeric parameter, with optional min/max conditions, step width & unit.

    The min/max conditions are expressions that are parsed only when needed. If they
    can't be parsed, the constraint is omitted rather than failing the catalog.
    """

    SHAPE = ValueShape.NUMERIC

    min_value_condition: str | None = None
    max_value_condition: str | None = None
    step_width: float | None = None
    unit_name: str | None = None

    def __post_init__(self) -> None:
        if self.step_width is None:
            return
        if isinstance(self.step_width, bool):  # float(True) is 1.0
            raise exc.CatalogShapeInvalid(
                f"{self}: step width is not numeric: {self.step_width!r}"
            )
        try:
            step_width = float(self.step_width)
        except (TypeError, ValueError) as err:
            raise exc.CatalogShapeInvalid(
                f"{self}: step width is not numeric: {self.step_width!r}"
            ) from err
        if step_width <= 0:
            raise exc.CatalogShapeInvalid(
                f"{self}: step width is not positive: {self.step_width!r}"
            )
        object.__setattr__(self, "step_width", step_width)

    @cached_property
    def min_value(self) -> float | None:
        return self._parse_condition("min", self.min_value_condition)

    @cached_property
    def max_value(self) -> float | None:
        return self._parse_condition("max", self.max_value_condition)

    def _parse_condition(self, attr: str, expr: str | None) -> float | None:
        if (result := parse_condition(expr)) is None and expr is not None:
            _LOGGER.warning(
                "Cannot parse %s value condition '%s' for PTID %s (ignored)",
                attr,
                expr,
                self.ptid,
            )
        return result


@dataclass(frozen=True, kw_only=True)
class ListParameterDescriptor(ParameterDescriptor):
    """An enumerated parameter, possibly one modelling a two-state (on/off) concept."""

    SHAPE = ValueShape.LIST

    options: tuple[ListOption, ...] = field(default_factory=tuple)
    is_boolean: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", tuple(self.options))

        if not self.options:
            raise exc.CatalogShapeInvalid(f"{self}: has no options")
        if len({o.value for o in self.options}) != len(self.options):
            raise exc.CatalogShapeInvalid(f"{self}: has duplicate option values")
        if self.is_boolean and len(self.options) != 2:
            raise exc.CatalogShapeInvalid(
                f"{self}: is boolean, but has {len(self.options)} options"
            )

    def text_for(self, raw: int) -> str | None:
        """Return the text of the option with this raw value, if any."""
        return next((o.text for o in self.options if o.value == raw), None)

    def value_for(self, text: str) -> int | None:
        """Return the raw value of the option with this text, if any.

        An exact match is preferred, otherwise the match is case-insensitive.
        """
        if (raw := next((o.value for o in self.options if o.text == text), None)) is None:
            text = text.casefold()
            raw = next((o.value for o in self.options if o.text.casefold() == text), None)
        return raw


@dataclass(frozen=True, kw_only=True)
class TextParameterDescriptor(ParameterDescriptor):
    SHAPE = ValueShape.TEXT


@dataclass(frozen=True, kw_only=True)
class OtherParameterDescriptor(ParameterDescriptor):
    SHAPE = ValueShape.OTHER


DESCRIPTOR_CLASSES: dict[ValueShape, type[ParameterDescriptor]] = {
    c.SHAPE: c
    for c in (
        NumericParameterDescriptor,
        ListParameterDescriptor,
        TextParameterDescriptor,
        OtherParameterDescriptor,
    )
}
