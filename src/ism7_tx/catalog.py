#!/usr/bin/env python3
"""ISM7 TX - the catalog of parameter descriptors and converter templates.

The catalog is loaded (and validated) once. Converters are then created from it, one
per parameter, for each device that exposes that parameter.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any

import voluptuous as vol

from . import exceptions as exc
from .const import (
    SZ_CONTROL_TYPE,
    SZ_CONVERTER_TEMPLATES,
    SZ_CTID,
    SZ_IS_BOOLEAN,
    SZ_MAX_VALUE,
    SZ_MIN_VALUE,
    SZ_NAME,
    SZ_OPTIONS,
    SZ_PARAMETERS,
    SZ_SHAPE,
    SZ_STEP_WIDTH,
    SZ_TEXT,
    SZ_UNIT_NAME,
    SZ_VALUE,
    SZ_WRITABLE,
    CtidT,
    PtidT,
    ValueShape,
)
from .converters import ConverterTemplateBase
from .descriptors import (
    DESCRIPTOR_CLASSES,
    ListOption,
    ParameterDescriptor,
)
from .registry import create_converter
from .schemas import SCH_CATALOG

_LOGGER = logging.getLogger(__name__)


def _descriptor_kwargs(ptid: PtidT, config: dict[str, Any]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "ptid": ptid,
        "name": config[SZ_NAME],
        "ctid": config[SZ_CTID],
        "is_writable": config[SZ_WRITABLE],
        "control_type": config[SZ_CONTROL_TYPE] or "",
    }

    shape = ValueShape(config[SZ_SHAPE])

    if shape == ValueShape.NUMERIC:
        kwargs |= {
            "min_value_condition": config.get(SZ_MIN_VALUE),
            "max_value_condition": config.get(SZ_MAX_VALUE),
            "step_width": config.get(SZ_STEP_WIDTH),
            "unit_name": config.get(SZ_UNIT_NAME),
        }

    elif shape == ValueShape.LIST:
        kwargs |= {
            "options": tuple(
                ListOption(o[SZ_VALUE], o[SZ_TEXT]) for o in config[SZ_OPTIONS]
            ),
            "is_boolean": config[SZ_IS_BOOLEAN],
        }

    return kwargs


def descriptor_from_config(ptid: PtidT, config: dict[str, Any]) -> ParameterDescriptor:
    """Create a parameter descriptor from its (validated) catalog entry.

    Raise CatalogShapeInvalid if its shape is inconsistent.
    """
    cls = DESCRIPTOR_CLASSES[ValueShape(config[SZ_SHAPE])]
    return cls(**_descriptor_kwargs(ptid, config))


class Catalog:
    """The parameter descriptors (by PTID) and converter templates (by CTID)."""

    def __init__(
        self,
        descriptors: dict[PtidT, ParameterDescriptor],
        templates: dict[CtidT, dict[str, Any]],
    ) -> None:
        for d in descriptors.values():
            if d.ctid not in templates:
                raise exc.CatalogError(
                    f"{d}: is bound to an unknown converter template: {d.ctid}"
                )

        self._descriptors = MappingProxyType(dict(descriptors))
        self._templates = MappingProxyType(dict(templates))

    def __repr__(self) -> str:
        return (
            f"Catalog(descriptors={len(self._descriptors)}, "
            f"templates={len(self._templates)})"
        )

    def __contains__(self, ptid: object) -> bool:
        return ptid in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    @property
    def descriptors(self) -> MappingProxyType[PtidT, ParameterDescriptor]:
        return self._descriptors

    @property
    def templates(self) -> MappingProxyType[CtidT, dict[str, Any]]:
        return self._templates

    def descriptor(self, ptid: PtidT) -> ParameterDescriptor:
        try:
            return self._descriptors[ptid]
        except KeyError as err:
            raise exc.CatalogError(f"Unknown parameter (PTID): {ptid}") from err

    def create_converter(self, ptid: PtidT) -> ConverterTemplateBase | None:
        """Return a new converter for the parameter, or None if it is not convertible."""
        descriptor = self.descriptor(ptid)
        return create_converter(descriptor, self._templates[descriptor.ctid])


def load_catalog(config: dict[str, Any]) -> Catalog:
    """Validate a catalog config (a dict, e.g. from YAML), and return the catalog.

    Raise CatalogError (or CatalogShapeInvalid) if the catalog is invalid.
    """

    try:
        config = SCH_CATALOG(config)
    except vol.Invalid as err:
        raise exc.CatalogError(f"Catalog is invalid: {err}") from err

    return build_catalog(config)


def build_catalog(config: dict[str, Any]) -> Catalog:
    """Return the catalog of a catalog config that has already been validated."""

    templates: dict[CtidT, dict[str, Any]] = config[SZ_CONVERTER_TEMPLATES] or {}
    descriptors = {
        ptid: descriptor_from_config(ptid, cfg)
        for ptid, cfg in (config[SZ_PARAMETERS] or {}).items()
    }

    catalog = Catalog(descriptors, templates)
    _LOGGER.debug("Loaded the catalog: %r", catalog)
    return catalog
