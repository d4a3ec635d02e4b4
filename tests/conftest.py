#!/usr/bin/env python3
"""ISM7 TX - a telegram conversion framework for Wolf ISM7 controllers."""

from typing import Any

import pytest

from ism7_mqtt import RunningDevice, devices_from_config
from ism7_tx import Catalog, load_catalog

from .helpers import load_test_config


@pytest.fixture
def config() -> dict[str, Any]:
    """Return the (unvalidated) global config of a BM-2."""
    return load_test_config()


@pytest.fixture
def catalog(config: dict[str, Any]) -> Catalog:
    return load_catalog(config["catalog"])


@pytest.fixture
def device(config: dict[str, Any]) -> RunningDevice:
    return devices_from_config(config)[0]
