#!/usr/bin/env python3
"""ISM7 TX - a telegram conversion framework for Wolf ISM7 controllers."""

from pathlib import Path
from typing import Any

import yaml

from ism7_tx import Telegram
from ism7_tx.const import SZ_CONVERTER_TEMPLATES, SZ_PARAMETERS


TEST_DIR = Path(__file__).resolve().parent
FIXTURES_DIR = TEST_DIR / "fixtures"

CONFIG_FILE = FIXTURES_DIR / "config.yaml"
TELEGRAM_LOG = FIXTURES_DIR / "telegrams.log"


def assert_raises(exception: type[Exception], fnc, *args: Any) -> None:
    try:
        fnc(*args)
    except exception:  # as err:
        pass  # or: assert True
    else:
        assert False, f"{fnc.__name__}{args} did not raise {exception.__name__}"


def load_yaml(file_name: Path) -> dict[str, Any]:
    with open(file_name) as f:
        return yaml.safe_load(f)  # type: ignore[no-any-return]


def load_test_config() -> dict[str, Any]:
    return load_yaml(CONFIG_FILE)


def catalog_config(
    templates: dict[str, Any], parameters: dict[int, Any]
) -> dict[str, Any]:
    return {SZ_CONVERTER_TEMPLATES: templates, SZ_PARAMETERS: parameters}


def telegrams(*args: tuple[int, int, int]) -> list[Telegram]:
    return [Telegram(*a) for a in args]

