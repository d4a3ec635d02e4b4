#!/usr/bin/env python3
"""A CLI for the ism7_tx library."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Final, TextIO

import click
import yaml
from colorama import Fore, Style, init as colorama_init

from ism7_mqtt import HaDiscovery, RunningDevice, build_devices, load_config
from ism7_mqtt import exceptions as exc
from ism7_mqtt.const import DEFAULT_DISCOVERY_ID, SZ_DISCOVERY_ID, SZ_MQTT
from ism7_tx import Telegram, set_telegram_logging
from ism7_tx.logger import CONSOLE_COLS, DEFAULT_DATEFMT, DEFAULT_FMT
from ism7_tx.schemas import (
    SZ_FILE_NAME,
    SZ_ROTATE_BACKUPS,
    SZ_ROTATE_BYTES,
    SZ_TELEGRAM_LOG,
)

from .debug import SZ_DBG_MODE, start_debugging

logging.basicConfig(level=logging.WARNING, format=DEFAULT_FMT, datefmt=DEFAULT_DATEFMT)


COMMENT_CHAR: Final = "#"

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


def load_config_file(config_file: TextIO) -> dict[str, Any]:
    """Return the config (YAML, or JSON) of a config file."""
    try:
        config = yaml.safe_load(config_file)
    except yaml.YAMLError as err:
        raise click.BadParameter(f"not a YAML/JSON file: {err}") from err
    if not isinstance(config, dict):
        raise click.BadParameter("the config file must contain a mapping")
    return config


def select_device(devices: list[RunningDevice], name: str | None) -> RunningDevice:
    """Return the device with the name (the first device, if no name is given)."""
    if not devices:
        raise click.UsageError("the config has no devices")
    if name is None:
        return devices[0]
    if device := next((d for d in devices if d.name == name), None):
        return device
    raise click.UsageError(
        f"no such device: {name} (try one of: {', '.join(d.name for d in devices)})"
    )


def print_error(msg: str) -> None:
    click.echo(f"{Style.BRIGHT}{Fore.RED}{msg}", err=True)


# Args/Params for all commands
@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("-z", "--debug-mode", count=True, help="enable debugger")
@click.option(
    "-c", "--config-file", type=click.File("r"), required=True, help="YAML/JSON"
)
@click.pass_context
def cli(ctx: click.Context, config_file: TextIO, **kwargs: Any) -> None:
    """A CLI for the ism7_tx library."""

    if kwargs[SZ_DBG_MODE] > 0:  # Do first
        start_debugging(kwargs[SZ_DBG_MODE] == 1)

    try:
        config = load_config(load_config_file(config_file))
        devices = build_devices(config)
    except exc.Ism7Exception as err:
        print_error(f"Error: {err}")
        ctx.exit(1)

    ctx.obj = config, devices


# Args/Params for telegram logs only
class FileCommand(click.Command):  # client.py parse <file>
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.params.insert(  # input_file
            0, click.Argument(("input-file",), type=click.File("r"), default="-")
        )


#
# 1/3: PARSE (a telegram log, printing the values as they become complete)
@click.command(cls=FileCommand)
@click.option("-d", "--device", "device_name", help="the device (default: the first)")
@click.option("-l", "--long-format", is_flag=True, help="dont truncate STDOUT")
@click.pass_obj
def parse(obj: tuple[dict[str, Any], list[RunningDevice]], **kwargs: Any) -> None:
    """Parse a telegram log (lines of: nr low high) for values."""

    config, devices = obj
    device = select_device(devices, kwargs["device_name"])
    con_cols = None if kwargs["long_format"] else CONSOLE_COLS

    if tlg_log := config.get(SZ_TELEGRAM_LOG):
        set_telegram_logging(
            file_name=tlg_log[SZ_FILE_NAME],
            rotate_backups=tlg_log[SZ_ROTATE_BACKUPS] or 0,
            rotate_bytes=tlg_log.get(SZ_ROTATE_BYTES),
        )

    input_file: TextIO = kwargs["input_file"]
    for line in input_file:
        line = line.split(COMMENT_CHAR, 1)[0].strip()
        if not line:
            continue

        try:
            telegram = Telegram.from_str(line)
        except exc.TelegramInvalid as err:
            print_error(f"{err}")
            continue

        if not device.add_telegram(telegram):
            continue

        for key, value in device.take_values().items():
            click.echo(f"{Fore.GREEN}{telegram} {key}: {value}"[:con_cols])


#
# 2/3: DISCOVERY (print the Home Assistant discovery documents)
@click.command()
@click.pass_obj
def discovery(obj: tuple[dict[str, Any], list[RunningDevice]]) -> None:
    """Print the Home Assistant discovery documents (as JSON)."""

    config, devices = obj
    discovery_id = config.get(SZ_MQTT, {}).get(SZ_DISCOVERY_ID, DEFAULT_DISCOVERY_ID)

    result = {m.path: m.content for m in HaDiscovery(devices, discovery_id).messages()}
    click.echo(json.dumps(result, indent=4, ensure_ascii=False))


#
# 3/3: WRITE (print the telegrams that would be written for a value)
@click.command()
@click.option("-d", "--device", "device_name", help="the device (default: the first)")
@click.argument("key")
@click.argument("value")
@click.pass_context
def write(ctx: click.Context, key: str, value: str, device_name: str | None) -> None:
    """Print the telegrams to write a value to a parameter (KEY is its sub-topic)."""

    _, devices = ctx.obj
    device = select_device(devices, device_name)

    try:
        writes = device.get_writes(key, value)
    except exc.Ism7Exception as err:
        print_error(f"Error: {err}")
        ctx.exit(1)

    for w in writes:
        click.echo(f"{Fore.CYAN}{w}")


cli.add_command(parse)
cli.add_command(discovery)
cli.add_command(write)


def main() -> None:
    colorama_init(autoreset=True)

    try:
        result = cli(standalone_mode=False)
    except click.ClickException as err:
        err.show()
        sys.exit(err.exit_code)
    except click.Abort:
        print("\r\nism7_cli: aborted")
        sys.exit(1)

    if isinstance(result, int):
        sys.exit(result)


if __name__ == "__main__":
    main()
