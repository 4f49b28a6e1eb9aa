#!/usr/bin/env python3
"""
BeagleBone GPIO - command line entry point

Commands:
    pins                    List known pins and their kernel GPIO numbers
    get PIN                 Initialize PIN as input and print its value
    set PIN VALUE           Initialize PIN as output and write VALUE (0/1/low/high)
    watch PIN [--seconds N] Print every value change of PIN until N seconds
                            passed or Ctrl+C

The backend comes from config/gpio.yaml (see ConfigManager); --backend
overrides it for one run.
"""

import argparse
import sys
import time
from dataclasses import replace
from typing import Optional

from hardware.gpio.beagle import Beagle
from lifecycle.beagle_application import BeagleApplication, create_beagle
from managers.config_manager import ConfigManager
from models.config import GpioConfig
from models.enums import BackendType, Direction, LogCategory, PinValue
from models.errors import BeagleIOError
from models.pin import Pin
from utils.enum_helper import EnumHelper
from utils.logger import configure_logger, get_logger

log = get_logger().for_category(LogCategory.SYSTEM)


class WatchApplication(BeagleApplication):
    """Print value changes of one input pin"""

    def __init__(self, config: GpioConfig, pin: Pin, seconds: Optional[float] = None):
        super().__init__(config)
        self.pin = pin
        self.deadline = time.monotonic() + seconds if seconds else None

    def initialize(self, beagle: Beagle) -> None:
        beagle.initialize_pin(self.pin, Direction.IN)
        handle = beagle.poll(self.pin)
        print(f"{self.pin.name}: {handle.value.name}")
        handle.on_change(lambda value: print(f"{self.pin.name}: {value.name}"))

    def run(self, beagle: Beagle) -> bool:
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return False
        return not self.sleep(0.1)

    def cleanup(self, beagle: Beagle) -> None:
        pass


def cmd_pins(args: argparse.Namespace, config: GpioConfig) -> None:
    for pin in Pin:
        print(f"{pin.name:<10} gpio{pin.kernel_number}")


def cmd_get(args: argparse.Namespace, config: GpioConfig) -> None:
    with create_beagle(config) as beagle:
        beagle.initialize_pin(args.pin, Direction.IN)
        print(beagle.get_pin_value(args.pin).name)


def cmd_set(args: argparse.Namespace, config: GpioConfig) -> None:
    with create_beagle(config) as beagle:
        beagle.initialize_pin(args.pin, Direction.OUT)
        beagle.set_pin_value(args.pin, args.value)
        print(f"{args.pin.name} → {beagle.get_pin_value(args.pin).name}")


def cmd_watch(args: argparse.Namespace, config: GpioConfig) -> None:
    app = WatchApplication(config, args.pin, args.seconds)
    app.setup_signal_handlers()
    app.start()


def _pin(raw: str) -> Pin:
    try:
        return EnumHelper.from_string(Pin, raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"unknown pin '{raw}' (see 'pins')")


def _pin_value(raw: str) -> PinValue:
    try:
        return EnumHelper.to_enum(PinValue, raw)
    except (ValueError, TypeError):
        raise argparse.ArgumentTypeError(f"invalid value '{raw}' (use 0, 1, low or high)")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="beagle-gpio",
        description="BeagleBone GPIO pin control",
    )
    p.add_argument("--config", default="config/gpio.yaml", help="Path to gpio.yaml")
    p.add_argument("--backend", default="", choices=[""] + EnumHelper.list_names(BackendType, lowercase=True),
                   help="Override the configured backend")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("pins", help="List known pins")

    p_get = sub.add_parser("get", help="Read a pin")
    p_get.add_argument("pin", type=_pin)

    p_set = sub.add_parser("set", help="Write a pin")
    p_set.add_argument("pin", type=_pin)
    p_set.add_argument("value", type=_pin_value)

    p_watch = sub.add_parser("watch", help="Print value changes of a pin")
    p_watch.add_argument("pin", type=_pin)
    p_watch.add_argument("--seconds", type=float, default=None, help="Stop after N seconds")

    return p


COMMANDS = {
    "pins": cmd_pins,
    "get": cmd_get,
    "set": cmd_set,
    "watch": cmd_watch,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = ConfigManager(config_path=args.config).load()
    if args.backend:
        config = replace(config, backend=EnumHelper.from_string(BackendType, args.backend))
    configure_logger(config.log_level, config.log_colors)

    try:
        COMMANDS[args.command](args, config)
    except BeagleIOError as ex:
        log.exception("Command failed", ex, command=args.command)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
