"""
Pin group helpers

Apply one Beagle operation to every pin of a PinGroup, in group order.
The first failure propagates and the remaining pins are not touched;
pins handled before the failure keep their new state.
"""

from typing import Dict

from hardware.gpio.beagle import Beagle
from models.enums import Direction, LogCategory, PinValue
from models.pin import PinGroup
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.GPIO)


def initialize_pins(beagle: Beagle, group: PinGroup, direction: Direction, active_low: bool = False) -> None:
    for pin in group:
        beagle.initialize_pin(pin, direction, active_low)
    log.debug("Pin group initialized", pins=_names(group), direction=direction.value)


def close_pins(beagle: Beagle, group: PinGroup) -> None:
    for pin in group:
        beagle.close_pin(pin)
    log.debug("Pin group closed", pins=_names(group))


def set_pins_value(beagle: Beagle, group: PinGroup, value: PinValue) -> None:
    for pin in group:
        beagle.set_pin_value(pin, value)


def get_pins_value(beagle: Beagle, group: PinGroup) -> Dict:
    """Read every pin of the group: {Pin: PinValue}, in group order."""
    return {pin: beagle.get_pin_value(pin) for pin in group}


def _names(group: PinGroup) -> str:
    return ", ".join(pin.name for pin in group)
