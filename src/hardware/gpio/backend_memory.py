from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from models.commands import ExportPin, PinCommand, Release, SetActiveLow, SetDirection, SetValue
from models.enums import Direction, LogCategory, PinValue
from models.errors import BackendError
from models.pin import Pin
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.GPIO)


@dataclass
class MemoryPinState:
    direction: Optional[Direction] = None
    active_low: bool = False
    value: str = PinValue.LOW.value


class InMemoryBackend:
    """
    Dictionary backed GPIO backend for tests and dry runs

    Every successfully applied command is appended to `applied`, so tests
    can assert exactly what reached the backend and in which order.
    Writing a value to a pin not configured as output fails, like sysfs.
    """

    def __init__(self):
        self._pins: Dict[Pin, MemoryPinState] = {}
        self.applied: List[Tuple[Pin, PinCommand]] = []
        self.released = False
        log.info("Mock GPIO backend initialized")

    # -------------------------------
    # Commands
    # -------------------------------

    def apply(self, pin: Pin, command: PinCommand) -> None:
        if isinstance(command, ExportPin):
            if pin in self._pins:
                raise BackendError(f"Pin {pin.name} is already exported")
            self._pins[pin] = MemoryPinState()
        else:
            state = self._state(pin)

            if isinstance(command, SetDirection):
                state.direction = command.direction
                if command.direction is Direction.HIGH:
                    state.value = PinValue.HIGH.value
                elif command.direction is Direction.LOW:
                    state.value = PinValue.LOW.value
            elif isinstance(command, SetActiveLow):
                state.active_low = command.active_low
            elif isinstance(command, SetValue):
                if state.direction is None or not state.direction.is_output:
                    raise BackendError(f"Pin {pin.name} is not configured as output")
                state.value = command.value.value
            elif isinstance(command, Release):
                del self._pins[pin]
            else:
                raise TypeError(f"Unknown pin command: {command!r}")

        self.applied.append((pin, command))

    # -------------------------------
    # Reads
    # -------------------------------

    def read_value(self, pin: Pin) -> str:
        value = self._state(pin).value
        if not value:
            raise BackendError(f"Pin {pin.name} holds no value")
        return value

    def subscribe_to_change(self, pin: Pin) -> None:
        return None

    # -------------------------------
    # Test helpers
    # -------------------------------

    def set_external_value(self, pin: Pin, raw: str) -> None:
        """Simulate the outside world driving an input pin (raw is not validated)."""
        self._state(pin).value = raw

    def is_exported(self, pin: Pin) -> bool:
        return pin in self._pins

    def state_of(self, pin: Pin) -> MemoryPinState:
        return self._state(pin)

    def commands_for(self, pin: Pin) -> List[PinCommand]:
        return [command for applied_pin, command in self.applied if applied_pin is pin]

    # -------------------------------
    # Lifecycle
    # -------------------------------

    def release(self) -> None:
        self._pins.clear()
        self.released = True
        log.info("Mock GPIO backend released")

    def _state(self, pin: Pin) -> MemoryPinState:
        state = self._pins.get(pin)
        if state is None:
            raise BackendError(f"Pin {pin.name} is not exported")
        return state
