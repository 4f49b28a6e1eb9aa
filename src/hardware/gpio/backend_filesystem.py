"""
File System Backend - shared base for pseudo-file GPIO backends

Each exported pin is a directory holding one file per attribute:

    <pin dir>/direction    in | out | high | low
    <pin dir>/active_low   0 | 1
    <pin dir>/value        0 | 1
    <pin dir>/edge, power, uevent

Subclasses only decide where the pin directory lives and how it is acquired
and released (export_resource / unexport_resource). Command dispatch, file
I/O and error translation live here.
"""

import errno
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from hardware.gpio.backend_interface import IChangeSubscription
from models.commands import ExportPin, PinCommand, Release, SetActiveLow, SetDirection, SetValue
from models.enums import LogCategory
from models.errors import BackendError, ConfigurationError
from models.pin import Pin
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.GPIO)

ACTIVE_LOW_FILE = "active_low"
DIRECTION_FILE = "direction"
EDGE_FILE = "edge"
POWER_FILE = "power"
UEVENT_FILE = "uevent"
VALUE_FILE = "value"

PIN_FILES = (ACTIVE_LOW_FILE, DIRECTION_FILE, EDGE_FILE, POWER_FILE, UEVENT_FILE, VALUE_FILE)


class FileSystemBackend(ABC):

    def __init__(self, base_directory: Union[str, Path]):
        self.base_directory = Path(base_directory)
        self._handles: Dict[Pin, Path] = {}

    # -------------------------------
    # Commands
    # -------------------------------

    def apply(self, pin: Pin, command: PinCommand) -> None:
        if isinstance(command, ExportPin):
            self._handles[pin] = self.export_resource(pin)
            log.debug("Pin exported", pin=pin.name, directory=self._handles[pin])
            return

        handle = self._handle(pin)

        if isinstance(command, SetDirection):
            self._write_config(handle / DIRECTION_FILE, command.direction.value)
        elif isinstance(command, SetActiveLow):
            self._write_config(handle / ACTIVE_LOW_FILE, command.wire_value)
        elif isinstance(command, SetValue):
            self.write(handle / VALUE_FILE, command.value.value)
        elif isinstance(command, Release):
            self.unexport_resource(pin, handle)
            del self._handles[pin]
            log.debug("Pin unexported", pin=pin.name)
        else:
            raise TypeError(f"Unknown pin command: {command!r}")

    # -------------------------------
    # Reads
    # -------------------------------

    def read_value(self, pin: Pin) -> str:
        return self.read(self._handle(pin) / VALUE_FILE)

    def pin_directory(self, pin: Pin) -> Optional[Path]:
        """Directory of an exported pin, None if not exported"""
        return self._handles.get(pin)

    def subscribe_to_change(self, pin: Pin) -> Optional[IChangeSubscription]:
        return None

    def release(self) -> None:
        self._handles.clear()

    # -------------------------------
    # File I/O
    # -------------------------------

    def write(self, path: Path, value) -> None:
        """
        Write str(value) to path.

        Raises:
            BackendError: On any OS error
        """
        try:
            self._raw_write(path, value)
        except OSError as ex:
            raise BackendError(f"Error writing value {value} to file {path}", ex) from ex

    def read(self, path: Path) -> str:
        """
        Return the first line of path without surrounding whitespace.

        Raises:
            BackendError: On OS error or if the file holds no value
        """
        try:
            with open(path, "r", encoding="ascii") as f:
                line = f.readline()
        except (OSError, UnicodeDecodeError) as ex:
            raise BackendError(f"Error reading value from file {path}", ex) from ex

        value = line.strip()
        if not value:
            raise BackendError(f"File {path} holds no value")
        return value

    @staticmethod
    def _raw_write(path: Path, value) -> None:
        with open(path, "w", encoding="ascii") as f:
            f.write(str(value))

    def _write_config(self, path: Path, value) -> None:
        """Like write(), but EINVAL means the kernel refused the value"""
        try:
            self._raw_write(path, value)
        except OSError as ex:
            if ex.errno == errno.EINVAL:
                raise ConfigurationError(f"Value {value} rejected by {path}", ex) from ex
            raise BackendError(f"Error writing value {value} to file {path}", ex) from ex

    def _handle(self, pin: Pin) -> Path:
        handle = self._handles.get(pin)
        if handle is None:
            raise BackendError(f"Pin {pin.name} is not exported")
        return handle

    # -------------------------------
    # Resource acquisition
    # -------------------------------

    @abstractmethod
    def export_resource(self, pin: Pin) -> Path:
        """Make the pin directory available and return it."""

    @abstractmethod
    def unexport_resource(self, pin: Pin, handle: Path) -> None:
        """Give the pin directory back."""
