"""
Temporary File System Backend - development double of sysfs

Mirrors the sysfs layout under <tmp>/beagleio/<PIN_NAME>/ so applications
can run on a workstation and tests can inspect or flip the files directly.
Pin directories are deleted on release, the base directory on backend
release. Like the kernel, "high" and "low" directions also set the value
file and value writes to a pin that is not an output are refused. Regular
files raise no edge events, so polling always samples.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from hardware.gpio.backend_filesystem import DIRECTION_FILE, PIN_FILES, VALUE_FILE, FileSystemBackend
from models.commands import PinCommand, SetDirection, SetValue
from models.enums import Direction, LogCategory, PinValue
from models.errors import BackendError
from models.pin import Pin
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.GPIO)

OWNER_ONLY_DIRECTORY = 0o700
OWNER_ONLY_FILE = 0o600

OUTPUT_DIRECTIONS = {direction.value for direction in Direction if direction.is_output}
INITIAL_LEVELS = {Direction.HIGH: PinValue.HIGH, Direction.LOW: PinValue.LOW}


def default_base_directory() -> Path:
    return Path(tempfile.gettempdir()) / "beagleio"


class TemporaryFilesystemBackend(FileSystemBackend):

    def __init__(self, base_directory: Optional[Union[str, Path]] = None):
        super().__init__(base_directory or default_base_directory())

        try:
            self.base_directory.mkdir(parents=True, exist_ok=True)
            os.chmod(self.base_directory, OWNER_ONLY_DIRECTORY)
        except OSError as ex:
            raise BackendError(f"Error creating temporary GPIO directory {self.base_directory}", ex) from ex

        log.info("Temporary GPIO backend initialized", base=self.base_directory)

    def apply(self, pin: Pin, command: PinCommand) -> None:
        if isinstance(command, SetValue) and not self._is_output(pin):
            raise BackendError(f"Pin {pin.name} is not configured as output")

        super().apply(pin, command)

        if isinstance(command, SetDirection) and command.direction in INITIAL_LEVELS:
            self.write(self._handle(pin) / VALUE_FILE, INITIAL_LEVELS[command.direction].value)

    def _is_output(self, pin: Pin) -> bool:
        path = self._handle(pin) / DIRECTION_FILE
        try:
            raw = path.read_text(encoding="ascii").strip()
        except (OSError, UnicodeDecodeError) as ex:
            raise BackendError(f"Error reading value from file {path}", ex) from ex
        return raw in OUTPUT_DIRECTIONS

    def export_resource(self, pin: Pin) -> Path:
        pin_directory = self.base_directory / pin.name

        try:
            if not pin_directory.exists():
                pin_directory.mkdir()
                os.chmod(pin_directory, OWNER_ONLY_DIRECTORY)

            for name in PIN_FILES:
                path = pin_directory / name
                if not path.exists():
                    path.touch()
                    os.chmod(path, OWNER_ONLY_FILE)
        except OSError as ex:
            raise BackendError(f"Error initializing temporary pin directory {pin_directory}", ex) from ex

        self.write(pin_directory / VALUE_FILE, PinValue.LOW.value)
        return pin_directory

    def unexport_resource(self, pin: Pin, handle: Path) -> None:
        try:
            shutil.rmtree(handle)
        except FileNotFoundError:
            pass
        except OSError as ex:
            raise BackendError(f"Error deleting temporary pin directory {handle}", ex) from ex

    def release(self) -> None:
        super().release()
        try:
            shutil.rmtree(self.base_directory)
        except FileNotFoundError:
            pass
        except OSError as ex:
            raise BackendError(f"Error deleting temporary GPIO directory {self.base_directory}", ex) from ex

        log.info("Temporary GPIO directory removed", base=self.base_directory)
