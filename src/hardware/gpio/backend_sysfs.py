"""
Sysfs Backend - Linux /sys/class/gpio

Pins are exported by writing the kernel GPIO number to `export`, which
creates gpio<N>/; writing it to `unexport` removes the directory again.
Value changes are pushed through epoll (see ChangeWatcher) when
`use_change_events` is on and the pin supports edge interrupts.
"""

import os
from pathlib import Path
from typing import Optional, Union

from hardware.gpio.backend_filesystem import EDGE_FILE, VALUE_FILE, FileSystemBackend
from hardware.gpio.change_watcher import ChangeWatcher, EdgeSubscription
from models.enums import LogCategory
from models.errors import BackendError
from models.pin import Pin
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.GPIO)

SYSFS_GPIO_DIRECTORY = Path("/sys/class/gpio")
EXPORT_FILE = "export"
UNEXPORT_FILE = "unexport"


class SysfsBackend(FileSystemBackend):

    def __init__(self, base_directory: Union[str, Path] = SYSFS_GPIO_DIRECTORY,
                 use_change_events: bool = True):
        super().__init__(base_directory)
        self.use_change_events = use_change_events
        self._watcher: Optional[ChangeWatcher] = None

        log.info("Sysfs GPIO backend initialized", base=self.base_directory, edge_events=use_change_events)

    def export_resource(self, pin: Pin) -> Path:
        pin_directory = self.base_directory / f"gpio{pin.kernel_number}"
        if not pin_directory.exists():
            self.write(self.base_directory / EXPORT_FILE, pin.kernel_number)
        return pin_directory

    def unexport_resource(self, pin: Pin, handle: Path) -> None:
        self.write(self.base_directory / UNEXPORT_FILE, pin.kernel_number)

    def subscribe_to_change(self, pin: Pin) -> Optional[EdgeSubscription]:
        if not self.use_change_events or not ChangeWatcher.is_supported():
            return None

        handle = self._handle(pin)
        try:
            self.write(handle / EDGE_FILE, "both")
        except BackendError as ex:
            # Not every pin can raise interrupts, sampling still works
            log.warn("Edge events unavailable, falling back to sampling", pin=pin.name, error=str(ex))
            return None

        try:
            fd = os.open(handle / VALUE_FILE, os.O_RDONLY | os.O_NONBLOCK)
        except OSError as ex:
            raise BackendError(f"Error opening {handle / VALUE_FILE} for change events", ex) from ex

        if self._watcher is None:
            self._watcher = ChangeWatcher()
        return self._watcher.watch(fd, label=pin.name)

    def release(self) -> None:
        if self._watcher is not None:
            self._watcher.close()
            self._watcher = None
        super().release()
