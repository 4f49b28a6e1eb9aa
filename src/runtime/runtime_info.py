import os
import select
import sys

SYSFS_GPIO_EXPORT = "/sys/class/gpio/export"
DEVICE_TREE_MODEL = "/proc/device-tree/model"


class RuntimeInfo:

    @classmethod
    def is_linux(cls) -> bool:
        return sys.platform.startswith("linux")

    @classmethod
    def is_beaglebone(cls) -> bool:
        if not cls.is_linux():
            return False
        for path in (DEVICE_TREE_MODEL, "/proc/cpuinfo"):
            try:
                with open(path, "r", errors="ignore") as f:
                    if "BeagleBone" in f.read():
                        return True
            except OSError:
                continue
        return False

    @classmethod
    def has_sysfs_gpio(cls) -> bool:
        return cls.is_linux() and os.path.exists(SYSFS_GPIO_EXPORT)

    @classmethod
    def has_epoll(cls) -> bool:
        return hasattr(select, "epoll")
