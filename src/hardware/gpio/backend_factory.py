from runtime.runtime_info import RuntimeInfo
from hardware.gpio.backend_interface import IGPIOBackend
from hardware.gpio.backend_memory import InMemoryBackend
from hardware.gpio.backend_sysfs import SYSFS_GPIO_DIRECTORY, SysfsBackend
from hardware.gpio.backend_temporary import TemporaryFilesystemBackend
from models.config import GpioConfig
from models.enums import BackendType, LogCategory
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.GPIO)


def resolve_backend_type(config: GpioConfig) -> BackendType:
    if config.backend is not BackendType.AUTO:
        return config.backend

    has_sysfs = RuntimeInfo.has_sysfs_gpio()
    log.debug("Detecting GPIO backend", sysfs=has_sysfs, beaglebone=RuntimeInfo.is_beaglebone())
    return BackendType.SYSFS if has_sysfs else BackendType.TEMPORARY


def create_backend(config: GpioConfig) -> IGPIOBackend:
    backend_type = resolve_backend_type(config)
    log.debug("Creating GPIO backend", requested=config.backend.name, resolved=backend_type.name)

    if backend_type is BackendType.SYSFS:
        return SysfsBackend(
            config.base_directory or SYSFS_GPIO_DIRECTORY,
            use_change_events=config.use_change_events
        )
    if backend_type is BackendType.MEMORY:
        return InMemoryBackend()
    return TemporaryFilesystemBackend(config.base_directory)
