"""
Hardware Layer

Low-level GPIO access only:

- Beagle (pin table, batching, polling)
- Backends (sysfs, temporary files, in-memory)
"""
from .gpio.beagle import Beagle
from .gpio.backend_factory import create_backend
from .gpio.backend_sysfs import SysfsBackend
from .gpio.backend_temporary import TemporaryFilesystemBackend
from .gpio.backend_memory import InMemoryBackend

__all__ = [
    "Beagle",
    "create_backend",
    "SysfsBackend",
    "TemporaryFilesystemBackend",
    "InMemoryBackend",
]
