from .backend_interface import IGPIOBackend, IChangeSubscription
from .backend_filesystem import FileSystemBackend
from .backend_sysfs import SysfsBackend
from .backend_temporary import TemporaryFilesystemBackend
from .backend_memory import InMemoryBackend
from .backend_factory import create_backend
from .change_notifier import ChangeNotifier, ChangeHandle
from .operation_queue import OperationQueue
from .pin_manager import PinManager
from .beagle import Beagle
from .pin_groups import initialize_pins, close_pins, set_pins_value, get_pins_value


__all__ = [
    "IGPIOBackend",
    "IChangeSubscription",
    "FileSystemBackend",
    "SysfsBackend",
    "TemporaryFilesystemBackend",
    "InMemoryBackend",
    "create_backend",
    "ChangeNotifier",
    "ChangeHandle",
    "OperationQueue",
    "PinManager",
    "Beagle",
    "initialize_pins",
    "close_pins",
    "set_pins_value",
    "get_pins_value",
]
