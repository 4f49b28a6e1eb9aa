"""
Enums for the GPIO pin management layer
"""

from enum import Enum, auto

from models.errors import ParseError


class PinValue(Enum):
    """
    Logical level of a pin

    The enum value is the wire representation found in the `value` file.
    """
    LOW = "0"
    HIGH = "1"

    @classmethod
    def from_wire(cls, raw: str) -> "PinValue":
        """
        Parse the content of a value file

        Raises:
            ParseError: If raw is anything but "0" or "1"
        """
        for member in cls:
            if member.value == raw:
                return member
        raise ParseError(f"PinValue {raw!r} not found", raw=raw)

    def inverted(self) -> "PinValue":
        return PinValue.LOW if self is PinValue.HIGH else PinValue.HIGH


class Direction(Enum):
    """
    Pin direction as written to the `direction` file

    HIGH and LOW configure the pin as output and set the initial level
    atomically (no glitch between direction and value writes).
    """
    IN = "in"
    OUT = "out"
    HIGH = "high"
    LOW = "low"

    @classmethod
    def from_wire(cls, raw: str) -> "Direction":
        for member in cls:
            if member.value == raw:
                return member
        raise ParseError(f"Direction {raw!r} not found", raw=raw)

    @property
    def is_output(self) -> bool:
        return self is not Direction.IN


class PinLifecycle(Enum):
    """Pin manager states (forward only)"""
    UNINITIALIZED = auto()   # Manager not created yet
    CONFIGURING = auto()     # Resource acquisition / configuration queued
    ACTIVE = auto()          # Configuration flushed, pin usable
    RELEASING = auto()       # Release queued, waiting for flush
    RELEASED = auto()        # Backend resource gone


class BackendType(Enum):
    """Backend adapters selectable from configuration"""
    AUTO = auto()        # sysfs when available, temporary files otherwise
    SYSFS = auto()       # /sys/class/gpio on the board
    TEMPORARY = auto()   # Pin directories in the temp dir (development)
    MEMORY = auto()      # Dictionary backed, no files at all (tests)


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    GPIO = auto()        # Pin export, configuration, reads and writes
    POLL = auto()        # Change notifiers, scheduler, file watches
    LIFECYCLE = auto()   # Application loop, shutdown
    SYSTEM = auto()      # Startup, runtime detection, errors
