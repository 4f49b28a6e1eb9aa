"""
GPIO error taxonomy

BeagleIOError
├─ LifecycleError          operation outside its valid state
│  ├─ AlreadyInitializedError
│  └─ NotInitializedError
├─ BackendError            file / device I/O failure (cause attached)
│  └─ ConfigurationError   backend rejected a configuration value
└─ ParseError              value outside the closed wire vocabulary
"""

from typing import Optional


class BeagleIOError(Exception):
    """Base class for all errors raised by the GPIO layer"""


class LifecycleError(BeagleIOError):
    """Operation attempted in a lifecycle state that does not allow it"""


class AlreadyInitializedError(LifecycleError):
    def __init__(self, pin):
        super().__init__(f"Pin {pin.name} is already initialized")
        self.pin = pin


class NotInitializedError(LifecycleError):
    def __init__(self, pin):
        super().__init__(
            f"Pin {pin.name} was not found. Did you forget to initialize it? "
            f"Always call initialize_pin(pin, direction) before using a pin."
        )
        self.pin = pin


class BackendError(BeagleIOError):
    """
    Underlying I/O failed

    The underlying exception is chained (`raise ... from ex`) and also kept in
    `cause` so callers logging the error do not need to walk `__cause__`.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ConfigurationError(BackendError):
    """Backend rejected a syntactically valid configuration value"""


class ParseError(BeagleIOError):
    """Backend returned a string outside the PinValue / Direction vocabulary"""

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw
