from typing import Optional, Protocol

from models.commands import PinCommand
from models.pin import Pin


class IChangeSubscription(Protocol):
    """Push-style change notification for one pin's value"""

    def consume(self) -> bool:
        """Return True (once) if the value changed since the last call."""
        ...

    def cancel(self) -> None:
        ...


class IGPIOBackend(Protocol):

    # -------------------------------
    # Commands (deferred, flushed by the pin manager)
    # -------------------------------

    def apply(self, pin: Pin, command: PinCommand) -> None:
        """
        Execute one queued command against the backing store.

        Raises:
            BackendError: I/O failed
            ConfigurationError: Value rejected by the backend
        """
        ...

    # -------------------------------
    # Immediate reads
    # -------------------------------

    def read_value(self, pin: Pin) -> str:
        """Raw content of the pin's value file ("0" / "1" on a sane backend)"""
        ...

    # -------------------------------
    # Optional capability
    # -------------------------------

    def subscribe_to_change(self, pin: Pin) -> Optional[IChangeSubscription]:
        """Return a subscription, or None to fall back to pure sampling."""
        ...

    # -------------------------------
    # Lifecycle
    # -------------------------------

    def release(self) -> None:
        """Close shared resources (watchers, base directories)."""
        ...
