"""
Beagle - GPIO controller

Infrastructure component owning every initialized pin of one board.

Responsibilities:
- Track initialized pins (pin -> PinManager), reject double initialization
  and use before initialization
- Commit configuration through the pin managers' operation queues
- Own the poll scheduler shared by all change notifiers
- Release every pin, the scheduler and the backend on shutdown

The backend is injected; the entry point decides which one to build
(see backend_factory.create_backend).
"""

from __future__ import annotations

from typing import Dict, List, Optional

from hardware.gpio.backend_interface import IGPIOBackend
from hardware.gpio.change_notifier import DEFAULT_POLL_INTERVAL, ChangeHandle
from hardware.gpio.pin_manager import PinManager
from lifecycle.poll_scheduler import PollScheduler
from models.enums import Direction, LogCategory, LogLevel, PinLifecycle, PinValue
from models.errors import (
    AlreadyInitializedError,
    BackendError,
    BeagleIOError,
    LifecycleError,
    NotInitializedError,
)
from models.pin import Pin
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.GPIO)


class Beagle:
    """
    Example:
        with Beagle(TemporaryFilesystemBackend()) as beagle:
            beagle.initialize_pin(Pin.P8_03, Direction.OUT)
            beagle.set_pin_value(Pin.P8_03, PinValue.HIGH)
            handle = beagle.poll(Pin.P8_03)

    Not thread-safe: call from one thread or serialize externally.
    """

    def __init__(
        self,
        backend: IGPIOBackend,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        scheduler: Optional[PollScheduler] = None
    ):
        """
        Args:
            backend: Backend adapter executing pin commands
            poll_interval: Sampling interval of change notifiers (seconds)
            scheduler: Poll scheduler to share (default: a new one owned by this Beagle)
        """
        self.backend = backend
        self.poll_interval = poll_interval
        self._scheduler = scheduler or PollScheduler()
        self._pins: Dict[Pin, PinManager] = {}
        self._released = False

        log.info("Beagle initialized", backend=type(backend).__name__,
                 poll_interval_ms=round(poll_interval * 1000, 1))

    # -------------------------------
    # Pin lifecycle
    # -------------------------------

    def initialize_pin(self, pin: Pin, direction: Direction, active_low: bool = False) -> None:
        """
        Export and configure a pin. It is registered only if the whole
        configuration committed; otherwise an export that already ran is
        undone, so the call can be retried.

        Raises:
            AlreadyInitializedError: Pin already initialized
            BackendError, ConfigurationError: Configuration failed
        """
        self._require_open()
        if pin in self._pins:
            log.error("Pin already initialized", pin=pin.name)
            raise AlreadyInitializedError(pin)

        manager = self._create_pin_manager(pin)
        try:
            manager.set_direction(direction).set_active_low(active_low).perform_outstanding_operations()
        except BeagleIOError as ex:
            log.exception("Pin initialization failed", ex, pin=pin.name)
            self._abandon(manager)
            raise

        self._pins[pin] = manager
        log.info("Pin initialized", pin=pin.name, direction=direction.value, active_low=active_low)

    def close_pin(self, pin: Pin) -> None:
        """
        Release a pin and forget it. If the release flush fails the pin
        stays tracked and close_pin() can be retried.

        Raises:
            NotInitializedError: Pin not initialized
        """
        manager = self._find_pin_manager(pin)

        if manager.lifecycle is not PinLifecycle.RELEASING:
            manager.release()
        manager.perform_outstanding_operations()

        del self._pins[pin]
        log.info("Pin closed", pin=pin.name)

    # -------------------------------
    # Values
    # -------------------------------

    def set_pin_value(self, pin: Pin, value: PinValue) -> None:
        self._find_pin_manager(pin).set_value(value).perform_outstanding_operations()
        log.debug("Pin value written", pin=pin.name, value=value.value)

    def get_pin_value(self, pin: Pin) -> PinValue:
        return self._find_pin_manager(pin).get_value()

    def poll(self, pin: Pin) -> ChangeHandle:
        """Live value handle for the pin (same handle on repeated calls)."""
        return self._find_pin_manager(pin).poll()

    # -------------------------------
    # Introspection
    # -------------------------------

    def is_initialized(self, pin: Pin) -> bool:
        return pin in self._pins

    def initialized_pins(self) -> List[Pin]:
        return list(self._pins)

    def pin_manager(self, pin: Pin) -> PinManager:
        return self._find_pin_manager(pin)

    @property
    def released(self) -> bool:
        return self._released

    # -------------------------------
    # Shutdown
    # -------------------------------

    def release(self) -> None:
        """
        Close every tracked pin, then stop the scheduler and release the
        backend. Pins that fail to close are logged and skipped so the
        others still get released; the first failure is raised at the end.
        Calling it again is a no-op.
        """
        if self._released:
            return

        pin_count = len(self._pins)
        log.info(f"Releasing {pin_count} GPIO pins")

        failures: List[BeagleIOError] = []
        for pin in list(self._pins):
            try:
                self.close_pin(pin)
            except BeagleIOError as ex:
                log.error("Failed to close pin", pin=pin.name, error=str(ex))
                failures.append(ex)

        self._scheduler.shutdown()
        self._released = True

        try:
            self.backend.release()
        except BeagleIOError as ex:
            log.error("Backend release failed", error=str(ex))
            failures.append(ex)

        if failures:
            raise BackendError(
                f"Beagle released with {len(failures)} error(s): {failures[0]}",
                failures[0]
            ) from failures[0]

        log.info("GPIO release complete")

    def __enter__(self) -> Beagle:
        return self

    def __exit__(self, *_):
        self.release()

    # -------------------------------
    # Internals
    # -------------------------------

    def _create_pin_manager(self, pin: Pin) -> PinManager:
        return PinManager(pin, self.backend, self._scheduler, poll_interval=self.poll_interval)

    def _abandon(self, manager: PinManager) -> None:
        """Give back whatever a failed initialization acquired."""
        try:
            manager.release().perform_outstanding_operations()
        except BeagleIOError as ex:
            log.exception("Rollback of failed pin left it exported", ex, level=LogLevel.WARN,
                          pin=manager.pin.name)

    def _find_pin_manager(self, pin: Pin) -> PinManager:
        self._require_open()
        manager = self._pins.get(pin)
        if manager is None:
            raise NotInitializedError(pin)
        return manager

    def _require_open(self) -> None:
        if self._released:
            raise LifecycleError("Beagle is already released")
