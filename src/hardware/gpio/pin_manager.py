"""
Pin Manager - per-pin state machine with deferred operations

    UNINITIALIZED ──create──▶ CONFIGURING ──flush──▶ ACTIVE
    ACTIVE ──release()──▶ RELEASING ──flush──▶ RELEASED

Configuration calls (set_direction, set_active_low, set_value, release)
only enqueue commands; perform_outstanding_operations() commits them in
order against the backend. Reads (get_value) bypass the queue.
"""

from __future__ import annotations

from typing import List, Optional

from hardware.gpio.backend_interface import IGPIOBackend
from hardware.gpio.change_notifier import DEFAULT_POLL_INTERVAL, ChangeHandle, ChangeNotifier
from hardware.gpio.operation_queue import OperationQueue
from lifecycle.poll_scheduler import PollScheduler
from models.commands import ExportPin, PinCommand, Release, SetActiveLow, SetDirection, SetValue
from models.enums import Direction, LogCategory, PinLifecycle, PinValue
from models.errors import LifecycleError
from models.pin import Pin
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.GPIO)

CONFIGURABLE_STATES = (PinLifecycle.CONFIGURING, PinLifecycle.ACTIVE)


class PinManager:
    """
    Owns one pin: its pending commands, applied configuration and notifier.

    Example:
        manager = PinManager(Pin.P8_03, backend, scheduler)
        manager.set_direction(Direction.OUT).set_active_low(False).perform_outstanding_operations()
        manager.set_value(PinValue.HIGH).perform_outstanding_operations()
        manager.release().perform_outstanding_operations()
    """

    def __init__(
        self,
        pin: Pin,
        backend: IGPIOBackend,
        scheduler: PollScheduler,
        poll_interval: float = DEFAULT_POLL_INTERVAL
    ):
        self.pin = pin
        self.poll_interval = poll_interval
        self._backend = backend
        self._scheduler = scheduler
        self._queue = OperationQueue()
        self._lifecycle = PinLifecycle.UNINITIALIZED

        # Applied (flushed) configuration, None until written
        self.direction: Optional[Direction] = None
        self.active_low: Optional[bool] = None

        self._notifier: Optional[ChangeNotifier] = None
        self._handle: Optional[ChangeHandle] = None

        self._queue.enqueue(ExportPin())
        self._lifecycle = PinLifecycle.CONFIGURING

    # -------------------------------
    # Configuration (deferred)
    # -------------------------------

    def set_direction(self, direction: Direction) -> PinManager:
        self._require(CONFIGURABLE_STATES, "set direction")
        self._queue.enqueue(SetDirection(direction))
        return self

    def set_active_low(self, active_low: bool) -> PinManager:
        self._require(CONFIGURABLE_STATES, "set active_low")
        self._queue.enqueue(SetActiveLow(bool(active_low)))
        return self

    def set_value(self, value: PinValue) -> PinManager:
        """Queue a value write; the backend refuses it on input pins."""
        self._require((PinLifecycle.ACTIVE,), "set value")
        self._queue.enqueue(SetValue(value))
        return self

    def release(self) -> PinManager:
        """
        Stop polling and queue the backend teardown.

        Configuration and value writes still pending are dropped, so a
        command the backend keeps refusing cannot block the teardown. A pin
        whose export never ran has nothing to give back and is released
        right away.
        """
        self._require(CONFIGURABLE_STATES, "release")

        if self._notifier is not None:
            self._notifier.stop()

        dropped = self._queue.discard(SetDirection, SetActiveLow, SetValue)
        if dropped:
            log.debug("Pending operations dropped", pin=self.pin.name, count=dropped)

        if self._queue.contains(ExportPin):
            self._queue.clear()
            self._lifecycle = PinLifecycle.RELEASED
            log.debug("Pin released before export", pin=self.pin.name)
            return self

        self._queue.enqueue(Release())
        self._lifecycle = PinLifecycle.RELEASING
        return self

    def perform_outstanding_operations(self) -> PinManager:
        """
        Flush queued commands in FIFO order.

        On failure the failing command and all later ones stay queued and
        the exception propagates; calling again retries from there.
        """
        executed = self._queue.flush(self._execute)

        if self._lifecycle is PinLifecycle.CONFIGURING:
            self._lifecycle = PinLifecycle.ACTIVE
            log.debug("Pin active", pin=self.pin.name, direction=self.direction, active_low=self.active_low)

        if executed:
            log.debug("Operations performed", pin=self.pin.name, count=executed)
        return self

    # -------------------------------
    # Immediate operations
    # -------------------------------

    def get_value(self) -> PinValue:
        """
        Read the current value, bypassing the queue.

        Raises:
            BackendError: Read failed or value file empty
            ParseError: Value is not "0" / "1"
        """
        self._require((PinLifecycle.ACTIVE,), "get value")
        return PinValue.from_wire(self._backend.read_value(self.pin))

    def poll(self) -> ChangeHandle:
        """Return the pin's live value handle, starting the notifier on first use."""
        self._require((PinLifecycle.ACTIVE,), "poll")

        if self._handle is not None:
            return self._handle

        subscription = self._backend.subscribe_to_change(self.pin)
        notifier = ChangeNotifier(
            self.pin,
            self.get_value,
            self._scheduler,
            interval=self.poll_interval,
            subscription=subscription
        )
        try:
            handle = notifier.start()
        except Exception:
            if subscription is not None:
                subscription.cancel()
            raise

        self._notifier = notifier
        self._handle = handle
        return handle

    # -------------------------------
    # State
    # -------------------------------

    @property
    def lifecycle(self) -> PinLifecycle:
        return self._lifecycle

    @property
    def is_polling(self) -> bool:
        return self._notifier is not None and not self._notifier.stopped

    def pending_operations(self) -> List[PinCommand]:
        return self._queue.pending()

    # -------------------------------
    # Internals
    # -------------------------------

    def _execute(self, command: PinCommand) -> None:
        self._backend.apply(self.pin, command)

        if isinstance(command, SetDirection):
            self.direction = command.direction
        elif isinstance(command, SetActiveLow):
            self.active_low = command.active_low
        elif isinstance(command, Release):
            self._lifecycle = PinLifecycle.RELEASED
            self._notifier = None
            self._handle = None
            log.debug("Pin released", pin=self.pin.name)

    def _require(self, states, action: str) -> None:
        if self._lifecycle not in states:
            raise LifecycleError(
                f"Cannot {action} on pin {self.pin.name} while {self._lifecycle.name}"
            )

    def __repr__(self) -> str:
        return f"PinManager(pin={self.pin.name}, lifecycle={self._lifecycle.name}, pending={len(self._queue)})"
