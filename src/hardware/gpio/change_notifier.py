"""
Change Notifier - push-style value changes for a pin that can only be pulled

A notifier samples one pin on the Beagle's shared PollScheduler and keeps
the last delivered value in a lock-protected cell. The scheduler thread is
the only writer; any thread may read through a ChangeHandle.

When the backend offers a change subscription (sysfs edge events), a tick
only re-reads after a notification arrived. Either way a level change is
seen within one interval, and a pulse that starts and ends inside one
interval can be missed entirely. Consumers get the latest value, not every
intermediate one.

Listeners run on the scheduler thread, in registration order, after the
cell has been updated.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from hardware.gpio.backend_interface import IChangeSubscription
from lifecycle.poll_scheduler import PollScheduler, ScheduledJob
from models.enums import LogCategory, PinValue
from models.errors import BeagleIOError
from models.pin import Pin
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.POLL)

DEFAULT_POLL_INTERVAL = 0.01


@dataclass
class PinChangeListener:
    """Listener registration"""
    callback: Callable[[PinValue], None]
    predicate: Optional[Callable[[PinValue], bool]] = None

    def matches(self, value: PinValue) -> bool:
        return self.predicate is None or self.predicate(value)


class ChangeNotifier:

    def __init__(
        self,
        pin: Pin,
        read_value: Callable[[], PinValue],
        scheduler: PollScheduler,
        interval: float = DEFAULT_POLL_INTERVAL,
        subscription: Optional[IChangeSubscription] = None
    ):
        """
        Args:
            pin: Pin being watched (logs only)
            read_value: Immediate, parsed read of the pin's value
            scheduler: Shared scheduler running the sampling ticks
            interval: Sampling interval in seconds
            subscription: Optional change subscription gating the re-reads
        """
        self.pin = pin
        self.interval = interval
        self._read_value = read_value
        self._scheduler = scheduler
        self._subscription = subscription

        self._changed = threading.Condition()
        self._value: Optional[PinValue] = None
        self._listeners: List[PinChangeListener] = []
        self._job: Optional[ScheduledJob] = None
        self._stopped = False

        self.sample_failures = 0

    # -------------------------------
    # Lifecycle
    # -------------------------------

    def start(self) -> ChangeHandle:
        """
        Read the current value once, then start sampling.

        Raises:
            BackendError, ParseError: The first read failed (nothing scheduled)
        """
        value = self._read_value()
        with self._changed:
            self._value = value

        self._job = self._scheduler.schedule(self._tick, self.interval, name=f"poll:{self.pin.name}")

        mode = "edge events" if self._subscription is not None else "sampling"
        log.info("Polling pin", pin=self.pin.name, value=value.name, mode=mode,
                 interval_ms=round(self.interval * 1000, 1))
        return ChangeHandle(self)

    def stop(self) -> None:
        """Cancel sampling and the change subscription (idempotent)."""
        if self._stopped:
            return
        self._stopped = True

        if self._job is not None:
            self._scheduler.cancel(self._job)
            self._job = None
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

        log.debug("Polling stopped", pin=self.pin.name)

    @property
    def stopped(self) -> bool:
        return self._stopped

    # -------------------------------
    # Readers
    # -------------------------------

    @property
    def value(self) -> PinValue:
        with self._changed:
            return self._value

    def wait_for(self, value: PinValue, timeout: Optional[float] = None) -> bool:
        """Block until the delivered value equals value; False on timeout."""
        with self._changed:
            return self._changed.wait_for(lambda: self._value is value, timeout)

    # -------------------------------
    # Listeners
    # -------------------------------

    def on_change(
        self,
        callback: Callable[[PinValue], None],
        predicate: Optional[Callable[[PinValue], bool]] = None
    ) -> ChangeNotifier:
        with self._changed:
            self._listeners.append(PinChangeListener(callback, predicate))
        return self

    def when_high(self, callback: Callable[[], None]) -> ChangeNotifier:
        return self.on_change(lambda _value: callback(), lambda value: value is PinValue.HIGH)

    def when_low(self, callback: Callable[[], None]) -> ChangeNotifier:
        return self.on_change(lambda _value: callback(), lambda value: value is PinValue.LOW)

    # -------------------------------
    # Scheduler tick
    # -------------------------------

    def _tick(self) -> None:
        if self._stopped:
            return
        subscription = self._subscription
        if subscription is not None and not subscription.consume():
            return

        try:
            value = self._read_value()
        except BeagleIOError as ex:
            self.sample_failures += 1
            log.warn("Sampling failed", pin=self.pin.name, error=str(ex), failures=self.sample_failures)
            return

        with self._changed:
            if value is self._value:
                return
            previous = self._value
            self._value = value
            listeners = list(self._listeners)
            self._changed.notify_all()

        log.debug("Pin value changed", pin=self.pin.name, change=f"{previous.name} → {value.name}")
        self._dispatch(value, listeners)

    def _dispatch(self, value: PinValue, listeners: List[PinChangeListener]) -> None:
        for listener in listeners:
            try:
                if listener.matches(value):
                    listener.callback(value)
            except Exception as ex:
                log.exception("Pin listener failed", ex, pin=self.pin.name)


class ChangeHandle:
    """
    Read-only, live view of a ChangeNotifier

    Example:
        handle = beagle.poll(Pin.P8_04)
        handle.when_high(lambda: print("pressed"))
        if handle.value is PinValue.LOW:
            ...
    """

    def __init__(self, notifier: ChangeNotifier):
        self._notifier = notifier

    @property
    def pin(self) -> Pin:
        return self._notifier.pin

    @property
    def value(self) -> PinValue:
        return self._notifier.value

    def is_high(self) -> bool:
        return self.value is PinValue.HIGH

    def is_low(self) -> bool:
        return self.value is PinValue.LOW

    @property
    def active(self) -> bool:
        return not self._notifier.stopped

    def wait_for(self, value: PinValue, timeout: Optional[float] = None) -> bool:
        return self._notifier.wait_for(value, timeout)

    def on_change(
        self,
        callback: Callable[[PinValue], None],
        predicate: Optional[Callable[[PinValue], bool]] = None
    ) -> ChangeHandle:
        self._notifier.on_change(callback, predicate)
        return self

    def when_high(self, callback: Callable[[], None]) -> ChangeHandle:
        self._notifier.when_high(callback)
        return self

    def when_low(self, callback: Callable[[], None]) -> ChangeHandle:
        self._notifier.when_low(callback)
        return self

    def __repr__(self) -> str:
        return f"ChangeHandle(pin={self.pin.name}, value={self.value.name}, active={self.active})"
