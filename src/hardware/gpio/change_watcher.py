"""
Change Watcher - file change notification for sysfs value files

The kernel signals an edge on /sys/class/gpio/gpioN/value with POLLPRI once
`edge` is set to rising/falling/both. One watcher thread waits on a shared
epoll set for all subscribed pins and only flags the matching subscription;
the pin's change notifier re-reads the value on its next scheduler tick, so
several edges between two ticks collapse into the latest value.
"""

import os
import select
import threading
from typing import Dict, Optional

from runtime.runtime_info import RuntimeInfo
from models.enums import LogCategory
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.POLL)


class EdgeSubscription:
    """Flag set by the watcher thread, consumed by the notifier tick"""

    def __init__(self, watcher: "ChangeWatcher", fd: int, label: str, close_fd: bool):
        self._watcher = watcher
        self._event = threading.Event()
        self.fd = fd
        self.label = label
        self.close_fd = close_fd
        self.cancelled = False

    def consume(self) -> bool:
        if not self._event.is_set():
            return False
        self._event.clear()
        return True

    def cancel(self) -> None:
        self._watcher.unwatch(self)

    def _notify(self) -> None:
        self._event.set()


class ChangeWatcher:
    """
    epoll based notification worker (Linux only)

    Args:
        event_mask: epoll mask registered per fd (default POLLPRI | POLLERR,
                    which is what sysfs raises on an edge)
        poll_timeout: Seconds between checks of the stop flag
    """

    def __init__(self, event_mask: Optional[int] = None, poll_timeout: float = 0.2,
                 name: str = "GpioChangeWatcher"):
        if not self.is_supported():
            raise RuntimeError("epoll is not available on this platform")

        self.name = name
        self._event_mask = event_mask if event_mask is not None else select.EPOLLPRI | select.EPOLLERR
        self._poll_timeout = poll_timeout
        self._lock = threading.Lock()
        self._subscriptions: Dict[int, EdgeSubscription] = {}
        self._epoll = None
        self._thread: Optional[threading.Thread] = None
        self._running = False
        self._closed = False

    @staticmethod
    def is_supported() -> bool:
        return RuntimeInfo.has_epoll()

    def watch(self, fd: int, label: str = "", close_fd: bool = True) -> EdgeSubscription:
        """
        Start watching fd.

        Args:
            fd: Open file descriptor (ownership passes to the watcher if close_fd)
            label: Name used in logs
            close_fd: Close fd when the subscription is cancelled
        """
        with self._lock:
            if self._closed:
                raise RuntimeError(f"{self.name} is closed")

            if self._epoll is None:
                self._epoll = select.epoll()

            subscription = EdgeSubscription(self, fd, label, close_fd)
            self._epoll.register(fd, self._event_mask)
            self._subscriptions[fd] = subscription
            self._ensure_started()

        log.debug("Watching for changes", target=label or fd)
        return subscription

    def unwatch(self, subscription: EdgeSubscription) -> None:
        with self._lock:
            if self._subscriptions.pop(subscription.fd, None) is None:
                return
            subscription.cancelled = True
            self._unregister(subscription)

        log.debug("Stopped watching", target=subscription.label or subscription.fd)

    def close(self) -> None:
        """Stop the thread, drop every subscription, close epoll (idempotent)."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._running = False

        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._poll_timeout * 5)

        with self._lock:
            for subscription in list(self._subscriptions.values()):
                subscription.cancelled = True
                self._unregister(subscription)
            self._subscriptions.clear()
            if self._epoll is not None:
                self._epoll.close()
                self._epoll = None

        log.debug("Change watcher closed", name=self.name)

    @property
    def watch_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    # -------------------------------
    # Internals
    # -------------------------------

    def _ensure_started(self) -> None:
        # Caller holds self._lock
        if self._thread and self._thread.is_alive():
            return

        self._running = True
        self._thread = threading.Thread(target=self._run, daemon=True, name=self.name)
        self._thread.start()

    def _unregister(self, subscription: EdgeSubscription) -> None:
        # Caller holds self._lock
        if self._epoll is not None:
            try:
                self._epoll.unregister(subscription.fd)
            except (OSError, ValueError):
                pass
        if subscription.close_fd:
            try:
                os.close(subscription.fd)
            except OSError:
                pass

    def _run(self) -> None:
        epoll = self._epoll
        while self._running:
            try:
                events = epoll.poll(self._poll_timeout)
            except (OSError, ValueError) as ex:
                # ValueError: epoll closed underneath us during close()
                if self._running:
                    log.error("Change watcher stopped", error=str(ex))
                return

            for fd, _mask in events:
                with self._lock:
                    subscription = self._subscriptions.get(fd)
                    if subscription is None:
                        continue
                    self._drain(fd)
                subscription._notify()

    @staticmethod
    def _drain(fd: int) -> None:
        """Read the fd from offset 0 so a level triggered condition clears."""
        try:
            os.lseek(fd, 0, os.SEEK_SET)
        except OSError:
            pass
        try:
            os.read(fd, 64)
        except OSError:
            pass
