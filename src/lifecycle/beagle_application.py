"""
Beagle application skeleton

Subclasses implement initialize / run / cleanup; start() drives them:

    initialize(beagle)
    while not stopped and run(beagle): pass
    cleanup(beagle)
    beagle.release()          # always, even after an error

SIGINT / SIGTERM stop the loop after the current run() returns.
"""

import signal
import threading
from abc import ABC, abstractmethod
from typing import Optional, Type

from hardware.gpio.backend_factory import create_backend
from hardware.gpio.beagle import Beagle
from managers.config_manager import ConfigManager
from models.config import GpioConfig
from models.enums import LogCategory
from utils.logger import configure_logger, get_logger

log = get_logger().for_category(LogCategory.LIFECYCLE)


def create_beagle(config: GpioConfig) -> Beagle:
    """Beagle on the backend named in config."""
    return Beagle(create_backend(config), poll_interval=config.poll_interval)


class BeagleApplication(ABC):
    """
    Example:
        class Blink(BeagleApplication):
            def initialize(self, beagle):
                beagle.initialize_pin(Pin.P8_03, Direction.OUT)

            def run(self, beagle):
                ...
                return True

            def cleanup(self, beagle):
                pass

        launch(Blink)
    """

    def __init__(self, config: Optional[GpioConfig] = None):
        self.config = config or GpioConfig()
        self._stop_event = threading.Event()
        self._stop_reason: Optional[str] = None

    @abstractmethod
    def initialize(self, beagle: Beagle) -> None:
        """Initialize pins and listeners."""

    @abstractmethod
    def run(self, beagle: Beagle) -> bool:
        """One loop iteration; return False to finish."""

    @abstractmethod
    def cleanup(self, beagle: Beagle) -> None:
        """Application-specific teardown, before the beagle is released."""

    # -------------------------------
    # Control
    # -------------------------------

    def stop(self, reason: str = "requested") -> None:
        self._stop_reason = reason
        self._stop_event.set()

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()

    def sleep(self, seconds: float) -> bool:
        """Interruptible sleep for run(); True if the application is stopping."""
        return self._stop_event.wait(seconds)

    def create_beagle(self) -> Beagle:
        return create_beagle(self.config)

    def setup_signal_handlers(self) -> None:
        """Install SIGINT / SIGTERM handlers (main thread only)."""
        if threading.current_thread() is not threading.main_thread():
            log.warn("Not on main thread, signal handlers not installed")
            return

        def signal_handler(signum, _frame):
            name = signal.Signals(signum).name
            log.info(f"Signal {name} received → stopping")
            self.stop(name)

        for sig in (signal.SIGINT, signal.SIGTERM):
            signal.signal(sig, signal_handler)

        log.info("Signal handlers installed (SIGINT, SIGTERM)")

    def start(self, beagle: Optional[Beagle] = None) -> None:
        """
        Run the application to completion.

        Errors from initialize() / run() propagate after cleanup and release.
        """
        beagle = beagle or self.create_beagle()
        name = type(self).__name__
        log.info(f"Starting {name}")

        try:
            self.initialize(beagle)
            while not self.stopping and self.run(beagle):
                pass
        finally:
            try:
                self.cleanup(beagle)
            finally:
                beagle.release()
                log.info(f"{name} finished", reason=self._stop_reason or "completed")


def launch(app_class: Type[BeagleApplication], config: Optional[GpioConfig] = None) -> BeagleApplication:
    """Load config (unless given), configure logging and run app_class."""
    config = config or ConfigManager().load()
    configure_logger(config.log_level, config.log_colors)

    app = app_class(config)
    app.setup_signal_handlers()
    app.start()
    return app
