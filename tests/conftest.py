import sys
import time
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hardware.gpio.backend_memory import InMemoryBackend
from hardware.gpio.backend_temporary import TemporaryFilesystemBackend
from hardware.gpio.beagle import Beagle
from lifecycle.poll_scheduler import PollScheduler
from models.enums import LogLevel
from utils.logger import configure_logger

POLL_INTERVAL = 0.005


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep test output readable: errors only, no ANSI codes."""
    configure_logger(LogLevel.ERROR, use_colors=False)
    yield
    configure_logger(LogLevel.INFO, use_colors=True)


@pytest.fixture
def scheduler():
    scheduler = PollScheduler(name="TestPollScheduler")
    yield scheduler
    scheduler.shutdown()


@pytest.fixture
def memory_backend():
    return InMemoryBackend()


@pytest.fixture
def temp_backend(tmp_path):
    return TemporaryFilesystemBackend(tmp_path / "beagleio")


@pytest.fixture
def beagle(temp_backend):
    beagle = Beagle(temp_backend, poll_interval=POLL_INTERVAL)
    yield beagle
    if not beagle.released:
        beagle.release()


@pytest.fixture
def memory_beagle(memory_backend):
    beagle = Beagle(memory_backend, poll_interval=POLL_INTERVAL)
    yield beagle
    if not beagle.released:
        beagle.release()


def _wait_until(condition, timeout=2.0, interval=0.005):
    """Poll condition() until it is truthy or timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(interval)
    return bool(condition())


@pytest.fixture
def wait_until():
    return _wait_until
