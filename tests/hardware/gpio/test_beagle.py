import pytest
from unittest.mock import MagicMock

from hardware.gpio.backend_memory import InMemoryBackend
from hardware.gpio.beagle import Beagle
from hardware.gpio.pin_manager import PinManager
from models.commands import ExportPin, Release, SetActiveLow, SetDirection
from models.enums import Direction, PinLifecycle, PinValue
from models.errors import (
    AlreadyInitializedError,
    BackendError,
    ConfigurationError,
    LifecycleError,
    NotInitializedError,
    ParseError,
)
from models.pin import Pin


def _value_file(backend, pin):
    return backend.base_directory / pin.name / "value"


# -------------------------------
# Pin table
# -------------------------------

def test_double_initialize_fails(beagle):
    beagle.initialize_pin(Pin.P8_03, Direction.OUT)

    with pytest.raises(AlreadyInitializedError):
        beagle.initialize_pin(Pin.P8_03, Direction.OUT)

    assert beagle.initialized_pins() == [Pin.P8_03]


@pytest.mark.parametrize("action", [
    lambda b: b.get_pin_value(Pin.P9_12),
    lambda b: b.set_pin_value(Pin.P9_12, PinValue.HIGH),
    lambda b: b.poll(Pin.P9_12),
    lambda b: b.close_pin(Pin.P9_12),
])
def test_use_before_initialize_fails(beagle, action):
    with pytest.raises(NotInitializedError) as exc:
        action(beagle)

    assert isinstance(exc.value, LifecycleError)
    assert "initialize" in str(exc.value)


def test_failed_initialization_is_not_registered(memory_backend, memory_beagle):
    memory_backend.apply(Pin.P8_04, ExportPin())

    with pytest.raises(BackendError):
        memory_beagle.initialize_pin(Pin.P8_04, Direction.IN)

    assert not memory_beagle.is_initialized(Pin.P8_04)


def test_initialize_writes_direction_then_active_low(memory_backend, memory_beagle):
    memory_beagle.initialize_pin(Pin.P8_03, Direction.OUT, active_low=True)

    assert memory_backend.commands_for(Pin.P8_03) == [
        ExportPin(),
        SetDirection(Direction.OUT),
        SetActiveLow(True),
    ]
    assert memory_beagle.pin_manager(Pin.P8_03).lifecycle is PinLifecycle.ACTIVE


# -------------------------------
# Values
# -------------------------------

def test_value_round_trip(memory_beagle):
    memory_beagle.initialize_pin(Pin.P9_15, Direction.OUT)

    memory_beagle.set_pin_value(Pin.P9_15, PinValue.HIGH)
    assert memory_beagle.get_pin_value(Pin.P9_15) is PinValue.HIGH

    memory_beagle.set_pin_value(Pin.P9_15, PinValue.LOW)
    assert memory_beagle.get_pin_value(Pin.P9_15) is PinValue.LOW


def test_output_pin_scenario(beagle, temp_backend):
    beagle.initialize_pin(Pin.P8_03, Direction.OUT)
    value_file = _value_file(temp_backend, Pin.P8_03)

    beagle.set_pin_value(Pin.P8_03, PinValue.HIGH)
    assert value_file.read_text() == "1"

    beagle.set_pin_value(Pin.P8_03, PinValue.LOW)
    assert value_file.read_text() == "0"

    beagle.close_pin(Pin.P8_03)
    assert not value_file.parent.exists()
    assert not beagle.is_initialized(Pin.P8_03)


def test_unparseable_value_raises_parse_error(beagle, temp_backend):
    beagle.initialize_pin(Pin.P8_04, Direction.IN)
    _value_file(temp_backend, Pin.P8_04).write_text("x")

    with pytest.raises(ParseError):
        beagle.get_pin_value(Pin.P8_04)


def test_set_value_on_input_pin_fails(memory_beagle):
    memory_beagle.initialize_pin(Pin.P8_04, Direction.IN)

    with pytest.raises(BackendError):
        memory_beagle.set_pin_value(Pin.P8_04, PinValue.HIGH)


def test_close_after_refused_value_write(memory_backend, memory_beagle):
    memory_beagle.initialize_pin(Pin.P8_04, Direction.IN)
    with pytest.raises(BackendError):
        memory_beagle.set_pin_value(Pin.P8_04, PinValue.HIGH)

    memory_beagle.close_pin(Pin.P8_04)

    assert not memory_beagle.is_initialized(Pin.P8_04)
    assert not memory_backend.is_exported(Pin.P8_04)
    assert memory_backend.commands_for(Pin.P8_04)[-1] == Release()


def test_refused_value_write_does_not_block_release(memory_backend, memory_beagle):
    memory_beagle.initialize_pin(Pin.P8_04, Direction.IN)
    with pytest.raises(BackendError):
        memory_beagle.set_pin_value(Pin.P8_04, PinValue.HIGH)

    memory_beagle.release()

    assert memory_beagle.released
    assert not memory_backend.is_exported(Pin.P8_04)


class RejectFirstDirection(InMemoryBackend):
    """Refuses the first direction write, accepts everything afterwards."""

    def __init__(self):
        super().__init__()
        self.rejected = False

    def apply(self, pin, command):
        if isinstance(command, SetDirection) and not self.rejected:
            self.rejected = True
            raise ConfigurationError(f"Direction {command.direction.value} rejected")
        super().apply(pin, command)


def test_failed_initialization_unexports_and_can_be_retried():
    backend = RejectFirstDirection()
    beagle = Beagle(backend, poll_interval=0.005)
    try:
        with pytest.raises(ConfigurationError):
            beagle.initialize_pin(Pin.P8_03, Direction.OUT)

        assert not beagle.is_initialized(Pin.P8_03)
        assert not backend.is_exported(Pin.P8_03)
        assert backend.commands_for(Pin.P8_03) == [ExportPin(), Release()]

        beagle.initialize_pin(Pin.P8_03, Direction.OUT)
        assert beagle.is_initialized(Pin.P8_03)
    finally:
        beagle.release()


# -------------------------------
# Polling
# -------------------------------

def test_polling_scenario(beagle, temp_backend):
    beagle.initialize_pin(Pin.P8_04, Direction.IN)
    value_file = _value_file(temp_backend, Pin.P8_04)

    handle = beagle.poll(Pin.P8_04)
    assert handle.value is PinValue.LOW

    value_file.write_text("1")
    assert handle.wait_for(PinValue.HIGH, timeout=2.0)

    value_file.write_text("0")
    assert handle.wait_for(PinValue.LOW, timeout=2.0)
    assert handle.is_low()


def test_poll_twice_shares_one_notifier(beagle, temp_backend, wait_until):
    beagle.initialize_pin(Pin.P8_04, Direction.IN)

    first = beagle.poll(Pin.P8_04)
    second = beagle.poll(Pin.P8_04)
    assert first is second

    changes = []
    first.on_change(changes.append)

    _value_file(temp_backend, Pin.P8_04).write_text("1")
    assert first.wait_for(PinValue.HIGH, timeout=2.0)
    assert wait_until(lambda: changes == [PinValue.HIGH])
    assert second.value is PinValue.HIGH


def test_close_stops_polling(beagle):
    beagle.initialize_pin(Pin.P8_04, Direction.IN)
    handle = beagle.poll(Pin.P8_04)

    beagle.close_pin(Pin.P8_04)

    assert not handle.active


# -------------------------------
# Release
# -------------------------------

def test_close_pin_retry_after_failed_release(scheduler):
    backend = MagicMock()
    backend.read_value.return_value = "0"
    beagle = Beagle(backend, scheduler=scheduler)
    beagle.initialize_pin(Pin.P8_03, Direction.OUT)

    backend.apply.side_effect = BackendError("unexport failed")
    with pytest.raises(BackendError):
        beagle.close_pin(Pin.P8_03)

    assert beagle.is_initialized(Pin.P8_03)
    assert beagle.pin_manager(Pin.P8_03).lifecycle is PinLifecycle.RELEASING

    backend.apply.side_effect = None
    beagle.close_pin(Pin.P8_03)

    assert not beagle.is_initialized(Pin.P8_03)
    backend.apply.assert_called_with(Pin.P8_03, Release())


def test_release_closes_all_pins(beagle, temp_backend):
    beagle.initialize_pin(Pin.P8_03, Direction.OUT)
    beagle.initialize_pin(Pin.P8_04, Direction.IN)
    beagle.poll(Pin.P8_04)

    beagle.release()

    assert beagle.released
    assert beagle.initialized_pins() == []
    assert not temp_backend.base_directory.exists()


def test_release_without_pins(memory_backend, memory_beagle):
    memory_beagle.release()
    memory_beagle.release()

    assert memory_backend.released


def test_release_continues_past_failing_pin(scheduler):
    backend = MagicMock()
    beagle = Beagle(backend, scheduler=scheduler)
    beagle.initialize_pin(Pin.P8_03, Direction.OUT)
    beagle.initialize_pin(Pin.P8_04, Direction.OUT)

    def apply(pin, command):
        if pin is Pin.P8_03 and isinstance(command, Release):
            raise BackendError("unexport failed")

    backend.apply.side_effect = apply

    with pytest.raises(BackendError):
        beagle.release()

    backend.apply.assert_any_call(Pin.P8_04, Release())
    backend.release.assert_called_once()
    assert scheduler.is_shutdown


def test_use_after_release_fails(memory_beagle):
    memory_beagle.release()

    with pytest.raises(LifecycleError):
        memory_beagle.initialize_pin(Pin.P8_03, Direction.OUT)


def test_context_manager_releases(memory_backend):
    with Beagle(memory_backend) as beagle:
        beagle.initialize_pin(Pin.P8_03, Direction.OUT)

    assert beagle.released
    assert not memory_backend.is_exported(Pin.P8_03)


def test_pin_manager_batching_on_temporary_files(temp_backend, scheduler):
    manager = PinManager(Pin.P8_05, temp_backend, scheduler)
    manager.set_direction(Direction.OUT).set_active_low(True)

    pin_directory = temp_backend.base_directory / Pin.P8_05.name
    assert not pin_directory.exists()

    manager.perform_outstanding_operations()

    assert (pin_directory / "direction").read_text() == "out"
    assert (pin_directory / "active_low").read_text() == "1"
