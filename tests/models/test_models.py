import pytest

from models.commands import SetActiveLow
from models.config import GpioConfig
from models.enums import BackendType, Direction, PinValue
from models.errors import (
    AlreadyInitializedError,
    BackendError,
    BeagleIOError,
    ConfigurationError,
    LifecycleError,
    NotInitializedError,
    ParseError,
)
from models.pin import Pin, PinGroup
from utils.enum_helper import EnumHelper


@pytest.mark.parametrize("raw, expected", [("0", PinValue.LOW), ("1", PinValue.HIGH)])
def test_pin_value_from_wire(raw, expected):
    assert PinValue.from_wire(raw) is expected


@pytest.mark.parametrize("raw", ["x", "", "2", " 1", "high"])
def test_pin_value_rejects_other_strings(raw):
    with pytest.raises(ParseError) as exc:
        PinValue.from_wire(raw)
    assert exc.value.raw == raw


def test_pin_value_inverted():
    assert PinValue.HIGH.inverted() is PinValue.LOW
    assert PinValue.LOW.inverted() is PinValue.HIGH


def test_direction_wire_values():
    assert [d.value for d in Direction] == ["in", "out", "high", "low"]
    assert Direction.from_wire("high") is Direction.HIGH
    assert not Direction.IN.is_output
    assert Direction.LOW.is_output

    with pytest.raises(ParseError):
        Direction.from_wire("hight")


def test_pin_kernel_numbers():
    assert Pin.P8_03.kernel_number == 38
    assert Pin.P8_04.kernel_number == 39
    assert Pin.LED_USR0.kernel_number == 53
    assert str(Pin.P9_12) == "P9_12"


def test_pin_names_are_unique_kernel_numbers():
    numbers = [pin.kernel_number for pin in Pin]
    assert len(numbers) == len(set(numbers))


def test_pin_group_keeps_order():
    group = PinGroup.from_pins(Pin.P9_12, Pin.P8_03)
    assert list(group) == [Pin.P9_12, Pin.P8_03]
    assert len(group) == 2


def test_set_active_low_wire_value():
    assert SetActiveLow(True).wire_value == 1
    assert SetActiveLow(False).wire_value == 0


def test_error_hierarchy():
    assert issubclass(AlreadyInitializedError, LifecycleError)
    assert issubclass(NotInitializedError, LifecycleError)
    assert issubclass(ConfigurationError, BackendError)
    for error in (LifecycleError, BackendError, ParseError):
        assert issubclass(error, BeagleIOError)


def test_backend_error_keeps_cause():
    cause = OSError("disk gone")
    assert BackendError("write failed", cause).cause is cause


def test_config_validation():
    with pytest.raises(ValueError):
        GpioConfig(poll_interval_ms=0)

    config = GpioConfig(backend=BackendType.SYSFS, poll_interval_ms=20)
    assert config.poll_interval == pytest.approx(0.02)
    assert config.as_dict()["backend"] == "sysfs"


def test_enum_helper():
    assert EnumHelper.from_string(BackendType, "Temporary") is BackendType.TEMPORARY
    assert EnumHelper.from_string(BackendType, "nope", default=BackendType.AUTO) is BackendType.AUTO
    assert EnumHelper.to_enum(PinValue, "1") is PinValue.HIGH
    assert EnumHelper.to_enum(PinValue, "low") is PinValue.LOW
    assert EnumHelper.list_names(BackendType, lowercase=True) == ["auto", "sysfs", "temporary", "memory"]

    with pytest.raises(ValueError):
        EnumHelper.from_string(BackendType, "spi")
