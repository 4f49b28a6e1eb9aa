from pathlib import Path

import pytest

import config as config_package
from managers.config_manager import ConfigManager
from models.config import GpioConfig
from models.enums import BackendType, LogLevel


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "factory_defaults.yaml").write_text(
        "gpio:\n"
        "  backend: temporary\n"
        "  poll_interval_ms: 25\n"
        "  use_change_events: false\n"
        "logging:\n"
        "  level: warn\n"
        "  colors: false\n"
    )
    return tmp_path


def _manager(config_dir, name="gpio.yaml", environ=None):
    return ConfigManager(
        config_path=config_dir / name,
        defaults_path=config_dir / "factory_defaults.yaml",
        environ=environ or {},
    )


def test_load_gpio_yaml(config_dir):
    (config_dir / "gpio.yaml").write_text(
        "gpio:\n"
        "  backend: SYSFS\n"
        "  base_directory: /tmp/fake-gpio\n"
        "  poll_interval_ms: 5\n"
        "logging:\n"
        "  level: debug\n"
    )

    config = _manager(config_dir).load()

    assert config.backend is BackendType.SYSFS
    assert config.base_directory == "/tmp/fake-gpio"
    assert config.poll_interval_ms == 5
    assert config.poll_interval == pytest.approx(0.005)
    assert config.use_change_events is True
    assert config.log_level is LogLevel.DEBUG


def test_missing_file_falls_back_to_factory_defaults(config_dir):
    config = _manager(config_dir, name="missing.yaml").load()

    assert config.backend is BackendType.TEMPORARY
    assert config.poll_interval_ms == 25
    assert config.use_change_events is False
    assert config.log_level is LogLevel.WARN
    assert config.log_colors is False


def test_invalid_yaml_falls_back_to_factory_defaults(config_dir):
    (config_dir / "gpio.yaml").write_text("gpio: [unclosed\n")

    config = _manager(config_dir).load()

    assert config.backend is BackendType.TEMPORARY


def test_empty_file_uses_model_defaults(config_dir):
    (config_dir / "gpio.yaml").write_text("")

    config = _manager(config_dir).load()

    assert config.backend is BackendType.AUTO
    assert config.poll_interval_ms == 10


def test_environment_overrides(config_dir):
    (config_dir / "gpio.yaml").write_text("gpio:\n  backend: sysfs\n")
    environ = {
        "BEAGLEIO_BACKEND": "memory",
        "BEAGLEIO_BASE_DIR": "/tmp/override",
        "BEAGLEIO_POLL_INTERVAL_MS": "50",
    }

    config = _manager(config_dir, environ=environ).load()

    assert config.backend is BackendType.MEMORY
    assert config.base_directory == "/tmp/override"
    assert config.poll_interval_ms == 50


def test_unknown_backend_is_rejected(config_dir):
    (config_dir / "gpio.yaml").write_text("gpio:\n  backend: spi\n")

    with pytest.raises(ValueError):
        _manager(config_dir).load()


def test_non_positive_interval_is_rejected(config_dir):
    (config_dir / "gpio.yaml").write_text("gpio:\n  poll_interval_ms: 0\n")

    with pytest.raises(ValueError):
        _manager(config_dir).load()


def test_shipped_config_files_load():
    config = ConfigManager(environ={}).load()
    assert config.poll_interval_ms > 0

    defaults = ConfigManager(config_path="config/factory_defaults.yaml", environ={}).load()
    assert defaults.backend is BackendType.TEMPORARY


def test_missing_defaults_fall_back_to_model_defaults(tmp_path):
    manager = ConfigManager(
        config_path=tmp_path / "missing.yaml",
        defaults_path=tmp_path / "also_missing.yaml",
        environ={},
    )

    assert manager.load() == GpioConfig()


def test_environment_overrides_apply_to_built_in_defaults(tmp_path):
    manager = ConfigManager(
        config_path=tmp_path / "missing.yaml",
        defaults_path=tmp_path / "also_missing.yaml",
        environ={"BEAGLEIO_BACKEND": "memory"},
    )

    assert manager.load().backend is BackendType.MEMORY


def test_shipped_config_lives_in_config_package():
    package_dir = Path(config_package.__file__).resolve().parent

    assert (package_dir / "gpio.yaml").is_file()
    assert (package_dir / "factory_defaults.yaml").is_file()
    assert ConfigManager._resolve(Path("config/gpio.yaml")).resolve() == package_dir / "gpio.yaml"
