"""
Config Manager

Loads config/gpio.yaml (falling back to factory defaults), applies
BEAGLEIO_* environment overrides and returns a typed GpioConfig.
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from models.config import GpioConfig
from models.enums import BackendType, LogCategory, LogLevel
from utils.enum_helper import EnumHelper
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.CONFIG)

ENV_BACKEND = "BEAGLEIO_BACKEND"
ENV_BASE_DIR = "BEAGLEIO_BASE_DIR"
ENV_POLL_INTERVAL_MS = "BEAGLEIO_POLL_INTERVAL_MS"


class ConfigManager:
    """
    GPIO configuration loader

    Example:
        config = ConfigManager().load()
        backend = create_backend(config)
        beagle = Beagle(backend, poll_interval=config.poll_interval)

    gpio.yaml layout:
        gpio:
          backend: auto            # auto | sysfs | temporary | memory
          base_directory: null
          poll_interval_ms: 10
          use_change_events: true
        logging:
          level: INFO
          colors: true
    """

    def __init__(
        self,
        config_path="config/gpio.yaml",
        defaults_path="config/factory_defaults.yaml",
        environ: Optional[Mapping[str, str]] = None
    ):
        """
        Args:
            config_path: Path to gpio.yaml (relative paths resolve against src/)
            defaults_path: Path to factory defaults fallback
            environ: Environment used for overrides (default: os.environ)
        """
        self.config_path = Path(config_path)
        self.factory_defaults_path = Path(defaults_path)
        self.environ = os.environ if environ is None else environ
        self.data: Dict[str, Any] = {}
        self.config: Optional[GpioConfig] = None

    def load(self) -> GpioConfig:
        """
        Load YAML configuration

        Process:
        1. Load gpio.yaml
        2. Fallback to factory_defaults.yaml on failure, built-in defaults
           when that fails too
        3. Apply environment overrides
        4. Build GpioConfig

        Raises:
            ValueError: Unknown enum name or invalid poll interval
        """
        try:
            self.data = self._read_yaml(self.config_path)
            log.info("Configuration loaded", path=self._resolve(self.config_path))
        except (OSError, yaml.YAMLError) as ex:
            log.exception("Failed to load gpio.yaml", ex)
            log.warn("Falling back to factory defaults")
            self.data = self._load_factory_defaults()

        defaults = GpioConfig()
        gpio = dict(self.data.get("gpio") or {})
        logging = dict(self.data.get("logging") or {})
        self._apply_env_overrides(gpio)

        self.config = GpioConfig(
            backend=EnumHelper.from_string(BackendType, gpio.get("backend", defaults.backend.name)),
            base_directory=gpio.get("base_directory", defaults.base_directory),
            poll_interval_ms=int(gpio.get("poll_interval_ms", defaults.poll_interval_ms)),
            use_change_events=bool(gpio.get("use_change_events", defaults.use_change_events)),
            log_level=EnumHelper.from_string(LogLevel, logging.get("level", defaults.log_level.name)),
            log_colors=bool(logging.get("colors", defaults.log_colors)),
        )

        log.debug("GPIO config", **self.config.as_dict())
        return self.config

    def _load_factory_defaults(self) -> Dict[str, Any]:
        try:
            return self._read_yaml(self.factory_defaults_path)
        except (OSError, yaml.YAMLError) as ex:
            log.exception("Failed to load factory defaults, using built-in defaults", ex)
            return {}

    def _apply_env_overrides(self, gpio: Dict[str, Any]) -> None:
        overrides = {
            "backend": self.environ.get(ENV_BACKEND),
            "base_directory": self.environ.get(ENV_BASE_DIR),
            "poll_interval_ms": self.environ.get(ENV_POLL_INTERVAL_MS),
        }
        for key, value in overrides.items():
            if value:
                gpio[key] = value
                log.info("Environment override", key=key, value=value)

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        with open(self._resolve(path), "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _resolve(path: Path) -> Path:
        if path.is_absolute():
            return path
        # Relative to the directory holding the packages (src/ or site-packages)
        src_dir = Path(__file__).parent.parent
        return src_dir / path
