"""
GPIO Configuration Model

Typed container mirroring config/gpio.yaml. Populated by ConfigManager,
consumed by the entry point to build the backend and the Beagle.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from models.enums import BackendType, LogLevel


@dataclass(frozen=True)
class GpioConfig:
    backend: BackendType = BackendType.AUTO
    base_directory: Optional[str] = None   # None = backend default
    poll_interval_ms: int = 10
    use_change_events: bool = True        # epoll edge events when the backend has them
    log_level: LogLevel = LogLevel.INFO
    log_colors: bool = True

    def __post_init__(self):
        if self.poll_interval_ms <= 0:
            raise ValueError("GpioConfig.poll_interval_ms must be > 0")

    @property
    def poll_interval(self) -> float:
        """Poll interval in seconds"""
        return self.poll_interval_ms / 1000.0

    def as_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["backend"] = self.backend.name.lower()
        d["log_level"] = self.log_level.name
        return d
