"""
Models package - Data models for GPIO pin management
"""

from .enums import PinValue, Direction, PinLifecycle, BackendType, LogLevel, LogCategory
from .pin import Pin, PinGroup
from .commands import ExportPin, SetDirection, SetActiveLow, SetValue, Release, PinCommand
from .config import GpioConfig
from .errors import (
    BeagleIOError,
    LifecycleError,
    AlreadyInitializedError,
    NotInitializedError,
    BackendError,
    ConfigurationError,
    ParseError,
)

__all__ = [
    'PinValue',
    'Direction',
    'PinLifecycle',
    'BackendType',
    'LogLevel',
    'LogCategory',
    'Pin',
    'PinGroup',
    'ExportPin',
    'SetDirection',
    'SetActiveLow',
    'SetValue',
    'Release',
    'PinCommand',
    'GpioConfig',
    'BeagleIOError',
    'LifecycleError',
    'AlreadyInitializedError',
    'NotInitializedError',
    'BackendError',
    'ConfigurationError',
    'ParseError',
]
