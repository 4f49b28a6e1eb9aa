"""
Pin Commands

Deferred operations queued on a pin manager and interpreted by the backend
adapter's apply() dispatcher. Frozen dataclasses, so a queue of them can be
logged, compared and serialized.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from models.enums import Direction, PinValue


@dataclass(frozen=True)
class ExportPin:
    """Acquire the backend resource (export / create pin directory)"""


@dataclass(frozen=True)
class SetDirection:
    direction: Direction


@dataclass(frozen=True)
class SetActiveLow:
    active_low: bool

    @property
    def wire_value(self) -> int:
        return 1 if self.active_low else 0


@dataclass(frozen=True)
class SetValue:
    value: PinValue


@dataclass(frozen=True)
class Release:
    """Give the backend resource back (unexport / delete pin directory)"""


PinCommand = Union[ExportPin, SetDirection, SetActiveLow, SetValue, Release]
