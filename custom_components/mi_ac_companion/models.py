"""Data models for Mi AC Companion integration."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class OperationMode(StrEnum):
    """Operation modes, valued by their miIO wire token."""

    COOLING = "cool"
    HEATING = "heat"
    AUTO = "auto"
    SCAVENGER = "wind"
    DEHUMIDIFICATION = "dry"


class RotationSpeed(StrEnum):
    """Fan levels, valued by their miIO wire token."""

    AUTO = "auto_fan"
    SLOW = "small_fan"
    NORMAL = "medium_fan"
    FAST = "large_fan"


class Power(StrEnum):
    """On/off switch used for both power and swing."""

    ON = "on"
    OFF = "off"


class IRLearnState(StrEnum):
    """States of an infrared learn session."""

    IDLE = "idle"
    LEARNING = "learning"
    CAPTURED = "captured"


@dataclass(frozen=True, slots=True)
class CompanionDeviceState:
    """Snapshot of the state reported by the companion."""

    operation_mode: OperationMode
    power: Power
    swing_mode: Power
    rotation_speed: RotationSpeed
    temperature: int

    def replace(self, **changes: Any) -> CompanionDeviceState:  # noqa: ANN401
        """Return a copy of the state with the given fields changed."""
        return dataclasses.replace(self, **changes)


DEFAULT_STATE = CompanionDeviceState(
    operation_mode=OperationMode.AUTO,
    power=Power.OFF,
    swing_mode=Power.OFF,
    rotation_speed=RotationSpeed.AUTO,
    temperature=30,
)


@dataclass(frozen=True)
class IRLearnResult:
    """Result of reading an infrared learn task.

    Attributes:
        key: Task identifier the result belongs to.
        length: Length of the captured code as reported by the device.
        code: Captured code, empty while nothing has been captured.

    """

    key: str
    length: int
    code: str

    @property
    def captured(self) -> bool:
        """Return True once the device has captured a code."""
        return bool(self.code)
