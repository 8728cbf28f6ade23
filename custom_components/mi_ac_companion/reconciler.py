"""Mapping between companion state and Home Assistant capabilities.

The companion's modes and fan levels do not line up one-to-one with the
heating/cooling and fan vocabulary of Home Assistant. This module holds the
pure mapping functions and the field diff that decides which capability
groups need to be written after a state change.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import StrEnum
from typing import Any

from homeassistant.components.climate import HVACAction, HVACMode

from .const import FAN_STATE_AUTO, FAN_STATE_MANUAL
from .models import CompanionDeviceState, OperationMode, Power, RotationSpeed


class Service(StrEnum):
    """Capability groups exposed for one companion."""

    THERMOSTAT = "thermostat"
    FAN = "fan"


class Characteristic(StrEnum):
    """Typed attributes of the capability groups."""

    CURRENT_HEATING_COOLING_STATE = "current_heating_cooling_state"
    TARGET_HEATING_COOLING_STATE = "target_heating_cooling_state"
    CURRENT_TEMPERATURE = "current_temperature"
    TARGET_TEMPERATURE = "target_temperature"
    ACTIVE = "active"
    TARGET_FAN_STATE = "target_fan_state"
    ROTATION_SPEED = "rotation_speed"
    SWING_MODE = "swing_mode"


@dataclass(frozen=True)
class ServiceUpdate:
    """Values to push to one capability group."""

    service: Service
    values: dict[Characteristic, Any]


_FAN_LEVELS = {
    RotationSpeed.AUTO: 3,
    RotationSpeed.SLOW: 1,
    RotationSpeed.NORMAL: 2,
    RotationSpeed.FAST: 3,
}

FAN_LEVEL_SPEEDS = {
    1: RotationSpeed.SLOW,
    2: RotationSpeed.NORMAL,
    3: RotationSpeed.FAST,
}

# Modes other than heating read as cooling for the current state but as
# automatic for the target state.
_TARGET_MODES = {
    OperationMode.COOLING: HVACMode.COOL,
    OperationMode.HEATING: HVACMode.HEAT,
    OperationMode.AUTO: HVACMode.AUTO,
    OperationMode.SCAVENGER: HVACMode.AUTO,
    OperationMode.DEHUMIDIFICATION: HVACMode.AUTO,
}


def current_heating_cooling_state(state: CompanionDeviceState) -> HVACAction:
    if state.power is Power.OFF:
        return HVACAction.OFF
    if state.operation_mode is OperationMode.HEATING:
        return HVACAction.HEATING
    return HVACAction.COOLING


def target_heating_cooling_state(state: CompanionDeviceState) -> HVACMode:
    if state.power is Power.OFF:
        return HVACMode.OFF
    return _TARGET_MODES[state.operation_mode]


def fan_active(state: CompanionDeviceState) -> bool:
    return state.power is Power.ON


def target_fan_state(state: CompanionDeviceState) -> str:
    if state.rotation_speed is RotationSpeed.AUTO:
        return FAN_STATE_AUTO
    return FAN_STATE_MANUAL


def fan_speed_level(state: CompanionDeviceState) -> int:
    """Return the fan level 0-3, where 0 means the unit is off."""
    if state.power is Power.OFF:
        return 0
    return _FAN_LEVELS[state.rotation_speed]


def swing_enabled(state: CompanionDeviceState) -> bool:
    return state.swing_mode is Power.ON


_CHARACTERISTICS = {
    Characteristic.CURRENT_HEATING_COOLING_STATE: current_heating_cooling_state,
    Characteristic.TARGET_HEATING_COOLING_STATE: target_heating_cooling_state,
    Characteristic.CURRENT_TEMPERATURE: lambda state: state.temperature,
    Characteristic.TARGET_TEMPERATURE: lambda state: state.temperature,
    Characteristic.ACTIVE: fan_active,
    Characteristic.TARGET_FAN_STATE: target_fan_state,
    Characteristic.ROTATION_SPEED: fan_speed_level,
    Characteristic.SWING_MODE: swing_enabled,
}

# Characteristics that depend on each state field, per capability group.
_FIELD_CHARACTERISTICS: dict[str, tuple[tuple[Service, Characteristic], ...]] = {
    "temperature": (
        (Service.THERMOSTAT, Characteristic.CURRENT_TEMPERATURE),
        (Service.THERMOSTAT, Characteristic.TARGET_TEMPERATURE),
    ),
    "power": (
        (Service.THERMOSTAT, Characteristic.CURRENT_HEATING_COOLING_STATE),
        (Service.THERMOSTAT, Characteristic.TARGET_HEATING_COOLING_STATE),
        (Service.FAN, Characteristic.ACTIVE),
        (Service.FAN, Characteristic.ROTATION_SPEED),
    ),
    "operation_mode": (
        (Service.THERMOSTAT, Characteristic.CURRENT_HEATING_COOLING_STATE),
        (Service.THERMOSTAT, Characteristic.TARGET_HEATING_COOLING_STATE),
    ),
    "rotation_speed": (
        (Service.FAN, Characteristic.TARGET_FAN_STATE),
        (Service.FAN, Characteristic.ROTATION_SPEED),
    ),
    "swing_mode": ((Service.FAN, Characteristic.SWING_MODE),),
}


def characteristic_value(
    state: CompanionDeviceState, characteristic: Characteristic
) -> Any:  # noqa: ANN401
    """Return the mapped value of a characteristic for a device state."""
    return _CHARACTERISTICS[characteristic](state)


def diff_states(
    old: CompanionDeviceState, new: CompanionDeviceState
) -> set[str]:
    """Return the names of the fields that differ between two states."""
    return {
        field.name
        for field in fields(CompanionDeviceState)
        if getattr(old, field.name) != getattr(new, field.name)
    }


def service_updates(
    old: CompanionDeviceState, new: CompanionDeviceState
) -> list[ServiceUpdate]:
    """Compute the capability updates caused by moving from old to new.

    Returns one ServiceUpdate per capability group that has at least one
    changed field behind it, thermostat first. Values are mapped from the
    new state.
    """
    grouped: dict[Service, dict[Characteristic, Any]] = {}
    for field_name in diff_states(old, new):
        for service, characteristic in _FIELD_CHARACTERISTICS[field_name]:
            grouped.setdefault(service, {})[characteristic] = characteristic_value(
                new, characteristic
            )
    return [
        ServiceUpdate(service=service, values=grouped[service])
        for service in Service
        if service in grouped
    ]
