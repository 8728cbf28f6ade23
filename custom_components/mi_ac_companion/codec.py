"""Codec for the Mi AC Companion status token and property list.

The companion reports its whole operating state as one token such as
``P1_M0_T20_S3_D0``: ``_``-separated fields made of a key letter and a
decimal integer. This module maps those integers to the typed values of
:mod:`.models` and back.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from .const import (
    MODE_MAP,
    MODE_REVERSE_MAP,
    POWER_MAP,
    POWER_REVERSE_MAP,
    ROTATION_SPEED_MAP,
    ROTATION_SPEED_REVERSE_MAP,
    STATUS_KEY_MODE,
    STATUS_KEY_POWER,
    STATUS_KEY_ROTATION_SPEED,
    STATUS_KEY_SWING,
    STATUS_KEY_TEMPERATURE,
    STATUS_SEPARATOR,
    SWING_OFF_CODE,
    SWING_ON_CODE,
)
from .exceptions import (
    InvalidEnumValueError,
    MalformedStatusError,
    MissingStatusFieldError,
    UnknownStatusKeyError,
)
from .models import CompanionDeviceState, OperationMode, Power, RotationSpeed

_LOGGER = logging.getLogger(__name__)

_STATUS_FIELDS = {
    STATUS_KEY_POWER: "power",
    STATUS_KEY_MODE: "operation_mode",
    STATUS_KEY_SWING: "swing_mode",
    STATUS_KEY_ROTATION_SPEED: "rotation_speed",
    STATUS_KEY_TEMPERATURE: "temperature",
}


def decode_mode(code: int) -> OperationMode:
    """Decode the operation mode code of a status token.

    Raises:
        InvalidEnumValueError: If the code is not one of 0-4.

    """
    try:
        return MODE_MAP[code]
    except KeyError:
        error_msg = f"Received invalid mode: {code}"
        raise InvalidEnumValueError(error_msg) from None


def decode_fan_speed(code: int) -> RotationSpeed:
    """Decode the rotation speed code of a status token.

    Raises:
        InvalidEnumValueError: If the code is not one of 0-3.

    """
    try:
        return ROTATION_SPEED_MAP[code]
    except KeyError:
        error_msg = f"Invalid rotation speed: {code}"
        raise InvalidEnumValueError(error_msg) from None


def decode_power(code: int) -> Power:
    """Decode the power code of a status token, where 0 is on and 1 is off.

    Raises:
        InvalidEnumValueError: If the code is neither 0 nor 1.

    """
    try:
        return POWER_MAP[code]
    except KeyError:
        error_msg = f"Invalid power value: {code}"
        raise InvalidEnumValueError(error_msg) from None


def decode_swing(code: int) -> Power:
    """Decode the swing code of a status token.

    Only 0 means swinging. The device reports 999 when swing is off, and
    any other code is read as off as well.
    """
    if code == SWING_ON_CODE:
        return Power.ON
    return Power.OFF


def encode_mode(mode: OperationMode) -> int:
    return MODE_REVERSE_MAP[mode]


def encode_fan_speed(speed: RotationSpeed) -> int:
    return ROTATION_SPEED_REVERSE_MAP[speed]


def encode_power(power: Power) -> int:
    return POWER_REVERSE_MAP[power]


def encode_swing(swing: Power) -> int:
    return SWING_ON_CODE if swing is Power.ON else SWING_OFF_CODE


_VALUE_PATTERN = re.compile(r"-?[0-9]+")

_DECODERS = {
    STATUS_KEY_POWER: decode_power,
    STATUS_KEY_MODE: decode_mode,
    STATUS_KEY_SWING: decode_swing,
    STATUS_KEY_ROTATION_SPEED: decode_fan_speed,
    STATUS_KEY_TEMPERATURE: int,
}


def _split_field(field: str) -> tuple[str, int]:
    key, raw_value = field[:1], field[1:]
    if not key:
        error_msg = "Empty field in status token"
        raise MalformedStatusError(error_msg)
    if not _VALUE_PATTERN.fullmatch(raw_value):
        error_msg = f"Invalid value for status key {key}: {raw_value!r}"
        raise MalformedStatusError(error_msg)
    return key, int(raw_value)


def parse_state(token: str) -> CompanionDeviceState:
    """Decode a composite status token into a device state.

    Fields may come in any order. A repeated key keeps its last value.

    Args:
        token: Status token, for example ``"P1_M0_T20_S3_D0"``.

    Returns:
        The decoded CompanionDeviceState.

    Raises:
        UnknownStatusKeyError: If a field starts with an unknown key letter.
        InvalidEnumValueError: If an enumerated field holds an invalid code.
        MalformedStatusError: If a field value is not a decimal integer.
        MissingStatusFieldError: If any of the five fields is absent.

    """
    if not isinstance(token, str):
        error_msg = f"Status token must be a string, got {type(token).__name__}"
        raise MalformedStatusError(error_msg)

    values: dict[str, Any] = {}
    for field in token.split(STATUS_SEPARATOR):
        key, code = _split_field(field)
        if key not in _DECODERS:
            error_msg = f"Unexpected key found: {key}"
            raise UnknownStatusKeyError(error_msg)
        values[_STATUS_FIELDS[key]] = _DECODERS[key](code)

    missing = [
        key for key, name in _STATUS_FIELDS.items() if name not in values
    ]
    if missing:
        error_msg = f"Status token {token!r} is missing keys: {', '.join(missing)}"
        raise MissingStatusFieldError(error_msg)

    state = CompanionDeviceState(**values)
    _LOGGER.debug("Parsed status token %s: %s", token, state)
    return state


def encode_state(state: CompanionDeviceState) -> str:
    """Render a device state as a status token."""
    fields = [
        f"{STATUS_KEY_POWER}{encode_power(state.power)}",
        f"{STATUS_KEY_MODE}{encode_mode(state.operation_mode)}",
        f"{STATUS_KEY_TEMPERATURE}{state.temperature}",
        f"{STATUS_KEY_ROTATION_SPEED}{encode_fan_speed(state.rotation_speed)}",
        f"{STATUS_KEY_SWING}{encode_swing(state.swing_mode)}",
    ]
    return STATUS_SEPARATOR.join(fields)


def decode_properties(props: list[str], values: Any) -> dict[str, Any]:  # noqa: ANN401
    """Pair the requested property names with a get_prop response.

    Args:
        props: Property names in the order they were requested.
        values: Positional values returned by the device.

    Returns:
        Dictionary of raw property values keyed by property name.

    Raises:
        MalformedStatusError: If the response is not a list of matching length.

    """
    if not isinstance(values, list) or len(values) != len(props):
        error_msg = f"Expected {len(props)} property values, got {values!r}"
        raise MalformedStatusError(error_msg)
    return dict(zip(props, values, strict=True))
