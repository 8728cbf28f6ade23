"""API client for the Mi AC Companion.

This module provides the shared miIO transport, the per-device client that
issues the companion's named commands, and the infrared learn session.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from miio import Device, DeviceException

from .codec import decode_properties, parse_state
from .const import (
    DEFAULT_PROPERTIES,
    DEFAULT_TIMEOUT,
    IR_DEFAULT_FREQUENCY,
    IR_LEARN_INTERVAL,
    IR_LEARN_TIMEOUT,
    METHOD_GET_PROP,
    METHOD_IR_LEARN,
    METHOD_IR_LEARN_STOP,
    METHOD_IR_PLAY,
    METHOD_IR_READ,
    METHOD_SET_FAN_LEVEL,
    METHOD_SET_MODE,
    METHOD_SET_POWER,
    METHOD_SET_SWING,
    METHOD_SET_TARGET_TEMPERATURE,
    PROP_AC_STATE,
)
from .exceptions import (
    CompanionCommandError,
    CompanionError,
    CompanionTimeoutError,
    CompanionTransportError,
    IRLearnStateError,
    MalformedStatusError,
)
from .models import (
    CompanionDeviceState,
    IRLearnResult,
    IRLearnState,
    OperationMode,
    Power,
    RotationSpeed,
)

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

_LOGGER = logging.getLogger(__name__)

ACK_RESULT = "ok"


def is_acknowledged(result: Any) -> bool:  # noqa: ANN401
    """Check if a miIO result acknowledges a command.

    Args:
        result: The ``result`` field of a miIO response.

    Returns:
        True if the device answered ``["ok"]`` (or a bare ``"ok"``).

    """
    if isinstance(result, list):
        return len(result) == 1 and result[0] == ACK_RESULT
    return result == ACK_RESULT


def extract_ir_learn_result(task_id: str, result: Any) -> IRLearnResult:  # noqa: ANN401
    """Build an IRLearnResult from a ``miIO.ir_read`` response.

    Raises:
        MalformedStatusError: If the response is not a dictionary.

    """
    if not isinstance(result, dict):
        error_msg = f"Unexpected infrared read result: {result!r}"
        raise MalformedStatusError(error_msg)
    try:
        length = int(result.get("length") or 0)
    except (TypeError, ValueError) as err:
        error_msg = f"Invalid infrared code length: {result.get('length')!r}"
        raise MalformedStatusError(error_msg) from err
    return IRLearnResult(
        key=str(result.get("key") or task_id),
        length=length,
        code=str(result.get("code") or ""),
    )


class MiioTransport:
    """miIO transport shared by every companion of a Home Assistant instance.

    Keeps one python-miio Device per host and runs its blocking ``send`` in
    the executor. python-miio owns encryption, timeouts and retries.
    """

    def __init__(self, hass: HomeAssistant, timeout: int = DEFAULT_TIMEOUT) -> None:
        self._hass = hass
        self._timeout = timeout
        self._devices: dict[tuple[str, str], Device] = {}

    def _get_device(self, host: str, token: str) -> Device:
        key = (host, token)
        if key not in self._devices:
            _LOGGER.debug("Creating miIO device handle for %s", host)
            self._devices[key] = Device(host, token, timeout=self._timeout)
        return self._devices[key]

    def forget(self, host: str, token: str) -> None:
        """Drop the cached device handle of an unloaded companion."""
        self._devices.pop((host, token), None)

    async def async_send(
        self,
        host: str,
        token: str,
        method: str,
        params: list[Any] | dict[str, Any],
    ) -> Any:  # noqa: ANN401
        """Send a miIO request and return its result.

        Raises:
            CompanionTransportError: If the round trip fails.

        """
        device = self._get_device(host, token)
        _LOGGER.debug("Sending %s to %s: %s", method, host, params)
        try:
            result = await self._hass.async_add_executor_job(
                device.send, method, params
            )
        except DeviceException as err:
            error_msg = f"{method} failed for {host}: {err}"
            raise CompanionTransportError(error_msg) from err
        _LOGGER.debug("Result of %s from %s: %s", method, host, result)
        return result

    async def async_simple_send(
        self,
        host: str,
        token: str,
        method: str,
        params: list[Any] | dict[str, Any],
    ) -> None:
        """Send a miIO command that the device must acknowledge.

        Raises:
            CompanionTransportError: If the round trip fails.
            CompanionCommandError: If the device does not answer ``ok``.

        """
        result = await self.async_send(host, token, method, params)
        if not is_acknowledged(result):
            error_msg = f"{method} was not acknowledged by {host}: {result!r}"
            raise CompanionCommandError(error_msg)


class AirConditionerCompanionClient:
    """Client issuing the companion's commands.

    The client holds no device state between calls; every method is one
    round trip through the shared transport.
    """

    def __init__(self, transport: MiioTransport, host: str, token: str) -> None:
        self._transport = transport
        self.host = host
        self._token = token

    async def _async_send(
        self, method: str, params: list[Any] | dict[str, Any]
    ) -> Any:  # noqa: ANN401
        return await self._transport.async_send(self.host, self._token, method, params)

    async def _async_command(
        self, method: str, params: list[Any] | dict[str, Any]
    ) -> None:
        await self._transport.async_simple_send(
            self.host, self._token, method, params
        )

    async def async_get_properties(
        self, props: list[str] | None = None
    ) -> dict[str, Any]:
        """Fetch raw device properties in one round trip."""
        props = list(props or DEFAULT_PROPERTIES)
        values = await self._async_send(METHOD_GET_PROP, props)
        return decode_properties(props, values)

    async def async_poll_status(self) -> CompanionDeviceState:
        """Fetch the property list and decode the composite status.

        Raises:
            CompanionTransportError: If the round trip fails.
            CompanionDecodeError: If the status cannot be decoded.

        """
        properties = await self.async_get_properties()
        return parse_state(properties[PROP_AC_STATE])

    async def async_set_power(self, power: Power) -> None:
        await self._async_command(METHOD_SET_POWER, [power.value])

    async def async_set_rotation_speed(self, speed: RotationSpeed) -> None:
        await self._async_command(METHOD_SET_FAN_LEVEL, [speed.value])

    async def async_set_swing(self, swing: Power) -> None:
        await self._async_command(METHOD_SET_SWING, [swing.value])

    async def async_set_target_temperature(self, temperature: int) -> None:
        await self._async_command(METHOD_SET_TARGET_TEMPERATURE, [int(temperature)])

    async def async_set_operation_mode(self, mode: OperationMode) -> None:
        await self._async_command(METHOD_SET_MODE, [mode.value])

    async def async_start_ir_learn(self, task_id: str) -> None:
        """Put the companion in infrared learn mode for the given task."""
        await self._async_command(METHOD_IR_LEARN, {"key": task_id})

    async def async_read_ir_learn_result(self, task_id: str) -> IRLearnResult:
        """Read what the companion has captured for the given task so far."""
        result = await self._async_send(METHOD_IR_READ, {"key": task_id})
        return extract_ir_learn_result(task_id, result)

    async def async_stop_ir_learn(self, task_id: str) -> None:
        await self._async_command(METHOD_IR_LEARN_STOP, {"key": task_id})

    async def async_send_ir_code(
        self, code: str, frequency: int = IR_DEFAULT_FREQUENCY
    ) -> None:
        """Play a previously captured infrared code."""
        await self._async_command(METHOD_IR_PLAY, {"freq": frequency, "code": code})


class IRLearnSession:
    """Infrared learn workflow of one companion.

    Tracks the Idle -> Learning -> Captured -> Idle cycle and rejects calls
    made out of order. Playing a code does not go through the session.
    """

    def __init__(self, client: AirConditionerCompanionClient, task_id: str) -> None:
        self._client = client
        self.task_id = task_id
        self.state = IRLearnState.IDLE
        self.result: IRLearnResult | None = None

    async def async_start(self) -> None:
        """Start learning.

        Raises:
            IRLearnStateError: If the session is not idle.

        """
        if self.state is not IRLearnState.IDLE:
            error_msg = f"Cannot start learning while {self.state}"
            raise IRLearnStateError(error_msg)
        # Claimed before the round trip so a concurrent start is rejected
        self.state = IRLearnState.LEARNING
        self.result = None
        try:
            await self._client.async_start_ir_learn(self.task_id)
        except BaseException:
            self.state = IRLearnState.IDLE
            raise

    async def async_read(self) -> IRLearnResult:
        """Read the learn result, moving to Captured once a code arrives.

        Raises:
            IRLearnStateError: If learning has not been started.

        """
        if self.state is IRLearnState.IDLE:
            error_msg = "Cannot read a learn result before learning is started"
            raise IRLearnStateError(error_msg)
        if self.state is IRLearnState.CAPTURED and self.result is not None:
            return self.result

        result = await self._client.async_read_ir_learn_result(self.task_id)
        if result.captured:
            _LOGGER.debug("Captured infrared code for task %s", self.task_id)
            self.result = result
            self.state = IRLearnState.CAPTURED
        return result

    async def async_stop(self) -> None:
        """Stop learning. Safe to call in any state."""
        try:
            await self._client.async_stop_ir_learn(self.task_id)
        finally:
            self.state = IRLearnState.IDLE

    async def async_learn(
        self,
        timeout: float = IR_LEARN_TIMEOUT,
        interval: float = IR_LEARN_INTERVAL,
    ) -> IRLearnResult:
        """Run a whole learn cycle and return the captured code.

        A failing stop command is only logged once a code has been captured.

        Raises:
            IRLearnStateError: If the session is not idle.
            CompanionTimeoutError: If nothing is captured within the timeout.

        """
        await self.async_start()
        result: IRLearnResult | None = None
        try:
            async with asyncio.timeout(timeout):
                while result is None:
                    read = await self.async_read()
                    if read.captured:
                        result = read
                    else:
                        await asyncio.sleep(interval)
        except TimeoutError as err:
            error_msg = f"No infrared code captured within {timeout} seconds"
            raise CompanionTimeoutError(error_msg) from err
        finally:
            try:
                await self.async_stop()
            except CompanionError as err:
                if result is None:
                    raise
                _LOGGER.warning(
                    "Failed to stop infrared learn for task %s: %s", self.task_id, err
                )
        return result
