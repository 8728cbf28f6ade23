"""Coordinator for Mi AC Companion integration."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from homeassistant.components.climate import HVACMode
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .const import (
    DEFAULT_POLL_INTERVAL,
    DOMAIN,
    FAN_STATE_AUTO,
    FAN_STATE_MANUAL,
    MAX_TEMPERATURE,
    MIN_TEMPERATURE,
)
from .exceptions import CompanionDecodeError, CompanionTransportError
from .models import (
    DEFAULT_STATE,
    CompanionDeviceState,
    OperationMode,
    Power,
    RotationSpeed,
)
from .reconciler import FAN_LEVEL_SPEEDS, Service, ServiceUpdate, service_updates

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .api import AirConditionerCompanionClient

_LOGGER = logging.getLogger(__name__)


class CompanionCoordinator(DataUpdateCoordinator[CompanionDeviceState]):
    """Coordinator that polls one companion and reconciles its state.

    ``data`` is the last known device state. Every poll and every
    successful command replaces it and records in ``last_updates`` which
    capability groups changed, so entities only write what moved.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        client: AirConditionerCompanionClient,
        config_entry: ConfigEntry | None,
        name: str,
        update_interval: timedelta = timedelta(seconds=DEFAULT_POLL_INTERVAL),
    ) -> None:
        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name=f"{DOMAIN}_{name}",
            update_interval=update_interval,
            always_update=False,
        )
        self.client = client
        self.data = DEFAULT_STATE
        self.last_updates: list[ServiceUpdate] = []
        # Serialises the poll and command paths over self.data
        self._lock = asyncio.Lock()

    def has_update_for(self, service: Service) -> bool:
        """Return True if the last state change touched the capability group."""
        return any(update.service is service for update in self.last_updates)

    async def _async_update_data(self) -> CompanionDeviceState:
        self.last_updates = []
        async with self._lock:
            try:
                state = await self.client.async_poll_status()
            except CompanionTransportError as err:
                raise UpdateFailed(
                    f"Connection error while polling {self.client.host}: {err}"
                ) from err
            except CompanionDecodeError as err:
                raise UpdateFailed(
                    f"Invalid status from {self.client.host}: {err}"
                ) from err

            _LOGGER.debug("Latest status of %s: %s", self.client.host, state)
            self.last_updates = service_updates(self.data, state)
            for update in self.last_updates:
                _LOGGER.debug("Update %s -> %s", update.service, update.values)
        # The base class stores the result before any waiter on the lock runs
        return state

    def _async_apply_state(self, state: CompanionDeviceState) -> None:
        """Optimistically replace the cached state after a command."""
        self.last_updates = service_updates(self.data, state)
        if not self.last_updates:
            return
        self.async_set_updated_data(state)

    async def async_set_hvac_mode(self, hvac_mode: HVACMode) -> None:
        """Apply a target heating/cooling state.

        Raises:
            ValueError: If the mode is not OFF, COOL or AUTO.

        """
        _LOGGER.debug("Set target heating cooling state: %s", hvac_mode)
        async with self._lock:
            if hvac_mode == HVACMode.OFF:
                if self.data.power is Power.OFF:
                    return
                await self.client.async_set_power(Power.OFF)
                self._async_apply_state(self.data.replace(power=Power.OFF))
            elif hvac_mode in (HVACMode.COOL, HVACMode.AUTO):
                mode = (
                    OperationMode.COOLING
                    if hvac_mode == HVACMode.COOL
                    else OperationMode.AUTO
                )
                await self.client.async_set_operation_mode(mode)
                self._async_apply_state(self.data.replace(operation_mode=mode))
            else:
                error_msg = f"Unsupported HVAC mode: {hvac_mode}"
                raise ValueError(error_msg)

    async def async_set_target_temperature(self, temperature: float) -> None:
        """Set the target temperature in whole degrees.

        Raises:
            ValueError: If the temperature is outside 16-30.

        """
        value = round(temperature)
        if not MIN_TEMPERATURE <= value <= MAX_TEMPERATURE:
            error_msg = (
                f"Temperature {temperature} outside "
                f"{MIN_TEMPERATURE}-{MAX_TEMPERATURE}"
            )
            raise ValueError(error_msg)

        _LOGGER.debug("Set target temperature: %s", value)
        async with self._lock:
            await self.client.async_set_target_temperature(value)
            self._async_apply_state(self.data.replace(temperature=value))

    async def async_set_active(self, active: bool) -> None:  # noqa: FBT001
        power = Power.ON if active else Power.OFF
        async with self._lock:
            if power is self.data.power:
                return
            _LOGGER.debug("Set active: %s", active)
            await self.client.async_set_power(power)
            self._async_apply_state(self.data.replace(power=power))

    async def async_set_swing(self, enabled: bool) -> None:  # noqa: FBT001
        swing = Power.ON if enabled else Power.OFF
        async with self._lock:
            if swing is self.data.swing_mode:
                return
            _LOGGER.debug("Set swing mode: %s", enabled)
            await self.client.async_set_swing(swing)
            self._async_apply_state(self.data.replace(swing_mode=swing))

    async def async_set_target_fan_state(self, fan_state: str) -> None:
        """Switch between automatic and manual fan control.

        Manual control starts at the normal speed.

        Raises:
            ValueError: If the fan state is neither manual nor auto.

        """
        if fan_state == FAN_STATE_MANUAL:
            speed = RotationSpeed.NORMAL
        elif fan_state == FAN_STATE_AUTO:
            speed = RotationSpeed.AUTO
        else:
            error_msg = f"Unsupported fan state: {fan_state}"
            raise ValueError(error_msg)

        _LOGGER.debug("Set target fan state: %s", fan_state)
        async with self._lock:
            await self.client.async_set_rotation_speed(speed)
            self._async_apply_state(self.data.replace(rotation_speed=speed))

    async def async_set_fan_speed_level(self, level: int) -> None:
        """Set the fan level 0-3. Level 0 switches the unit off.

        Raises:
            ValueError: If the level is outside 0-3.

        """
        if level != 0 and level not in FAN_LEVEL_SPEEDS:
            error_msg = f"Unsupported fan speed level: {level}"
            raise ValueError(error_msg)

        _LOGGER.debug("Set rotation speed: %s", level)
        async with self._lock:
            if level == 0:
                await self.client.async_set_power(Power.OFF)
                self._async_apply_state(self.data.replace(power=Power.OFF))
                return
            speed = FAN_LEVEL_SPEEDS[level]
            await self.client.async_set_rotation_speed(speed)
            self._async_apply_state(self.data.replace(rotation_speed=speed))
