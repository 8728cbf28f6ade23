"""Climate entities for the Mi AC Companion.

This module exposes the thermostat side of a companion: heating/cooling
state, current and target temperature.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from homeassistant.components.climate import (
    ClimateEntity,
    ClimateEntityFeature,
    HVACAction,
    HVACMode,
)
from homeassistant.const import ATTR_TEMPERATURE, UnitOfTemperature
from homeassistant.exceptions import HomeAssistantError

from .const import DOMAIN, MAX_TEMPERATURE, MIN_TEMPERATURE, TEMPERATURE_STEP
from .entity import CompanionEntity
from .exceptions import CompanionError
from .reconciler import Characteristic, Service

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the climate entity for a companion."""
    entry_data = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(
        [
            CompanionClimateEntity(
                entry_data["coordinator"],
                entry_data["unique_id"],
                entry_data["name"],
            )
        ]
    )


class CompanionClimateEntity(CompanionEntity, ClimateEntity):
    """Thermostat side of an air conditioner companion."""

    service = Service.THERMOSTAT

    _attr_name = None
    _attr_temperature_unit = UnitOfTemperature.CELSIUS
    _attr_target_temperature_step = TEMPERATURE_STEP
    _attr_min_temp = MIN_TEMPERATURE
    _attr_max_temp = MAX_TEMPERATURE
    _attr_hvac_modes = [HVACMode.OFF, HVACMode.COOL, HVACMode.AUTO]
    _attr_supported_features = (
        ClimateEntityFeature.TARGET_TEMPERATURE
        | ClimateEntityFeature.TURN_OFF
        | ClimateEntityFeature.TURN_ON
    )

    @property
    def hvac_mode(self) -> HVACMode:
        return self._characteristic(Characteristic.TARGET_HEATING_COOLING_STATE)

    @property
    def hvac_action(self) -> HVACAction:
        return self._characteristic(Characteristic.CURRENT_HEATING_COOLING_STATE)

    @property
    def current_temperature(self) -> float:
        return self._characteristic(Characteristic.CURRENT_TEMPERATURE)

    @property
    def target_temperature(self) -> float:
        return self._characteristic(Characteristic.TARGET_TEMPERATURE)

    async def async_set_hvac_mode(self, hvac_mode: HVACMode) -> None:
        """Set the HVAC mode.

        Args:
            hvac_mode: The HVAC mode to set.

        """
        try:
            await self._coordinator.async_set_hvac_mode(hvac_mode)
        except (CompanionError, ValueError) as err:
            _LOGGER.warning("Failed to set HVAC mode of %s: %s", self.name, err)
            raise HomeAssistantError(str(err)) from err

    async def async_set_temperature(self, **kwargs: Any) -> None:  # noqa: ANN401
        """Set the target temperature.

        Args:
            **kwargs: Keyword arguments containing temperature data.

        """
        temperature = kwargs.get(ATTR_TEMPERATURE)
        if temperature is None:
            return
        try:
            await self._coordinator.async_set_target_temperature(temperature)
        except (CompanionError, ValueError) as err:
            _LOGGER.warning("Failed to set temperature of %s: %s", self.name, err)
            raise HomeAssistantError(str(err)) from err

    async def async_turn_on(self) -> None:
        """Turn the unit on in its current mode."""
        try:
            await self._coordinator.async_set_active(True)
        except CompanionError as err:
            raise HomeAssistantError(str(err)) from err

    async def async_turn_off(self) -> None:
        await self.async_set_hvac_mode(HVACMode.OFF)
