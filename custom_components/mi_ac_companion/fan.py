"""Fan entities for the Mi AC Companion."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any

from homeassistant.components.fan import FanEntity, FanEntityFeature
from homeassistant.exceptions import HomeAssistantError
from homeassistant.util.percentage import (
    percentage_to_ranged_value,
    ranged_value_to_percentage,
)

from .const import DOMAIN, FAN_STATE_AUTO, FAN_STATE_MANUAL
from .entity import CompanionEntity
from .exceptions import CompanionError
from .reconciler import Characteristic, Service

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

_LOGGER = logging.getLogger(__name__)

SPEED_RANGE = (1, 3)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the fan entity for a companion."""
    entry_data = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(
        [
            CompanionFanEntity(
                entry_data["coordinator"],
                entry_data["unique_id"],
                entry_data["name"],
            )
        ]
    )


class CompanionFanEntity(CompanionEntity, FanEntity):
    """Fan side of an air conditioner companion.

    The fan levels 1-3 map to percentages; 0 % switches the unit off.
    """

    service = Service.FAN

    _attr_name = "Fan"
    _attr_speed_count = 3
    _attr_preset_modes = [FAN_STATE_MANUAL, FAN_STATE_AUTO]
    _attr_supported_features = (
        FanEntityFeature.SET_SPEED
        | FanEntityFeature.OSCILLATE
        | FanEntityFeature.PRESET_MODE
        | FanEntityFeature.TURN_ON
        | FanEntityFeature.TURN_OFF
    )

    @property
    def is_on(self) -> bool:
        return self._characteristic(Characteristic.ACTIVE)

    @property
    def percentage(self) -> int:
        level = self._characteristic(Characteristic.ROTATION_SPEED)
        if level == 0:
            return 0
        return ranged_value_to_percentage(SPEED_RANGE, level)

    @property
    def preset_mode(self) -> str:
        return self._characteristic(Characteristic.TARGET_FAN_STATE)

    @property
    def oscillating(self) -> bool:
        return self._characteristic(Characteristic.SWING_MODE)

    async def _async_call(self, action: str, coro: Any) -> None:  # noqa: ANN401
        try:
            await coro
        except (CompanionError, ValueError) as err:
            _LOGGER.warning("Failed to %s on %s: %s", action, self.name, err)
            raise HomeAssistantError(str(err)) from err

    async def async_set_percentage(self, percentage: int) -> None:
        """Set the fan speed from a percentage."""
        level = 0
        if percentage:
            level = math.ceil(percentage_to_ranged_value(SPEED_RANGE, percentage))
        await self._async_call(
            "set speed", self._coordinator.async_set_fan_speed_level(level)
        )

    async def async_set_preset_mode(self, preset_mode: str) -> None:
        await self._async_call(
            "set fan state",
            self._coordinator.async_set_target_fan_state(preset_mode),
        )

    async def async_oscillate(self, oscillating: bool) -> None:  # noqa: FBT001
        await self._async_call(
            "set swing", self._coordinator.async_set_swing(oscillating)
        )

    async def async_turn_on(
        self,
        percentage: int | None = None,
        preset_mode: str | None = None,
        **kwargs: Any,  # noqa: ANN401
    ) -> None:
        """Turn the unit on, optionally with a speed or fan state."""
        await self._async_call("turn on", self._coordinator.async_set_active(True))
        if preset_mode is not None:
            await self.async_set_preset_mode(preset_mode)
        elif percentage is not None:
            await self.async_set_percentage(percentage)

    async def async_turn_off(self, **kwargs: Any) -> None:  # noqa: ANN401
        await self._async_call("turn off", self._coordinator.async_set_active(False))
