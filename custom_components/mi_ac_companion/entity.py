"""Base entity for Mi AC Companion integration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity import Entity

from .const import DOMAIN, MANUFACTURER, MODEL
from .reconciler import Characteristic, characteristic_value

if TYPE_CHECKING:
    from collections.abc import Callable

    from .coordinator import CompanionCoordinator
    from .reconciler import Service

_LOGGER = logging.getLogger(__name__)


class CompanionEntity(Entity):
    """Entity bound to one capability group of a companion.

    State is written only when the coordinator reports a change for the
    entity's capability group.
    """

    _attr_has_entity_name = True
    _attr_should_poll = False

    service: Service

    def __init__(
        self,
        coordinator: CompanionCoordinator,
        unique_id: str,
        name: str,
    ) -> None:
        self._coordinator = coordinator
        self._attr_unique_id = f"{unique_id}_{self.service}"
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, unique_id)},
            name=name,
            manufacturer=MANUFACTURER,
            model=MODEL,
        )
        self._coordinator_listener_unsub: Callable[[], None] | None = None

    async def async_added_to_hass(self) -> None:
        """Subscribe to coordinator updates."""
        await super().async_added_to_hass()
        self._coordinator_listener_unsub = self._coordinator.async_add_listener(
            self._handle_coordinator_update
        )

    async def async_will_remove_from_hass(self) -> None:
        """Unsubscribe from coordinator updates."""
        await super().async_will_remove_from_hass()
        if self._coordinator_listener_unsub is not None:
            self._coordinator_listener_unsub()
            self._coordinator_listener_unsub = None

    def _handle_coordinator_update(self) -> None:
        if not self._coordinator.has_update_for(self.service):
            return
        _LOGGER.debug("Writing %s state of %s", self.service, self.entity_id)
        self.async_write_ha_state()

    def _characteristic(self, characteristic: Characteristic) -> Any:  # noqa: ANN401
        """Return the value pushed for a characteristic of the cached state."""
        return characteristic_value(self._coordinator.data, characteristic)
