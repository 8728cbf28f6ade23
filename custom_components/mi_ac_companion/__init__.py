from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST, CONF_NAME, CONF_TOKEN, Platform
from homeassistant.core import HomeAssistant
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.typing import ConfigType

from .api import AirConditionerCompanionClient, IRLearnSession, MiioTransport
from .const import DATA_TRANSPORT, DEFAULT_NAME, DOMAIN
from .coordinator import CompanionCoordinator
from .services import async_setup_services

_LOGGER = logging.getLogger(__name__)

PLATFORMS = [Platform.CLIMATE, Platform.FAN]

CONFIG_SCHEMA = cv.config_entry_only_config_schema(DOMAIN)


def get_transport(hass: HomeAssistant) -> MiioTransport:
    """Return the miIO transport shared by all companions."""
    domain_data = hass.data.setdefault(DOMAIN, {})
    if DATA_TRANSPORT not in domain_data:
        domain_data[DATA_TRANSPORT] = MiioTransport(hass)
    return domain_data[DATA_TRANSPORT]


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    async_setup_services(hass)
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Setting up Mi AC Companion for entry %s", entry.entry_id)

    if CONF_HOST not in entry.data or CONF_TOKEN not in entry.data:
        _LOGGER.error("Missing host or token in configuration for entry %s", entry.entry_id)
        return False

    host = entry.data[CONF_HOST]
    name = entry.data.get(CONF_NAME, DEFAULT_NAME)
    client = AirConditionerCompanionClient(
        get_transport(hass), host, entry.data[CONF_TOKEN]
    )
    coordinator = CompanionCoordinator(hass, client, entry, name)

    # Raises ConfigEntryNotReady while the companion does not answer
    await coordinator.async_config_entry_first_refresh()

    hass.data[DOMAIN][entry.entry_id] = {
        "client": client,
        "coordinator": coordinator,
        "ir_session": IRLearnSession(client, entry.entry_id),
        "unique_id": entry.unique_id or entry.entry_id,
        "name": name,
    }
    _LOGGER.debug("Stored data for entry %s (%s)", entry.entry_id, host)

    try:
        await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    except Exception as err:
        _LOGGER.error("Failed to setup platforms for entry %s: %s", entry.entry_id, err)
        return False

    _LOGGER.info("Successfully setup Mi AC Companion for entry %s", entry.entry_id)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Unloading Mi AC Companion for entry %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if not unload_ok:
        _LOGGER.warning("Failed to unload some platforms for entry %s", entry.entry_id)
        return False

    entry_data = hass.data[DOMAIN].pop(entry.entry_id, None)
    if entry_data is not None:
        await entry_data["coordinator"].async_shutdown()
        get_transport(hass).forget(entry.data[CONF_HOST], entry.data[CONF_TOKEN])
        _LOGGER.debug("Cleaned up data for entry %s", entry.entry_id)

    _LOGGER.info("Successfully unloaded Mi AC Companion for entry %s", entry.entry_id)
    return True
