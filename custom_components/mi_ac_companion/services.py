"""Infrared services for Mi AC Companion integration.

``learn_ir_code`` runs one learn cycle on a companion and returns the
captured code. ``send_ir_code`` plays a code through a companion.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import voluptuous as vol
from homeassistant.core import ServiceCall, SupportsResponse, callback
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
from homeassistant.helpers import config_validation as cv

from .const import (
    ATTR_CODE,
    ATTR_ENTRY_ID,
    ATTR_FREQUENCY,
    ATTR_TIMEOUT,
    DOMAIN,
    IR_DEFAULT_FREQUENCY,
    IR_LEARN_TIMEOUT,
    SERVICE_LEARN_IR_CODE,
    SERVICE_SEND_IR_CODE,
)
from .exceptions import CompanionError

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant, ServiceResponse

_LOGGER = logging.getLogger(__name__)

LEARN_IR_CODE_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_ENTRY_ID): cv.string,
        vol.Optional(ATTR_TIMEOUT, default=IR_LEARN_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=1, max=300)
        ),
    }
)

SEND_IR_CODE_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_ENTRY_ID): cv.string,
        vol.Required(ATTR_CODE): cv.string,
        vol.Optional(ATTR_FREQUENCY, default=IR_DEFAULT_FREQUENCY): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
    }
)


def _get_entry_data(hass: HomeAssistant, entry_id: str) -> dict[str, Any]:
    entry_data = hass.data.get(DOMAIN, {}).get(entry_id)
    if not isinstance(entry_data, dict) or "client" not in entry_data:
        error_msg = f"No loaded companion for config entry {entry_id}"
        raise ServiceValidationError(error_msg)
    return entry_data


async def async_handle_learn_ir_code(
    hass: HomeAssistant, call: ServiceCall
) -> ServiceResponse:
    """Learn one infrared code and return it."""
    entry_data = _get_entry_data(hass, call.data[ATTR_ENTRY_ID])
    session = entry_data["ir_session"]

    _LOGGER.debug("Learning infrared code with task %s", session.task_id)
    try:
        result = await session.async_learn(timeout=call.data[ATTR_TIMEOUT])
    except CompanionError as err:
        _LOGGER.warning("Infrared learn failed: %s", err)
        raise HomeAssistantError(str(err)) from err

    _LOGGER.info("Learned infrared code of length %d", result.length)
    return {"key": result.key, "length": result.length, "code": result.code}


async def async_handle_send_ir_code(hass: HomeAssistant, call: ServiceCall) -> None:
    """Play an infrared code."""
    entry_data = _get_entry_data(hass, call.data[ATTR_ENTRY_ID])

    try:
        await entry_data["client"].async_send_ir_code(
            call.data[ATTR_CODE], call.data[ATTR_FREQUENCY]
        )
    except CompanionError as err:
        _LOGGER.warning("Sending infrared code failed: %s", err)
        raise HomeAssistantError(str(err)) from err


@callback
def async_setup_services(hass: HomeAssistant) -> None:
    """Register the infrared services."""

    async def _learn_ir_code(call: ServiceCall) -> ServiceResponse:
        return await async_handle_learn_ir_code(hass, call)

    async def _send_ir_code(call: ServiceCall) -> None:
        await async_handle_send_ir_code(hass, call)

    hass.services.async_register(
        DOMAIN,
        SERVICE_LEARN_IR_CODE,
        _learn_ir_code,
        schema=LEARN_IR_CODE_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        DOMAIN,
        SERVICE_SEND_IR_CODE,
        _send_ir_code,
        schema=SEND_IR_CODE_SCHEMA,
    )
