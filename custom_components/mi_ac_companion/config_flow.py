"""
Configuration flow for Mi AC Companion integration.

This module handles the setup of a companion through Home Assistant's
config flow system. The entered host and token are checked by polling the
device status once.
"""

import logging
from typing import Any

import voluptuous as vol
from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.const import CONF_HOST, CONF_NAME, CONF_TOKEN

from . import get_transport
from .api import AirConditionerCompanionClient
from .const import (
    DEFAULT_NAME,
    DOMAIN,
    ERROR_CANNOT_CONNECT,
    ERROR_INVALID_RESPONSE,
    ERROR_INVALID_TOKEN,
    ERROR_UNKNOWN,
    TOKEN_LENGTH,
)
from .exceptions import CompanionDecodeError, CompanionTransportError

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): str,
        vol.Required(CONF_TOKEN): str,
        vol.Optional(CONF_NAME, default=DEFAULT_NAME): str,
    }
)


def is_valid_token(token: str) -> bool:
    """Check that a miIO token is 32 hexadecimal characters."""
    if len(token) != TOKEN_LENGTH:
        return False
    try:
        bytes.fromhex(token)
    except ValueError:
        return False
    return True


class MiAcCompanionConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle configuration flow for Mi AC Companion integration."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """
        Handle the initial step of the config flow.

        Args:
            user_input: User input data containing host, token and name.

        Returns:
            ConfigFlowResult indicating the next step or errors.

        """
        errors: dict[str, str] = {}

        if user_input is not None:
            host = user_input[CONF_HOST].strip()
            token = user_input[CONF_TOKEN].strip().lower()

            if not is_valid_token(token):
                errors[CONF_TOKEN] = ERROR_INVALID_TOKEN
            else:
                transport = get_transport(self.hass)
                try:
                    client = AirConditionerCompanionClient(transport, host, token)
                    state = await client.async_poll_status()
                    _LOGGER.info("Connected to companion at %s: %s", host, state)

                except CompanionTransportError:
                    _LOGGER.exception("Connection error (%s)", ERROR_CANNOT_CONNECT)
                    errors["base"] = ERROR_CANNOT_CONNECT
                except CompanionDecodeError:
                    _LOGGER.exception("Invalid status (%s)", ERROR_INVALID_RESPONSE)
                    errors["base"] = ERROR_INVALID_RESPONSE
                except Exception:
                    _LOGGER.exception(
                        "Unexpected error while connecting (%s)", ERROR_UNKNOWN
                    )
                    errors["base"] = ERROR_UNKNOWN

                else:
                    await self.async_set_unique_id(host)
                    self._abort_if_unique_id_configured()

                    name = user_input.get(CONF_NAME, DEFAULT_NAME)
                    return self.async_create_entry(
                        title=name,
                        data={
                            CONF_HOST: host,
                            CONF_TOKEN: token,
                            CONF_NAME: name,
                        },
                    )

                transport.forget(host, token)

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )
