"""
Configuration flow for Midea AC integration.

This module handles the setup of a Midea air conditioner through Home
Assistant's config flow system, and the options flow used to change the
polling interval at runtime.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import voluptuous as vol
from homeassistant.config_entries import ConfigFlow, ConfigFlowResult, OptionsFlow
from homeassistant.const import CONF_HOST, CONF_NAME, CONF_PORT, CONF_TOKEN
from homeassistant.core import callback
from homeassistant.helpers.httpx_client import get_async_client

from . import api
from .const import (
    CONF_DEVICE_ID,
    CONF_POLL_INTERVAL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_PORT,
    DOMAIN,
    ERROR_CANNOT_CONNECT,
    ERROR_INVALID_AUTH,
    ERROR_UNKNOWN,
)

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry

_LOGGER = logging.getLogger(__name__)

USER_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_NAME): str,
        vol.Required(CONF_HOST): str,
        vol.Optional(CONF_PORT, default=DEFAULT_PORT): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=65535)
        ),
        vol.Required(CONF_DEVICE_ID): str,
        vol.Required(CONF_TOKEN): str,
    }
)


def build_options_schema(poll_interval: int) -> vol.Schema:
    """Return the options schema with the current polling interval as default."""
    return vol.Schema(
        {
            vol.Required(CONF_POLL_INTERVAL, default=poll_interval): vol.All(
                vol.Coerce(int), vol.Range(min=1)
            ),
        }
    )


class MideaAcConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle configuration flow for Midea AC integration."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """
        Handle the initial step of the config flow.

        Args:
            user_input: User input data describing the appliance.

        Returns:
            ConfigFlowResult indicating the next step or errors.

        """
        errors: dict[str, str] = {}

        if user_input is not None:
            device_id = user_input[CONF_DEVICE_ID]

            try:
                link = api.MideaDeviceLink(
                    get_async_client(self.hass),
                    user_input[CONF_HOST],
                    user_input.get(CONF_PORT, DEFAULT_PORT),
                    device_id,
                    user_input[CONF_TOKEN],
                )
                await link.async_fetch_state()
                _LOGGER.info("Successfully connected to Midea AC %s", device_id)

            except api.MideaAuthError as err:
                _LOGGER.warning(
                    "Authentication failed (%s): %s", ERROR_INVALID_AUTH, err
                )
                errors["base"] = ERROR_INVALID_AUTH
            except api.MideaCommunicationError as err:
                _LOGGER.warning("Connection error (%s): %s", ERROR_CANNOT_CONNECT, err)
                errors["base"] = ERROR_CANNOT_CONNECT
            except Exception:
                _LOGGER.exception(
                    "Unexpected error while connecting (%s)",
                    ERROR_UNKNOWN,
                )
                errors["base"] = ERROR_UNKNOWN

            else:
                await self.async_set_unique_id(device_id)
                self._abort_if_unique_id_configured()

                return self.async_create_entry(
                    title=user_input[CONF_NAME],
                    data={CONF_PORT: DEFAULT_PORT, **user_input},
                    options={CONF_POLL_INTERVAL: DEFAULT_POLL_INTERVAL},
                )

        return self.async_show_form(
            step_id="user",
            data_schema=USER_SCHEMA,
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: ConfigEntry) -> MideaAcOptionsFlow:
        """Return the options flow handler."""
        return MideaAcOptionsFlow(config_entry)


class MideaAcOptionsFlow(OptionsFlow):
    """Allow changing the polling interval after setup."""

    def __init__(self, entry: ConfigEntry) -> None:
        """Store the config entry providing the current options."""
        self._entry = entry

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Show the options form and store submitted values."""
        if user_input is not None:
            return self.async_create_entry(data=user_input)

        poll_interval = self._entry.options.get(
            CONF_POLL_INTERVAL, DEFAULT_POLL_INTERVAL
        )
        return self.async_show_form(
            step_id="init",
            data_schema=build_options_schema(poll_interval),
        )
