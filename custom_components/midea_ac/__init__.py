from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST, CONF_NAME, CONF_PORT, CONF_TOKEN, Platform
from homeassistant.core import HomeAssistant

from . import api
from .api import create_session_client
from .const import (
    CONF_DEVICE_ID,
    CONF_POLL_INTERVAL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_PORT,
    DOMAIN,
)
from .coordinator import MideaPollScheduler, MideaReconciler
from .models import MideaDevice
from .publisher import MideaStatePublisher

_LOGGER = logging.getLogger(__name__)

PLATFORMS = [Platform.CLIMATE, Platform.SENSOR]


def get_poll_interval(entry: ConfigEntry) -> int:
    """Return the configured polling interval in seconds."""
    return int(entry.options.get(CONF_POLL_INTERVAL, DEFAULT_POLL_INTERVAL))


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Setting up Midea AC integration for entry %s", entry.entry_id)

    device = MideaDevice(id=entry.data[CONF_DEVICE_ID], name=entry.data[CONF_NAME])
    link = api.MideaDeviceLink(
        create_session_client(hass),
        entry.data[CONF_HOST],
        entry.data.get(CONF_PORT, DEFAULT_PORT),
        device.id,
        entry.data[CONF_TOKEN],
    )

    try:
        _LOGGER.debug("Checking connection to Midea AC [%s]", device.name)
        await link.async_fetch_state()
    except api.MideaAuthError as err:
        _LOGGER.warning(
            "Authentication failed for entry %s: %s", entry.entry_id, str(err)
        )
        return False
    except api.MideaCommunicationError as err:
        _LOGGER.error("Connection error for entry %s: %s", entry.entry_id, str(err))
        return False

    publisher = MideaStatePublisher()
    reconciler = MideaReconciler(link, publisher, device.name)
    scheduler = MideaPollScheduler(hass, reconciler)

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        "device": device,
        "link": link,
        "publisher": publisher,
        "reconciler": reconciler,
        "scheduler": scheduler,
    }

    try:
        await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    except Exception as err:
        _LOGGER.error("Failed to setup platforms for entry %s: %s", entry.entry_id, err)
        hass.data[DOMAIN].pop(entry.entry_id)
        return False

    scheduler.start(get_poll_interval(entry))
    entry.async_on_unload(entry.add_update_listener(async_update_options))
    await reconciler.async_fetch_and_publish()

    _LOGGER.info("Midea AC [%s] initialized", device.name)
    return True


async def async_update_options(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Apply a changed polling interval to the running scheduler."""
    entry_data = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    if entry_data is None:
        return
    entry_data["scheduler"].reconfigure(get_poll_interval(entry))


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Unloading Midea AC integration for entry %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        entry_data = hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
        if entry_data is not None:
            entry_data["scheduler"].stop()
            _LOGGER.debug("Cleaned up data for entry %s", entry.entry_id)
        _LOGGER.info(
            "Successfully unloaded Midea AC integration for entry %s",
            entry.entry_id,
        )
    else:
        _LOGGER.warning("Failed to unload some platforms for entry %s", entry.entry_id)

    return unload_ok
