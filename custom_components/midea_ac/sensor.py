"""Temperature sensors for Midea air conditioners."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.const import UnitOfTemperature

from .climate import build_device_info
from .const import DOMAIN, READING_INDOOR_TEMPERATURE, READING_OUTDOOR_TEMPERATURE

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import CALLBACK_TYPE, HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .models import MideaDevice
    from .publisher import MideaStatePublisher

SENSOR_NAMES = {
    READING_INDOOR_TEMPERATURE: "Indoor temperature",
    READING_OUTDOOR_TEMPERATURE: "Outdoor temperature",
}


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up indoor and outdoor temperature sensors."""
    entry_data = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(
        MideaTemperatureSensor(entry_data["publisher"], entry_data["device"], reading)
        for reading in SENSOR_NAMES
    )


class MideaTemperatureSensor(SensorEntity):
    """Temperature measured by the appliance."""

    _attr_device_class = SensorDeviceClass.TEMPERATURE
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = UnitOfTemperature.CELSIUS
    _attr_has_entity_name = True
    _attr_should_poll = False

    def __init__(
        self, publisher: MideaStatePublisher, device: MideaDevice, reading: str
    ) -> None:
        self._publisher = publisher
        self._reading = reading
        self._attr_name = SENSOR_NAMES[reading]
        self._attr_unique_id = f"{device.id}_{reading}"
        self._attr_device_info = build_device_info(device)
        self._attr_native_value = None
        self._unsub: CALLBACK_TYPE | None = None

    async def async_added_to_hass(self) -> None:
        """Subscribe to published readings."""
        await super().async_added_to_hass()
        self._unsub = self._publisher.async_add_listener(
            self._reading, self._handle_reading
        )

    async def async_will_remove_from_hass(self) -> None:
        """Unsubscribe from published readings."""
        await super().async_will_remove_from_hass()
        if self._unsub is not None:
            self._unsub()
            self._unsub = None

    def _handle_reading(self, temperature: float | None) -> None:
        self._attr_native_value = temperature
        self.async_write_ha_state()
