"""Climate entity for Midea air conditioners.

This module exposes the appliance as a Home Assistant climate entity. The
entity never talks to the appliance itself: state arrives through the state
publisher and every user change is handed to the reconciler, which merges it
into the full appliance state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from homeassistant.components.climate import (
    ATTR_HVAC_MODE,
    ClimateEntity,
    ClimateEntityFeature,
    HVACMode,
)
from homeassistant.components.climate.const import (
    FAN_AUTO,
    PRESET_BOOST,
    PRESET_NONE,
    SWING_OFF,
)
from homeassistant.const import (
    ATTR_TEMPERATURE,
    UnitOfTemperature,
)
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.restore_state import RestoreEntity

from .api import MideaCommunicationError
from .codec import MideaValidationError
from .const import (
    CONTROL_BOOST,
    CONTROL_FAN_SPEED,
    CONTROL_MODE,
    CONTROL_POWER,
    CONTROL_SWING_MODE,
    CONTROL_TARGET_TEMPERATURE,
    DOMAIN,
    FAN_SPEED_MAP,
    MANUFACTURER,
    MAX_TEMP,
    MIN_TEMP,
    READING_INDOOR_TEMPERATURE,
    SWING_MODE_MAP,
)
from .models import ControlChange

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import CALLBACK_TYPE, HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .coordinator import MideaReconciler
    from .models import MideaDevice
    from .publisher import MideaStatePublisher

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the climate entity for a Midea AC."""
    entry_data = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(
        [
            MideaClimateEntity(
                entry_data["reconciler"],
                entry_data["publisher"],
                entry_data["device"],
            )
        ]
    )


def build_device_info(device: MideaDevice) -> DeviceInfo:
    """Return the device registry entry shared by all entities of a device."""
    return DeviceInfo(
        identifiers={(DOMAIN, device.id)},
        name=device.name,
        manufacturer=MANUFACTURER,
    )


class MideaClimateEntity(ClimateEntity, RestoreEntity):
    """Climate entity for a Midea air conditioner.

    Power, mode, target temperature, fan speed, swing and boost are each
    updated individually as the publisher delivers them.
    """

    _attr_temperature_unit = UnitOfTemperature.CELSIUS
    _attr_target_temperature_step = 1.0
    _attr_min_temp = MIN_TEMP
    _attr_max_temp = MAX_TEMP
    _attr_has_entity_name = True
    _attr_name = None
    _attr_should_poll = False
    _attr_hvac_modes = [HVACMode.OFF, HVACMode.AUTO, HVACMode.COOL, HVACMode.HEAT]
    _attr_fan_modes = list(FAN_SPEED_MAP)
    _attr_swing_modes = list(SWING_MODE_MAP)
    _attr_preset_modes = [PRESET_NONE, PRESET_BOOST]
    _attr_supported_features = (
        ClimateEntityFeature.TARGET_TEMPERATURE
        | ClimateEntityFeature.FAN_MODE
        | ClimateEntityFeature.SWING_MODE
        | ClimateEntityFeature.PRESET_MODE
        | ClimateEntityFeature.TURN_OFF
        | ClimateEntityFeature.TURN_ON
    )

    def __init__(
        self,
        reconciler: MideaReconciler,
        publisher: MideaStatePublisher,
        device: MideaDevice,
    ) -> None:
        """Initialize the Midea climate entity.

        Args:
            reconciler: Reconciler applying user changes to the appliance.
            publisher: Publisher delivering appliance state.
            device: Configured appliance.

        """
        self._reconciler = reconciler
        self._publisher = publisher
        self._device = device
        self._attr_unique_id = device.id
        self._attr_device_info = build_device_info(device)

        self._attr_hvac_mode = HVACMode.OFF
        self._attr_target_temperature = 24.0
        self._attr_current_temperature = None
        self._attr_fan_mode = FAN_AUTO
        self._attr_swing_mode = SWING_OFF
        self._attr_preset_mode = PRESET_NONE
        self._received_update = False
        self._listener_unsubs: list[CALLBACK_TYPE] = []

    async def async_added_to_hass(self) -> None:
        """Subscribe to published state and restore the last known state."""
        await super().async_added_to_hass()

        handlers = {
            CONTROL_POWER: self._handle_power,
            CONTROL_MODE: self._handle_mode,
            CONTROL_TARGET_TEMPERATURE: self._handle_target_temperature,
            CONTROL_FAN_SPEED: self._handle_fan_speed,
            CONTROL_SWING_MODE: self._handle_swing_mode,
            CONTROL_BOOST: self._handle_boost,
            READING_INDOOR_TEMPERATURE: self._handle_indoor_temperature,
        }
        self._listener_unsubs = [
            self._publisher.async_add_listener(control, handler)
            for control, handler in handlers.items()
        ]

        if self._received_update:
            return

        last_state = await self.async_get_last_state()
        # A publish during the await is newer than anything restored
        if last_state is not None and not self._received_update:
            try:
                self._attr_hvac_mode = HVACMode(last_state.state)
            except ValueError:
                self._attr_hvac_mode = HVACMode.OFF
            attributes = last_state.attributes
            self._attr_target_temperature = attributes.get(
                ATTR_TEMPERATURE, self._attr_target_temperature
            )
            self._attr_fan_mode = attributes.get("fan_mode", self._attr_fan_mode)
            self._attr_swing_mode = attributes.get(
                "swing_mode", self._attr_swing_mode
            )
            self._attr_preset_mode = attributes.get(
                "preset_mode", self._attr_preset_mode
            )
            _LOGGER.debug("Restored state for %s", self._device.name)

    async def async_will_remove_from_hass(self) -> None:
        """Unsubscribe from published state."""
        await super().async_will_remove_from_hass()

        for unsub in self._listener_unsubs:
            unsub()
        self._listener_unsubs = []

    def _handle_power(self, power_on: bool) -> None:
        if not power_on:
            self._attr_hvac_mode = HVACMode.OFF
        self._async_write_update()

    def _handle_mode(self, mode: str) -> None:
        self._attr_hvac_mode = HVACMode(mode)
        self._async_write_update()

    def _handle_target_temperature(self, temperature: float) -> None:
        self._attr_target_temperature = temperature
        self._async_write_update()

    def _handle_fan_speed(self, fan_speed: str) -> None:
        self._attr_fan_mode = fan_speed
        self._async_write_update()

    def _handle_swing_mode(self, swing_mode: str) -> None:
        self._attr_swing_mode = swing_mode
        self._async_write_update()

    def _handle_boost(self, boost: bool) -> None:
        self._attr_preset_mode = PRESET_BOOST if boost else PRESET_NONE
        self._async_write_update()

    def _handle_indoor_temperature(self, temperature: float | None) -> None:
        self._attr_current_temperature = temperature
        self._async_write_update()

    def _async_write_update(self) -> None:
        self._received_update = True
        self.async_write_ha_state()

    async def async_submit_control_change(self, control: str, value: Any) -> None:  # noqa: ANN401
        """Apply one control change, reporting failures to the caller.

        Raises:
            ServiceValidationError: If the value is not valid for the control.
            HomeAssistantError: If the appliance could not be updated.

        """
        try:
            await self._reconciler.async_apply_change(ControlChange(control, value))
        except MideaValidationError as err:
            raise ServiceValidationError(str(err)) from err
        except MideaCommunicationError as err:
            _LOGGER.warning(
                "Failed to set %s on %s: %s", control, self._device.name, err
            )
            error_msg = f"Failed to set {control} on {self._device.name}: {err}"
            raise HomeAssistantError(error_msg) from err

    async def async_set_hvac_mode(self, hvac_mode: HVACMode) -> None:
        """Set the HVAC mode."""
        await self.async_submit_control_change(CONTROL_MODE, hvac_mode)

    async def async_set_temperature(self, **kwargs: Any) -> None:  # noqa: ANN401
        """Set the target temperature, optionally together with the HVAC mode."""
        if (hvac_mode := kwargs.get(ATTR_HVAC_MODE)) is not None:
            await self.async_set_hvac_mode(hvac_mode)

        temperature = kwargs.get(ATTR_TEMPERATURE)
        if temperature is None:
            return
        await self.async_submit_control_change(CONTROL_TARGET_TEMPERATURE, temperature)

    async def async_set_fan_mode(self, fan_mode: str) -> None:
        """Set the fan speed."""
        await self.async_submit_control_change(CONTROL_FAN_SPEED, fan_mode)

    async def async_set_swing_mode(self, swing_mode: str) -> None:
        """Set the swing mode."""
        await self.async_submit_control_change(CONTROL_SWING_MODE, swing_mode)

    async def async_set_preset_mode(self, preset_mode: str) -> None:
        """Switch boost on or off through the preset mode."""
        await self.async_submit_control_change(
            CONTROL_BOOST, preset_mode == PRESET_BOOST
        )

    async def async_turn_on(self) -> None:
        """Turn the appliance on in its last operational mode."""
        await self.async_submit_control_change(CONTROL_POWER, True)  # noqa: FBT003

    async def async_turn_off(self) -> None:
        """Turn the appliance off."""
        await self.async_submit_control_change(CONTROL_POWER, False)  # noqa: FBT003
