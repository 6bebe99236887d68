"""Translation between appliance-native state and user-facing control values.

``decode`` turns a full :class:`DeviceStateSnapshot` into the symbolic values
published for each control, and ``encode`` folds one control change back into
a snapshot so the complete state can be pushed to the appliance.
"""

import logging
from dataclasses import replace
from typing import Any

from homeassistant.components.climate import HVACMode

from .const import (
    CONTROL_BOOST,
    CONTROL_FAN_SPEED,
    CONTROL_MODE,
    CONTROL_POWER,
    CONTROL_SWING_MODE,
    CONTROL_TARGET_TEMPERATURE,
    FAN_SPEED_MAP,
    FAN_SPEED_REVERSE_MAP,
    MAX_TEMP,
    MIN_TEMP,
    MODE_MAP,
    MODE_REVERSE_MAP,
    READING_INDOOR_TEMPERATURE,
    READING_OUTDOOR_TEMPERATURE,
    SWING_MODE_MAP,
    SWING_MODE_REVERSE_MAP,
)
from .models import DeviceStateSnapshot

_LOGGER = logging.getLogger(__name__)


class MideaValidationError(ValueError):
    """Exception raised when a control change cannot be applied to a snapshot."""


def decode(snapshot: DeviceStateSnapshot) -> dict[str, Any]:
    """Decode a snapshot into symbolic control values.

    Args:
        snapshot: Appliance state to decode.

    Returns:
        Mapping of control name to symbolic value. The ``mode`` key is left
        out when the appliance runs a mode that has no symbolic equivalent.

    """
    values: dict[str, Any] = {
        CONTROL_POWER: snapshot.power_on,
        CONTROL_TARGET_TEMPERATURE: float(snapshot.target_temperature),
        CONTROL_BOOST: snapshot.turbo_mode,
        CONTROL_FAN_SPEED: FAN_SPEED_REVERSE_MAP[snapshot.fan_speed],
        CONTROL_SWING_MODE: SWING_MODE_REVERSE_MAP[snapshot.swing_mode],
        READING_INDOOR_TEMPERATURE: snapshot.indoor_temperature,
        READING_OUTDOOR_TEMPERATURE: snapshot.outdoor_temperature,
    }

    if not snapshot.power_on:
        values[CONTROL_MODE] = HVACMode.OFF
    elif snapshot.operational_mode in MODE_REVERSE_MAP:
        values[CONTROL_MODE] = MODE_REVERSE_MAP[snapshot.operational_mode]
    else:
        mode_name = (
            snapshot.operational_mode.name.lower()
            if snapshot.operational_mode is not None
            else "unknown"
        )
        _LOGGER.warning("Thermostat mode '%s' not supported", mode_name)

    return values


def encode(control: str, value: Any, snapshot: DeviceStateSnapshot) -> DeviceStateSnapshot:  # noqa: ANN401
    """Apply one control change to a snapshot.

    Args:
        control: Name of the control being changed.
        value: Symbolic target value for the control.
        snapshot: Current full appliance state.

    Returns:
        New snapshot with only the fields governed by ``control`` changed.

    Raises:
        MideaValidationError: If the control or value is not recognized.

    """
    if control == CONTROL_POWER:
        return replace(snapshot, power_on=_require_bool(control, value))

    if control == CONTROL_BOOST:
        return replace(snapshot, turbo_mode=_require_bool(control, value))

    if control == CONTROL_TARGET_TEMPERATURE:
        return replace(snapshot, target_temperature=_require_temperature(value))

    if control == CONTROL_MODE:
        if value == HVACMode.OFF:
            return replace(snapshot, power_on=False)
        mode = _lookup(MODE_MAP, control, value)
        return replace(snapshot, power_on=True, operational_mode=mode)

    if control == CONTROL_FAN_SPEED:
        return replace(snapshot, fan_speed=_lookup(FAN_SPEED_MAP, control, value))

    if control == CONTROL_SWING_MODE:
        return replace(snapshot, swing_mode=_lookup(SWING_MODE_MAP, control, value))

    error_msg = f"Unknown control: {control}"
    raise MideaValidationError(error_msg)


def _lookup(mapping: dict[str, Any], control: str, value: Any) -> Any:  # noqa: ANN401
    if not isinstance(value, str) or value not in mapping:
        error_msg = f"Unsupported value for {control}: {value!r}"
        raise MideaValidationError(error_msg)
    return mapping[value]


def _require_bool(control: str, value: Any) -> bool:  # noqa: ANN401
    if not isinstance(value, bool):
        error_msg = f"Expected a boolean for {control}, got {value!r}"
        raise MideaValidationError(error_msg)
    return value


def _require_temperature(value: Any) -> float:  # noqa: ANN401
    if isinstance(value, bool) or not isinstance(value, int | float):
        error_msg = f"Expected a number for target temperature, got {value!r}"
        raise MideaValidationError(error_msg)
    if not MIN_TEMP <= value <= MAX_TEMP:
        error_msg = (
            f"Target temperature {value} outside range {MIN_TEMP}-{MAX_TEMP}"
        )
        raise MideaValidationError(error_msg)
    return float(value)
