"""Constants for Midea AC integration.

This module contains all the constants used throughout the integration,
including configuration keys, control names, and mapping dictionaries
between appliance-native values and Home Assistant symbolic values.
"""

from homeassistant.components.climate import (
    HVACMode,
)
from homeassistant.components.climate.const import (
    FAN_AUTO,
    FAN_HIGH,
    FAN_LOW,
    FAN_MEDIUM,
    SWING_BOTH,
    SWING_HORIZONTAL,
    SWING_OFF,
    SWING_VERTICAL,
)

from .models import FanSpeed, OperationalMode, SwingMode

DOMAIN = "midea_ac"
MANUFACTURER = "Midea"

DEFAULT_PORT = 80
DEFAULT_POLL_INTERVAL = 30  # Seconds between reconciliation cycles
DEFAULT_TIMEOUT = 10.0  # Seconds per device request

MIN_TEMP = 16.0
MAX_TEMP = 30.0

CONF_DEVICE_ID = "device_id"
CONF_POLL_INTERVAL = "polling_interval"

ERROR_INVALID_AUTH = "invalid_auth"
ERROR_CANNOT_CONNECT = "cannot_connect"
ERROR_UNKNOWN = "unknown_error"

# User-facing controls
CONTROL_POWER = "power"
CONTROL_TARGET_TEMPERATURE = "target_temperature"
CONTROL_MODE = "mode"
CONTROL_BOOST = "boost"
CONTROL_FAN_SPEED = "fan_speed"
CONTROL_SWING_MODE = "swing_mode"
CONTROLS = (
    CONTROL_POWER,
    CONTROL_TARGET_TEMPERATURE,
    CONTROL_MODE,
    CONTROL_BOOST,
    CONTROL_FAN_SPEED,
    CONTROL_SWING_MODE,
)

# Read-only measurements published alongside the controls
READING_INDOOR_TEMPERATURE = "indoor_temperature"
READING_OUTDOOR_TEMPERATURE = "outdoor_temperature"

FAN_FIXED = "fixed"
FAN_SILENT = "silent"

MODE_MAP = {
    HVACMode.AUTO: OperationalMode.AUTO,
    HVACMode.COOL: OperationalMode.COOL,
    HVACMode.HEAT: OperationalMode.HEAT,
}
MODE_REVERSE_MAP = {value: key for key, value in MODE_MAP.items()}
FAN_SPEED_MAP = {
    FAN_AUTO: FanSpeed.AUTO,
    FAN_FIXED: FanSpeed.FIXED,
    FAN_SILENT: FanSpeed.SILENT,
    FAN_LOW: FanSpeed.LOW,
    FAN_MEDIUM: FanSpeed.MEDIUM,
    FAN_HIGH: FanSpeed.HIGH,
}
FAN_SPEED_REVERSE_MAP = {value: key for key, value in FAN_SPEED_MAP.items()}
SWING_MODE_MAP = {
    SWING_OFF: SwingMode.OFF,
    SWING_VERTICAL: SwingMode.VERTICAL,
    SWING_HORIZONTAL: SwingMode.HORIZONTAL,
    SWING_BOTH: SwingMode.BOTH,
}
SWING_MODE_REVERSE_MAP = {value: key for key, value in SWING_MODE_MAP.items()}
