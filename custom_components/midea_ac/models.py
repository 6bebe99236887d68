"""Data models for Midea AC integration."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class OperationalMode(IntEnum):
    """Operational mode as reported by the appliance."""

    AUTO = 1
    COOL = 2
    DRY = 3
    HEAT = 4
    FAN = 5


class FanSpeed(IntEnum):
    """Fan speed as reported by the appliance."""

    SILENT = 20
    LOW = 40
    MEDIUM = 60
    HIGH = 80
    FIXED = 101
    AUTO = 102


class SwingMode(IntEnum):
    """Louver swing mode as reported by the appliance."""

    OFF = 0x0
    HORIZONTAL = 0x3
    VERTICAL = 0xC
    BOTH = 0xF


@dataclass(frozen=True)
class MideaDevice:
    """Represents the configured Midea appliance.

    Attributes:
        id: Appliance identifier.
        name: Human-readable device name.

    """

    id: str
    name: str


@dataclass(frozen=True, slots=True)
class DeviceStateSnapshot:
    """Full operating state of the appliance at one instant."""

    power_on: bool
    operational_mode: OperationalMode | None
    target_temperature: float
    indoor_temperature: float | None
    outdoor_temperature: float | None
    turbo_mode: bool
    fan_speed: FanSpeed
    swing_mode: SwingMode


@dataclass(frozen=True, slots=True)
class ControlChange:
    """A single user-requested change of one control."""

    control: str
    value: Any
