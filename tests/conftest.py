"""Pytest configuration and fixtures for Midea AC tests."""

from typing import Any

import pytest

from custom_components.midea_ac.models import (
    DeviceStateSnapshot,
    FanSpeed,
    OperationalMode,
    SwingMode,
)


@pytest.fixture
def base_snapshot() -> DeviceStateSnapshot:
    """Fixture providing a powered-on appliance cooling to 22 degrees."""
    return DeviceStateSnapshot(
        power_on=True,
        operational_mode=OperationalMode.COOL,
        target_temperature=22.0,
        indoor_temperature=25.5,
        outdoor_temperature=31.0,
        turbo_mode=False,
        fan_speed=FanSpeed.AUTO,
        swing_mode=SwingMode.OFF,
    )


@pytest.fixture
def powered_off_snapshot() -> DeviceStateSnapshot:
    """Fixture providing a powered-off appliance that never reported a mode."""
    return DeviceStateSnapshot(
        power_on=False,
        operational_mode=None,
        target_temperature=22.0,
        indoor_temperature=24.0,
        outdoor_temperature=None,
        turbo_mode=False,
        fan_speed=FanSpeed.AUTO,
        swing_mode=SwingMode.OFF,
    )


@pytest.fixture
def sample_state_payload() -> dict[str, Any]:
    """Fixture providing the wire payload matching ``base_snapshot``.

    Returns:
        A dictionary representing an appliance state payload.

    """
    return {
        "powerOn": True,
        "operationalMode": 2,
        "targetTemperature": 22.0,
        "indoorTemperature": 25.5,
        "outdoorTemperature": 31.0,
        "turboMode": False,
        "fanSpeed": 102,
        "swingMode": 0,
    }


@pytest.fixture
def sample_state_response(sample_state_payload: dict[str, Any]) -> dict[str, Any]:
    """Fixture providing a successful state API response.

    Args:
        sample_state_payload: State payload fixture.

    Returns:
        A dictionary representing a state API response.

    """
    return {
        "status": 0,
        "body": {
            "state": sample_state_payload,
        },
    }
