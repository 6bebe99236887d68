"""Device link for Midea air conditioners.

This module provides the thin adapter that reads and writes the full
appliance state over the device's local JSON endpoint. Every failure,
whether transport, HTTP or payload related, is surfaced as a
MideaCommunicationError so callers only ever handle one error kind.
"""

import logging
from typing import Any

import httpx
from homeassistant.core import HomeAssistant
from homeassistant.helpers.httpx_client import create_async_httpx_client

from .const import DEFAULT_TIMEOUT
from .models import DeviceStateSnapshot, FanSpeed, OperationalMode, SwingMode

_LOGGER = logging.getLogger(__name__)

# HTTP status codes
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403

# API status codes signalling an expired or rejected token
AUTH_API_STATUSES = (99, 103)

KEY_POWER_ON = "powerOn"
KEY_OPERATIONAL_MODE = "operationalMode"
KEY_TARGET_TEMPERATURE = "targetTemperature"
KEY_INDOOR_TEMPERATURE = "indoorTemperature"
KEY_OUTDOOR_TEMPERATURE = "outdoorTemperature"
KEY_TURBO_MODE = "turboMode"
KEY_FAN_SPEED = "fanSpeed"
KEY_SWING_MODE = "swingMode"


class MideaCommunicationError(Exception):
    """Exception raised when the appliance cannot be reached or answers badly."""


class MideaAuthError(MideaCommunicationError):
    """Exception raised when the appliance rejects the configured token."""


def create_headers(token: str | None = None) -> dict[str, str]:
    """Create HTTP headers for device requests.

    Args:
        token: Optional device token to include in headers.

    Returns:
        Dictionary containing HTTP headers for device requests.

    """
    headers = {
        "content-type": "application/json",
        "accept": "application/json",
    }
    if token:
        headers["authorization"] = f"Bearer {token}"
    return headers


def is_http_error(status: int) -> bool:
    """Check if HTTP status code indicates an error."""
    return status >= HTTP_BAD_REQUEST


def is_auth_error(status: int) -> bool:
    """Check if HTTP status code indicates authentication error."""
    return status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN)


def is_api_error(data: dict[str, Any]) -> bool:
    """Check if API response indicates an error."""
    return data.get("status", 0) != 0


def is_auth_api_error(data: dict[str, Any]) -> bool:
    """Check if API response indicates authentication error."""
    return data.get("status", 0) in AUTH_API_STATUSES


def validate_response(response: httpx.Response) -> dict[str, Any]:
    """Validate HTTP response and return parsed JSON data.

    Args:
        response: HTTP response object to validate.

    Returns:
        Parsed JSON data from response.

    Raises:
        MideaAuthError: If authentication error is detected.
        MideaCommunicationError: If the response is an error or malformed.

    """
    _validate_http_status(response)
    try:
        data = response.json()
    except ValueError as err:
        error_msg = f"Malformed response: {err}"
        raise MideaCommunicationError(error_msg) from err
    if not isinstance(data, dict):
        error_msg = "Malformed response: expected a JSON object"
        raise MideaCommunicationError(error_msg)
    _validate_api_status(data)
    return data


def _validate_http_status(response: httpx.Response) -> None:
    if not is_http_error(response.status_code):
        return

    if is_auth_error(response.status_code):
        auth_error = "Authentication error"
        raise MideaAuthError(auth_error)

    client_error = f"Request failed: {response.status_code}"
    raise MideaCommunicationError(client_error)


def _validate_api_status(data: dict[str, Any]) -> None:
    if not is_api_error(data):
        return

    error_message = data.get("errorMessage", "Unknown API error")

    if is_auth_api_error(data):
        raise MideaAuthError(error_message)

    raise MideaCommunicationError(error_message)


def snapshot_from_payload(payload: dict[str, Any]) -> DeviceStateSnapshot:
    """Build a snapshot from a state payload.

    Every key must be present; only the operational mode and the two measured
    temperatures may be null.

    Raises:
        MideaCommunicationError: If the payload is incomplete or ill-typed.

    """
    try:
        mode = payload[KEY_OPERATIONAL_MODE]
        return DeviceStateSnapshot(
            power_on=_as_bool(payload[KEY_POWER_ON]),
            operational_mode=OperationalMode(mode) if mode is not None else None,
            target_temperature=_as_float(payload[KEY_TARGET_TEMPERATURE]),
            indoor_temperature=_as_optional_float(payload[KEY_INDOOR_TEMPERATURE]),
            outdoor_temperature=_as_optional_float(payload[KEY_OUTDOOR_TEMPERATURE]),
            turbo_mode=_as_bool(payload[KEY_TURBO_MODE]),
            fan_speed=FanSpeed(payload[KEY_FAN_SPEED]),
            swing_mode=SwingMode(payload[KEY_SWING_MODE]),
        )
    except (KeyError, TypeError, ValueError) as err:
        error_msg = f"Malformed state payload: {err!r}"
        raise MideaCommunicationError(error_msg) from err


def snapshot_to_payload(snapshot: DeviceStateSnapshot) -> dict[str, Any]:
    """Serialize a snapshot into a state payload."""
    return {
        KEY_POWER_ON: snapshot.power_on,
        KEY_OPERATIONAL_MODE: (
            int(snapshot.operational_mode)
            if snapshot.operational_mode is not None
            else None
        ),
        KEY_TARGET_TEMPERATURE: snapshot.target_temperature,
        KEY_INDOOR_TEMPERATURE: snapshot.indoor_temperature,
        KEY_OUTDOOR_TEMPERATURE: snapshot.outdoor_temperature,
        KEY_TURBO_MODE: snapshot.turbo_mode,
        KEY_FAN_SPEED: int(snapshot.fan_speed),
        KEY_SWING_MODE: int(snapshot.swing_mode),
    }


def extract_snapshot(data: dict[str, Any]) -> DeviceStateSnapshot:
    """Extract the state snapshot from a validated API response."""
    body = data.get("body")
    state = body.get("state") if isinstance(body, dict) else None
    if not isinstance(state, dict):
        error_msg = "Malformed response: missing state"
        raise MideaCommunicationError(error_msg)
    return snapshot_from_payload(state)


def _as_bool(value: Any) -> bool:  # noqa: ANN401
    if not isinstance(value, bool):
        error_msg = f"expected boolean, got {value!r}"
        raise TypeError(error_msg)
    return value


def _as_float(value: Any) -> float:  # noqa: ANN401
    if isinstance(value, bool) or not isinstance(value, int | float):
        error_msg = f"expected number, got {value!r}"
        raise TypeError(error_msg)
    return float(value)


def _as_optional_float(value: Any) -> float | None:  # noqa: ANN401
    return _as_float(value) if value is not None else None


def create_session_client(hass: HomeAssistant) -> httpx.AsyncClient:
    """Create HTTP client for device requests.

    Requests are not retried here; a failed poll is simply repeated on the
    next reconciliation cycle.

    Args:
        hass: Home Assistant instance.

    Returns:
        Configured httpx AsyncClient.

    """
    return create_async_httpx_client(hass, timeout=DEFAULT_TIMEOUT)


class MideaDeviceLink:
    """Reads and writes the full appliance state."""

    def __init__(
        self,
        session: httpx.AsyncClient,
        host: str,
        port: int,
        device_id: str,
        token: str,
    ) -> None:
        """Initialize the device link.

        Args:
            session: HTTP client session.
            host: Appliance host name or address.
            port: Appliance HTTP port.
            device_id: Appliance identifier.
            token: Device token used for authorization.

        """
        self._session = session
        self._device_id = device_id
        self._token = token
        self._url = f"http://{host}:{port}/api/devices/{device_id}/state"

    @property
    def url(self) -> str:
        """Return the state endpoint URL."""
        return self._url

    async def async_fetch_state(self) -> DeviceStateSnapshot:
        """Fetch the current full state from the appliance.

        Raises:
            MideaCommunicationError: If the request fails or the reply is invalid.

        """
        _LOGGER.debug("Fetching state of device %s", self._device_id)
        response = await self._async_request("GET")
        return extract_snapshot(validate_response(response))

    async def async_push_state(
        self, snapshot: DeviceStateSnapshot
    ) -> DeviceStateSnapshot:
        """Push a full state to the appliance.

        Returns:
            The state the appliance confirmed, which may differ from the one sent.

        Raises:
            MideaCommunicationError: If the request fails or the reply is invalid.

        """
        payload = {"state": snapshot_to_payload(snapshot)}
        _LOGGER.debug("Pushing state to device %s: %s", self._device_id, payload)
        response = await self._async_request("POST", json=payload)
        return extract_snapshot(validate_response(response))

    async def _async_request(self, method: str, **kwargs: Any) -> httpx.Response:  # noqa: ANN401
        try:
            return await self._session.request(
                method,
                self._url,
                headers=create_headers(self._token),
                **kwargs,
            )
        except httpx.TimeoutException as err:
            error_msg = f"Timeout talking to device {self._device_id}: {err}"
            raise MideaCommunicationError(error_msg) from err
        except httpx.RequestError as err:
            error_msg = f"Connection error talking to device {self._device_id}: {err}"
            raise MideaCommunicationError(error_msg) from err
