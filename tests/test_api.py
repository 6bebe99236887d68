"""Tests for the Midea AC device link."""

from dataclasses import replace
from typing import Any
from unittest.mock import Mock, patch

import httpx
import pytest
from pytest_httpx import HTTPXMock

from custom_components.midea_ac import api
from custom_components.midea_ac.api import (
    MideaAuthError,
    MideaCommunicationError,
    MideaDeviceLink,
)
from custom_components.midea_ac.const import DEFAULT_TIMEOUT
from custom_components.midea_ac.models import (
    DeviceStateSnapshot,
    FanSpeed,
    OperationalMode,
    SwingMode,
)

HOST = "192.168.1.50"
PORT = 8080
DEVICE_ID = "150633093373701"
TOKEN = "device-token"
STATE_URL = f"http://{HOST}:{PORT}/api/devices/{DEVICE_ID}/state"


@pytest.fixture
def link_factory() -> Any:
    """Create device links bound to a given session."""

    def _create(session: httpx.AsyncClient) -> MideaDeviceLink:
        return MideaDeviceLink(session, HOST, PORT, DEVICE_ID, TOKEN)

    return _create


class TestMideaErrors:
    """Tests for the exception hierarchy."""

    def test_auth_error_is_communication_error(self) -> None:
        """Test that MideaAuthError is a MideaCommunicationError."""
        error = MideaAuthError("expired")
        assert isinstance(error, MideaCommunicationError)
        assert isinstance(error, Exception)


class TestCreateHeaders:
    """Tests for create_headers function."""

    def test_create_headers_returns_base_headers(self) -> None:
        """Test that create_headers returns headers without authorization."""
        headers = api.create_headers()
        assert headers["content-type"] == "application/json"
        assert "authorization" not in headers

    def test_create_headers_includes_token_when_provided(self) -> None:
        """Test that create_headers includes the bearer token."""
        headers = api.create_headers(TOKEN)
        assert headers["authorization"] == f"Bearer {TOKEN}"


class TestValidateResponse:
    """Tests for validate_response function."""

    def test_validate_response_returns_data_for_valid_response(self) -> None:
        """Test that validate_response returns parsed data."""
        response = httpx.Response(200, json={"status": 0, "body": {}})
        assert api.validate_response(response) == {"status": 0, "body": {}}

    @pytest.mark.parametrize("status_code", [401, 403])
    def test_validate_response_raises_auth_error_on_http_auth_status(
        self, status_code: int
    ) -> None:
        """Test that HTTP 401 and 403 raise MideaAuthError."""
        with pytest.raises(MideaAuthError):
            api.validate_response(httpx.Response(status_code))

    def test_validate_response_raises_communication_error_on_http_500(self) -> None:
        """Test that HTTP 500 raises MideaCommunicationError."""
        with pytest.raises(MideaCommunicationError, match="500"):
            api.validate_response(httpx.Response(500))

    def test_validate_response_raises_on_non_json_body(self) -> None:
        """Test that a non-JSON body is reported as malformed."""
        response = httpx.Response(200, content=b"not json")
        with pytest.raises(MideaCommunicationError, match="Malformed"):
            api.validate_response(response)

    def test_validate_response_raises_on_non_object_body(self) -> None:
        """Test that a JSON list is reported as malformed."""
        with pytest.raises(MideaCommunicationError, match="Malformed"):
            api.validate_response(httpx.Response(200, json=[1, 2]))

    @pytest.mark.parametrize("status", [99, 103])
    def test_validate_response_raises_auth_error_on_api_auth_status(
        self, status: int
    ) -> None:
        """Test that API auth statuses raise MideaAuthError."""
        response = httpx.Response(
            200, json={"status": status, "errorMessage": "Token expired"}
        )
        with pytest.raises(MideaAuthError, match="Token expired"):
            api.validate_response(response)

    def test_validate_response_raises_on_api_error_with_default_message(self) -> None:
        """Test that other API statuses raise with the default message."""
        response = httpx.Response(200, json={"status": 5})
        with pytest.raises(MideaCommunicationError, match="Unknown API error"):
            api.validate_response(response)


class TestSnapshotPayload:
    """Tests for snapshot payload conversion."""

    def test_snapshot_from_payload(
        self,
        sample_state_payload: dict[str, Any],
        base_snapshot: DeviceStateSnapshot,
    ) -> None:
        """Test that a complete payload becomes a snapshot."""
        assert api.snapshot_from_payload(sample_state_payload) == base_snapshot

    def test_snapshot_from_payload_accepts_nullable_fields(
        self, sample_state_payload: dict[str, Any]
    ) -> None:
        """Test that mode and measured temperatures may be null."""
        sample_state_payload.update(
            operationalMode=None, indoorTemperature=None, outdoorTemperature=None
        )
        snapshot = api.snapshot_from_payload(sample_state_payload)
        assert snapshot.operational_mode is None
        assert snapshot.indoor_temperature is None
        assert snapshot.outdoor_temperature is None

    @pytest.mark.parametrize(
        "key",
        [
            "powerOn",
            "operationalMode",
            "targetTemperature",
            "indoorTemperature",
            "outdoorTemperature",
            "turboMode",
            "fanSpeed",
            "swingMode",
        ],
    )
    def test_snapshot_from_payload_rejects_partial_state(
        self, sample_state_payload: dict[str, Any], key: str
    ) -> None:
        """Test that every key is required."""
        del sample_state_payload[key]
        with pytest.raises(MideaCommunicationError, match="Malformed"):
            api.snapshot_from_payload(sample_state_payload)

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("powerOn", "yes"),
            ("fanSpeed", 7),
            ("swingMode", None),
            ("operationalMode", 9),
            ("targetTemperature", "warm"),
            ("targetTemperature", "22"),
            ("targetTemperature", True),
            ("indoorTemperature", "25.5"),
            ("outdoorTemperature", False),
        ],
    )
    def test_snapshot_from_payload_rejects_invalid_values(
        self, sample_state_payload: dict[str, Any], key: str, value: object
    ) -> None:
        """Test that ill-typed values are reported as malformed."""
        sample_state_payload[key] = value
        with pytest.raises(MideaCommunicationError, match="Malformed"):
            api.snapshot_from_payload(sample_state_payload)

    def test_snapshot_to_payload(
        self,
        sample_state_payload: dict[str, Any],
        base_snapshot: DeviceStateSnapshot,
    ) -> None:
        """Test that a snapshot serializes to the wire payload."""
        assert api.snapshot_to_payload(base_snapshot) == sample_state_payload

    def test_extract_snapshot_raises_when_state_missing(self) -> None:
        """Test that a response without state is malformed."""
        with pytest.raises(MideaCommunicationError, match="missing state"):
            api.extract_snapshot({"status": 0, "body": {}})

    @pytest.mark.parametrize("body", [None, "x", []])
    def test_extract_snapshot_raises_when_body_not_object(self, body: object) -> None:
        """Test that a body that is not an object is malformed."""
        with pytest.raises(MideaCommunicationError, match="missing state"):
            api.extract_snapshot({"status": 0, "body": body})

    def test_extract_snapshot_raises_when_body_missing(self) -> None:
        """Test that a response without body is malformed."""
        with pytest.raises(MideaCommunicationError, match="missing state"):
            api.extract_snapshot({"status": 0})


class TestCreateSessionClient:
    """Tests for create_session_client function."""

    def test_create_session_client_uses_default_timeout(self) -> None:
        """Test that the Home Assistant client is created with a timeout."""
        mock_hass = Mock()
        with patch(
            "custom_components.midea_ac.api.create_async_httpx_client"
        ) as mock_create:
            result = api.create_session_client(mock_hass)
        mock_create.assert_called_once_with(mock_hass, timeout=DEFAULT_TIMEOUT)
        assert result is mock_create.return_value


class TestMideaDeviceLinkFetch:
    """Tests for MideaDeviceLink.async_fetch_state."""

    def test_url_points_at_device_state(self, link_factory: Any) -> None:
        """Test that the link targets the device state endpoint."""
        assert link_factory(Mock()).url == STATE_URL

    @pytest.mark.asyncio
    async def test_fetch_state_returns_snapshot(
        self,
        httpx_mock: HTTPXMock,
        link_factory: Any,
        sample_state_response: dict[str, Any],
        base_snapshot: DeviceStateSnapshot,
    ) -> None:
        """Test that fetch returns the reported snapshot."""
        httpx_mock.add_response(
            url=STATE_URL,
            method="GET",
            json=sample_state_response,
            match_headers={"authorization": f"Bearer {TOKEN}"},
        )
        async with httpx.AsyncClient() as session:
            snapshot = await link_factory(session).async_fetch_state()
        assert snapshot == base_snapshot

    @pytest.mark.asyncio
    async def test_fetch_state_raises_auth_error_on_http_401(
        self, httpx_mock: HTTPXMock, link_factory: Any
    ) -> None:
        """Test that an expired token surfaces as MideaAuthError."""
        httpx_mock.add_response(url=STATE_URL, method="GET", status_code=401)
        async with httpx.AsyncClient() as session:
            with pytest.raises(MideaAuthError):
                await link_factory(session).async_fetch_state()

    @pytest.mark.asyncio
    async def test_fetch_state_wraps_timeout(
        self, httpx_mock: HTTPXMock, link_factory: Any
    ) -> None:
        """Test that a timeout surfaces as MideaCommunicationError."""
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"), url=STATE_URL)
        async with httpx.AsyncClient() as session:
            with pytest.raises(MideaCommunicationError, match="Timeout"):
                await link_factory(session).async_fetch_state()

    @pytest.mark.asyncio
    async def test_fetch_state_wraps_connection_error(
        self, httpx_mock: HTTPXMock, link_factory: Any
    ) -> None:
        """Test that a connection error surfaces as MideaCommunicationError."""
        httpx_mock.add_exception(httpx.ConnectError("refused"), url=STATE_URL)
        async with httpx.AsyncClient() as session:
            with pytest.raises(MideaCommunicationError, match="Connection error"):
                await link_factory(session).async_fetch_state()

    @pytest.mark.asyncio
    async def test_fetch_state_rejects_short_state(
        self,
        httpx_mock: HTTPXMock,
        link_factory: Any,
        sample_state_response: dict[str, Any],
    ) -> None:
        """Test that a partial state is rejected."""
        del sample_state_response["body"]["state"]["swingMode"]
        httpx_mock.add_response(url=STATE_URL, method="GET", json=sample_state_response)
        async with httpx.AsyncClient() as session:
            with pytest.raises(MideaCommunicationError, match="Malformed"):
                await link_factory(session).async_fetch_state()

    @pytest.mark.asyncio
    async def test_fetch_state_rejects_null_body(
        self, httpx_mock: HTTPXMock, link_factory: Any
    ) -> None:
        """Test that a null body surfaces as MideaCommunicationError."""
        httpx_mock.add_response(
            url=STATE_URL, method="GET", json={"status": 0, "body": None}
        )
        async with httpx.AsyncClient() as session:
            with pytest.raises(MideaCommunicationError, match="missing state"):
                await link_factory(session).async_fetch_state()


class TestMideaDeviceLinkPush:
    """Tests for MideaDeviceLink.async_push_state."""

    @pytest.mark.asyncio
    async def test_push_state_sends_full_state_and_returns_confirmed(
        self,
        httpx_mock: HTTPXMock,
        link_factory: Any,
        sample_state_payload: dict[str, Any],
        base_snapshot: DeviceStateSnapshot,
    ) -> None:
        """Test that push sends the whole snapshot and returns the confirmation."""
        confirmed_payload = {
            **sample_state_payload,
            "operationalMode": int(OperationalMode.HEAT),
            "fanSpeed": int(FanSpeed.LOW),
            "swingMode": int(SwingMode.VERTICAL),
        }
        httpx_mock.add_response(
            url=STATE_URL,
            method="POST",
            json={"status": 0, "body": {"state": confirmed_payload}},
            match_json={"state": sample_state_payload},
        )
        async with httpx.AsyncClient() as session:
            confirmed = await link_factory(session).async_push_state(base_snapshot)

        assert confirmed == replace(
            base_snapshot,
            operational_mode=OperationalMode.HEAT,
            fan_speed=FanSpeed.LOW,
            swing_mode=SwingMode.VERTICAL,
        )

    @pytest.mark.asyncio
    async def test_push_state_raises_on_api_error(
        self,
        httpx_mock: HTTPXMock,
        link_factory: Any,
        base_snapshot: DeviceStateSnapshot,
    ) -> None:
        """Test that an API error surfaces as MideaCommunicationError."""
        httpx_mock.add_response(
            url=STATE_URL,
            method="POST",
            json={"status": 7, "errorMessage": "Device busy"},
        )
        async with httpx.AsyncClient() as session:
            with pytest.raises(MideaCommunicationError, match="Device busy"):
                await link_factory(session).async_push_state(base_snapshot)
