"""Tests for the Tuya device coordinator."""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest
from homeassistant.exceptions import ConfigEntryAuthFailed
from homeassistant.helpers.update_coordinator import UpdateFailed

from custom_components.tuya_lights import api
from custom_components.tuya_lights.coordinator import (
    TuyaDeviceCoordinator,
    async_fetch_device_statuses,
)
from custom_components.tuya_lights.models import (
    HsvColor,
    TuyaCredentials,
    TuyaDeviceStatus,
)

DEVICE_IDS = ["device1", "device2"]


@pytest.fixture
def mock_hass() -> Mock:
    """Create a mock Home Assistant instance."""
    return Mock()


@pytest.fixture
def mock_session() -> Mock:
    """Create a mock HTTP session."""
    return Mock(spec=httpx.AsyncClient)


@pytest.fixture
def coordinator(
    mock_hass: Mock,
    mock_session: Mock,
    credentials: TuyaCredentials,
) -> TuyaDeviceCoordinator:
    """Create a TuyaDeviceCoordinator for testing."""
    return TuyaDeviceCoordinator(
        mock_hass, mock_session, credentials, DEVICE_IDS, config_entry=Mock()
    )


class TestAsyncFetchDeviceStatuses:
    """Tests for async_fetch_device_statuses function."""

    @pytest.mark.asyncio
    async def test_fetch_returns_status_per_device(
        self,
        mock_session: Mock,
        credentials: TuyaCredentials,
    ) -> None:
        """Test that every device status is returned keyed by device id."""
        statuses = {
            "device1": TuyaDeviceStatus(on_off=True),
            "device2": TuyaDeviceStatus(color=HsvColor(h=1, s=2, v=3)),
        }

        async def fake_status(
            _session: Mock, _credentials: TuyaCredentials, device_id: str
        ) -> TuyaDeviceStatus:
            return statuses[device_id]

        with patch(
            "custom_components.tuya_lights.coordinator.api.async_get_device_status",
            side_effect=fake_status,
        ) as mock_get_status:
            result = await async_fetch_device_statuses(
                mock_session, credentials, DEVICE_IDS
            )

        assert result == statuses
        assert mock_get_status.call_count == len(DEVICE_IDS)

    @pytest.mark.asyncio
    async def test_fetch_propagates_errors(
        self,
        mock_session: Mock,
        credentials: TuyaCredentials,
    ) -> None:
        """Test that a failing device read fails the whole fetch."""
        with (
            patch(
                "custom_components.tuya_lights.coordinator.api.async_get_device_status",
                side_effect=api.TuyaApiHttpError(500),
            ),
            pytest.raises(api.TuyaApiHttpError),
        ):
            await async_fetch_device_statuses(mock_session, credentials, DEVICE_IDS)


class TestTuyaDeviceCoordinator:
    """Tests for TuyaDeviceCoordinator."""

    def test_init_sets_session_and_interval(
        self,
        coordinator: TuyaDeviceCoordinator,
        mock_session: Mock,
        credentials: TuyaCredentials,
    ) -> None:
        """Test that init stores the session, credentials and poll interval."""
        assert coordinator.session == mock_session
        assert coordinator.credentials == credentials
        assert coordinator.update_interval == timedelta(seconds=30)
        assert coordinator.data == {}

    @pytest.mark.asyncio
    async def test_update_returns_empty_without_devices(
        self,
        mock_hass: Mock,
        mock_session: Mock,
        credentials: TuyaCredentials,
    ) -> None:
        """Test that no configured devices means no API calls."""
        coordinator = TuyaDeviceCoordinator(
            mock_hass, mock_session, credentials, [], config_entry=Mock()
        )
        with patch(
            "custom_components.tuya_lights.coordinator.async_fetch_device_statuses",
            new=AsyncMock(),
        ) as mock_fetch:
            result = await coordinator._async_update_data()
        assert result == {}
        mock_fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_returns_statuses(
        self,
        coordinator: TuyaDeviceCoordinator,
    ) -> None:
        """Test that polled statuses are returned as coordinator data."""
        statuses = {"device1": TuyaDeviceStatus(on_off=False)}
        with patch(
            "custom_components.tuya_lights.coordinator.async_fetch_device_statuses",
            new=AsyncMock(return_value=statuses),
        ):
            result = await coordinator._async_update_data()
        assert result == statuses

    @pytest.mark.asyncio
    async def test_update_raises_auth_failed_on_auth_error(
        self,
        coordinator: TuyaDeviceCoordinator,
    ) -> None:
        """Test that token refusal triggers re-authentication."""
        with (
            patch(
                "custom_components.tuya_lights.coordinator.async_fetch_device_statuses",
                new=AsyncMock(side_effect=api.TuyaApiAuthError("sign invalid")),
            ),
            pytest.raises(ConfigEntryAuthFailed, match="sign invalid"),
        ):
            await coordinator._async_update_data()

    @pytest.mark.asyncio
    async def test_update_raises_update_failed_on_client_error(
        self,
        coordinator: TuyaDeviceCoordinator,
    ) -> None:
        """Test that other API errors raise UpdateFailed."""
        with (
            patch(
                "custom_components.tuya_lights.coordinator.async_fetch_device_statuses",
                new=AsyncMock(side_effect=api.TuyaApiError(1106, "permission deny")),
            ),
            pytest.raises(UpdateFailed, match="permission deny"),
        ):
            await coordinator._async_update_data()
