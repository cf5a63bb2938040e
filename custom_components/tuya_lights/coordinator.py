"""Coordinator for Tuya Cloud Lights integration."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from homeassistant.exceptions import ConfigEntryAuthFailed
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import api
from .const import DEFAULT_POLL_INTERVAL, DOMAIN
from .models import TuyaCredentials, TuyaDeviceStatus

if TYPE_CHECKING:
    import httpx
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

_LOGGER = logging.getLogger(__name__)


async def async_fetch_device_statuses(
    session: httpx.AsyncClient,
    credentials: TuyaCredentials,
    device_ids: list[str],
) -> dict[str, TuyaDeviceStatus]:
    """Read the status of every device concurrently.

    Each read pays for its own token; a single failure fails the whole poll.
    """
    statuses = await asyncio.gather(
        *(
            api.async_get_device_status(session, credentials, device_id)
            for device_id in device_ids
        )
    )
    return dict(zip(device_ids, statuses, strict=True))


class TuyaDeviceCoordinator(DataUpdateCoordinator[dict[str, TuyaDeviceStatus]]):
    """Coordinator that polls Tuya light states."""

    def __init__(
        self,
        hass: HomeAssistant,
        session: httpx.AsyncClient,
        credentials: TuyaCredentials,
        device_ids: list[str],
        config_entry: ConfigEntry | None = None,
    ) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name=f"{DOMAIN}_devices",
            update_interval=timedelta(seconds=DEFAULT_POLL_INTERVAL),
        )
        self.session = session
        self.credentials = credentials
        self._device_ids = device_ids
        self.data = {}

    async def _async_update_data(self) -> dict[str, TuyaDeviceStatus]:
        if not self._device_ids:
            _LOGGER.debug("No Tuya devices configured for polling")
            return {}

        try:
            states = await async_fetch_device_statuses(
                self.session, self.credentials, self._device_ids
            )
        except api.TuyaApiAuthError as err:
            error_msg = f"Authentication error while polling devices: {err}"
            raise ConfigEntryAuthFailed(error_msg) from err
        except api.TuyaApiClientError as err:
            error_msg = f"API error while polling devices: {err}"
            raise UpdateFailed(error_msg) from err

        _LOGGER.debug("Polled status for %d devices", len(states))
        return states
