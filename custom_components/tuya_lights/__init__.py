from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryAuthFailed, ConfigEntryNotReady
from homeassistant.helpers import llm

from . import api
from .api import create_session_client
from .const import (
    CONF_ACCESS_KEY,
    CONF_BASE_URL,
    CONF_SECRET_KEY,
    DEFAULT_BASE_URL,
    DOMAIN,
)
from .coordinator import TuyaDeviceCoordinator
from .llm_api import TuyaLightsAPI
from .models import TuyaCredentials
from .rooms import build_device_table

_LOGGER = logging.getLogger(__name__)

PLATFORMS = [Platform.LIGHT]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Setting up Tuya Cloud Lights integration for entry %s", entry.entry_id)

    if CONF_ACCESS_KEY not in entry.data or CONF_SECRET_KEY not in entry.data:
        _LOGGER.error("Missing credentials in configuration for entry %s", entry.entry_id)
        return False

    credentials = TuyaCredentials(
        access_key=entry.data[CONF_ACCESS_KEY],
        secret_key=entry.data[CONF_SECRET_KEY],
        base_url=entry.data.get(CONF_BASE_URL, DEFAULT_BASE_URL),
    )
    devices = build_device_table(entry.data)
    session = create_session_client(hass)

    try:
        _LOGGER.debug("Validating Tuya credentials")
        await api.async_get_token(session, credentials)
    except api.TuyaApiAuthError as err:
        error_msg = f"Authentication failed for entry {entry.entry_id}: {err}"
        raise ConfigEntryAuthFailed(error_msg) from err
    except api.TuyaApiClientError as err:
        error_msg = f"Tuya API unavailable for entry {entry.entry_id}: {err}"
        raise ConfigEntryNotReady(error_msg) from err

    device_coordinator = TuyaDeviceCoordinator(
        hass, session, credentials, list(devices.values()), config_entry=entry
    )
    await device_coordinator.async_config_entry_first_refresh()

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        "session": session,
        "credentials": credentials,
        "devices": devices,
        "device_coordinator": device_coordinator,
    }
    _LOGGER.debug("Stored data for entry %s: %d devices", entry.entry_id, len(devices))

    entry.async_on_unload(
        llm.async_register_api(
            hass,
            TuyaLightsAPI(hass, entry.entry_id, session, credentials, devices),
        )
    )

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    _LOGGER.info(
        "Successfully setup Tuya Cloud Lights integration for entry %s", entry.entry_id
    )
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Unloading Tuya Cloud Lights integration for entry %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        if DOMAIN in hass.data and entry.entry_id in hass.data[DOMAIN]:
            hass.data[DOMAIN].pop(entry.entry_id)
            _LOGGER.debug("Cleaned up data for entry %s", entry.entry_id)
        _LOGGER.info(
            "Successfully unloaded Tuya Cloud Lights integration for entry %s",
            entry.entry_id,
        )
    else:
        _LOGGER.warning("Failed to unload some platforms for entry %s", entry.entry_id)

    return unload_ok
