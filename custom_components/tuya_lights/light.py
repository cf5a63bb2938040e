"""Light entities for Tuya Cloud Lights.

This module exposes every configured room light as a Home Assistant light
entity with on/off and HS colour control.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from homeassistant.components.light import (
    ATTR_BRIGHTNESS,
    ATTR_HS_COLOR,
    ColorMode,
    LightEntity,
)
from homeassistant.exceptions import HomeAssistantError

from . import api
from .const import (
    DOMAIN,
    ROOM_NAMES,
    TUYA_HUE_MAX,
    TUYA_SATURATION_MAX,
    TUYA_VALUE_MAX,
)
from .models import HsvColor

if TYPE_CHECKING:
    import httpx
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .coordinator import TuyaDeviceCoordinator
    from .models import TuyaCredentials

_LOGGER = logging.getLogger(__name__)

HA_SATURATION_MAX = 100
HA_BRIGHTNESS_MAX = 255


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up one light entity per configured room."""
    entry_data = hass.data[DOMAIN][entry.entry_id]

    entities = [
        TuyaLightEntity(
            entry_data["session"],
            entry_data["credentials"],
            entry_data["device_coordinator"],
            room,
            device_id,
        )
        for room, device_id in entry_data["devices"].items()
    ]
    async_add_entities(entities)


def tuya_to_ha_color(color: HsvColor) -> tuple[tuple[float, float], int]:
    """Convert a Tuya colour to a Home Assistant (hs_color, brightness) pair."""
    hs_color = (
        float(color.h),
        color.s * HA_SATURATION_MAX / TUYA_SATURATION_MAX,
    )
    brightness = round(color.v * HA_BRIGHTNESS_MAX / TUYA_VALUE_MAX)
    return hs_color, brightness


def ha_to_tuya_color(hs_color: tuple[float, float], brightness: int) -> HsvColor:
    """Convert a Home Assistant hs_color and brightness to a Tuya colour."""
    hue, saturation = hs_color
    tuya_saturation = round(saturation * TUYA_SATURATION_MAX / HA_SATURATION_MAX)
    tuya_value = round(brightness * TUYA_VALUE_MAX / HA_BRIGHTNESS_MAX)
    return HsvColor(
        h=min(round(hue), TUYA_HUE_MAX),
        s=min(tuya_saturation, TUYA_SATURATION_MAX),
        v=min(tuya_value, TUYA_VALUE_MAX),
    )


class TuyaLightEntity(LightEntity):
    """Light entity for a Tuya cloud light bound to a room."""

    _attr_color_mode = ColorMode.HS
    _attr_supported_color_modes = {ColorMode.HS}
    _attr_should_poll = False

    def __init__(  # noqa: PLR0913
        self,
        session: httpx.AsyncClient,
        credentials: TuyaCredentials,
        device_coordinator: TuyaDeviceCoordinator,
        room: str,
        device_id: str,
    ) -> None:
        """Initialize the light entity.

        Args:
            session: HTTP client session for API calls.
            credentials: Project credentials.
            device_coordinator: Coordinator polling device states.
            room: Normalized room name.
            device_id: Tuya device identifier.

        """
        self._session = session
        self._credentials = credentials
        self._device_coordinator = device_coordinator
        self._room = room
        self._device_id = device_id
        self._attr_unique_id = device_id
        self._attr_name = ROOM_NAMES.get(room, room)

        self._attr_is_on = None
        self._attr_hs_color = None
        self._attr_brightness = None
        self._coordinator_listener_unsub = None

    @property
    def available(self) -> bool:
        """Return True when the last poll succeeded."""
        return self._device_coordinator.last_update_success

    async def async_added_to_hass(self) -> None:
        """Subscribe to device coordinator updates."""
        await super().async_added_to_hass()
        self._coordinator_listener_unsub = self._device_coordinator.async_add_listener(
            self._handle_coordinator_update
        )
        self._update_from_coordinator()

    async def async_will_remove_from_hass(self) -> None:
        """Unsubscribe from coordinator updates."""
        await super().async_will_remove_from_hass()

        if self._coordinator_listener_unsub is not None:
            self._coordinator_listener_unsub()
            self._coordinator_listener_unsub = None

    def _handle_coordinator_update(self) -> None:
        """Handle updated data from the coordinator."""
        self._update_from_coordinator()
        self.async_write_ha_state()

    def _update_from_coordinator(self) -> None:
        """Update entity state from coordinator data."""
        status = (self._device_coordinator.data or {}).get(self._device_id)
        if status is None:
            _LOGGER.debug("%s: No device state in coordinator data", self.name)
            return

        if status.on_off is not None:
            self._attr_is_on = status.on_off
        if status.color is not None:
            self._attr_hs_color, self._attr_brightness = tuya_to_ha_color(status.color)

    async def async_turn_on(self, **kwargs: Any) -> None:  # noqa: ANN401
        """Turn the light on, optionally changing its colour."""
        try:
            if not self.is_on:
                await api.async_turn_on_off(
                    self._session, self._credentials, self._device_id, True  # noqa: FBT003
                )
                self._attr_is_on = True

            if ATTR_HS_COLOR in kwargs or ATTR_BRIGHTNESS in kwargs:
                hs_color = kwargs.get(ATTR_HS_COLOR, self.hs_color or (0.0, 0.0))
                brightness = kwargs.get(
                    ATTR_BRIGHTNESS, self.brightness or HA_BRIGHTNESS_MAX
                )
                color = ha_to_tuya_color(hs_color, brightness)
                await api.async_change_color(
                    self._session,
                    self._credentials,
                    self._device_id,
                    color.h,
                    color.s,
                    color.v,
                )
                self._attr_hs_color = hs_color
                self._attr_brightness = brightness
        except api.TuyaApiClientError as err:
            error_msg = f"Failed to turn on {self.name}: {err}"
            raise HomeAssistantError(error_msg) from err

        self.async_write_ha_state()
        await self._device_coordinator.async_request_refresh()

    async def async_turn_off(self, **kwargs: Any) -> None:  # noqa: ANN401, ARG002
        """Turn the light off."""
        try:
            await api.async_turn_on_off(
                self._session, self._credentials, self._device_id, False  # noqa: FBT003
            )
        except api.TuyaApiClientError as err:
            error_msg = f"Failed to turn off {self.name}: {err}"
            raise HomeAssistantError(error_msg) from err

        self._attr_is_on = False
        self.async_write_ha_state()
        await self._device_coordinator.async_request_refresh()
