"""LLM tools for Tuya Cloud Lights.

Registers an LLM API with Home Assistant so that a conversation agent can
resolve rooms to devices, read light status, switch lights and change
their colour.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import TYPE_CHECKING

import voluptuous as vol
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers import llm

from . import api
from .const import (
    LLM_API_ID,
    LLM_API_NAME,
    LLM_API_PROMPT,
    TUYA_HUE_MAX,
    TUYA_SATURATION_MAX,
    TUYA_VALUE_MAX,
)
from .rooms import normalize_room_name, resolve_device_id

if TYPE_CHECKING:
    import httpx
    from homeassistant.core import HomeAssistant
    from homeassistant.util.json import JsonObjectType

    from .models import TuyaCredentials

_LOGGER = logging.getLogger(__name__)


class TuyaTool(llm.Tool):
    """Base class for tools that call the Tuya cloud."""

    def __init__(
        self,
        session: httpx.AsyncClient,
        credentials: TuyaCredentials,
    ) -> None:
        """Initialize the tool with the session and credentials to use."""
        self._session = session
        self._credentials = credentials


class GetDeviceIdTool(llm.Tool):
    """Resolve a room name to the id of its light."""

    name = "get_device_id"
    description = "Get the ID of the device"
    parameters = vol.Schema({vol.Required("room_name"): cv.string})

    def __init__(self, device_table: dict[str, str]) -> None:
        """Initialize the tool with the room -> device id table."""
        self._device_table = device_table

    async def async_call(
        self,
        hass: HomeAssistant,  # noqa: ARG002
        tool_input: llm.ToolInput,
        llm_context: llm.LLMContext,  # noqa: ARG002
    ) -> JsonObjectType:
        """Look up the device id of a room."""
        room_name = tool_input.tool_args["room_name"]
        device_id = resolve_device_id(room_name, self._device_table)
        room = normalize_room_name(room_name)
        _LOGGER.debug("Room: %s, DeviceID: %s", room, device_id)

        if device_id is None:
            _LOGGER.warning("No light configured for room %r", room_name)
            known = ", ".join(sorted(self._device_table)) or "none"
            error_msg = f"Unknown room '{room_name}'. Known rooms: {known}"
            raise HomeAssistantError(error_msg)

        return {"room": room, "device_id": device_id}


class TurnOnOffTool(TuyaTool):
    """Switch a light on or off."""

    name = "turn_on_off"
    description = "Turns the [device_id] on or off"
    parameters = vol.Schema(
        {
            vol.Required("device_id"): cv.string,
            vol.Required("on_off"): cv.boolean,
        }
    )

    async def async_call(
        self,
        hass: HomeAssistant,  # noqa: ARG002
        tool_input: llm.ToolInput,
        llm_context: llm.LLMContext,  # noqa: ARG002
    ) -> JsonObjectType:
        """Send the switch command."""
        args = tool_input.tool_args
        try:
            result = await api.async_turn_on_off(
                self._session, self._credentials, args["device_id"], args["on_off"]
            )
        except api.TuyaApiClientError as err:
            raise HomeAssistantError(str(err)) from err
        return result.as_dict()


class ChangeColorTool(TuyaTool):
    """Change the colour of a light."""

    name = "change_color"
    description = "Change the color of the light"
    parameters = vol.Schema(
        {
            vol.Required("device_id"): cv.string,
            vol.Required("h"): vol.All(
                vol.Coerce(int), vol.Range(min=0, max=TUYA_HUE_MAX)
            ),
            vol.Required("s"): vol.All(
                vol.Coerce(int), vol.Range(min=0, max=TUYA_SATURATION_MAX)
            ),
            vol.Required("v"): vol.All(
                vol.Coerce(int), vol.Range(min=0, max=TUYA_VALUE_MAX)
            ),
        }
    )

    async def async_call(
        self,
        hass: HomeAssistant,  # noqa: ARG002
        tool_input: llm.ToolInput,
        llm_context: llm.LLMContext,  # noqa: ARG002
    ) -> JsonObjectType:
        """Send the colour command."""
        args = tool_input.tool_args
        try:
            result = await api.async_change_color(
                self._session,
                self._credentials,
                args["device_id"],
                args["h"],
                args["s"],
                args["v"],
            )
        except api.TuyaApiClientError as err:
            raise HomeAssistantError(str(err)) from err
        return result.as_dict()


class GetDeviceStatusTool(TuyaTool):
    """Read the current status of a light."""

    name = "get_device_status"
    description = "Get the current status (power, brightness, color) of the device"
    parameters = vol.Schema({vol.Required("device_id"): cv.string})

    async def async_call(
        self,
        hass: HomeAssistant,  # noqa: ARG002
        tool_input: llm.ToolInput,
        llm_context: llm.LLMContext,  # noqa: ARG002
    ) -> JsonObjectType:
        """Fetch and report the device status."""
        try:
            status = await api.async_get_device_status(
                self._session, self._credentials, tool_input.tool_args["device_id"]
            )
        except api.TuyaApiClientError as err:
            raise HomeAssistantError(str(err)) from err
        return {key: value for key, value in asdict(status).items() if value is not None}


class TuyaLightsAPI(llm.API):
    """LLM API exposing the Tuya light tools."""

    def __init__(  # noqa: PLR0913
        self,
        hass: HomeAssistant,
        entry_id: str,
        session: httpx.AsyncClient,
        credentials: TuyaCredentials,
        device_table: dict[str, str],
    ) -> None:
        """Initialize the API for one config entry."""
        super().__init__(
            hass=hass,
            id=f"{LLM_API_ID}-{entry_id}",
            name=LLM_API_NAME,
        )
        self.session = session
        self.credentials = credentials
        self.device_table = device_table

    async def async_get_api_instance(
        self, llm_context: llm.LLMContext
    ) -> llm.APIInstance:
        """Return the tools and prompt for a conversation."""
        tools: list[llm.Tool] = [
            GetDeviceIdTool(self.device_table),
            TurnOnOffTool(self.session, self.credentials),
            ChangeColorTool(self.session, self.credentials),
            GetDeviceStatusTool(self.session, self.credentials),
        ]
        return llm.APIInstance(
            api=self,
            api_prompt=LLM_API_PROMPT,
            llm_context=llm_context,
            tools=tools,
        )
