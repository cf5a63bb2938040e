"""
Configuration flow for Tuya Cloud Lights integration.

This module handles the setup of the integration through Home Assistant's
config flow system: cloud project credentials, data centre and the device
id of the light in each room. It also handles re-authentication when the
Tuya cloud stops accepting the stored credentials.
"""

import logging
from collections.abc import Mapping
from typing import Any

import voluptuous as vol
from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.helpers.httpx_client import get_async_client

from . import api
from .const import (
    BASE_URLS,
    CONF_ACCESS_KEY,
    CONF_BASE_URL,
    CONF_ROOM_DEVICE_IDS,
    CONF_SECRET_KEY,
    DEFAULT_BASE_URL,
    DOMAIN,
    ERROR_API_ERROR,
    ERROR_CANNOT_CONNECT,
    ERROR_DUPLICATE_DEVICE,
    ERROR_INVALID_AUTH,
    ERROR_UNKNOWN,
    ROOMS,
)
from .models import TuyaCredentials

_LOGGER = logging.getLogger(__name__)

REAUTH_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_ACCESS_KEY): str,
        vol.Required(CONF_SECRET_KEY): str,
    }
)


def _user_schema() -> vol.Schema:
    schema: dict[Any, Any] = {
        vol.Required(CONF_ACCESS_KEY): str,
        vol.Required(CONF_SECRET_KEY): str,
        vol.Required(CONF_BASE_URL, default=DEFAULT_BASE_URL): vol.In(
            {url: name for name, url in BASE_URLS.items()}
        ),
    }
    for room in ROOMS:
        schema[vol.Optional(CONF_ROOM_DEVICE_IDS[room])] = str
    return vol.Schema(schema)


def _room_device_ids(user_input: Mapping[str, Any]) -> dict[str, str]:
    """Return the non-empty room device ids keyed by their config key."""
    device_ids: dict[str, str] = {}
    for room in ROOMS:
        device_id = user_input.get(CONF_ROOM_DEVICE_IDS[room], "").strip()
        if device_id:
            device_ids[CONF_ROOM_DEVICE_IDS[room]] = device_id
    return device_ids


class TuyaLightsConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle configuration flow for Tuya Cloud Lights integration."""

    VERSION = 1

    async def _async_validate_credentials(
        self, credentials: TuyaCredentials
    ) -> dict[str, str]:
        """
        Check the credentials by fetching an access token.

        Args:
            credentials: Credentials to check.

        Returns:
            Form errors; empty when a token was issued.

        """
        try:
            session = get_async_client(self.hass)
            await api.async_get_token(session, credentials)
            _LOGGER.info("Successfully authenticated with Tuya API")

        except api.TuyaApiAuthError as err:
            _LOGGER.warning("Authentication failed (%s): %s", ERROR_INVALID_AUTH, err)
            return {"base": ERROR_INVALID_AUTH}
        except api.TuyaApiConnectionError:
            _LOGGER.exception("Connection error (%s)", ERROR_CANNOT_CONNECT)
            return {"base": ERROR_CANNOT_CONNECT}
        except api.TuyaApiClientError:
            _LOGGER.exception("API client error (%s)", ERROR_API_ERROR)
            return {"base": ERROR_API_ERROR}
        except Exception:
            _LOGGER.exception(
                "Unexpected error during authentication (%s)",
                ERROR_UNKNOWN,
            )
            return {"base": ERROR_UNKNOWN}

        return {}

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """
        Handle the initial step of the config flow.

        Args:
            user_input: User input data containing credentials and device ids.

        Returns:
            ConfigFlowResult indicating the next step or errors.

        """
        errors: dict[str, str] = {}

        if user_input is not None:
            access_key = user_input[CONF_ACCESS_KEY].strip()
            credentials = TuyaCredentials(
                access_key=access_key,
                secret_key=user_input[CONF_SECRET_KEY].strip(),
                base_url=user_input[CONF_BASE_URL],
            )
            device_ids = _room_device_ids(user_input)

            if len(set(device_ids.values())) != len(device_ids):
                _LOGGER.warning("Same device id entered for more than one room")
                errors["base"] = ERROR_DUPLICATE_DEVICE
            else:
                errors = await self._async_validate_credentials(credentials)

            if not errors:
                await self.async_set_unique_id(access_key)
                self._abort_if_unique_id_configured()

                return self.async_create_entry(
                    title=f"Tuya Cloud Lights ({access_key})",
                    data={
                        CONF_ACCESS_KEY: credentials.access_key,
                        CONF_SECRET_KEY: credentials.secret_key,
                        CONF_BASE_URL: credentials.base_url,
                        **device_ids,
                    },
                )

        return self.async_show_form(
            step_id="user",
            data_schema=_user_schema(),
            errors=errors,
        )

    async def async_step_reauth(
        self,
        entry_data: Mapping[str, Any],  # noqa: ARG002
    ) -> ConfigFlowResult:
        """Start re-authentication after the cloud rejected the credentials."""
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """
        Ask for new credentials and update the existing entry.

        The data centre and room device ids of the entry are kept.

        Args:
            user_input: User input data containing the access key and secret.

        Returns:
            ConfigFlowResult aborting with reauth_successful, or the form.

        """
        errors: dict[str, str] = {}
        reauth_entry = self._get_reauth_entry()

        if user_input is not None:
            access_key = user_input[CONF_ACCESS_KEY].strip()
            credentials = TuyaCredentials(
                access_key=access_key,
                secret_key=user_input[CONF_SECRET_KEY].strip(),
                base_url=reauth_entry.data.get(CONF_BASE_URL, DEFAULT_BASE_URL),
            )
            errors = await self._async_validate_credentials(credentials)

            if not errors:
                await self.async_set_unique_id(access_key)
                self._abort_if_unique_id_mismatch()

                return self.async_update_reload_and_abort(
                    reauth_entry,
                    data_updates={
                        CONF_ACCESS_KEY: credentials.access_key,
                        CONF_SECRET_KEY: credentials.secret_key,
                    },
                )

        return self.async_show_form(
            step_id="reauth_confirm",
            data_schema=self.add_suggested_values_to_schema(
                REAUTH_SCHEMA,
                {CONF_ACCESS_KEY: reauth_entry.data.get(CONF_ACCESS_KEY)},
            ),
            errors=errors,
        )
