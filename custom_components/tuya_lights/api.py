"""API client for the Tuya cloud IoT platform.

This module provides functions to interact with the Tuya OpenAPI,
including token acquisition, signed requests, device status and commands.
"""

import json
import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
from homeassistant.core import HomeAssistant
from homeassistant.helpers.httpx_client import create_async_httpx_client

from . import signing
from .const import (
    CODE_COLOUR_DATA,
    CODE_SWITCH_LED,
    DEVICE_COMMANDS_PATH,
    DEVICE_STATUS_PATH,
    REQUEST_TIMEOUT,
    STATUS_CODE_MAP,
    TOKEN_PATH,
)
from .models import (
    DeviceActionResult,
    HsvColor,
    TuyaCredentials,
    TuyaDeviceStatus,
    TuyaToken,
)

_LOGGER = logging.getLogger(__name__)

# HTTP status codes
HTTP_OK = 200
HTTP_MULTIPLE_CHOICES = 300
HTTP_AUTH_ERRORS = (401, 403)


class TuyaApiClientError(Exception):
    """Base exception for Tuya API client errors."""


class TuyaApiAuthError(TuyaApiClientError):
    """Exception raised when no access token could be obtained."""


class TuyaApiConnectionError(TuyaApiClientError):
    """Exception raised when the platform could not be reached."""


class TuyaApiDecodeError(TuyaApiClientError):
    """Exception raised for malformed response payloads."""


class TuyaApiHttpError(TuyaApiClientError):
    """Exception raised for non-2xx HTTP responses."""

    def __init__(self, status: int) -> None:
        """Initialize the error with the HTTP status code."""
        super().__init__(f"HTTP Error. Status {status}")
        self.status = status


class TuyaApiError(TuyaApiClientError):
    """Exception raised when the platform envelope reports a failure."""

    def __init__(self, code: int | None, msg: str | None) -> None:
        """Initialize the error with the platform code and message."""
        super().__init__(f"Error message: {msg}. Error code: {code}")
        self.code = code
        self.msg = msg


def is_http_error(status: int) -> bool:
    """Check if HTTP status code is outside the 2xx range.

    Args:
        status: HTTP status code to check.

    Returns:
        True if status code is not 2xx, False otherwise.

    """
    return not HTTP_OK <= status < HTTP_MULTIPLE_CHOICES


def is_api_error(data: dict[str, Any]) -> bool:
    """Check if the platform envelope reports a failure.

    Args:
        data: Decoded response envelope.

    Returns:
        True unless the envelope carries success=true.

    """
    return data.get("success") is not True


def validate_response(response: httpx.Response) -> dict[str, Any]:
    """Validate HTTP status and decode the JSON envelope.

    The body is not read when the HTTP status is an error.

    Args:
        response: HTTP response object to validate.

    Returns:
        Decoded envelope.

    Raises:
        TuyaApiHttpError: If the HTTP status is not 2xx.
        TuyaApiDecodeError: If the body is not a JSON object.

    """
    if is_http_error(response.status_code):
        raise TuyaApiHttpError(response.status_code)

    try:
        data = response.json()
    except ValueError as err:
        error_msg = f"Malformed JSON response: {err}"
        raise TuyaApiDecodeError(error_msg) from err

    if not isinstance(data, dict):
        error_msg = f"Unexpected response payload: {data!r}"
        raise TuyaApiDecodeError(error_msg)
    return data


def _validate_api_status(data: dict[str, Any]) -> None:
    if not is_api_error(data):
        return
    raise TuyaApiError(data.get("code"), data.get("msg"))


def create_session_client(hass: HomeAssistant) -> httpx.AsyncClient:
    """Create HTTP client for the Tuya API.

    Args:
        hass: Home Assistant instance.

    Returns:
        Configured httpx AsyncClient.

    """
    return create_async_httpx_client(hass, timeout=REQUEST_TIMEOUT)


async def _async_request(
    session: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs: Any,  # noqa: ANN401
) -> httpx.Response:
    try:
        return await session.request(method, url, **kwargs)
    except httpx.RequestError as err:
        error_msg = f"Connection error: {err}"
        raise TuyaApiConnectionError(error_msg) from err


def extract_token(data: dict[str, Any]) -> TuyaToken:
    """Extract the access token from a token endpoint response.

    Args:
        data: Token endpoint envelope.

    Returns:
        TuyaToken with the expiry computed from now.

    Raises:
        TuyaApiAuthError: If the response carries no access token.

    """
    result = data.get("result") or {}
    access_token = result.get("access_token")
    if not access_token:
        error_msg = "Token response did not include an access token"
        raise TuyaApiAuthError(error_msg)

    expire_time = result.get("expire_time", 0)
    return TuyaToken(
        access_token=access_token,
        expire_at=datetime.now(UTC) + timedelta(seconds=expire_time),
        refresh_token=result.get("refresh_token"),
        uid=result.get("uid"),
    )


async def async_get_token(
    session: httpx.AsyncClient,
    credentials: TuyaCredentials,
) -> str:
    """Fetch a fresh access token.

    Args:
        session: HTTP client session.
        credentials: Project credentials.

    Returns:
        Access token string.

    Raises:
        TuyaApiAuthError: If the platform refuses to issue a token, either in
            the envelope or with HTTP 401/403.
        TuyaApiHttpError: If the token endpoint returns a non-2xx status.
        TuyaApiDecodeError: If the response is not valid JSON.
        TuyaApiConnectionError: If the platform cannot be reached.

    """
    headers = signing.token_headers(
        credentials.access_key,
        credentials.secret_key,
        signing.current_timestamp(),
    )

    _LOGGER.debug("Requesting access token from %s", credentials.base_url)
    response = await _async_request(
        session, "GET", credentials.base_url + TOKEN_PATH, headers=headers
    )
    if response.status_code in HTTP_AUTH_ERRORS:
        error_msg = f"Fetch failed: HTTP status {response.status_code}"
        raise TuyaApiAuthError(error_msg)
    data = validate_response(response)

    if is_api_error(data):
        error_msg = f"Fetch failed: {data.get('msg')}"
        raise TuyaApiAuthError(error_msg)

    return extract_token(data).access_token


async def async_call(  # noqa: PLR0913
    session: httpx.AsyncClient,
    credentials: TuyaCredentials,
    method: str,
    endpoint: str,
    query: dict[str, Any] | None = None,
    body: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Send a signed request to a Tuya endpoint.

    A fresh token is acquired for every call.

    Args:
        session: HTTP client session.
        credentials: Project credentials.
        method: HTTP method.
        endpoint: Endpoint path, optionally with a query string.
        query: Extra query parameters.
        body: JSON body, sent only for POST requests.

    Returns:
        Decoded response envelope.

    Raises:
        TuyaApiClientError: Any failure, as one of its subclasses.

    """
    method = method.upper()
    access_token = await async_get_token(session, credentials)
    canonical = signing.canonicalize(endpoint, query)
    headers = signing.request_headers(
        credentials.access_key,
        credentials.secret_key,
        access_token,
        signing.current_timestamp(),
        method,
        canonical,
        body,
    )

    kwargs: dict[str, Any] = {"headers": headers}
    if canonical.params:
        kwargs["params"] = list(canonical.params)
    if method == "POST" and body:
        headers["Content-Type"] = "application/json"
        kwargs["content"] = signing.serialize_body(body).encode("utf-8")

    _LOGGER.debug("%s %s", method, canonical.url)
    response = await _async_request(
        session, method, credentials.base_url + canonical.uri, **kwargs
    )
    data = validate_response(response)
    _validate_api_status(data)
    return data


def _decode_color(value: Any) -> HsvColor:  # noqa: ANN401
    try:
        raw = json.loads(value) if isinstance(value, str) else value
        return HsvColor(h=raw["h"], s=raw["s"], v=raw["v"])
    except (ValueError, TypeError, KeyError) as err:
        error_msg = f"Invalid colour value {value!r}: {err}"
        raise TuyaApiDecodeError(error_msg) from err


def extract_device_status(data: dict[str, Any]) -> TuyaDeviceStatus:
    """Fold the status data points of a device into a TuyaDeviceStatus.

    Args:
        data: Status endpoint envelope.

    Returns:
        TuyaDeviceStatus with the recognised fields set.

    Raises:
        TuyaApiDecodeError: If the result or the colour value is malformed.

    """
    result = data.get("result")
    if not isinstance(result, list):
        error_msg = f"Unexpected status result: {result!r}"
        raise TuyaApiDecodeError(error_msg)

    status = TuyaDeviceStatus()
    for item in result:
        if not isinstance(item, dict):
            error_msg = f"Unexpected status item: {item!r}"
            raise TuyaApiDecodeError(error_msg)
        field = STATUS_CODE_MAP.get(item.get("code"))
        if field is None:
            continue
        value = item.get("value")
        if item["code"] == CODE_COLOUR_DATA:
            value = _decode_color(value)
        setattr(status, field, value)
    return status


def build_commands_body(commands: list[dict[str, Any]]) -> dict[str, str]:
    """Wrap a command list in a request body.

    The command list itself is sent as a JSON string.
    """
    return {"commands": json.dumps(commands, separators=(",", ":"))}


async def async_get_device_status(
    session: httpx.AsyncClient,
    credentials: TuyaCredentials,
    device_id: str,
) -> TuyaDeviceStatus:
    """Read the current status of a light."""
    endpoint = DEVICE_STATUS_PATH.format(device_id=device_id)
    data = await async_call(session, credentials, "GET", endpoint)
    status = extract_device_status(data)
    _LOGGER.debug("Status for device %s: %s", device_id, status)
    return status


async def async_turn_on_off(
    session: httpx.AsyncClient,
    credentials: TuyaCredentials,
    device_id: str,
    on_off: bool,  # noqa: FBT001
) -> DeviceActionResult:
    """Switch a light on or off.

    Args:
        session: HTTP client session.
        credentials: Project credentials.
        device_id: Target device identifier.
        on_off: True to switch on, False to switch off.

    Returns:
        Confirmation of the new state.

    """
    endpoint = DEVICE_COMMANDS_PATH.format(device_id=device_id)
    body = build_commands_body([{"code": CODE_SWITCH_LED, "value": on_off}])

    _LOGGER.debug("Switching device %s %s", device_id, "on" if on_off else "off")
    await async_call(session, credentials, "POST", endpoint, {}, body)
    return DeviceActionResult(
        message="The light is now " + ("on" if on_off else "off"),
        device_id=device_id,
        current_state=on_off,
    )


async def async_change_color(  # noqa: PLR0913
    session: httpx.AsyncClient,
    credentials: TuyaCredentials,
    device_id: str,
    h: int,
    s: int,
    v: int,
) -> DeviceActionResult:
    """Change the colour of a light.

    Ranges (0<=h<=360, 0<=s<=1000, 0<=v<=1000) are the caller's contract.

    Args:
        session: HTTP client session.
        credentials: Project credentials.
        device_id: Target device identifier.
        h: Hue.
        s: Saturation.
        v: Value (brightness).

    Returns:
        Confirmation of the new colour.

    """
    endpoint = DEVICE_COMMANDS_PATH.format(device_id=device_id)
    colour = json.dumps({"h": h, "s": s, "v": v}, separators=(",", ":"))
    body = build_commands_body([{"code": CODE_COLOUR_DATA, "value": colour}])

    _LOGGER.debug("Changing colour of device %s to %s", device_id, colour)
    await async_call(session, credentials, "POST", endpoint, {}, body)
    return DeviceActionResult(
        message="The color has changed",
        device_id=device_id,
        current_state=f"h: {h}, s: {s}, v: {v}",
    )
