"""Pytest configuration and fixtures for Tuya Cloud Lights tests."""

import pytest

from custom_components.tuya_lights.models import TuyaCredentials

BASE_URL = "https://openapi.tuyaus.test"
ACCESS_KEY = "test_access_key"
SECRET_KEY = "test_secret_key"
ACCESS_TOKEN = "test_access_token"
TIMESTAMP = "1700000000000"

TOKEN_URL = f"{BASE_URL}/v1.0/token?grant_type=1"


@pytest.fixture
def credentials() -> TuyaCredentials:
    """Fixture providing test project credentials."""
    return TuyaCredentials(
        access_key=ACCESS_KEY,
        secret_key=SECRET_KEY,
        base_url=BASE_URL,
    )


@pytest.fixture
def device_table() -> dict[str, str]:
    """Fixture providing a room -> device id table."""
    return {
        "bedroom": "bedroom_device",
        "livingroom": "livingroom_device",
        "diningroom": "diningroom_device",
        "kitchen": "kitchen_device",
    }


@pytest.fixture
def sample_token_response() -> dict:
    """Fixture providing a sample token endpoint response.

    Returns:
        A dictionary representing a successful token response.

    """
    return {
        "success": True,
        "t": 1700000000000,
        "tid": "token_tid",
        "result": {
            "access_token": ACCESS_TOKEN,
            "expire_time": 7200,
            "refresh_token": "test_refresh_token",
            "uid": "test_uid",
        },
    }


@pytest.fixture
def sample_status_response() -> dict:
    """Fixture providing a sample device status response.

    Returns:
        A dictionary representing a status response for a colour light.

    """
    return {
        "success": True,
        "t": 1700000000000,
        "tid": "status_tid",
        "result": [
            {"code": "switch_led", "value": True},
            {"code": "work_mode", "value": "colour"},
            {"code": "bright_value_v2", "value": 500},
            {"code": "temp_value_v2", "value": 250},
            {"code": "colour_data_v2", "value": '{"h":10,"s":500,"v":800}'},
        ],
    }


@pytest.fixture
def sample_command_response() -> dict:
    """Fixture providing a sample command response."""
    return {"success": True, "t": 1700000000000, "tid": "command_tid", "result": True}
