"""Constants for Tuya Cloud Lights integration.

This module contains all the constants used throughout the integration,
including API endpoints, configuration keys, and status code mappings.
"""

DOMAIN = "tuya_lights"

DEFAULT_BASE_URL = "https://openapi.tuyaus.com"
BASE_URLS = {
    "America": "https://openapi.tuyaus.com",
    "America (Azure)": "https://openapi-ueaz.tuyaus.com",
    "China": "https://openapi.tuyacn.com",
    "Europe": "https://openapi.tuyaeu.com",
    "Europe (Azure)": "https://openapi-weaz.tuyaeu.com",
    "India": "https://openapi.tuyain.com",
}

TOKEN_PATH = "/v1.0/token?grant_type=1"
DEVICE_STATUS_PATH = "/v1.0/devices/{device_id}/status"
DEVICE_COMMANDS_PATH = "/v1.0/devices/{device_id}/commands"

SIGN_METHOD = "HMAC-SHA256"

DEFAULT_POLL_INTERVAL = 30
REQUEST_TIMEOUT = 10.0

CONF_ACCESS_KEY = "access_key"
CONF_SECRET_KEY = "secret_key"
CONF_BASE_URL = "base_url"

ROOMS = ("bedroom", "livingroom", "diningroom", "kitchen")
ROOM_NAMES = {
    "bedroom": "Bedroom",
    "livingroom": "Living Room",
    "diningroom": "Dining Room",
    "kitchen": "Kitchen",
}
CONF_ROOM_DEVICE_IDS = {room: f"{room}_device_id" for room in ROOMS}

ERROR_INVALID_AUTH = "invalid_auth"
ERROR_CANNOT_CONNECT = "cannot_connect"
ERROR_API_ERROR = "api_error"
ERROR_UNKNOWN = "unknown_error"
ERROR_DUPLICATE_DEVICE = "duplicate_device"

# Data point codes reported by Tuya lights
CODE_SWITCH_LED = "switch_led"
CODE_BRIGHT_VALUE = "bright_value_v2"
CODE_TEMP_VALUE = "temp_value_v2"
CODE_COLOUR_DATA = "colour_data_v2"

STATUS_CODE_MAP = {
    CODE_SWITCH_LED: "on_off",
    CODE_BRIGHT_VALUE: "brightness",
    CODE_TEMP_VALUE: "temp",
    CODE_COLOUR_DATA: "color",
}

TUYA_HUE_MAX = 360
TUYA_SATURATION_MAX = 1000
TUYA_VALUE_MAX = 1000

LLM_API_ID = DOMAIN
LLM_API_NAME = "Tuya Cloud Lights"
LLM_API_PROMPT = """You are a Home Automation assistant. Always use the provided \
tools to perform actions or get information. Never assume the state of a device \
without checking. For every request:
1. Get the device ID using the get_device_id tool.
2. Use the appropriate tool (turn_on_off, change_color) to perform the action.
3. Confirm the action has been completed by checking the tool's response.
These are the available devices:
1. A light in the bedroom
2. A light in the living room
3. A light in the dining room
4. A light in the kitchen
Always respond back to the user.

The color of the light uses h,s,v. 0<=h<=360, 0<=s<=1000, 0<=v<=1000."""
