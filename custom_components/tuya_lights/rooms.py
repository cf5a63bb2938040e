"""Room name to Tuya device id lookup."""

import logging
import re
from collections.abc import Mapping
from typing import Any

from .const import CONF_ROOM_DEVICE_IDS, ROOMS

_LOGGER = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s")


def normalize_room_name(room_name: str) -> str:
    """Normalize a spoken room name ("Living Room " -> "livingroom")."""
    return _WHITESPACE.sub("", room_name.strip().lower())


def build_device_table(data: Mapping[str, Any]) -> dict[str, str]:
    """Build the room -> device id table from config entry data.

    Rooms without a configured device id are left out.
    """
    table = {}
    for room in ROOMS:
        device_id = data.get(CONF_ROOM_DEVICE_IDS[room])
        if device_id:
            table[room] = str(device_id).strip()
    return table


def resolve_device_id(room_name: str, device_table: Mapping[str, str]) -> str | None:
    """Resolve a room name to its device id.

    Args:
        room_name: Free-form room name as given by the user or the model.
        device_table: Mapping of normalized room name to device id.

    Returns:
        The device id, or None when the room is unknown or not configured.

    """
    room = normalize_room_name(room_name)
    device_id = device_table.get(room)
    if device_id is None:
        _LOGGER.debug("No device configured for room %r", room)
    return device_id
