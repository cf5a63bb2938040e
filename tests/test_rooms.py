"""Tests for the room lookup helpers."""

from custom_components.tuya_lights.const import CONF_ACCESS_KEY
from custom_components.tuya_lights.rooms import (
    build_device_table,
    normalize_room_name,
    resolve_device_id,
)


class TestNormalizeRoomName:
    """Tests for normalize_room_name function."""

    def test_normalize_room_name_strips_and_lowercases(self) -> None:
        """Test that room names are trimmed, lower-cased and joined."""
        assert normalize_room_name("Living Room ") == "livingroom"
        assert normalize_room_name("  DINING\troom") == "diningroom"
        assert normalize_room_name("kitchen") == "kitchen"


class TestResolveDeviceId:
    """Tests for resolve_device_id function."""

    def test_resolve_device_id_returns_configured_id(
        self, device_table: dict[str, str]
    ) -> None:
        """Test that a spoken room name resolves to its device id."""
        assert resolve_device_id("Living Room ", device_table) == "livingroom_device"

    def test_resolve_device_id_returns_none_for_unknown_room(
        self, device_table: dict[str, str]
    ) -> None:
        """Test that an unknown room resolves to None, not a sentinel string."""
        assert resolve_device_id("garage", device_table) is None
        assert resolve_device_id("undefined", device_table) is None

    def test_resolve_device_id_returns_none_for_unconfigured_room(self) -> None:
        """Test that a known room without a device resolves to None."""
        assert resolve_device_id("bedroom", {"kitchen": "kitchen_device"}) is None


class TestBuildDeviceTable:
    """Tests for build_device_table function."""

    def test_build_device_table_keeps_configured_rooms_only(self) -> None:
        """Test that only rooms with a device id are included."""
        data = {
            CONF_ACCESS_KEY: "key",
            "bedroom_device_id": " bed123 ",
            "kitchen_device_id": "kit456",
            "livingroom_device_id": "",
        }
        assert build_device_table(data) == {
            "bedroom": "bed123",
            "kitchen": "kit456",
        }

    def test_build_device_table_returns_empty_when_nothing_configured(self) -> None:
        """Test that no configured rooms gives an empty table."""
        assert build_device_table({}) == {}
