"""Data models for Tuya Cloud Lights integration."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class TuyaCredentials:
    """Cloud project credentials passed into every API call."""

    access_key: str
    secret_key: str
    base_url: str


@dataclass
class TuyaToken:
    """Represents a Tuya access token with its expiration timestamp."""

    access_token: str
    expire_at: datetime
    refresh_token: str | None = None
    uid: str | None = None


@dataclass(frozen=True)
class CanonicalRequest:
    """Path and sorted query string used as signing input."""

    uri: str
    query_string: str
    params: tuple[tuple[str, str], ...] = ()

    @property
    def url(self) -> str:
        """Return the canonical URL."""
        if not self.query_string:
            return self.uri
        return f"{self.uri}?{self.query_string}"


@dataclass(frozen=True)
class HsvColor:
    """Light colour in Tuya units (h 0-360, s 0-1000, v 0-1000)."""

    h: int
    s: int
    v: int


@dataclass(slots=True)
class TuyaDeviceStatus:
    """Represents the current light state reported by the Tuya API."""

    on_off: bool | None = None
    brightness: int | None = None
    temp: int | None = None
    color: HsvColor | None = None


@dataclass(frozen=True)
class DeviceActionResult:
    """Confirmation returned after a command was accepted."""

    message: str
    device_id: str
    current_state: Any

    def as_dict(self) -> dict[str, Any]:
        """Return the result as a JSON-serialisable dictionary."""
        return {
            "message": self.message,
            "deviceId": self.device_id,
            "currentState": self.current_state,
        }
