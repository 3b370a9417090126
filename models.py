"""Data models and dataclasses."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class MqttMessage:
    """Message received from MQTT."""
    topic: str
    payload: str
    retained: bool = False


@dataclass
class DeviceInfo:
    """SmartThings device metadata."""
    device_id: str
    label: Optional[str]
    name: Optional[str]
    location_id: Optional[str]
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "DeviceInfo":
        return cls(
            device_id=str(data.get("deviceId", "")),
            label=data.get("label"),
            name=data.get("name"),
            location_id=data.get("locationId"),
            raw=data,
        )


@dataclass
class CloudCallResult:
    """Outcome of one SmartThings API call."""
    ok: bool
    status: Optional[int] = None
    payload: Any = None
    error: Optional[str] = None
    not_configured: bool = False

    @classmethod
    def success(cls, status: int, payload: Any = None) -> "CloudCallResult":
        return cls(ok=True, status=status, payload=payload)

    @classmethod
    def failure(cls, error: str, status: Optional[int] = None) -> "CloudCallResult":
        return cls(ok=False, status=status, error=error)

    @classmethod
    def unconfigured(cls) -> "CloudCallResult":
        return cls(ok=False, error="SmartThings token or device id not set", not_configured=True)


@dataclass(frozen=True)
class ConnectionState:
    """Snapshot of bridge connectivity."""
    mqtt_connected: bool
    cloud_configured: bool
