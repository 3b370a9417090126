"""Read-only health and status views."""

import time
from typing import Any, Callable, Dict

from models import ConnectionState
from mqtt_bridge import MqttBridge
from smartthings_api import SmartThingsClient
from topics import BridgeTopics


class HealthReporter:
    """Liveness and status snapshots, recomputed on every call."""

    def __init__(
        self,
        mqtt: MqttBridge,
        cloud: SmartThingsClient,
        topics: BridgeTopics,
        broker: str,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.mqtt = mqtt
        self.cloud = cloud
        self.topics = topics
        self.broker = broker
        self._clock = clock
        self._started = clock()

    def uptime(self) -> float:
        return self._clock() - self._started

    def connection_state(self) -> ConnectionState:
        return ConnectionState(
            mqtt_connected=self.mqtt.is_connected(),
            cloud_configured=self.cloud.configured,
        )

    def liveness(self) -> Dict[str, Any]:
        state = self.connection_state()
        return {
            "status": "running",
            "mqtt": {
                "connected": state.mqtt_connected,
                "broker": self.broker,
            },
            "smartthings": {
                "configured": state.cloud_configured,
            },
            "uptime": self.uptime(),
        }

    def status(self) -> Dict[str, Any]:
        return {
            "mqtt_connected": self.mqtt.is_connected(),
            "topics": self.topics.as_dict(),
        }
