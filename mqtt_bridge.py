"""MQTT bridge implementation."""

import asyncio
import logging
import ssl
from typing import List

import paho.mqtt.client as mqtt

from constants import (
    MQTT_KEEPALIVE,
    MQTT_QOS,
    MQTT_RECONNECT_DELAY,
)
from models import MqttMessage

logger = logging.getLogger(__name__)


class MqttBridge:
    """Bridge between MQTT and asyncio event loop.

    paho runs its network loop in its own thread; inbound messages are handed
    to the asyncio loop through ``msg_queue`` in the order they arrive.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        msg_queue: "asyncio.Queue[MqttMessage]",
        host: str,
        port: int,
        username: str,
        password: str,
        subscriptions: List[str],
        client_id: str = "",
        use_tls: bool = True,
        tls_insecure: bool = False,
    ):
        self.loop = loop
        self.msg_queue = msg_queue
        self.host = host
        self.port = port
        self.subscriptions = list(subscriptions)
        self.use_tls = use_tls
        self.tls_insecure = tls_insecure
        self._connected = False

        self.client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=client_id)
        self.client.username_pw_set(username, password)

        self.client.on_connect = self._on_connect
        self.client.on_connect_fail = self._on_connect_fail
        self.client.on_disconnect = self._on_disconnect
        self.client.on_message = self._on_message

    def connect(self):
        """Start connecting to the MQTT broker.

        Returns immediately; paho keeps retrying in the background with a
        fixed delay until the broker becomes reachable.
        """
        if self.use_tls:
            self.client.tls_set(cert_reqs=ssl.CERT_NONE if self.tls_insecure else ssl.CERT_REQUIRED)
            if self.tls_insecure:
                self.client.tls_insecure_set(True)
                logger.warning("MQTT TLS certificate verification disabled")
        self.client.reconnect_delay_set(min_delay=MQTT_RECONNECT_DELAY, max_delay=MQTT_RECONNECT_DELAY)
        self.client.connect_async(self.host, self.port, keepalive=MQTT_KEEPALIVE)
        self.client.loop_start()
        logger.info(f"Connecting to MQTT broker at {self.host}:{self.port}")

    def close(self):
        """Close MQTT connection."""
        try:
            self.client.disconnect()
        finally:
            self.client.loop_stop()
            self._connected = False
        logger.info("MQTT connection closed")

    def is_connected(self) -> bool:
        return self._connected

    def publish(self, topic: str, payload: str, retained: bool = False) -> bool:
        """Publish a message. Returns False if paho did not accept it."""
        try:
            info = self.client.publish(topic, payload=payload, qos=MQTT_QOS, retain=retained)
        except Exception as e:
            logger.error(f"MQTT publish to {topic} failed: {e}")
            return False

        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            logger.error(f"MQTT publish to {topic} failed: {mqtt.error_string(info.rc)}")
            return False

        logger.debug(f"Published to {topic}: {payload} (retain={retained})")
        return True

    def _on_connect(self, client, userdata, flags, reason_code, properties):
        """Handle MQTT connection."""
        if reason_code != 0:
            self._connected = False
            logger.warning(f"MQTT broker refused connection: {reason_code}")
            return

        self._connected = True
        logger.info("Connected to MQTT broker successfully")
        for topic in self.subscriptions:
            result, _mid = client.subscribe(topic, qos=MQTT_QOS)
            if result == mqtt.MQTT_ERR_SUCCESS:
                logger.info(f"Subscribed to: {topic}")
            else:
                logger.error(f"Subscribe to {topic} failed: {mqtt.error_string(result)}")

    def _on_connect_fail(self, client, userdata):
        """Handle a failed connect or reconnect attempt."""
        self._connected = False
        logger.warning(
            f"Could not connect to MQTT broker at {self.host}:{self.port}, retrying in {MQTT_RECONNECT_DELAY}s"
        )

    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties):
        """Handle MQTT disconnection."""
        self._connected = False
        if reason_code == 0:
            logger.info("Disconnected from MQTT broker")
        else:
            logger.warning(
                f"MQTT connection lost ({reason_code}), reconnecting every {MQTT_RECONNECT_DELAY}s"
            )

    def _on_message(self, client, userdata, msg):
        """Handle incoming MQTT message."""
        try:
            payload = (msg.payload or b"").decode("utf-8", errors="replace").strip()
            message = MqttMessage(topic=msg.topic, payload=payload, retained=bool(msg.retain))
            # push into asyncio loop safely from MQTT thread
            self.loop.call_soon_threadsafe(self.msg_queue.put_nowait, message)
        except Exception as e:
            logger.error(f"Error handling MQTT message: {e}", exc_info=True)
