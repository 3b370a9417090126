"""Dispatch between MQTT topics, the HTTP control surface and SmartThings."""

import json
import logging
from typing import Optional

from commands import SwitchCommand, normalize_command
from exceptions import InvalidCommand, PublishFailure
from models import CloudCallResult, MqttMessage
from mqtt_bridge import MqttBridge
from smartthings_api import SmartThingsClient
from topics import BridgeTopics, TopicRole

logger = logging.getLogger(__name__)


class BridgeRouter:
    """Reacts to inbound MQTT messages and HTTP control requests.

    State topic messages are relayed to SmartThings fire-and-forget.
    HTTP control requests are published to the command topic and the
    outcome is returned to the caller. Nothing is deduplicated.
    """

    def __init__(self, mqtt: MqttBridge, cloud: SmartThingsClient, topics: BridgeTopics):
        self.mqtt = mqtt
        self.cloud = cloud
        self.topics = topics
        self.last_availability: Optional[str] = None

    async def handle_message(self, msg: MqttMessage) -> Optional[CloudCallResult]:
        """Handle one inbound MQTT message. Returns the cloud result, if a call was made."""
        logger.info(f"MQTT message [{msg.topic}]: {msg.payload}")

        role = self.topics.role_of(msg.topic)
        if role is TopicRole.STATE:
            return await self._relay_state(msg.payload)
        if role is TopicRole.AVAILABILITY:
            self.last_availability = msg.payload
            logger.info(f"Device availability: {msg.payload}")
            return None

        logger.debug(f"Ignoring message on unhandled topic: {msg.topic}")
        return None

    async def _relay_state(self, payload: str) -> Optional[CloudCallResult]:
        try:
            command = normalize_command(payload)
        except InvalidCommand:
            logger.warning(f"Ignoring invalid state payload '{payload}' on {self.topics.state}")
            return None

        if not self.cloud.configured:
            logger.debug("SmartThings not configured, state not relayed")
            return None

        result = await self.cloud.send_switch_command(command)
        if result.ok:
            logger.info(f"Updated SmartThings: {command.to_wire_upper()}")
        elif result.status is not None:
            logger.error(f"SmartThings update failed (HTTP {result.status}): {result.error}")
        else:
            logger.error(f"SmartThings update failed: {result.error}")
        return result

    def handle_control(self, command: object) -> SwitchCommand:
        """
        Publish a control command to the device's command topic (retained).
        Raises InvalidCommand for a bad command and PublishFailure if the
        broker did not take it.
        """
        switch = normalize_command(command)
        payload = switch.to_wire_upper()
        logger.info(f"Control command received: {payload}")

        if not self.mqtt.publish(self.topics.command, payload, retained=True):
            raise PublishFailure(self.topics.command, "broker rejected publish or not connected")

        logger.info(f"Published to MQTT: {payload}")
        return switch

    def handle_publish(self, topic: object, message: object):
        """Publish an arbitrary retained message. Raises ValueError on missing fields.

        Non-string messages are published as JSON.
        """
        if not topic or not message or not isinstance(topic, str):
            raise ValueError("Topic and message required")
        payload = message if isinstance(message, str) else json.dumps(message)

        if not self.mqtt.publish(topic, payload, retained=True):
            raise PublishFailure(topic, "broker rejected publish or not connected")
        logger.info(f"Manual publish to {topic}: {payload}")
        return topic, payload
