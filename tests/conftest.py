"""
Shared fixtures for unit tests.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from models import CloudCallResult
from topics import BridgeTopics


@pytest.fixture
def topics():
    return BridgeTopics(
        command="test/switch/command",
        state="test/switch/state",
        availability="test/availability",
    )


@pytest.fixture
def mock_mqtt():
    """
    Mock MqttBridge.

    publish() succeeds and the broker reports connected unless a test changes it.
    """
    bridge = MagicMock()
    bridge.publish = MagicMock(return_value=True)
    bridge.is_connected = MagicMock(return_value=True)
    return bridge


@pytest.fixture
def mock_cloud():
    """Mock SmartThingsClient that is configured and always succeeds."""
    cloud = MagicMock()
    cloud.configured = True
    cloud.send_switch_command = AsyncMock(return_value=CloudCallResult.success(200, {"results": []}))
    cloud.get_device_info = AsyncMock()
    cloud.close = AsyncMock()
    return cloud


@pytest.fixture
def env():
    """Minimal environment that satisfies the required settings."""
    return {
        "MQTT_BROKER": "broker.test",
        "MQTT_USERNAME": "bridge",
        "MQTT_PASSWORD": "secret",
    }
