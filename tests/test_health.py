"""Unit tests for HealthReporter."""

from health import HealthReporter


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


def test_liveness(mock_mqtt, mock_cloud, topics):
    clock = FakeClock()
    reporter = HealthReporter(mock_mqtt, mock_cloud, topics, broker="broker.test", clock=clock)
    clock.now = 142.5

    assert reporter.liveness() == {
        "status": "running",
        "mqtt": {"connected": True, "broker": "broker.test"},
        "smartthings": {"configured": True},
        "uptime": 42.5,
    }


def test_status(mock_mqtt, mock_cloud, topics):
    reporter = HealthReporter(mock_mqtt, mock_cloud, topics, broker="broker.test")

    assert reporter.status() == {
        "mqtt_connected": True,
        "topics": {
            "command": "test/switch/command",
            "state": "test/switch/state",
            "availability": "test/availability",
        },
    }


def test_connection_state_recomputed(mock_mqtt, mock_cloud, topics):
    reporter = HealthReporter(mock_mqtt, mock_cloud, topics, broker="broker.test")
    assert reporter.connection_state().mqtt_connected is True

    mock_mqtt.is_connected.return_value = False
    mock_cloud.configured = False

    state = reporter.connection_state()
    assert state.mqtt_connected is False
    assert state.cloud_configured is False
    assert reporter.liveness()["mqtt"]["connected"] is False
