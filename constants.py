"""Constants for MQTT2SmartThings bridge."""

# Default configuration paths
DEFAULT_CONFIG_FILE = "mqtt2smartthings.yaml"
CONFIG_FILE_ENV = "MQTT2SMARTTHINGS_CONFIG"

# MQTT Topics and Payloads
DEFAULT_TOPIC_COMMAND = "smartthings/nodemcu/switch/command"
DEFAULT_TOPIC_STATE = "smartthings/nodemcu/switch/state"
DEFAULT_TOPIC_AVAILABILITY = "smartthings/nodemcu/availability"
MQTT_PAYLOAD_ON = "ON"
MQTT_PAYLOAD_OFF = "OFF"

# MQTT settings
DEFAULT_MQTT_PORT = 8883
DEFAULT_MQTT_CLIENT_ID = "mqtt2smartthings"
MQTT_QOS = 1
MQTT_KEEPALIVE = 60
MQTT_RECONNECT_DELAY = 5

# SmartThings API
SMARTTHINGS_API_BASE = "https://api.smartthings.com/v1"
SMARTTHINGS_COMPONENT = "main"
SMARTTHINGS_SWITCH_CAPABILITY = "switch"

# Timeouts (seconds)
SMARTTHINGS_API_TIMEOUT = 8.0

# HTTP server
DEFAULT_HTTP_HOST = "0.0.0.0"
DEFAULT_HTTP_PORT = 3000

DEFAULT_LOG_LEVEL = "INFO"
