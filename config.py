"""Configuration loading: optional YAML file, overridden by environment variables."""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import (
    CONFIG_FILE_ENV,
    DEFAULT_CONFIG_FILE,
    DEFAULT_HTTP_PORT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MQTT_CLIENT_ID,
    DEFAULT_MQTT_PORT,
    DEFAULT_TOPIC_AVAILABILITY,
    DEFAULT_TOPIC_COMMAND,
    DEFAULT_TOPIC_STATE,
    SMARTTHINGS_API_BASE,
    SMARTTHINGS_API_TIMEOUT,
)
from exceptions import ConfigurationError
from topics import BridgeTopics

logger = logging.getLogger(__name__)

_TRUE = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class BridgeConfig:
    """Resolved bridge configuration."""
    mqtt_host: str
    mqtt_port: int
    mqtt_username: str
    mqtt_password: str
    mqtt_tls: bool
    mqtt_tls_insecure: bool
    mqtt_client_id: str
    topics: BridgeTopics
    smartthings_token: Optional[str]
    smartthings_device_id: Optional[str]
    smartthings_api_base: str
    smartthings_timeout: float
    http_port: int
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def smartthings_configured(self) -> bool:
        return bool(self.smartthings_token and self.smartthings_device_id)


def _read_yaml(path: str) -> Dict[str, Any]:
    """Load the YAML config file, or an empty dict if it does not exist."""
    if not os.path.exists(path):
        return {}

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in '{path}': {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"'{path}' must contain a mapping at the top level")
    logger.debug(f"Loaded configuration file {path}")
    return data


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"'{name}' section must be a mapping")
    return value


def _pick(environ: Mapping[str, str], env_key: str, section: Dict[str, Any], key: str, default=None):
    """Environment beats file beats default. Empty strings count as unset."""
    value = environ.get(env_key)
    if value not in (None, ""):
        return value
    value = section.get(key)
    if value not in (None, ""):
        return value
    return default


def _as_int(value, name: str) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if not 0 <= port < 65536:
        raise ConfigurationError(f"{name} out of range: {port}")
    return port


def _as_float(value, name: str) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if result <= 0:
        raise ConfigurationError(f"{name} must be positive")
    return result


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE


def load_config(environ: Optional[Mapping[str, str]] = None, path: Optional[str] = None) -> BridgeConfig:
    """Load and validate configuration.

    Raises ConfigurationError when broker address or credentials are missing,
    or a value cannot be parsed.
    """
    if environ is None:
        environ = os.environ
    if path is None:
        path = environ.get(CONFIG_FILE_ENV) or DEFAULT_CONFIG_FILE

    data = _read_yaml(path)
    mqtt_cfg = _section(data, "mqtt")
    topics_cfg = _section(data, "topics")
    st_cfg = _section(data, "smartthings")
    http_cfg = _section(data, "http")
    log_cfg = _section(data, "logging")

    host = _pick(environ, "MQTT_BROKER", mqtt_cfg, "host")
    username = _pick(environ, "MQTT_USERNAME", mqtt_cfg, "username")
    password = _pick(environ, "MQTT_PASSWORD", mqtt_cfg, "password")

    missing = [
        name
        for name, value in (
            ("MQTT_BROKER", host),
            ("MQTT_USERNAME", username),
            ("MQTT_PASSWORD", password),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

    topics = BridgeTopics(
        command=str(_pick(environ, "MQTT_TOPIC_COMMAND", topics_cfg, "command", DEFAULT_TOPIC_COMMAND)),
        state=str(_pick(environ, "MQTT_TOPIC_STATE", topics_cfg, "state", DEFAULT_TOPIC_STATE)),
        availability=str(
            _pick(environ, "MQTT_TOPIC_AVAILABILITY", topics_cfg, "availability", DEFAULT_TOPIC_AVAILABILITY)
        ),
    )

    token = _pick(environ, "SMARTTHINGS_TOKEN", st_cfg, "token")
    device_id = _pick(environ, "SMARTTHINGS_DEVICE_ID", st_cfg, "device_id")

    return BridgeConfig(
        mqtt_host=str(host),
        mqtt_port=_as_int(_pick(environ, "MQTT_PORT", mqtt_cfg, "port", DEFAULT_MQTT_PORT), "MQTT_PORT"),
        mqtt_username=str(username),
        mqtt_password=str(password),
        mqtt_tls=_as_bool(_pick(environ, "MQTT_TLS", mqtt_cfg, "tls", True)),
        mqtt_tls_insecure=_as_bool(_pick(environ, "MQTT_TLS_INSECURE", mqtt_cfg, "tls_insecure", False)),
        mqtt_client_id=str(_pick(environ, "MQTT_CLIENT_ID", mqtt_cfg, "client_id", DEFAULT_MQTT_CLIENT_ID)),
        topics=topics,
        smartthings_token=str(token) if token else None,
        smartthings_device_id=str(device_id) if device_id else None,
        smartthings_api_base=str(
            _pick(environ, "SMARTTHINGS_API_BASE", st_cfg, "api_base", SMARTTHINGS_API_BASE)
        ).rstrip("/"),
        smartthings_timeout=_as_float(
            _pick(environ, "SMARTTHINGS_TIMEOUT", st_cfg, "timeout", SMARTTHINGS_API_TIMEOUT),
            "SMARTTHINGS_TIMEOUT",
        ),
        http_port=_as_int(_pick(environ, "PORT", http_cfg, "port", DEFAULT_HTTP_PORT), "PORT"),
        log_level=str(_pick(environ, "LOG_LEVEL", log_cfg, "level", DEFAULT_LOG_LEVEL)).upper(),
    )
