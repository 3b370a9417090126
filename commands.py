"""Switch command normalization shared by both relay directions."""

from enum import Enum
from typing import Optional, Tuple

from constants import MQTT_PAYLOAD_OFF, MQTT_PAYLOAD_ON
from exceptions import InvalidCommand


class SwitchCommand(Enum):
    """Binary switch command."""
    ON = "on"
    OFF = "off"

    def to_wire_upper(self) -> str:
        """MQTT payload form."""
        return MQTT_PAYLOAD_ON if self is SwitchCommand.ON else MQTT_PAYLOAD_OFF

    def to_wire_lower(self) -> str:
        """SmartThings command form."""
        return self.value


def normalize_command(value: object) -> SwitchCommand:
    """Map a case-insensitive "on"/"off" token to a SwitchCommand.

    Raises InvalidCommand for anything else, including non-strings.
    """
    if not isinstance(value, str):
        raise InvalidCommand(value)
    token = value.strip().lower()
    if token == "on":
        return SwitchCommand.ON
    if token == "off":
        return SwitchCommand.OFF
    raise InvalidCommand(value)


def parse_command(value: object) -> Tuple[Optional[SwitchCommand], bool]:
    """Like normalize_command, but returns (command, ok) instead of raising."""
    try:
        return normalize_command(value), True
    except InvalidCommand:
        return None, False
