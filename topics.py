"""Topic utilities for MQTT."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class TopicRole(Enum):
    """Role a configured topic plays for the device."""
    COMMAND = "command"
    STATE = "state"
    AVAILABILITY = "availability"


@dataclass(frozen=True)
class BridgeTopics:
    """The three topics of the bridged device, fixed for the process lifetime."""
    command: str
    state: str
    availability: str

    def role_of(self, topic: str) -> Optional[TopicRole]:
        """Get the role of an inbound topic, or None if it is not one of ours."""
        if topic == self.state:
            return TopicRole.STATE
        if topic == self.availability:
            return TopicRole.AVAILABILITY
        if topic == self.command:
            return TopicRole.COMMAND
        return None

    def subscriptions(self):
        """Topics the bridge listens on."""
        return [self.state, self.availability]

    def as_dict(self) -> Dict[str, str]:
        return {
            "command": self.command,
            "state": self.state,
            "availability": self.availability,
        }
