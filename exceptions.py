"""Exception types raised by the bridge."""


class BridgeError(Exception):
    """Base class for bridge errors."""


class ConfigurationError(BridgeError):
    """Required configuration is missing or invalid.

    Only raised at startup; the entry point exits with status 1.
    """


class InvalidCommand(BridgeError, ValueError):
    """A switch command outside the accepted on/off vocabulary.

    Attributes:
        value: The rejected input
    """

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid command {value!r}. Use ON or OFF")


class CloudCallFailure(BridgeError):
    """A SmartThings API call failed.

    Attributes:
        status: HTTP status code, if a response was received
        body: Response body or error message
    """

    def __init__(self, status, body: str):
        self.status = status
        self.body = body
        if status is None:
            super().__init__(f"SmartThings request failed: {body}")
        else:
            super().__init__(f"SmartThings request failed with HTTP {status}: {body}")


class PublishFailure(BridgeError):
    """The broker did not accept a publish.

    Attributes:
        topic: Target topic
        reason: What paho reported
    """

    def __init__(self, topic: str, reason: str):
        self.topic = topic
        self.reason = reason
        super().__init__(f"Failed to publish to {topic}: {reason}")
