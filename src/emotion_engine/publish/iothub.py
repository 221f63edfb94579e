"""Device-to-cloud messages over Azure IoT Hub."""

import logging

from azure.iot.device import IoTHubDeviceClient, Message

from emotion_engine.config import IOTHUB_DEVICE_CONNECTION_STRING
from emotion_engine.errors import ConfigurationError

logger = logging.getLogger(__name__)


class IoTHubSender:
    """Owns one device client for the lifetime of the process."""

    def __init__(
        self,
        connection_string: str | None = None,
        client: IoTHubDeviceClient | None = None,
    ) -> None:
        if client is None:
            connection_string = connection_string or IOTHUB_DEVICE_CONNECTION_STRING
            if not connection_string:
                raise ConfigurationError(
                    "IoT Hub device connection string is required. "
                    "Set IOTHUB_DEVICE_CONNECTION_STRING in .env file."
                )
            client = IoTHubDeviceClient.create_from_connection_string(connection_string)
        self.client = client

    def send(self, text: str) -> None:
        """Send one JSON message. The client connects on first use."""
        message = Message(text)
        message.content_encoding = "utf-8"
        message.content_type = "application/json"
        self.client.send_message(message)
        logger.debug("Sent %d bytes to IoT Hub", len(text))

    def close(self) -> None:
        self.client.shutdown()
