"""Main MQTT2SmartThings bridge application."""

import asyncio
import logging
from typing import List, Optional

from aiohttp import web

from bridge_router import BridgeRouter
from config import BridgeConfig
from constants import DEFAULT_HTTP_HOST
from health import HealthReporter
from http_api import create_app
from models import MqttMessage
from mqtt_bridge import MqttBridge
from smartthings_api import SmartThingsClient

logger = logging.getLogger(__name__)


class MQTT2SmartThings:
    """Main bridge application.

    Owns the single broker connection, the SmartThings client and the HTTP
    listener; the router and reporter get references to them.
    """

    def __init__(self, config: BridgeConfig, http_host: str = DEFAULT_HTTP_HOST):
        self.config = config
        self.http_host = http_host
        self.loop = asyncio.get_running_loop()
        self.msg_queue: asyncio.Queue[MqttMessage] = asyncio.Queue()

        self.mqtt = MqttBridge(
            self.loop,
            self.msg_queue,
            host=config.mqtt_host,
            port=config.mqtt_port,
            username=config.mqtt_username,
            password=config.mqtt_password,
            subscriptions=config.topics.subscriptions(),
            client_id=config.mqtt_client_id,
            use_tls=config.mqtt_tls,
            tls_insecure=config.mqtt_tls_insecure,
        )
        self.cloud = SmartThingsClient(
            config.smartthings_token,
            config.smartthings_device_id,
            api_base=config.smartthings_api_base,
            timeout=config.smartthings_timeout,
        )
        self.router = BridgeRouter(self.mqtt, self.cloud, config.topics)
        self.reporter = HealthReporter(
            self.mqtt, self.cloud, config.topics, broker=config.mqtt_host
        )

        self._runner: Optional[web.AppRunner] = None
        self._tasks: List[asyncio.Task] = []
        self.running = True

    async def start(self):
        """Start the bridge."""
        self.mqtt.connect()
        await self.start_http()
        await self.log_device_info()

        self._tasks = [
            asyncio.create_task(self.message_consumer_task(), name="msg_consumer"),
        ]

        # Wait until tasks finish (they won't until stopped)
        await asyncio.gather(*self._tasks)

    async def start_http(self):
        """Start the HTTP listener."""
        app = create_app(self.router, self.reporter)
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.http_host, self.config.http_port)
        await site.start()
        logger.info(f"Server running on port {self.config.http_port}")
        logger.info(f"Webhook URL: http://localhost:{self.config.http_port}/control")

    async def log_device_info(self):
        """Look up the SmartThings device once so misconfiguration shows up in the log early."""
        if not self.cloud.configured:
            return
        result = await self.cloud.get_device_info()
        if result.ok:
            info = result.payload
            logger.info(f"SmartThings device: {info.label or info.name} ({info.device_id})")
        else:
            logger.warning(f"Could not fetch SmartThings device info: {result.error}")

    async def stop(self):
        """Stop the bridge."""
        if not self.running:
            return
        self.running = False

        # Stop accepting HTTP requests first
        if self._runner is not None:
            try:
                await self._runner.cleanup()
            except Exception as e:
                logger.warning(f"Error stopping HTTP server: {e}")
            self._runner = None

        for t in self._tasks:
            t.cancel()
        for t in self._tasks:
            try:
                await t
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.warning(f"Task {t.get_name()} ended with error: {e}")

        try:
            self.mqtt.close()
        except Exception as e:
            logger.warning(f"Error closing MQTT connection: {e}")
        await self.cloud.close()

    async def message_consumer_task(self):
        """Consume messages from the MQTT queue in arrival order."""
        while self.running:
            msg = await self.msg_queue.get()
            try:
                await self.router.handle_message(msg)
            except Exception as e:
                logger.error(f"Error handling message on {msg.topic}: {e}", exc_info=True)
