#!/usr/bin/env python3
"""MQTT to SmartThings bridge."""

import asyncio
import logging
import signal
import sys

from config import BridgeConfig, load_config
from exceptions import ConfigurationError
from mqtt2smartthings_app import MQTT2SmartThings

logger = logging.getLogger(__name__)


async def main(config: BridgeConfig) -> bool:
    """Main entry point. Returns True if the bridge stopped because of an error."""
    app = MQTT2SmartThings(config)
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()
    failed = False

    async def runner():
        nonlocal failed
        try:
            await app.start()
        except asyncio.CancelledError:
            pass
        except Exception as e:
            failed = True
            logger.error(f"Bridge failed: {e}", exc_info=True)
        finally:
            await app.stop()
            stop_event.set()

    task = loop.create_task(runner())

    def _shutdown():
        if not task.done():
            logger.info("Shutting down, closing MQTT connection...")
            task.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _shutdown)
        except NotImplementedError:
            pass

    await stop_event.wait()
    return failed


def run() -> int:
    """Load configuration, run until signalled. Returns the exit code."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        config = load_config()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        logger.error("Required: MQTT_BROKER, MQTT_USERNAME, MQTT_PASSWORD")
        return 1

    logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))
    logger.info("=== MQTT-SmartThings Bridge ===")
    logger.info(f"MQTT Broker: {config.mqtt_host}:{config.mqtt_port}")
    logger.info(f"MQTT Username: {config.mqtt_username}")
    logger.info(f"SmartThings configured: {'Yes' if config.smartthings_configured else 'No'}")

    if asyncio.run(main(config)):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(run())
