"""HTTP surface: health, status, SmartThings webhook and manual publish."""

import logging
from typing import Any, Dict

from aiohttp import web

from bridge_router import BridgeRouter
from exceptions import InvalidCommand, PublishFailure
from health import HealthReporter

logger = logging.getLogger(__name__)

ROUTER_KEY = web.AppKey("router", BridgeRouter)
REPORTER_KEY = web.AppKey("reporter", HealthReporter)


async def _read_json(request: web.Request) -> Dict[str, Any]:
    """Decode a JSON object body; raises ValueError if it isn't one."""
    try:
        data = await request.json()
    except (ValueError, LookupError) as e:
        raise ValueError(f"Malformed JSON body: {e}")
    if not isinstance(data, dict):
        raise ValueError("JSON body must be an object")
    return data


async def handle_root(request: web.Request) -> web.Response:
    """Handle GET / - liveness."""
    return web.json_response(request.app[REPORTER_KEY].liveness())


async def handle_status(request: web.Request) -> web.Response:
    """Handle GET /status - broker connectivity and configured topics."""
    return web.json_response(request.app[REPORTER_KEY].status())


async def handle_control(request: web.Request) -> web.Response:
    """Handle POST /control - SmartThings webhook.

    Request body:
        {"command": "ON" | "OFF"}  (case-insensitive)
    """
    router = request.app[ROUTER_KEY]
    try:
        data = await _read_json(request)
        switch = router.handle_control(data.get("command"))
    except InvalidCommand:
        return web.json_response(
            {"success": False, "error": "Invalid command. Use ON or OFF"}, status=400
        )
    except ValueError as e:
        return web.json_response({"success": False, "error": str(e)}, status=400)
    except PublishFailure as e:
        logger.error(f"MQTT publish failed: {e}")
        return web.json_response(
            {"success": False, "error": "Failed to publish to MQTT"}, status=500
        )

    return web.json_response(
        {"success": True, "message": f"Command {switch.to_wire_upper()} sent to device"}
    )


async def handle_publish(request: web.Request) -> web.Response:
    """Handle POST /publish - publish a retained message to any topic.

    Request body:
        {"topic": "...", "message": "..."}
    """
    router = request.app[ROUTER_KEY]
    try:
        data = await _read_json(request)
        topic, message = router.handle_publish(data.get("topic"), data.get("message"))
    except ValueError as e:
        return web.json_response({"success": False, "error": str(e)}, status=400)
    except PublishFailure as e:
        logger.error(f"MQTT publish failed: {e}")
        return web.json_response({"success": False, "error": str(e)}, status=500)

    return web.json_response({"success": True, "topic": topic, "message": message})


def create_app(router: BridgeRouter, reporter: HealthReporter) -> web.Application:
    """Build the aiohttp application."""
    app = web.Application()
    app[ROUTER_KEY] = router
    app[REPORTER_KEY] = reporter
    app.router.add_get("/", handle_root)
    app.router.add_get("/status", handle_status)
    app.router.add_post("/control", handle_control)
    app.router.add_post("/publish", handle_publish)
    return app
