"""SmartThings device API client."""

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Tuple

import aiohttp

from commands import SwitchCommand
from constants import (
    SMARTTHINGS_API_BASE,
    SMARTTHINGS_API_TIMEOUT,
    SMARTTHINGS_COMPONENT,
    SMARTTHINGS_SWITCH_CAPABILITY,
)
from exceptions import CloudCallFailure
from models import CloudCallResult, DeviceInfo

logger = logging.getLogger(__name__)


def switch_command_body(command: SwitchCommand) -> Dict[str, Any]:
    """
    Body for POST /devices/{id}/commands. The API rejects the request
    if "arguments" is missing, so it is always sent, empty.
    """
    return {
        "commands": [
            {
                "component": SMARTTHINGS_COMPONENT,
                "capability": SMARTTHINGS_SWITCH_CAPABILITY,
                "command": command.to_wire_lower(),
                "arguments": [],
            }
        ]
    }


class SmartThingsClient:
    """Send commands to a SmartThings device. No retries."""

    def __init__(
        self,
        token: Optional[str],
        device_id: Optional[str],
        api_base: str = SMARTTHINGS_API_BASE,
        timeout: float = SMARTTHINGS_API_TIMEOUT,
    ):
        self.token = token
        self.device_id = device_id
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    @property
    def configured(self) -> bool:
        return bool(self.token and self.device_id)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
        return self.session

    async def close(self):
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def _request(
        self, method: str, path: str, body: Optional[Dict[str, Any]] = None
    ) -> Tuple[int, Any]:
        """
        Perform one API request and return (status, decoded JSON body or None if empty).
        Raises CloudCallFailure on HTTP errors, network errors, timeouts and bad JSON.
        """
        session = await self._ensure_session()
        url = f"{self.api_base}{path}"
        try:
            async with session.request(
                method,
                url,
                json=body,
                headers=self._headers(),
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                text = await resp.text()
                if resp.status >= 400:
                    raise CloudCallFailure(resp.status, text)
                status = resp.status
        except asyncio.TimeoutError:
            raise CloudCallFailure(None, f"timed out after {self.timeout}s")
        except aiohttp.ClientError as e:
            raise CloudCallFailure(None, str(e) or type(e).__name__)

        if not text:
            return status, None
        try:
            return status, json.loads(text)
        except ValueError:
            raise CloudCallFailure(status, f"malformed JSON response: {text[:200]}")

    async def get_device_info(self, device_id: Optional[str] = None) -> CloudCallResult:
        """Fetch device metadata. On success, result.payload is a DeviceInfo."""
        device_id = device_id or self.device_id
        if not self.token or not device_id:
            return CloudCallResult.unconfigured()

        try:
            status, data = await self._request("GET", f"/devices/{device_id}")
        except CloudCallFailure as e:
            logger.error(f"Failed to fetch SmartThings device {device_id}: {e}")
            return CloudCallResult.failure(e.body, status=e.status)

        if not isinstance(data, dict):
            logger.warning("Unexpected response format from SmartThings device endpoint")
            return CloudCallResult.failure("unexpected response format", status=status)
        return CloudCallResult.success(status, DeviceInfo.from_api(data))

    async def send_switch_command(
        self, command: SwitchCommand, device_id: Optional[str] = None
    ) -> CloudCallResult:
        """Submit a switch on/off command to the device's main component."""
        device_id = device_id or self.device_id
        if not self.token or not device_id:
            return CloudCallResult.unconfigured()

        logger.debug(f"Sending {command.to_wire_lower()} command to SmartThings device {device_id}")
        try:
            status, data = await self._request(
                "POST", f"/devices/{device_id}/commands", switch_command_body(command)
            )
        except CloudCallFailure as e:
            return CloudCallResult.failure(e.body, status=e.status)
        return CloudCallResult.success(status, data)
