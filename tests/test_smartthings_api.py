"""
Unit tests for the SmartThings client, run against an in-process fake API.
"""

import json

import pytest

from commands import SwitchCommand
from fake_smartthings import FakeSmartThings, serve
from models import DeviceInfo
from smartthings_api import SmartThingsClient, switch_command_body


def test_switch_command_body_shape():
    assert switch_command_body(SwitchCommand.OFF) == {
        "commands": [
            {"component": "main", "capability": "switch", "command": "off", "arguments": []}
        ]
    }


class TestSendSwitchCommand:
    @pytest.mark.asyncio
    async def test_success(self):
        fake = FakeSmartThings()
        async with serve(fake) as base:
            client = SmartThingsClient("tok", "dev-1", api_base=base)
            try:
                result = await client.send_switch_command(SwitchCommand.ON)
            finally:
                await client.close()

        assert result.ok is True
        assert result.status == 200
        assert result.payload == {"results": []}
        assert len(fake.requests) == 1
        request = fake.requests[0]
        assert request["method"] == "POST"
        assert request["path"] == "/v1/devices/dev-1/commands"
        assert request["headers"]["Authorization"] == "Bearer tok"
        body = json.loads(request["body"])
        assert body["commands"][0]["command"] == "on"
        assert body["commands"][0]["arguments"] == []

    @pytest.mark.asyncio
    async def test_http_error_reported(self):
        fake = FakeSmartThings(status=422, body='{"error": {"code": "ConstraintViolationError"}}')
        async with serve(fake) as base:
            client = SmartThingsClient("tok", "dev-1", api_base=base)
            try:
                result = await client.send_switch_command(SwitchCommand.OFF)
            finally:
                await client.close()

        assert result.ok is False
        assert result.status == 422
        assert "ConstraintViolationError" in result.error
        assert len(fake.requests) == 1

    @pytest.mark.asyncio
    async def test_malformed_json(self):
        fake = FakeSmartThings(body="<html>oops</html>")
        async with serve(fake) as base:
            client = SmartThingsClient("tok", "dev-1", api_base=base)
            try:
                result = await client.send_switch_command(SwitchCommand.OFF)
            finally:
                await client.close()

        assert result.ok is False
        assert result.status == 200
        assert "malformed JSON" in result.error

    @pytest.mark.asyncio
    async def test_timeout(self):
        fake = FakeSmartThings(delay=1.0)
        async with serve(fake) as base:
            client = SmartThingsClient("tok", "dev-1", api_base=base, timeout=0.1)
            try:
                result = await client.send_switch_command(SwitchCommand.ON)
            finally:
                await client.close()

        assert result.ok is False
        assert result.status is None
        assert "timed out" in result.error

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        client = SmartThingsClient("tok", "dev-1", api_base="http://127.0.0.1:1/v1")
        try:
            result = await client.send_switch_command(SwitchCommand.ON)
        finally:
            await client.close()

        assert result.ok is False
        assert result.status is None
        assert result.error

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token,device_id", [(None, "dev-1"), ("tok", None), ("", "")])
    async def test_not_configured_skips_network(self, token, device_id):
        client = SmartThingsClient(token, device_id)

        result = await client.send_switch_command(SwitchCommand.ON)

        assert result.ok is False
        assert result.not_configured is True
        assert client.session is None


class TestGetDeviceInfo:
    @pytest.mark.asyncio
    async def test_success(self):
        fake = FakeSmartThings(
            body=json.dumps(
                {"deviceId": "dev-1", "label": "Desk Lamp", "name": "c2c-switch", "locationId": "loc-9"}
            )
        )
        async with serve(fake) as base:
            client = SmartThingsClient("tok", "dev-1", api_base=base)
            try:
                result = await client.get_device_info()
            finally:
                await client.close()

        assert result.ok is True
        assert isinstance(result.payload, DeviceInfo)
        assert result.payload.label == "Desk Lamp"
        assert result.payload.location_id == "loc-9"
        assert fake.requests[0]["method"] == "GET"
        assert fake.requests[0]["path"] == "/v1/devices/dev-1"

    @pytest.mark.asyncio
    async def test_not_found(self):
        fake = FakeSmartThings(status=404, body='{"error": "not found"}')
        async with serve(fake) as base:
            client = SmartThingsClient("tok", "dev-1", api_base=base)
            try:
                result = await client.get_device_info("other")
            finally:
                await client.close()

        assert result.ok is False
        assert result.status == 404
        assert fake.requests[0]["path"] == "/v1/devices/other"

    @pytest.mark.asyncio
    async def test_not_configured(self):
        result = await SmartThingsClient(None, None).get_device_info()
        assert result.not_configured is True
