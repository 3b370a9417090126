"""In-process stand-in for the SmartThings device API."""

import asyncio
import contextlib
from typing import Any, Dict, List

from aiohttp import web
from aiohttp.test_utils import TestServer


class FakeSmartThings:
    """Records requests and answers with a fixed status/body."""

    def __init__(self, status: int = 200, body: str = '{"results": []}', delay: float = 0):
        self.status = status
        self.body = body
        self.delay = delay
        self.requests: List[Dict[str, Any]] = []

    async def _record(self, request: web.Request):
        body = await request.text()
        self.requests.append(
            {
                "method": request.method,
                "path": request.path,
                "headers": dict(request.headers),
                "body": body,
            }
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        return web.Response(status=self.status, text=self.body, content_type="application/json")

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/v1/devices/{device_id}/commands", self._record)
        app.router.add_get("/v1/devices/{device_id}", self._record)
        return app


@contextlib.asynccontextmanager
async def serve(fake: FakeSmartThings):
    """Run the fake and yield its API base URL."""
    server = TestServer(fake.app())
    await server.start_server()
    try:
        yield str(server.make_url("/v1"))
    finally:
        await server.close()
