"""Minimal liveness endpoint for hosts that expect a listening port."""

from __future__ import annotations

import logging
from typing import Optional

from aiohttp import web

LOGGER = logging.getLogger(__name__)


async def _pong(request: web.Request) -> web.Response:
    return web.Response(text="pong")


def create_web_app() -> web.Application:
    """Build the aiohttp Application answering every path."""
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", _pong)
    return app


class HealthServer:
    """Manages the aiohttp server lifecycle."""

    def __init__(self, port: int, host: str = "0.0.0.0") -> None:
        self.port = port
        self.host = host
        self._runner: Optional[web.AppRunner] = None

    async def start(self) -> None:
        LOGGER.info("Starting web server on port %d", self.port)
        self._runner = web.AppRunner(create_web_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            LOGGER.info("Web server stopped")
