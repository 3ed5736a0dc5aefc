"""Connection supervision for the Discord session.

discord.py's own reconnect loop is disabled; instead a failed session is
closed and replaced by a new client, with exponential backoff between
attempts so a persistently failing gateway is not hammered.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import aiohttp
import discord

from core.config import ReconnectConfig

LOGGER = logging.getLogger(__name__)

TRANSPORT_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    aiohttp.ClientError,
    discord.ConnectionClosed,
    discord.GatewayNotFound,
    # 5xx during login or gateway lookup. LoginFailure is not a subclass.
    discord.HTTPException,
)


class ReconnectBackoff:
    """Bounded exponential backoff, reset once a session becomes ready."""

    def __init__(self, config: ReconnectConfig) -> None:
        self._config = config
        self._attempts = 0

    @property
    def attempts(self) -> int:
        return self._attempts

    def next_delay(self) -> float:
        delay = self._config.initial_delay * (self._config.factor ** self._attempts)
        self._attempts += 1
        return min(delay, self._config.max_delay)

    def reset(self) -> None:
        self._attempts = 0


class ConnectionSupervisor:
    """Keeps one Discord session alive, replacing it on transport errors.

    ``client_factory`` receives the callback to invoke on readiness and must
    return a new, unstarted client each time it is called.
    """

    def __init__(
        self,
        token: str,
        client_factory: Callable[[Callable[[], None]], Any],
        reconnect: ReconnectConfig,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._token = token
        self._client_factory = client_factory
        self._backoff = ReconnectBackoff(reconnect)
        self._sleep = sleep
        self._stopping = False
        self._client: Optional[Any] = None
        self.sessions = 0

    @property
    def stopping(self) -> bool:
        return self._stopping

    async def stop(self) -> None:
        """Request shutdown and close the current session, if any."""

        self._stopping = True
        client = self._client
        if client is not None and not client.is_closed():
            await client.close()

    async def run(self) -> None:
        """Run sessions until stop() is called; login failures propagate."""

        while not self._stopping:
            client = self._client_factory(self._backoff.reset)
            self._client = client
            self.sessions += 1
            try:
                await client.start(self._token, reconnect=False)
            except TRANSPORT_ERRORS as exc:
                if self._stopping:
                    break
                delay = self._backoff.next_delay()
                LOGGER.error("An error occurred: %s", exc)
            else:
                if self._stopping:
                    break
                # A clean close from the server still leaves the relay offline.
                delay = self._backoff.next_delay()
                LOGGER.warning("Discord session closed by the server.")
            finally:
                if not client.is_closed():
                    await client.close()
                self._client = None
            LOGGER.info("Restarting Discord Client in %.1f seconds.", delay)
            await self._sleep(delay)
        LOGGER.info("Discord session closed.")
