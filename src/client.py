"""Discord client factory for echobot.

Each client instance is one platform session. The connection supervisor
builds a fresh client for every reconnect, and the message pipeline is
attached to it here.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

import discord

from adapters.discord_mapper import build_inbound_message
from adapters.discord_platform import DiscordPlatform
from core.config import Redirect
from core.dispatch import Dispatcher
from core.processor import MessageProcessor

LOGGER = logging.getLogger(__name__)


class EchoClient(discord.Client):
    """discord.py client that feeds every message into the relay pipeline."""

    def __init__(
        self,
        redirects: Iterable[Redirect],
        on_ready_callback: Optional[Callable[[], None]] = None,
    ) -> None:
        intents = discord.Intents.default()
        # Relaying text requires the privileged message content intent.
        intents.message_content = True
        super().__init__(intents=intents)
        self.processor = MessageProcessor(redirects, Dispatcher(DiscordPlatform(self)))
        self._on_ready_callback = on_ready_callback

    async def on_ready(self) -> None:
        LOGGER.info("Signed into Discord as %s.", self.user)
        if self._on_ready_callback is not None:
            self._on_ready_callback()

    async def on_message(self, message: discord.Message) -> None:
        try:
            await self.processor.handle(build_inbound_message(message))
        except Exception:
            LOGGER.exception("Failed to handle message %s", message.id)
            return
        LOGGER.debug("Message handled gracefully.")

    async def on_error(self, event_method: str, *args, **kwargs) -> None:
        LOGGER.exception("Unhandled error in %s", event_method)


def build_client(
    redirects: Iterable[Redirect],
    on_ready: Optional[Callable[[], None]] = None,
) -> EchoClient:
    """Create a new Discord session with the relay pipeline attached."""

    LOGGER.info("Initializing Discord client")
    return EchoClient(redirects, on_ready)
