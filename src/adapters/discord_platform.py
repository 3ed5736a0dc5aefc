"""Discord delivery adapter.

Implements the core PlatformPort on top of a discord.py client, translating
core embed payloads and attachments into discord.py objects.
"""

from __future__ import annotations

import asyncio
import io
import logging
from typing import Any, Dict, List, Optional, Sequence

import aiohttp
import discord

from adapters.discord_mapper import channel_info
from core.errors import DispatchError, DispatchFailure
from core.models import Attachment, AttachmentFile, ChannelInfo

LOGGER = logging.getLogger(__name__)

# Threads accept messages the same way text channels do.
TEXT_CHANNEL_TYPES = (discord.TextChannel, discord.Thread)

DOWNLOAD_TIMEOUT = aiohttp.ClientTimeout(total=60)


async def download_attachments(attachments: Sequence[Attachment]) -> List[AttachmentFile]:
    """Fetch attachment bytes so they can be re-uploaded to other channels."""

    files: List[AttachmentFile] = []
    async with aiohttp.ClientSession(raise_for_status=True, timeout=DOWNLOAD_TIMEOUT) as session:
        for attachment in attachments:
            async with session.get(attachment.url) as response:
                data = await response.read()
            files.append(AttachmentFile(filename=attachment.filename, data=data))
    LOGGER.debug("Downloaded %d attachment(s)", len(files))
    return files


class DiscordDestination:
    """A resolved Discord channel wrapped for the dispatcher."""

    def __init__(self, channel: Any) -> None:
        self._channel = channel

    @property
    def is_text(self) -> bool:
        return isinstance(self._channel, TEXT_CHANNEL_TYPES)

    @property
    def location(self) -> ChannelInfo:
        return channel_info(self._channel)

    async def send(
        self,
        content: Optional[str],
        *,
        embed: Optional[Dict[str, Any]],
        attachments: Sequence[AttachmentFile],
        nonce: str,
    ) -> None:
        kwargs: Dict[str, Any] = {"nonce": nonce}
        if embed:
            kwargs["embed"] = discord.Embed.from_dict(embed)
        if attachments:
            # discord.File consumes its buffer, so each send gets fresh ones.
            kwargs["files"] = [
                discord.File(io.BytesIO(item.data), filename=item.filename) for item in attachments
            ]
        try:
            await self._channel.send(content or None, **kwargs)
        except (discord.HTTPException, aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise DispatchError(
                DispatchFailure.TRANSPORT,
                str(self._channel.id),
                detail=str(exc) or type(exc).__name__,
            ) from exc


class DiscordPlatform:
    """PlatformPort backed by the discord.py client's channel cache."""

    def __init__(self, client: discord.Client) -> None:
        self._client = client

    def get_channel(self, channel_id: str) -> Optional[DiscordDestination]:
        try:
            snowflake = int(channel_id)
        except ValueError:
            LOGGER.warning("Destination %s is not a valid channel ID", channel_id)
            return None
        channel = self._client.get_channel(snowflake)
        if channel is None:
            return None
        return DiscordDestination(channel)

    async def fetch_attachments(self, attachments: Sequence[Attachment]) -> List[AttachmentFile]:
        return await download_attachments(attachments)
