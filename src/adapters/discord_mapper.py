"""Discord-to-core message mapping adapter.

This keeps discord.py-specific details out of the core pipeline.
"""

from __future__ import annotations

from typing import Any

import discord

from core.models import Attachment, Author, ChannelInfo, InboundEmbed, InboundMessage


def channel_info(channel: Any) -> ChannelInfo:
    """Describe a discord.py channel (or thread) for display and matching."""

    guild = getattr(channel, "guild", None)
    category = getattr(channel, "category", None)
    return ChannelInfo(
        id=str(channel.id),
        name=getattr(channel, "name", None) or "",
        guild_name=guild.name if guild is not None else None,
        parent_name=category.name if category is not None else None,
        is_private=getattr(channel, "type", None) == discord.ChannelType.private,
    )


def _author(author: Any) -> Author:
    # Members expose their guild nickname through display_name.
    return Author(
        id=str(author.id),
        username=author.name,
        display_name=getattr(author, "display_name", None) or author.name,
    )


def build_inbound_message(message: discord.Message) -> InboundMessage:
    """Build a core InboundMessage from a discord.py Message."""

    return InboundMessage(
        author=_author(message.author),
        channel=channel_info(message.channel),
        content=message.content or "",
        attachments=tuple(
            Attachment(url=item.url, filename=item.filename) for item in message.attachments
        ),
        embeds=tuple(
            InboundEmbed(type=str(embed.type), data=embed.to_dict()) for embed in message.embeds
        ),
    )
