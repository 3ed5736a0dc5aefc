"""Header and body construction for relayed messages (core domain).

Headers and bodies are rebuilt for every (message, redirect) pair because
each redirect carries its own options.
"""

from __future__ import annotations

import copy
from typing import List, Optional

from core.config import DEFAULT_RICH_EMBED_COLOR, Redirect
from core.models import (
    Body,
    ChannelInfo,
    EmbedField,
    Header,
    InboundMessage,
    PlainTextHeader,
    RichEmbedHeader,
)

EVERYONE_MENTION = "@everyone"
HERE_MENTION = "@here"


def explain_path(channel: ChannelInfo) -> str:
    """Return a human-friendly location such as ``Guild/Category/channel``."""

    parts: List[str] = []
    if channel.guild_name is not None:
        parts.append(channel.guild_name)
        if channel.parent_name:
            parts.append(channel.parent_name)
        parts.append(channel.name)
    elif channel.is_private:
        parts.append("Direct Messages")
    return "/".join(parts)


def build_header(message: InboundMessage, redirect: Redirect) -> Optional[Header]:
    """Build the optional header announcing the relayed message."""

    options = redirect.options
    location = explain_path(message.channel)

    if options.rich_embed:
        # An embed with neither title nor fields renders as an empty box.
        if not options.title and not options.include_source:
            return None
        fields = ()
        if options.include_source:
            fields = (
                EmbedField(
                    name="Author",
                    value=f"**{message.author.display_name}** in **{location}**",
                ),
            )
        return RichEmbedHeader(
            color=options.rich_embed_color or DEFAULT_RICH_EMBED_COLOR,
            title=options.title,
            fields=fields,
        )

    text = ""
    if options.title:
        text += f"**{options.title}**\n"
    if options.include_source:
        text += f"*Author: **{message.author.display_name}** in **{location}***\n"
    if not text:
        return None
    return PlainTextHeader(text)


def build_body(message: InboundMessage, redirect: Redirect) -> Body:
    """Build the relayed body from the inbound text and embeds."""

    options = redirect.options
    contents = message.content
    embed = None

    if options.copy_rich_embed:
        received = next((item for item in message.embeds if item.type == "rich"), None)
        if received is not None:
            embed = copy.deepcopy(dict(received.data))

    # Only the first mention is removed, later ones are left untouched.
    if options.remove_everyone:
        contents = contents.replace(EVERYONE_MENTION, "", 1)
    if options.remove_here:
        contents = contents.replace(HERE_MENTION, "", 1)

    return Body(contents=contents, embed=embed)


def text_length(text: str) -> int:
    """Length in UTF-16 code units, so an emoji outside the BMP counts as two."""

    return len(text.encode("utf-16-le")) // 2


def drop_reason(body: Body, redirect: Redirect) -> Optional[str]:
    """Return why the body must not be relayed for this redirect, if anything."""

    min_length = redirect.options.min_length
    if min_length and not body.embed:
        if not body.contents or text_length(body.contents) < min_length:
            return "their message is too short"

    if body.is_empty():
        return "their message would be empty due to redirect options"
    return None
