"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any Discord-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from core.errors import DispatchError


@dataclass(frozen=True)
class Author:
    """Who wrote the inbound message."""

    id: str
    username: str
    display_name: str


@dataclass(frozen=True)
class ChannelInfo:
    """Where a message lives, with enough context to describe the location."""

    id: str
    name: str = ""
    guild_name: Optional[str] = None
    parent_name: Optional[str] = None
    is_private: bool = False


@dataclass(frozen=True)
class Attachment:
    url: str
    filename: str


@dataclass(frozen=True)
class AttachmentFile:
    """Downloaded attachment bytes, fetched once and re-sent to each destination."""

    filename: str
    data: bytes


@dataclass(frozen=True)
class InboundEmbed:
    """An embed found on the inbound message, kept as its raw payload."""

    type: str
    data: Mapping[str, Any]


@dataclass(frozen=True)
class InboundMessage:
    """Minimal message context used by the core processing pipeline."""

    author: Author
    channel: ChannelInfo
    content: str
    attachments: Tuple[Attachment, ...] = ()
    embeds: Tuple[InboundEmbed, ...] = ()


@dataclass(frozen=True)
class EmbedField:
    name: str
    value: str
    inline: bool = False


@dataclass(frozen=True)
class PlainTextHeader:
    """Header sent as a regular text message."""

    text: str

    @property
    def content(self) -> Optional[str]:
        return self.text

    @property
    def embed(self) -> Optional[Dict[str, Any]]:
        return None


@dataclass(frozen=True)
class RichEmbedHeader:
    """Header sent as a rich embed with no text content."""

    color: int
    title: Optional[str] = None
    fields: Tuple[EmbedField, ...] = ()

    @property
    def content(self) -> Optional[str]:
        return None

    @property
    def embed(self) -> Optional[Dict[str, Any]]:
        payload: Dict[str, Any] = {"type": "rich", "color": self.color}
        if self.title:
            payload["title"] = self.title
        if self.fields:
            payload["fields"] = [
                {"name": item.name, "value": item.value, "inline": item.inline}
                for item in self.fields
            ]
        return payload


@dataclass(frozen=True)
class Body:
    """The relayed message itself."""

    contents: Optional[str]
    embed: Optional[Dict[str, Any]] = None

    def is_empty(self) -> bool:
        return not self.contents and not self.embed


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of delivering one message to one destination."""

    destination: str
    error: Optional[DispatchError] = None
    nonces: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


Header = Union[PlainTextHeader, RichEmbedHeader]
